from __future__ import annotations

import math
import random
from typing import Optional

POISSON_NORMAL_THRESHOLD = 500.0


class RandomProcess:
    """Seeded source of every random draw made during a run.

    Arrival counts come either from a Poisson draw (``"poisson"``) or from a
    deterministic accumulator (``"regular"``) that carries the fractional
    remainder of ``rate * dt`` from one tick to the next, so a rate below one
    person per tick still produces arrivals at the configured long-run rate.
    """

    def __init__(self, seed: Optional[int] = None, arrival_process: str = "poisson") -> None:
        self.random = random.Random(seed)
        self.arrival_process = arrival_process
        self._arrival_credit = 0.0

    def bernoulli(self, probability: float) -> bool:
        return self.random.random() < probability

    def sample_arrival_count(self, rate: float, dt: float) -> int:
        expected = rate * dt
        if expected <= 0:
            return 0
        if self.arrival_process == "regular":
            self._arrival_credit += expected
            count = int(self._arrival_credit + 1e-9)
            self._arrival_credit -= count
            return count
        if expected > POISSON_NORMAL_THRESHOLD:
            # exp(-lam) underflows for large lam; the normal limit is accurate there
            return max(0, int(round(self.sample_normal(expected, math.sqrt(expected)))))
        return self._poisson(expected)

    def sample_normal(self, mean: float, std_dev: float) -> float:
        if std_dev <= 0:
            return mean
        # Box-Muller; u must be strictly positive for the log
        u = 0.0
        while u == 0.0:
            u = self.random.random()
        v = self.random.random()
        z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        return mean + z * std_dev

    def sample_walk_speed(self, mean: float, std_dev: float, minimum: float) -> float:
        return max(minimum, self.sample_normal(mean, std_dev))

    def _poisson(self, lam: float) -> int:
        L = math.exp(-lam)
        k = 0
        p = 1.0
        while p > L:
            k += 1
            p *= self.random.random()
        return k - 1
