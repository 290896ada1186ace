from __future__ import annotations

from typing import List, Optional

from .config import EscalatorConfig, Strategy
from .person import Behavior, Lane, Person
from .queues import BoardingArea
from .random_process import RandomProcess
from .registry import PersonRegistry


class ArrivalGenerator:
    """Turns the configured arrival rate into queued persons each tick."""

    def __init__(self, config: EscalatorConfig, random_process: RandomProcess) -> None:
        self.config = config
        self.random = random_process

    def generate(
        self, registry: PersonRegistry, area: BoardingArea, now: float, total_arrived: int
    ) -> List[Person]:
        count = self.random.sample_arrival_count(self.config.arrival_rate, self.config.dt)
        limit = self.config.max_total_arrivals
        if limit is not None:
            count = max(0, min(count, limit - total_arrived))
        return [self.spawn(registry, area, now) for _ in range(count)]

    def spawn(
        self,
        registry: PersonRegistry,
        area: BoardingArea,
        now: float,
        behavior: Optional[Behavior] = None,
        walk_speed: Optional[float] = None,
        lane: Optional[Lane] = None,
    ) -> Person:
        """Queue one person; unspecified attributes are drawn or derived."""

        if self.config.strategy is Strategy.STAND_ONLY:
            behavior = Behavior.STANDER
        elif behavior is None:
            behavior = self._classify()
        if behavior is Behavior.WALKER and walk_speed is None:
            walk_speed = self.random.sample_walk_speed(
                self.config.walk_speed_mean,
                self.config.walk_speed_std_dev,
                self.config.min_walk_speed,
            )
        elif behavior is Behavior.WALKER:
            walk_speed = max(self.config.min_walk_speed, walk_speed)
        if lane is None:
            lane = self._assign_lane(behavior, area)
        elif lane not in area.queues or (
            self.config.strategy is Strategy.SPLIT_LANES and lane is not self._assign_lane(behavior, area)
        ):
            raise ValueError(
                f"Lane '{lane.value}' cannot take a {behavior.value} under strategy '{self.config.strategy.value}'"
            )
        person = registry.create(behavior, lane, walk_speed or 0.0, now)
        area.add_person(person)
        return person

    def _classify(self) -> Behavior:
        if self.random.bernoulli(self.config.walking_percentage / 100.0):
            return Behavior.WALKER
        return Behavior.STANDER

    def _assign_lane(self, behavior: Behavior, area: BoardingArea) -> Lane:
        if self.config.strategy is Strategy.STAND_ONLY:
            return area.shortest_lane()
        return Lane.LEFT if behavior is Behavior.WALKER else Lane.RIGHT
