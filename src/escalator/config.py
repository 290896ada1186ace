from __future__ import annotations

import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from .person import Lane

ARRIVAL_PROCESSES = ("poisson", "regular")

NUMERIC_FIELDS = (
    "escalator_length",
    "belt_speed",
    "min_following_gap",
    "arrival_rate",
    "walking_percentage",
    "walk_speed_mean",
    "walk_speed_std_dev",
    "dt",
    "min_walk_speed",
    "throughput_window",
    "history_interval",
)


class ConfigError(ValueError):
    """Raised when an escalator configuration is invalid."""


class Strategy(str, Enum):
    STAND_ONLY = "stand_only"
    SPLIT_LANES = "split_lanes"

    @classmethod
    def parse(cls, value: Any) -> "Strategy":
        if isinstance(value, Strategy):
            return value
        if value in (1, "1"):
            return cls.STAND_ONLY
        if value in (2, "2"):
            return cls.SPLIT_LANES
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigError(
                f"Unknown strategy '{value}'. Available: {', '.join(s.value for s in cls)}"
            ) from None


@dataclass(frozen=True)
class EscalatorConfig:
    """Parameters for one simulation run. Immutable once built."""

    escalator_length: float = 20.0
    belt_speed: float = 0.5
    min_following_gap: float = 0.5
    strategy: Strategy = Strategy.SPLIT_LANES
    arrival_rate: float = 1.0
    walking_percentage: float = 40.0
    walk_speed_mean: float = 0.75
    walk_speed_std_dev: float = 0.15
    rng_seed: Optional[int] = None
    dt: float = 0.1
    min_walk_speed: float = 0.1
    arrival_process: str = "poisson"
    max_total_arrivals: Optional[int] = None
    throughput_window: float = 60.0
    history_interval: float = 5.0
    history_length: int = 20

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy", Strategy.parse(self.strategy))
        self._validate()

    def _validate(self) -> None:
        for name in NUMERIC_FIELDS:
            value = getattr(self, name)
            if value is None or not math.isfinite(value):
                raise ConfigError(f"{name} must be a finite number, got {value!r}")
        positive = {
            "escalator_length": self.escalator_length,
            "belt_speed": self.belt_speed,
            "min_following_gap": self.min_following_gap,
            "dt": self.dt,
            "min_walk_speed": self.min_walk_speed,
            "throughput_window": self.throughput_window,
            "history_interval": self.history_interval,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ConfigError(f"{name} must be positive, got {value!r}")
        if not 0 <= self.walking_percentage <= 100:
            raise ConfigError(
                f"walking_percentage must be within [0, 100], got {self.walking_percentage!r}"
            )
        if self.arrival_rate < 0:
            raise ConfigError(f"arrival_rate must not be negative, got {self.arrival_rate!r}")
        if self.walk_speed_std_dev < 0:
            raise ConfigError(
                f"walk_speed_std_dev must not be negative, got {self.walk_speed_std_dev!r}"
            )
        if self.arrival_process not in ARRIVAL_PROCESSES:
            raise ConfigError(
                f"Unknown arrival_process '{self.arrival_process}'. "
                f"Available: {', '.join(ARRIVAL_PROCESSES)}"
            )
        if self.max_total_arrivals is not None and self.max_total_arrivals < 0:
            raise ConfigError("max_total_arrivals must not be negative")
        if self.history_length < 1:
            raise ConfigError("history_length must be at least 1")

    @property
    def lanes(self) -> Tuple[Lane, Lane]:
        if self.strategy is Strategy.STAND_ONLY:
            return (Lane.A, Lane.B)
        return (Lane.LEFT, Lane.RIGHT)

    @property
    def stand_only_capacity(self) -> float:
        """Long-run people per second with everyone standing two abreast."""
        return 2 * self.belt_speed / self.min_following_gap

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EscalatorConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return configure(**dict(data))

    def to_dict(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["strategy"] = self.strategy.value
        return data


def configure(**kwargs: Any) -> EscalatorConfig:
    """Build a validated configuration, raising ConfigError on bad input."""

    try:
        return EscalatorConfig(**kwargs)
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc
