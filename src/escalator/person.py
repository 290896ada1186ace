from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Queue-entry sentinel; queued persons have no place on the belt yet.
QUEUE_POSITION = -1.0


class Behavior(str, Enum):
    STANDER = "stander"
    WALKER = "walker"


class Lane(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    A = "a"
    B = "b"


class PersonState(str, Enum):
    QUEUED = "queued"
    ON_ESCALATOR = "on_escalator"
    EXITED = "exited"


@dataclass
class Person:
    """A pedestrian queueing for, riding, or leaving the escalator."""

    person_id: int
    behavior: Behavior
    lane: Lane
    desired_walk_speed: float
    arrival_time: float
    state: PersonState = PersonState.QUEUED
    position: float = QUEUE_POSITION
    board_time: Optional[float] = None
    exit_time: Optional[float] = None

    @property
    def is_walker(self) -> bool:
        return self.behavior is Behavior.WALKER

    def speed(self, belt_speed: float) -> float:
        """Unobstructed speed on a belt moving at ``belt_speed``."""
        return belt_speed + (self.desired_walk_speed if self.is_walker else 0.0)

    @property
    def wait_time(self) -> Optional[float]:
        if self.board_time is None:
            return None
        return self.board_time - self.arrival_time

    @property
    def transit_time(self) -> Optional[float]:
        if self.board_time is None or self.exit_time is None:
            return None
        return self.exit_time - self.board_time


@dataclass(frozen=True)
class PersonView:
    """Read-only copy of a person handed out in snapshots."""

    person_id: int
    behavior: str
    lane: str
    state: str
    position: float
    desired_walk_speed: float
    arrival_time: float
    board_time: Optional[float]
    exit_time: Optional[float]

    @classmethod
    def of(cls, person: Person) -> "PersonView":
        return cls(
            person_id=person.person_id,
            behavior=person.behavior.value,
            lane=person.lane.value,
            state=person.state.value,
            position=person.position,
            desired_walk_speed=person.desired_walk_speed,
            arrival_time=person.arrival_time,
            board_time=person.board_time,
            exit_time=person.exit_time,
        )
