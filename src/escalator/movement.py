from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List

from policies.utils import EPSILON

from .config import EscalatorConfig
from .person import Lane, Person, PersonState
from .registry import PersonRegistry


@dataclass(frozen=True)
class Move:
    """Planned outcome of one tick for one rider."""

    person: Person
    position: float
    exits: bool


class MovementIntegrator:
    """Car-following update for everyone on the belt.

    A tick is computed in two phases. ``plan`` reads only the positions
    committed at the end of the previous tick and walks each lane from the
    rider nearest the top to the one nearest the bottom, handing the
    leader's planned position down as a barrier one gap behind it. ``apply``
    then commits every move at once, so no rider ever sees a half-updated
    lane.
    """

    def __init__(self, config: EscalatorConfig) -> None:
        self.config = config

    def plan(self, riders: Iterable[Person]) -> List[Move]:
        lanes: Dict[Lane, List[Person]] = {}
        for person in riders:
            if person.state is PersonState.ON_ESCALATOR:
                lanes.setdefault(person.lane, []).append(person)

        moves: List[Move] = []
        for persons in lanes.values():
            moves.extend(self._plan_lane(persons))
        return moves

    def _plan_lane(self, persons: List[Person]) -> List[Move]:
        config = self.config
        ordered = sorted(persons, key=lambda p: (-p.position, p.person_id))
        barrier = math.inf
        moves: List[Move] = []
        for person in ordered:
            target = person.position + person.speed(config.belt_speed) * config.dt
            position = max(person.position, min(target, barrier))
            if position >= config.escalator_length - EPSILON:
                moves.append(Move(person, config.escalator_length, True))
                continue
            moves.append(Move(person, position, False))
            barrier = position - config.min_following_gap
        return moves

    def apply(self, moves: Iterable[Move], registry: PersonRegistry, now: float) -> List[Person]:
        exited: List[Person] = []
        for move in moves:
            move.person.position = move.position
            if move.exits:
                registry.transition(move.person, PersonState.EXITED, now)
                exited.append(move.person)
        return exited
