from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from policies import BoardingPolicy, LaneSnapshot, get_policy
from policies.utils import EPSILON

from .config import EscalatorConfig
from .person import Lane, Person, PersonState
from .queues import BoardingArea
from .registry import PersonRegistry

logger = logging.getLogger(__name__)


class BoardingController:
    """Moves queue heads onto the belt as the active policy allows.

    Clearance is only checked at tick boundaries, but in continuous time the
    head would have stepped on the moment the gap opened. A head that was
    already waiting when the tick began therefore starts at the clearance
    surplus (``rearmost - gap``), back-dated by the time that distance took,
    capped at one tick of its own travel. Without this, a ``dt`` that does
    not divide ``gap / belt_speed`` loses part of a tick on every boarding.
    """

    def __init__(self, config: EscalatorConfig, policy: Optional[BoardingPolicy] = None) -> None:
        self.config = config
        self.policy = policy or get_policy(config.strategy.value)

    def board(self, registry: PersonRegistry, area: BoardingArea, now: float) -> List[Person]:
        rearmost = self._rearmost_positions(registry)
        lanes = self._snapshot_lanes(area, rearmost)
        selected = set(self.policy.select_boarders(lanes, self.config.min_following_gap))
        boarded: List[Person] = []
        for lane in area.queues:
            head = area.head(lane)
            if head is None or head.person_id not in selected:
                continue
            area.pop_head(lane)
            start, board_time = self._entry(head, rearmost.get(lane), now)
            registry.transition(head, PersonState.ON_ESCALATOR, board_time, position=start)
            boarded.append(head)
            logger.debug(
                "t=%.2f person %d boarded lane %s at %.3f", board_time, head.person_id, lane.value, start
            )
        return boarded

    def _entry(self, head: Person, rearmost: Optional[float], now: float) -> Tuple[float, float]:
        if rearmost is None or head.arrival_time >= now:
            return 0.0, now
        speed = head.speed(self.config.belt_speed)
        surplus = min(
            rearmost - self.config.min_following_gap,
            speed * self.config.dt,
            speed * (now - head.arrival_time),
        )
        if surplus <= EPSILON:
            return 0.0, now
        return surplus, now - surplus / speed

    def _rearmost_positions(self, registry: PersonRegistry) -> Dict[Lane, float]:
        rearmost: Dict[Lane, float] = {}
        for person in registry.list_by_state(PersonState.ON_ESCALATOR):
            current = rearmost.get(person.lane)
            if current is None or person.position < current:
                rearmost[person.lane] = person.position
        return rearmost

    def _snapshot_lanes(self, area: BoardingArea, rearmost: Dict[Lane, float]) -> List[LaneSnapshot]:
        snapshots: List[LaneSnapshot] = []
        for lane in area.queues:
            head = area.head(lane)
            snapshots.append(
                LaneSnapshot(
                    lane=lane.value,
                    head_person_id=head.person_id if head else None,
                    head_behavior=head.behavior.value if head else None,
                    rearmost_position=rearmost.get(lane),
                )
            )
        return snapshots
