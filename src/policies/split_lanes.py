from __future__ import annotations

from typing import Dict, Iterable, List

from .interface import LaneSnapshot
from .utils import has_clearance


class SplitLanesPolicy:
    """Walkers board the left lane, standers the right one."""

    lanes = ("left", "right")

    def __init__(self, lane_behaviors: Dict[str, str] | None = None) -> None:
        self.lane_behaviors = lane_behaviors or {"left": "walker", "right": "stander"}

    def select_boarders(
        self,
        lane_state: Iterable[LaneSnapshot],
        min_following_gap: float,
    ) -> List[int]:
        boarders: List[int] = []
        for lane in lane_state:
            if not lane.has_queue:
                continue
            # A mismatched head blocks its own lane; nobody jumps queues
            if self.lane_behaviors.get(lane.lane) != lane.head_behavior:
                continue
            if has_clearance(lane.rearmost_position, min_following_gap):
                boarders.append(lane.head_person_id)
        return boarders
