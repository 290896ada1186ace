from __future__ import annotations

from typing import Iterable, List

from .interface import LaneSnapshot
from .utils import has_clearance


class StandOnlyPolicy:
    """Everyone stands two abreast; both lanes board independently."""

    lanes = ("a", "b")

    def select_boarders(
        self,
        lane_state: Iterable[LaneSnapshot],
        min_following_gap: float,
    ) -> List[int]:
        boarders: List[int] = []
        for lane in lane_state:
            if lane.lane not in self.lanes or not lane.has_queue:
                continue
            if has_clearance(lane.rearmost_position, min_following_gap):
                boarders.append(lane.head_person_id)
        return boarders
