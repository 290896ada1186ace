from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol


@dataclass(frozen=True)
class LaneSnapshot:
    """Lightweight view of one lane for boarding decisions."""

    lane: str
    head_person_id: Optional[int]
    head_behavior: Optional[str]
    rearmost_position: Optional[float]

    @property
    def has_queue(self) -> bool:
        return self.head_person_id is not None


class BoardingPolicy(Protocol):
    """Strategy interface for admitting queued persons onto the escalator."""

    lanes: tuple

    def select_boarders(
        self,
        lane_state: Iterable[LaneSnapshot],
        min_following_gap: float,
    ) -> List[int]:
        """
        Return the ids of queue heads allowed to step on this tick.

        At most one person per lane, and only the head of that lane's
        queue; lanes without clearance or a suitable head board nobody.
        """
        ...
