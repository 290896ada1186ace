from __future__ import annotations

EPSILON = 1e-9


def has_clearance(rearmost_position: float | None, min_following_gap: float) -> bool:
    """True when nobody on the belt is within one gap of the boarding point.

    Positions are compared with a small tolerance so a rider who has moved
    exactly one gap in floating point still counts as clear.
    """

    if rearmost_position is None:
        return True
    return rearmost_position >= min_following_gap - EPSILON
