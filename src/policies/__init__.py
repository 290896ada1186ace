from __future__ import annotations

from typing import Dict, Type

from .interface import BoardingPolicy, LaneSnapshot
from .split_lanes import SplitLanesPolicy
from .stand_only import StandOnlyPolicy

__all__ = [
    "BoardingPolicy",
    "LaneSnapshot",
    "SplitLanesPolicy",
    "StandOnlyPolicy",
    "get_policy",
]


POLICY_REGISTRY: Dict[str, Type[BoardingPolicy]] = {
    "stand_only": StandOnlyPolicy,
    "split_lanes": SplitLanesPolicy,
}


def get_policy(name: str, **kwargs) -> BoardingPolicy:
    cls = POLICY_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown boarding policy '{name}'. Available: {', '.join(POLICY_REGISTRY)}")
    return cls(**kwargs)
