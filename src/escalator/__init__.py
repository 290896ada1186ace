"""Discrete-time escalator throughput simulation."""

from .config import ConfigError, EscalatorConfig, Strategy, configure
from .metrics import FlowSample, StatisticsAggregator, StatsSnapshot
from .person import Behavior, Lane, Person, PersonState, PersonView
from .registry import InvalidTransition, PersonRegistry
from .simulation import (
    FixedStepAccumulator,
    Simulation,
    SimulationState,
    Snapshot,
    reset,
    snapshot,
    tick,
)

__all__ = [
    "Behavior",
    "ConfigError",
    "EscalatorConfig",
    "FixedStepAccumulator",
    "FlowSample",
    "InvalidTransition",
    "Lane",
    "Person",
    "PersonRegistry",
    "PersonState",
    "PersonView",
    "Simulation",
    "SimulationState",
    "Snapshot",
    "StatisticsAggregator",
    "StatsSnapshot",
    "Strategy",
    "configure",
    "reset",
    "snapshot",
    "tick",
]
