from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .arrivals import ArrivalGenerator
from .boarding import BoardingController
from .config import EscalatorConfig
from .metrics import StatisticsAggregator, StatsSnapshot
from .movement import MovementIntegrator
from .person import Behavior, Lane, PersonState, PersonView
from .queues import BoardingArea
from .random_process import RandomProcess
from .registry import PersonRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickEvents:
    arrived: Tuple[PersonView, ...] = ()
    boarded: Tuple[PersonView, ...] = ()
    exited: Tuple[PersonView, ...] = ()


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of a run between ticks."""

    time: float
    tick: int
    strategy: str
    persons: Tuple[PersonView, ...]
    stats: StatsSnapshot

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SimulationState:
    """Everything a run owns. Replaced wholesale on reset."""

    config: EscalatorConfig
    random: RandomProcess
    registry: PersonRegistry
    area: BoardingArea
    statistics: StatisticsAggregator
    arrivals: ArrivalGenerator
    boarding: BoardingController
    movement: MovementIntegrator
    tick_index: int = 0
    last_events: TickEvents = field(default_factory=TickEvents)

    @property
    def time(self) -> float:
        return self.tick_index * self.config.dt


def reset(config: EscalatorConfig) -> SimulationState:
    """Fresh state at time zero: no persons, zeroed statistics."""

    random_process = RandomProcess(config.rng_seed, config.arrival_process)
    return SimulationState(
        config=config,
        random=random_process,
        registry=PersonRegistry(),
        area=BoardingArea(config.lanes),
        statistics=StatisticsAggregator(
            throughput_window=config.throughput_window,
            history_interval=config.history_interval,
            history_length=config.history_length,
        ),
        arrivals=ArrivalGenerator(config, random_process),
        boarding=BoardingController(config),
        movement=MovementIntegrator(config),
    )


def tick(state: SimulationState) -> SimulationState:
    """Advance exactly one ``dt``: arrivals, boarding, movement, statistics."""

    now = state.time
    end = (state.tick_index + 1) * state.config.dt
    statistics = state.statistics

    arrived = state.arrivals.generate(state.registry, state.area, now, statistics.total_arrived)
    boarded = state.boarding.board(state.registry, state.area, now)
    moves = state.movement.plan(state.registry.list_by_state(PersonState.ON_ESCALATOR))
    exited = state.movement.apply(moves, state.registry, end)

    statistics.record_arrivals(arrived)
    statistics.record_boardings(boarded)
    statistics.record_exits(exited)
    statistics.update(
        end,
        state.area.lengths(),
        len(state.registry.list_by_state(PersonState.ON_ESCALATOR)),
    )
    for person in exited:
        logger.debug("t=%.2f person %d exited after %.2f", end, person.person_id, person.transit_time)
        state.registry.remove(person)

    state.last_events = TickEvents(
        arrived=tuple(PersonView.of(p) for p in arrived),
        boarded=tuple(PersonView.of(p) for p in boarded),
        exited=tuple(PersonView.of(p) for p in exited),
    )
    state.tick_index += 1
    return state


def snapshot(state: SimulationState) -> Snapshot:
    return Snapshot(
        time=state.time,
        tick=state.tick_index,
        strategy=state.config.strategy.value,
        persons=tuple(PersonView.of(p) for p in state.registry),
        stats=state.statistics.snapshot(state.time),
    )


class Simulation:
    """Fixed-step escalator simulation driven one tick at a time."""

    def __init__(self, config: Optional[EscalatorConfig] = None, metrics_hook_interval: int = 1) -> None:
        self.config = config or EscalatorConfig()
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self.metrics_hook_interval = max(1, metrics_hook_interval)
        self.state = reset(self.config)

    @property
    def current_time(self) -> float:
        return self.state.time

    @property
    def statistics(self) -> StatisticsAggregator:
        return self.state.statistics

    def reset(self, config: Optional[EscalatorConfig] = None) -> None:
        if config is not None:
            self.config = config
        self.state = reset(self.config)
        logger.info(
            "Simulation reset: strategy=%s dt=%s seed=%s",
            self.config.strategy.value,
            self.config.dt,
            self.config.rng_seed,
        )
        self._emit("reset", {"config": self.config.to_dict()})

    def run(self, ticks: int) -> None:
        for _ in range(ticks):
            self.step()

    def run_for(self, duration: float) -> int:
        """Run the whole number of ticks closest to ``duration`` seconds."""

        ticks = max(0, int(round(duration / self.config.dt)))
        self.run(ticks)
        return ticks

    def step(self) -> None:
        tick(self.state)
        events = self.state.last_events
        if events.arrived:
            self._emit("arrival", {"time": self.current_time, "persons": events.arrived})
        if events.boarded:
            self._emit("board", {"time": self.current_time, "persons": events.boarded})
        if events.exited:
            self._emit("exit", {"time": self.current_time, "persons": events.exited})
        if self.state.tick_index % self.metrics_hook_interval == 0:
            self._emit("metrics", self.state.statistics.snapshot(self.current_time))

    def spawn_person(
        self,
        behavior: Optional[Behavior] = None,
        walk_speed: Optional[float] = None,
        lane: Optional[Lane] = None,
    ) -> PersonView:
        """Queue a specific person now, outside the arrival process."""

        person = self.state.arrivals.spawn(
            self.state.registry,
            self.state.area,
            self.current_time,
            behavior=behavior,
            walk_speed=walk_speed,
            lane=lane,
        )
        self.state.statistics.record_arrivals([person])
        self.state.statistics.refresh_counts(
            self.state.area.lengths(),
            len(self.state.registry.list_by_state(PersonState.ON_ESCALATOR)),
        )
        self._emit("arrival", {"time": self.current_time, "persons": (PersonView.of(person),)})
        return PersonView.of(person)

    def snapshot(self) -> Snapshot:
        return snapshot(self.state)

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)


class FixedStepAccumulator:
    """Converts host wall-clock time into a whole number of fixed ticks.

    Leftover time below one tick is kept for the next call, and catch-up is
    capped at ``max_steps`` so a long host stall never becomes one huge step.
    """

    def __init__(self, dt: float, speed: float = 1.0, max_steps: int = 100) -> None:
        self.dt = dt
        self.speed = speed
        self.max_steps = max_steps
        self._pending = 0.0

    def advance(self, elapsed: float) -> int:
        self._pending += max(0.0, elapsed) * self.speed
        steps = int(self._pending / self.dt + 1e-9)
        if steps > self.max_steps:
            steps = self.max_steps
            self._pending = 0.0
        else:
            self._pending = max(0.0, self._pending - steps * self.dt)
        return steps

    def clear(self) -> None:
        self._pending = 0.0
