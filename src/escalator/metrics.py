from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterable, Mapping, Sequence, Tuple

from .person import Person


@dataclass(frozen=True)
class FlowSample:
    time: float
    throughput: int
    queue_length: int
    on_escalator: int


@dataclass(frozen=True)
class StatsSnapshot:
    time: float
    total_arrived: int
    total_boarded: int
    total_exited: int
    current_queue_length: int
    queue_length_by_lane: Dict[str, int]
    max_queue_length: int
    current_on_escalator: int
    throughput_per_window: int
    throughput_window: float
    average_transit_time: float
    average_wait_time: float
    flow_history: Tuple[FlowSample, ...]


class StatisticsAggregator:
    """Running counters fed with each tick's arrival, boarding and exit events."""

    def __init__(self, throughput_window: float = 60.0, history_interval: float = 5.0, history_length: int = 20) -> None:
        self.throughput_window = throughput_window
        self.history_interval = history_interval
        self.total_arrived = 0
        self.total_boarded = 0
        self.total_exited = 0
        self.current_queue_length = 0
        self.queue_length_by_lane: Dict[str, int] = {}
        self.max_queue_length = 0
        self.current_on_escalator = 0
        self.average_transit_time = 0.0
        self.average_wait_time = 0.0
        self._recent_exits: Deque[float] = deque()
        self._history: Deque[FlowSample] = deque(maxlen=history_length)
        self._next_sample_time = history_interval

    def record_arrivals(self, persons: Sequence[Person]) -> None:
        self.total_arrived += len(persons)

    def record_boardings(self, persons: Iterable[Person]) -> None:
        for person in persons:
            self.total_boarded += 1
            self.average_wait_time += (person.wait_time - self.average_wait_time) / self.total_boarded

    def record_exits(self, persons: Iterable[Person]) -> None:
        for person in persons:
            self.total_exited += 1
            self.average_transit_time += (person.transit_time - self.average_transit_time) / self.total_exited
            self._recent_exits.append(person.exit_time)

    def update(self, now: float, queue_lengths: Mapping[str, int], on_escalator: int) -> None:
        """Close out a tick ending at ``now``."""

        self.refresh_counts(queue_lengths, on_escalator)
        horizon = now - self.throughput_window
        while self._recent_exits and self._recent_exits[0] <= horizon:
            self._recent_exits.popleft()
        if now >= self._next_sample_time - 1e-9:
            self._history.append(
                FlowSample(
                    time=now,
                    throughput=len(self._recent_exits),
                    queue_length=self.current_queue_length,
                    on_escalator=on_escalator,
                )
            )
            self._next_sample_time += self.history_interval

    def refresh_counts(self, queue_lengths: Mapping[str, int], on_escalator: int) -> None:
        self.queue_length_by_lane = dict(queue_lengths)
        self.current_queue_length = sum(queue_lengths.values())
        self.max_queue_length = max(self.max_queue_length, self.current_queue_length)
        self.current_on_escalator = on_escalator

    @property
    def throughput_per_window(self) -> int:
        return len(self._recent_exits)

    def snapshot(self, time: float) -> StatsSnapshot:
        return StatsSnapshot(
            time=time,
            total_arrived=self.total_arrived,
            total_boarded=self.total_boarded,
            total_exited=self.total_exited,
            current_queue_length=self.current_queue_length,
            queue_length_by_lane=dict(self.queue_length_by_lane),
            max_queue_length=self.max_queue_length,
            current_on_escalator=self.current_on_escalator,
            throughput_per_window=self.throughput_per_window,
            throughput_window=self.throughput_window,
            average_transit_time=self.average_transit_time,
            average_wait_time=self.average_wait_time,
            flow_history=tuple(self._history),
        )
