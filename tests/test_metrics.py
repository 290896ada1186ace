"""Incremental statistics."""
import pytest

from escalator import Behavior, Lane, PersonRegistry, PersonState, StatisticsAggregator


def finished(registry, board_time, exit_time, arrival_time=0.0):
    person = registry.create(Behavior.STANDER, Lane.A, 0, now=arrival_time)
    registry.transition(person, PersonState.ON_ESCALATOR, board_time)
    registry.transition(person, PersonState.EXITED, exit_time)
    return person


def test_running_means():
    registry = PersonRegistry()
    stats = StatisticsAggregator()
    a = finished(registry, board_time=2.0, exit_time=12.0)
    b = finished(registry, board_time=4.0, exit_time=24.0, arrival_time=1.0)
    stats.record_arrivals([a, b])
    stats.record_boardings([a, b])
    stats.record_exits([a, b])
    assert stats.total_arrived == 2
    assert stats.total_boarded == 2
    assert stats.total_exited == 2
    assert stats.average_transit_time == pytest.approx(15.0)
    assert stats.average_wait_time == pytest.approx(2.5)


def test_throughput_window_slides():
    registry = PersonRegistry()
    stats = StatisticsAggregator(throughput_window=60.0)
    stats.record_exits([finished(registry, 0.0, t) for t in (1.0, 50.0, 70.0)])
    stats.update(100.0, {"a": 0}, 0)
    assert stats.throughput_per_window == 2
    stats.update(120.0, {"a": 0}, 0)
    assert stats.throughput_per_window == 1
    stats.update(200.0, {"a": 0}, 0)
    assert stats.throughput_per_window == 0


def test_queue_counters_and_peak():
    stats = StatisticsAggregator()
    stats.update(0.1, {"left": 3, "right": 4}, 2)
    stats.update(0.2, {"left": 1, "right": 0}, 5)
    snap = stats.snapshot(0.2)
    assert snap.current_queue_length == 1
    assert snap.queue_length_by_lane == {"left": 1, "right": 0}
    assert snap.max_queue_length == 7
    assert snap.current_on_escalator == 5


def test_flow_history_is_sampled_and_bounded():
    stats = StatisticsAggregator(history_interval=5.0, history_length=2)
    for t in range(1, 17):
        stats.update(float(t), {"a": t}, 0)
    history = stats.snapshot(16.0).flow_history
    assert [sample.time for sample in history] == [10.0, 15.0]
    assert history[-1].queue_length == 15


def test_snapshot_is_detached_from_live_counters():
    stats = StatisticsAggregator()
    stats.update(0.1, {"a": 2}, 0)
    snap = stats.snapshot(0.1)
    snap.queue_length_by_lane["a"] = 99
    stats.update(0.2, {"a": 3}, 0)
    assert stats.snapshot(0.2).queue_length_by_lane == {"a": 3}
    assert snap.current_queue_length == 2
    with pytest.raises(AttributeError):
        snap.total_exited = 5
