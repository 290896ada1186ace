"""Seeded sampling used for arrivals and walking speeds."""
import pytest

from escalator.random_process import RandomProcess


def test_zero_std_dev_returns_mean():
    rng = RandomProcess(seed=1)
    assert all(rng.sample_normal(0.8, 0) == 0.8 for _ in range(10))


def test_walk_speed_is_clamped_to_minimum():
    rng = RandomProcess(seed=2)
    assert rng.sample_walk_speed(-1.0, 0, 0.1) == 0.1
    speeds = [rng.sample_walk_speed(0.0, 1.0, 0.05) for _ in range(500)]
    assert min(speeds) >= 0.05


def test_normal_samples_have_requested_moments():
    rng = RandomProcess(seed=3)
    samples = [rng.sample_normal(1.0, 0.2) for _ in range(20000)]
    mean = sum(samples) / len(samples)
    var = sum((s - mean) ** 2 for s in samples) / len(samples)
    assert mean == pytest.approx(1.0, abs=0.01)
    assert var ** 0.5 == pytest.approx(0.2, abs=0.01)


def test_regular_process_carries_fractional_arrivals():
    rng = RandomProcess(seed=4, arrival_process="regular")
    counts = [rng.sample_arrival_count(0.3, 1.0) for _ in range(10)]
    assert sum(counts) == 3
    assert counts[:3] == [0, 0, 0]
    assert counts[3] == 1


def test_poisson_process_matches_rate():
    rng = RandomProcess(seed=5)
    counts = [rng.sample_arrival_count(5.0, 0.1) for _ in range(20000)]
    assert sum(counts) / len(counts) == pytest.approx(0.5, abs=0.03)
    assert min(counts) >= 0


def test_zero_rate_never_arrives():
    rng = RandomProcess(seed=6, arrival_process="regular")
    assert sum(rng.sample_arrival_count(0.0, 0.1) for _ in range(100)) == 0


def test_same_seed_same_draws():
    a = RandomProcess(seed=99)
    b = RandomProcess(seed=99)
    assert [a.sample_normal(0, 1) for _ in range(5)] == [b.sample_normal(0, 1) for _ in range(5)]


def test_poisson_process_handles_large_rates():
    rng = RandomProcess(seed=7)
    counts = [rng.sample_arrival_count(10000.0, 0.1) for _ in range(2000)]
    mean = sum(counts) / len(counts)
    var = sum((c - mean) ** 2 for c in counts) / len(counts)
    assert mean == pytest.approx(1000.0, rel=0.01)
    assert var == pytest.approx(1000.0, rel=0.15)
