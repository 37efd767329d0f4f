"""Tests for cache statistics."""

from expirable.core.metrics import CacheStats, _percentile


def test_percentile_empty_list():
    """Test percentile with empty list."""
    assert _percentile([], 0.5) == 0


def test_percentile_multiple_values():
    """Test percentile calculation."""
    values = [10, 20, 30, 40, 50, 60, 70, 80, 90, 100]
    assert _percentile(values, 0.50) in [50, 60]
    assert _percentile(values, 0.95) in [90, 100]


def test_removals_split_by_reason():
    """Test explicit and expired removals are counted apart."""
    stats = CacheStats()
    stats.record_removal(expired=False)
    stats.record_removal(expired=True)
    stats.record_removal(expired=True)
    assert stats.removals == 1
    assert stats.expirations == 2


def test_snapshot():
    """Test snapshot format."""
    stats = CacheStats()
    stats.record_hit()
    stats.record_miss()
    stats.record_set()
    stats.record_sweep(1.5, evicted=3)

    snapshot = stats.snapshot()
    assert snapshot["hits"] == 1
    assert snapshot["misses"] == 1
    assert snapshot["sets"] == 1
    assert snapshot["sweeps"] == 1
    assert snapshot["last_sweep_evicted"] == 3
    assert snapshot["sweep_p50_ms"] == 1.5


def test_sweep_samples_are_capped():
    """Test latency samples do not grow without bound."""
    stats = CacheStats()
    for _ in range(1500):
        stats.record_sweep(1.0, evicted=0)
    assert stats.sweeps == 1500
    assert len(stats._sweep_latencies) == 1000


def test_reset():
    """Test reset zeroes every counter."""
    stats = CacheStats()
    stats.record_hit()
    stats.record_sweep(2.0, evicted=1)
    stats.reset()
    assert stats.hits == 0
    assert stats.sweeps == 0
    assert stats.snapshot()["sweep_p95_ms"] == 0
