"""
In-memory counters for cache behaviour (rough p50/p95 sweep latency).
Why: quick visibility into hit rate and eviction pressure.
"""

from typing import Dict, List

_MAX_SAMPLES = 1000


def _percentile(values: List[float], p: float) -> float:
    if not values:
        return 0
    idx = max(0, min(len(values) - 1, int(len(values) * p)))
    return sorted(values)[idx]


class CacheStats:
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self.sets = 0
        self.removals = 0
        self.expirations = 0
        self.sweeps = 0
        self.last_sweep_evicted = 0
        self._sweep_latencies: List[float] = []

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_set(self) -> None:
        self.sets += 1

    def record_removal(self, expired: bool) -> None:
        if expired:
            self.expirations += 1
        else:
            self.removals += 1

    def record_sweep(self, duration_ms: float, evicted: int) -> None:
        self.sweeps += 1
        self.last_sweep_evicted = evicted
        self._sweep_latencies.append(duration_ms)
        if len(self._sweep_latencies) > _MAX_SAMPLES:
            del self._sweep_latencies[0]

    def snapshot(self) -> Dict[str, float]:
        lat = list(self._sweep_latencies)
        return {
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "removals": self.removals,
            "expirations": self.expirations,
            "sweeps": self.sweeps,
            "last_sweep_evicted": self.last_sweep_evicted,
            "sweep_p50_ms": _percentile(lat, 0.50),
            "sweep_p95_ms": _percentile(lat, 0.95),
        }
