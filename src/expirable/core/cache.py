"""
In-memory key-value cache where every entry expires.
Why: short-lived memoization (computed values, buffered stream output)
without running an external store.

Expired entries go away two ways: lazily when a reader touches them, and
actively through a recurring sweep for entries nobody reads any more.
Expiry is sliding: every non-silent read restarts the entry's window.
"""

import threading
import time
import types
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from apscheduler.schedulers.base import BaseScheduler

from .duration import parse
from .events import RemovalEvents, RemovalListener
from .ingest import IngestState
from .logging import get_logger
from .metrics import CacheStats
from .schemas import CacheOptions
from .stream import ByteSource
from .sweeper import SweepTimer

_LOG = get_logger(__name__)

Clock = Callable[[], float]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass
class Entry:
    value: Any = None
    last: float = 0.0  # ms timestamp of last write or touching read
    ttl: float = 0.0
    streaming: bool = False

    def is_expired(self, now: float) -> bool:
        if self.streaming:
            return False
        return now - self.last >= self.ttl


class ExpiringCache:
    """Expiring key-value store with lazy and periodic eviction.

    ``options`` may be a duration (shorthand for ``expire``), a mapping,
    or :class:`CacheOptions`; keyword ``overrides`` win over it. Unless
    ``manually`` is set the sweep timer starts immediately.

    ``clock`` returns milliseconds and is read afresh for every expiry
    check. ``scheduler`` lets callers share an APScheduler instance (for
    example an ``AsyncIOScheduler`` on their event loop).
    """

    def __init__(
        self,
        options: Any = None,
        *,
        scheduler: Optional[BaseScheduler] = None,
        clock: Optional[Clock] = None,
        **overrides: Any,
    ) -> None:
        self.options = CacheOptions.coerce(options, **overrides)
        self.ttl = self.options.expire
        self.interval = self.options.interval
        self.events = RemovalEvents()
        self.stats = CacheStats()
        self._clock = clock or _monotonic_ms
        self._entries: dict = {}
        self._count = 0
        self._lock = threading.RLock()
        self._timer = SweepTimer(scheduler, job_id=f"expirable-sweep-{id(self):x}")

        if not self.options.manually:
            self.start()

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __enter__(self) -> "ExpiringCache":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.destroy()

    def keys(self) -> List[str]:
        """Snapshot of present keys, including ones still being ingested."""
        with self._lock:
            return list(self._entries)

    def on_remove(self, key: str, listener: RemovalListener) -> Callable[[], None]:
        return self.events.subscribe(key, listener)

    def get(self, key: str, suppress_touch: bool = False) -> Optional[Any]:
        """Return the value for ``key`` or ``None``.

        Evicts the entry when it turns out to be expired. Unless
        ``suppress_touch`` is set, a hit restarts the entry's TTL window.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.streaming:
                self.stats.record_miss()
                return None

            now = self._clock()
            if entry.is_expired(now):
                self.remove(key, expired=True)
                self.stats.record_miss()
                return None

            if not suppress_touch:
                entry.last = now
            self.stats.record_hit()
            return entry.value

    def set(self, key: str, value: Any, ttl: Any = None) -> Any:
        with self._lock:
            if key not in self._entries:
                self._count += 1
            self._entries[key] = Entry(
                value=value,
                last=self._clock(),
                ttl=parse(ttl) if ttl else self.ttl,
            )
            self.stats.record_set()
            return value

    def ingest(self, key: str, source: ByteSource, ttl: Any = None) -> ByteSource:
        """Store the complete output of ``source`` under ``key``.

        The key is reserved immediately but reads as absent until the
        source ends. An error, or an end without any data, removes it.
        Only one ingest per key should be in flight at a time.
        """
        with self._lock:
            if key not in self._entries:
                self._count += 1
            self._entries[key] = Entry(last=self._clock(), streaming=True)

        state = IngestState(cache=self, key=key, ttl=ttl)
        source.on_data(state.on_data)
        source.on_error(state.on_error)
        source.on_end(state.on_end)
        return source

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.streaming:
                return False
            return not entry.is_expired(self._clock())

    def expire(self, key: str, ttl: Any = None) -> None:
        """Change ``key``'s TTL and restart its window; no ``ttl`` removes it."""
        with self._lock:
            if not ttl:
                self.remove(key)
                return
            if self.has(key):
                entry = self._entries[key]
                entry.ttl = parse(ttl)
                entry.last = self._clock()

    def remove(self, key: str, expired: bool = False) -> None:
        with self._lock:
            if key not in self._entries:
                return
            self._count -= 1
            del self._entries[key]
            self.stats.record_removal(expired)
            _LOG.debug("cache entry removed", extra={"key": key, "expired": expired})
            self.events.emit(key, expired)

    def for_each(self, iterator: Callable[..., Any], context: Any = None) -> None:
        """Call ``iterator`` for every live entry, bound to ``context``.

        The iterator is bound like a method, so it is always called as
        ``iterator(context, key, value, ttl)``; ``context`` defaults to the
        cache. Expired entries met along the way are evicted and skipped.
        """
        visit = types.MethodType(iterator, context if context is not None else self)
        for key in self.keys():
            with self._lock:
                entry = self._entries.get(key)
                if entry is None or entry.streaming:
                    continue
                if entry.is_expired(self._clock()):
                    self.remove(key, expired=True)
                    continue
                value, ttl = entry.value, entry.ttl
            visit(key, value, ttl)

    def _sweep(self) -> int:
        started = time.perf_counter()
        evicted = 0
        with self._lock:
            for key in list(self._entries):
                entry = self._entries.get(key)
                if entry is None:
                    continue
                if entry.is_expired(self._clock()):
                    self.remove(key, expired=True)
                    evicted += 1
        duration_ms = (time.perf_counter() - started) * 1000
        self.stats.record_sweep(duration_ms, evicted)
        if evicted:
            _LOG.debug("sweep evicted entries", extra={"evicted": evicted})
        return evicted

    def start(self) -> None:
        with self._lock:
            self._timer.schedule(self._sweep, self.interval)

    def stop(self) -> None:
        with self._lock:
            self._timer.cancel()

    @property
    def running(self) -> bool:
        return self._timer.active

    def destroy(self) -> None:
        """Stop sweeping and drop every entry without removal notifications."""
        with self._lock:
            self._timer.shutdown()
            self._entries = {}
            self._count = 0
