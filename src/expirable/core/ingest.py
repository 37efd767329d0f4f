"""
Per-ingest state for streaming a byte source into the cache.
Why: the key is reserved while bytes arrive; the value lands only once
the source finishes cleanly.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional

from .logging import get_logger

if TYPE_CHECKING:
    from .cache import ExpiringCache

_LOG = get_logger(__name__)


@dataclass
class IngestState:
    cache: "ExpiringCache"
    key: str
    ttl: Any = None
    chunks: List[bytes] = field(default_factory=list)
    errored: bool = False
    resolved: bool = False

    def on_data(self, chunk: bytes) -> None:
        if self.resolved:
            return
        self.chunks.append(chunk)

    def on_error(self, exc: Optional[BaseException] = None) -> None:
        if self.resolved:
            return
        self.chunks.clear()
        self.errored = True
        _LOG.debug(f"ingest failed: {exc!r}", extra={"key": self.key})
        self._resolve()

    def on_end(self, chunk: Optional[bytes] = None) -> None:
        if self.resolved:
            return
        if chunk:
            self.chunks.append(chunk)
        self._resolve()

    def _resolve(self) -> None:
        self.resolved = True
        if not self.errored and self.chunks:
            self.cache.set(self.key, b"".join(self.chunks), self.ttl)
        else:
            self.cache.remove(self.key)
        self.chunks = []
