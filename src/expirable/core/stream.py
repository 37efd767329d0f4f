"""
Byte sources for streaming ingest.
Why: the cache only needs data/error/end notifications; this module
defines that contract and a small in-process emitter that satisfies it.
"""

from typing import AsyncIterable, Callable, Iterable, List, Optional, Protocol

from .logging import get_logger

_LOG = get_logger(__name__)

DataCallback = Callable[[bytes], None]
ErrorCallback = Callable[[BaseException], None]
EndCallback = Callable[[Optional[bytes]], None]


class ByteSource(Protocol):
    """Zero or more ``data`` notifications, then exactly one ``error`` or ``end``."""

    def on_data(self, callback: DataCallback) -> None: ...

    def on_error(self, callback: ErrorCallback) -> None: ...

    def on_end(self, callback: EndCallback) -> None: ...


class ByteStream:
    """Push-style emitter implementing :class:`ByteSource`."""

    def __init__(self) -> None:
        self._data: List[DataCallback] = []
        self._error: List[ErrorCallback] = []
        self._end: List[EndCallback] = []
        self.closed = False

    def on_data(self, callback: DataCallback) -> None:
        self._data.append(callback)

    def on_error(self, callback: ErrorCallback) -> None:
        self._error.append(callback)

    def on_end(self, callback: EndCallback) -> None:
        self._end.append(callback)

    def push(self, chunk: bytes) -> None:
        if self.closed:
            _LOG.debug("push after close ignored")
            return
        for callback in list(self._data):
            callback(chunk)

    def fail(self, exc: BaseException) -> None:
        if self.closed:
            _LOG.debug("fail after close ignored")
            return
        self.closed = True
        for callback in list(self._error):
            callback(exc)

    def end(self, chunk: Optional[bytes] = None) -> None:
        if self.closed:
            _LOG.debug("end after close ignored")
            return
        self.closed = True
        for callback in list(self._end):
            callback(chunk)

    def pump(self, chunks: Iterable[bytes]) -> "ByteStream":
        """Push every chunk from ``chunks`` then end; iteration errors fail the stream."""
        try:
            for chunk in chunks:
                self.push(chunk)
        except Exception as exc:
            self.fail(exc)
        else:
            self.end()
        return self

    async def apump(self, chunks: AsyncIterable[bytes]) -> "ByteStream":
        try:
            async for chunk in chunks:
                self.push(chunk)
        except Exception as exc:
            self.fail(exc)
        else:
            self.end()
        return self
