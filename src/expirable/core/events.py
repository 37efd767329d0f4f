"""
Per-key removal notifications.
Why: callers holding derived state need to know when a key goes away,
and whether it expired or was removed on purpose.
"""

from collections import defaultdict
from typing import Callable, DefaultDict, List

from .logging import get_logger

_LOG = get_logger(__name__)

RemovalListener = Callable[[str, bool], None]


class RemovalEvents:
    """Observer registry keyed by cache key.

    Listeners are called as ``listener(key, expired)``. Wildcard listeners
    registered with :meth:`subscribe_all` see every removal.
    """

    def __init__(self) -> None:
        self._by_key: DefaultDict[str, List[RemovalListener]] = defaultdict(list)
        self._wildcard: List[RemovalListener] = []

    def subscribe(self, key: str, listener: RemovalListener) -> Callable[[], None]:
        self._by_key[key].append(listener)

        def unsubscribe() -> None:
            listeners = self._by_key.get(key)
            if listeners and listener in listeners:
                listeners.remove(listener)
                if not listeners:
                    del self._by_key[key]

        return unsubscribe

    def subscribe_all(self, listener: RemovalListener) -> Callable[[], None]:
        self._wildcard.append(listener)

        def unsubscribe() -> None:
            if listener in self._wildcard:
                self._wildcard.remove(listener)

        return unsubscribe

    def listeners(self, key: str) -> List[RemovalListener]:
        return list(self._by_key.get(key, ())) + list(self._wildcard)

    def emit(self, key: str, expired: bool) -> None:
        for listener in self.listeners(key):
            try:
                listener(key, expired)
            except Exception:
                _LOG.exception(
                    "removal listener failed",
                    extra={"key": key, "expired": expired},
                )

    def clear(self) -> None:
        self._by_key.clear()
        self._wildcard.clear()
