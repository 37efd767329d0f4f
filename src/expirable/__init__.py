"""Expiring in-process key-value cache with lazy and periodic eviction."""

from expirable.core.cache import Entry, ExpiringCache
from expirable.core.duration import parse
from expirable.core.events import RemovalEvents
from expirable.core.logging import get_logger, setup_logging
from expirable.core.schemas import CacheOptions
from expirable.core.stream import ByteSource, ByteStream

__version__ = "1.0.0"

__all__ = [
    "ByteSource",
    "ByteStream",
    "CacheOptions",
    "Entry",
    "ExpiringCache",
    "RemovalEvents",
    "get_logger",
    "parse",
    "setup_logging",
]
