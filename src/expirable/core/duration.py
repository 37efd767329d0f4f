"""
Duration strings to milliseconds ("5 minutes", "10s", "1.5h").
Why: humans configure TTLs; the cache does arithmetic in ms.

Anything unparseable is 0 ms, never an error.
"""

import math
import re
from datetime import timedelta
from typing import Any, Union

from .logging import get_logger

_LOG = get_logger(__name__)

SECOND = 1000
MINUTE = SECOND * 60
HOUR = MINUTE * 60
DAY = HOUR * 24
YEAR = int(DAY * 365.25)

_DURATION_RE = re.compile(
    r"((?:\d+)?\.?\d+) *(ms|seconds?|s|minutes?|m|hours?|h|days?|d|years?|y)?",
    re.IGNORECASE,
)

_UNITS = {
    "ms": 1,
    "s": SECOND,
    "second": SECOND,
    "seconds": SECOND,
    "m": MINUTE,
    "minute": MINUTE,
    "minutes": MINUTE,
    "h": HOUR,
    "hour": HOUR,
    "hours": HOUR,
    "d": DAY,
    "day": DAY,
    "days": DAY,
    "y": YEAR,
    "year": YEAR,
    "years": YEAR,
}

Milliseconds = Union[int, float]


def _as_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _normalize(ms: float) -> Milliseconds:
    if math.isfinite(ms) and ms.is_integer():
        return int(ms)
    return ms


def parse(value: Any) -> Milliseconds:
    """Convert ``value`` to milliseconds.

    Numbers (and numeric strings) are taken as milliseconds already. Strings
    like ``"5 minutes"`` or ``"250ms"`` are converted using their unit; a
    missing unit means milliseconds. Unrecognized input yields ``0``.
    """
    if value is None:
        return 0
    if isinstance(value, timedelta):
        return _normalize(value.total_seconds() * SECOND)

    number = _as_number(value)
    if number and not math.isnan(number):
        return _normalize(number)

    match = _DURATION_RE.fullmatch(str(value))
    if not match:
        _LOG.debug(f"unparseable duration {value!r}, using 0ms")
        return 0

    amount = float(match.group(1))
    unit = (match.group(2) or "ms").lower()
    return _normalize(amount * _UNITS[unit])
