"""
Pydantic models for cache configuration.
Why: validate options once at construction; durations become plain ms.
"""

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ..config.settings import settings
from .duration import Milliseconds, parse


class CacheOptions(BaseModel):
    # Unknown keys (e.g. the legacy ``lru`` option) are accepted and ignored
    model_config = ConfigDict(extra="ignore", frozen=True)

    expire: Milliseconds = Field(default_factory=lambda: parse(settings.cache.expire))
    interval: Milliseconds = Field(default_factory=lambda: parse(settings.cache.interval))
    manually: bool = False

    @field_validator("expire", "interval", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any, info: ValidationInfo) -> Milliseconds:
        # Empty values fall back to the configured default
        if not value:
            return parse(getattr(settings.cache, info.field_name))
        return parse(value)

    @classmethod
    def coerce(cls, options: Any = None, **overrides: Any) -> "CacheOptions":
        """Build options from the shapes the cache constructor accepts.

        A bare string or number is the legacy shorthand for ``expire``.
        """
        if options is None:
            data: dict = {}
        elif isinstance(options, CacheOptions):
            data = options.model_dump()
        elif isinstance(options, (str, int, float)) and not isinstance(options, bool):
            data = {"expire": options}
        elif isinstance(options, Mapping):
            data = dict(options)
        else:
            raise TypeError(
                f"options must be a duration, mapping or CacheOptions, "
                f"not {type(options).__name__}"
            )
        data.update(overrides)
        return cls(**data)
