"""Configuration settings for expiring caches."""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class CacheSettings:
    # Durations accept anything expirable.core.duration.parse understands
    expire: str = os.getenv("EXPIRABLE_EXPIRE", "5 minutes")
    interval: str = os.getenv("EXPIRABLE_INTERVAL", "2 minutes")
    log_level: str = os.getenv("EXPIRABLE_LOG_LEVEL", "INFO")


class Settings:
    cache = CacheSettings()


settings = Settings()
