"""Environment-driven configuration for cronnext.

Values are read from ``CRONNEXT_*`` environment variables the first time
:func:`get_config` is called and cached for the life of the process.

    Variable                   Field            Default
    ──────────────────────────────────────────────────────
    CRONNEXT_TIMEZONE (or TZ)  timezone         None (naive local time)
    CRONNEXT_LOG_LEVEL         log_level        WARNING
    CRONNEXT_DAY_CACHE_SIZE    day_cache_size   1024

Usage::

    from cronnext.config import get_config

    config = get_config()
    config.tzinfo()
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from datetime import tzinfo
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cronnext.exceptions import ConfigError


ENV_PREFIX = "CRONNEXT_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class CronConfig:
    """Process-wide settings.

    Attributes:
        timezone: IANA zone name used when no instant is supplied to ``next``.
        log_level: Level the CLI configures the ``cronnext`` logger with.
        day_cache_size: Number of resolved months kept in memory.
    """

    timezone: str | None = None
    log_level: str = "WARNING"
    day_cache_size: int = 1024

    def __post_init__(self) -> None:
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {self.log_level}")
        if self.day_cache_size < 0:
            raise ConfigError(f"day_cache_size must be >= 0: {self.day_cache_size}")
        if self.timezone is not None:
            self.tzinfo()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CronConfig":
        """Build a configuration from environment variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``).

        Raises:
            ConfigError: If a value cannot be interpreted.
        """
        env = os.environ if environ is None else environ

        timezone = env.get(f"{ENV_PREFIX}TIMEZONE") or _system_zone(env.get("TZ"))
        log_level = env.get(f"{ENV_PREFIX}LOG_LEVEL", "WARNING").upper()

        return cls(
            timezone=timezone,
            log_level=log_level,
            day_cache_size=day_cache_size_from_env(env),
        )

    def tzinfo(self) -> tzinfo | None:
        """Resolve :attr:`timezone` to a ``ZoneInfo`` (None for naive local time)."""
        if self.timezone is None:
            return None
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigError(f"Unknown time zone: {self.timezone}") from None


def day_cache_size_from_env(environ: Mapping[str, str] | None = None) -> int:
    """Read ``CRONNEXT_DAY_CACHE_SIZE`` alone, without validating other settings.

    Raises:
        ConfigError: If the value is not a non-negative integer.
    """
    env = os.environ if environ is None else environ
    raw_size = env.get(f"{ENV_PREFIX}DAY_CACHE_SIZE", "1024")
    try:
        size = int(raw_size)
    except ValueError:
        raise ConfigError(f"Invalid {ENV_PREFIX}DAY_CACHE_SIZE: {raw_size!r}") from None
    if size < 0:
        raise ConfigError(f"day_cache_size must be >= 0: {size}")
    return size


def _system_zone(value: str | None) -> str | None:
    """Use ``TZ`` only when it names an IANA zone (it may also hold a POSIX rule)."""
    if not value:
        return None
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return None
    return value


_config: CronConfig | None = None
_config_lock = threading.Lock()


def get_config() -> CronConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    with _config_lock:
        if _config is None:
            _config = CronConfig.from_env()
        return _config


def set_config(config: CronConfig) -> None:
    """Replace the process-wide configuration."""
    global _config
    with _config_lock:
        _config = config


def reset_config() -> None:
    """Forget the cached configuration; the next access re-reads the environment."""
    global _config
    with _config_lock:
        _config = None
