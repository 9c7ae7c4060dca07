"""Environment-driven configuration for GemBump."""

import logging
import os
from dataclasses import dataclass

from .exceptions import ConfigError

DEFAULT_STALENESS_DAYS = 180  # 6 months
DEFAULT_TIMEOUT = 10.0
DEFAULT_REGISTRY_URL = "https://rubygems.org"
DEFAULT_MAX_CONCURRENCY = 1
DEFAULT_LOG_LEVEL = "INFO"

ENV_PREFIX = "GEMBUMP_"


@dataclass(frozen=True)
class Settings:
    """Runtime settings. Every field can be overridden with GEMBUMP_<FIELD>."""

    staleness_days: int = DEFAULT_STALENESS_DAYS
    timeout: float = DEFAULT_TIMEOUT
    registry_url: str = DEFAULT_REGISTRY_URL
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    log_level: str = DEFAULT_LOG_LEVEL


def _read(env, name: str, default, cast):
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} has an invalid value: {raw!r}")


def parse_log_level(name: str) -> int:
    """Map a level name such as "info" to its logging constant.

    Raises:
        ConfigError: If the name is not a known logging level
    """
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {name}")
    return level


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env: Mapping to read from. Defaults to os.environ.

    Returns:
        Validated Settings

    Raises:
        ConfigError: If a variable is malformed or out of range
    """
    if env is None:
        env = os.environ

    staleness_days = _read(env, "STALENESS_DAYS", DEFAULT_STALENESS_DAYS, int)
    if staleness_days < 0:
        raise ConfigError(f"{ENV_PREFIX}STALENESS_DAYS must not be negative")

    timeout = _read(env, "TIMEOUT", DEFAULT_TIMEOUT, float)
    if timeout <= 0:
        raise ConfigError(f"{ENV_PREFIX}TIMEOUT must be positive")

    max_concurrency = _read(env, "MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY, int)
    if max_concurrency < 1:
        raise ConfigError(f"{ENV_PREFIX}MAX_CONCURRENCY must be at least 1")

    registry_url = _read(env, "REGISTRY_URL", DEFAULT_REGISTRY_URL, str).rstrip("/")
    if not registry_url.startswith(("http://", "https://")):
        raise ConfigError(f"{ENV_PREFIX}REGISTRY_URL must be an http(s) URL")

    log_level = _read(env, "LOG_LEVEL", DEFAULT_LOG_LEVEL, str).upper()
    parse_log_level(log_level)

    return Settings(
        staleness_days=staleness_days,
        timeout=timeout,
        registry_url=registry_url,
        max_concurrency=max_concurrency,
        log_level=log_level,
    )
