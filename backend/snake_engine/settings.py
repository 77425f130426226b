"""
Environment-backed settings.

Reads SNAKE_GRID_SIZE, SNAKE_TICK_INTERVAL_MS and SNAKE_LOG_LEVEL from the
environment (or a .env file picked up by python-dotenv).
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .constants import DEFAULT_GRID_SIZE, DEFAULT_TICK_INTERVAL_MS, MIN_GRID_SIZE
from .errors import InvalidConfigurationError

load_dotenv()

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


@dataclass
class Settings:
    grid_size: int = DEFAULT_GRID_SIZE
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    log_level: str = DEFAULT_LOG_LEVEL


def _int_from_env(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise InvalidConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise InvalidConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    Raises:
        InvalidConfigurationError: if a variable is set to an unusable value
    """
    log_level = (os.getenv("SNAKE_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise InvalidConfigurationError(f"SNAKE_LOG_LEVEL is not a logging level: {log_level!r}")

    return Settings(
        grid_size=_int_from_env("SNAKE_GRID_SIZE", DEFAULT_GRID_SIZE, MIN_GRID_SIZE),
        tick_interval_ms=_int_from_env("SNAKE_TICK_INTERVAL_MS", DEFAULT_TICK_INTERVAL_MS, 1),
        log_level=log_level,
    )
