from __future__ import annotations

import logging
import os
from typing import Optional, Union

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"
LEVEL_ENV = "DESTMAP_LOG_LEVEL"
DEBUG_ENVS = ("DESTMAP_DEBUG", "DESTMAP_DEBUG_LOGGING")
# urllib3 logs every connection at DEBUG; keep it out of INFO output.
_TRANSPORT_LOGGERS = ("urllib3", "requests")


def _parse_level(value: Union[str, int, None], fallback: int) -> int:
    if isinstance(value, int):
        return value
    text = (value or "").strip()
    if text.isdigit():
        return int(text)
    candidate = logging.getLevelName(text.upper()) if text else None
    return candidate if isinstance(candidate, int) else fallback


def _env_level() -> Optional[int]:
    """Level forced by the environment, or ``None`` when nothing is set."""
    explicit = os.getenv(LEVEL_ENV)
    if explicit:
        return _parse_level(explicit, logging.INFO)
    for name in DEBUG_ENVS:
        if (os.getenv(name) or "").strip().lower() in {"1", "true", "yes", "on"}:
            return logging.DEBUG
    return None


def _set_levels(level: int) -> int:
    logging.getLogger().setLevel(level)
    transport_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
    return level


def configure_root(default_level: Union[int, str] = logging.INFO) -> int:
    """
    Install the compact root handler once and return the effective level.

    Environment overrides:
      - DESTMAP_LOG_LEVEL: explicit level (name or number)
      - DESTMAP_DEBUG / DESTMAP_DEBUG_LOGGING: truthy -> DEBUG
    """
    env_level = _env_level()
    level = env_level if env_level is not None else _parse_level(default_level, logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=_FORMAT, datefmt=_DATEFMT)
    return _set_levels(level)


def apply_debug_preference(debug_enabled: bool) -> int:
    """Follow the ``debug_logging`` setting unless the environment pins a level."""
    env_level = _env_level()
    if env_level is not None:
        return _set_levels(env_level)
    return _set_levels(logging.DEBUG if debug_enabled else logging.INFO)


def env_requests_debug() -> bool:
    """Return True if environment variables force DEBUG logging."""
    env_level = _env_level()
    return env_level is not None and env_level <= logging.DEBUG
