"""structlog configuration for contractguard.

Two output modes:
- Console (default): colored key/value lines
- JSON (LOG_JSON=true): one JSON object per event
"""

import logging
from typing import Optional

import structlog

from contractguard.config import get_settings

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def resolve_level(level_name: str) -> int:
    """Map a level name such as ``"info"`` to its numeric value."""
    try:
        return LOG_LEVELS[level_name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown log level '{level_name}'. Use one of: {', '.join(LOG_LEVELS)}") from None


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """Configure structlog processors and the level filter.

    Args:
        level: Level name; defaults to ``Settings.LOG_LEVEL``.
        json_output: Render JSON lines; defaults to ``Settings.LOG_JSON``.
    """
    settings = get_settings()
    level = level or settings.LOG_LEVEL
    json_output = settings.LOG_JSON if json_output is None else json_output

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
        cache_logger_on_first_use=False,
    )
