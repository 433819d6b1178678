"""
structlog setup for applications that want twotrack's execution logs rendered.

The library only emits events through structlog.get_logger(); nothing is
configured on import. Call configure_structlog() once at startup.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import structlog

from twotrack.config import get_settings


def resolve_level(name: str) -> int:
    """Map a level name such as "debug" to its logging constant."""
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level


def build_processors(json_logs: bool) -> list[Any]:
    """Processor chain: contextvars, level, timestamps, then one renderer."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_structlog(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structlog for structured logging.

    json_logs=True: JSON lines to stdout (machine-readable).
    json_logs=False: colored, human-readable console output.

    Arguments left as None come from TwotrackSettings.
    """
    settings = get_settings()
    structlog.configure(
        processors=build_processors(settings.json_logs if json_logs is None else json_logs),
        wrapper_class=structlog.make_filtering_bound_logger(
            resolve_level(log_level or settings.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
