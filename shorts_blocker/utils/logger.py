"""
Logging Setup
=============

structlog configuration for the blocker: readable console lines while
debugging, one JSON object per line otherwise. Logs go to stderr so the
CLI can print its results on stdout.

Enum members passed as event fields (``DetectionOutcome``, ``EventType``,
``DeviceState``) are rendered as their values, so both renderers print
``outcome=dismissed`` rather than the enum repr.

Per-event and per-session fields are bound with
``structlog.contextvars.bound_contextvars``.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from shorts_blocker.config import get_settings


def render_enums(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace enum members in the event with their values."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def setup_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name. Defaults to the configured server log level.
        json_logs: Force JSON output. Defaults to ``not settings.server.debug``.
    """
    settings = get_settings()
    level = level or settings.server.log_level
    if json_logs is None:
        json_logs = not settings.server.debug

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        render_enums,
    ]
    if json_logs:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.rich_traceback))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # uvicorn logs through the stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=getattr(logging, level))
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)
