"""Structlog setup and the event sink the supervisor reports through.

Lifecycle lines always go to stderr so stdout carries only the run result.
Text mode prints `[gracekill] <event>` lines; `-v` switches to structlog's
console renderer so the per-event fields (pid, signal, status) are visible.
"""

from __future__ import annotations

import logging as std_logging
import sys
from collections.abc import MutableMapping
from typing import Any, Protocol

import structlog

LOG_PREFIX = "[gracekill]"


class EventSink(Protocol):
    """Anything that accepts one lifecycle line plus structured fields."""

    def __call__(self, event: str, **fields: object) -> None: ...


def structlog_sink(name: str = "gracekill") -> EventSink:
    """Return a sink that forwards lifecycle lines to a structlog logger at INFO.

    Without `configure_logging()` (library use from a host program) structlog's
    defaults would print to stdout, so the sink falls back to a plain stderr
    logger instead.
    """

    if structlog.is_configured():
        logger = structlog.get_logger(name)
    else:
        logger = structlog.wrap_logger(
            structlog.PrintLogger(file=sys.stderr),
            processors=[_render_prefixed_line],
        )

    def _sink(event: str, **fields: object) -> None:
        logger.info(event, **fields)

    return _sink


def _render_prefixed_line(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> str:
    return f"{LOG_PREFIX} {event_dict['event']}"


def _level_from_verbosity(verbosity: int) -> int:
    if verbosity <= 0:
        return std_logging.WARNING
    if verbosity == 1:
        return std_logging.INFO
    return std_logging.DEBUG


def _processors(json_mode: bool, verbosity: int) -> list[structlog.typing.Processor]:
    if json_mode:
        return [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ]
    if verbosity > 1:
        return [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ]
    return [_render_prefixed_line]


def configure_logging(json_mode: bool = False, verbosity: int = 0) -> None:
    """Configure structlog for the CLI (text or JSON) or the MCP server (JSON)."""

    level = _level_from_verbosity(verbosity)
    # Config warnings go through stdlib logging; keep them on stderr too.
    handler = std_logging.StreamHandler(sys.stderr)
    handler.setFormatter(std_logging.Formatter(f"{LOG_PREFIX} %(message)s"))
    std_logging.basicConfig(level=level, handlers=[handler], force=True)

    structlog.configure(
        processors=_processors(json_mode, verbosity),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
