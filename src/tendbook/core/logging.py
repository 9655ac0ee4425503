"""
Structured logging for tendbook.

Call :func:`configure_logging` once per process (the API factory and the CLI
root callback both do).  Modules ask for a logger with
``get_logger(__name__)`` and log snake_case events with key/value fields::

    logger = get_logger(__name__)
    logger.info("tender_added", sync_id="kitchen", tender_id="c_...")

Operations run inside :func:`log_context`, so every line they emit carries
the ``request_id`` and ``sync_id`` it belongs to without passing them around.

Rendering is JSON (ECS field names, one object per line) when stdout is not
a terminal, and structlog's console renderer otherwise.  Log output goes to
stderr so that CLI commands can write data to stdout.

Tags:
    logging, structlog, observability, tendbook
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_ECS_RENAMES = {
    "timestamp": "@timestamp",
    "level": "log.level",
    "logger": "log.logger",
    "event": "message",
}


def _service_stamper(service: str) -> Processor:
    def stamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service.name", service)
        return event_dict

    return stamp


def _ecs_field_names(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename the standard keys to their Elastic Common Schema names."""
    for key, ecs_key in _ECS_RENAMES.items():
        if key in event_dict:
            event_dict[ecs_key] = event_dict.pop(key)
    return event_dict


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "tendbook",
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        json_format: ``True`` for JSON lines, ``False`` for console output,
            ``None`` to pick JSON unless stdout is a terminal.
        service: Value of the ``service.name`` field on every line.
    """
    numeric_level = _resolve_level(level)
    if json_format is None:
        json_format = not sys.stdout.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _service_stamper(service),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if json_format:
        processors += [
            structlog.processors.format_exc_info,
            _ecs_field_names,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # structlog hands rendered lines to stdlib loggers; uvicorn logs there too
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)
    logging.getLogger().setLevel(numeric_level)


def get_logger(name: str | None = None) -> Any:
    """A structlog logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def log_context(**fields: Any) -> AbstractContextManager[Any]:
    """Bind ``fields`` to every log line emitted inside the block.

    ``None`` values are skipped.  Previous bindings of the same keys are
    restored on exit, so contexts nest.

    Example:
        with log_context(sync_id="kitchen", request_id="abc123"):
            logger.info("tending_recorded")
    """
    return structlog.contextvars.bound_contextvars(
        **{key: value for key, value in fields.items() if value is not None}
    )


__all__ = [
    "log_context",
    "configure_logging",
    "get_logger",
]
