"""Structured JSON logging with materialization_id support.

Uses structlog for structured logging with JSON output.
Every log entry emitted while a definition is being materialized carries
the materialization_id of that call for correlation.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any

import structlog

from unitkit.core.ids import new_id

# Context var for materialization_id propagation
_materialization_id: ContextVar[str] = ContextVar("materialization_id", default="")


def get_materialization_id() -> str:
    """Get the current materialization ID ("" outside a materialization)."""
    return _materialization_id.get()


def set_materialization_id(materialization_id: str) -> Token[str]:
    """Set materialization ID in context.  Returns the token for reset."""
    return _materialization_id.set(materialization_id)


@contextmanager
def materialization_scope() -> Iterator[str]:
    """Run a block under a fresh materialization ID, restoring the outer one."""
    token = _materialization_id.set(new_id())
    try:
        yield _materialization_id.get()
    finally:
        _materialization_id.reset(token)


def _add_materialization_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add materialization_id when one is active."""
    mid = get_materialization_id()
    if mid:
        event_dict["materialization_id"] = mid
    return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for production, "console" for development.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        _add_materialization_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )


def get_logger(name: str, **bindings: Any) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module, optionally pre-bound."""
    log = structlog.get_logger(name)
    if bindings:
        log = log.bind(**bindings)
    return log
