"""Structured logging keyed by analytics run.

structlog renders every entry as JSON (or coloured console output while
developing) and stamps it with the ``run_id`` of the analytics run that
emitted it, so all lines logged while building one summary correlate.

Usage::

    setup_logging(level="DEBUG", format="console")
    log = get_logger(__name__)

    with analytics_run() as run_id:
        log.info("summary_started", trades=42)
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

import structlog

from journal_analytics.core.config import ObservabilityConfig
from journal_analytics.core.errors import ConfigError

_run_id: ContextVar[str] = ContextVar("run_id", default="")

_RENDERERS = {
    "json": structlog.processors.JSONRenderer,
    "console": structlog.dev.ConsoleRenderer,
}


def _make_run_id() -> str:
    return uuid.uuid4().hex[:12]


def get_run_id() -> str:
    """Current run ID; entries logged outside any run get a fresh one."""
    rid = _run_id.get()
    if not rid:
        rid = _make_run_id()
        _run_id.set(rid)
    return rid


def new_run_id() -> str:
    """Start a new run in the current context and return its ID."""
    rid = _make_run_id()
    _run_id.set(rid)
    return rid


@contextmanager
def analytics_run() -> Iterator[str]:
    """Scope a run ID to a block, restoring the previous one afterwards."""
    token = _run_id.set(_make_run_id())
    try:
        yield _run_id.get()
    finally:
        _run_id.reset(token)


def _add_run_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    event_dict["run_id"] = get_run_id()
    return event_dict


def _processors(format: str) -> list[Any]:
    try:
        renderer = _RENDERERS[format]()
    except KeyError:
        raise ConfigError(
            f"Unknown log format {format!r}; expected one of {sorted(_RENDERERS)}"
        ) from None

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        _add_run_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if format == "json":
        processors.append(structlog.processors.format_exc_info)
    processors.append(renderer)
    return processors


def setup_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        format: "json" for machine-readable output, "console" for humans.

    Raises:
        ConfigError: *format* is not a known renderer.
    """
    structlog.configure(
        processors=_processors(format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )


def configure_from_settings(config: ObservabilityConfig) -> None:
    setup_logging(level=config.log_level, format=config.log_format)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
