"""Structured logging for extraction runs.

Every structlog event is rendered through stdlib logging, so one call to
configure_logging() sets up both shellfacts' own loggers and any library that
logs through ``logging``. Each configured output gets its own renderer
(console or JSON) and level. Events carry the ID of the run that emitted them.

Module loggers are created at import time with get_logger(__name__); they
pick up the configuration when they emit, not when they are created.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from shellfacts.config.models import LoggingConfig, LogOutputConfig

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)

_STREAMS = ("stderr", "stdout")


def get_run_id() -> str | None:
    return _run_id.get()


def set_run_id(run_id: str | None = None) -> str:
    """Set or generate the correlation ID for an extraction run."""
    rid = run_id or uuid4().hex[:12]
    _run_id.set(rid)
    return rid


def clear_run_id() -> None:
    _run_id.set(None)


def _add_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := get_run_id():
        event_dict["run_id"] = rid
    return event_dict


def _level_number(name: str | None, fallback: int) -> int:
    """Map "DEBUG" / "warn" / ... to a logging level number."""
    if not name:
        return fallback
    return logging.getLevelNamesMapping().get(name.upper(), fallback)


def _shared_processors() -> list[structlog.types.Processor]:
    """Processors applied to structlog and foreign (stdlib) records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_run_id,  # type: ignore[list-item]
    ]


def _make_formatter(
    output: LogOutputConfig,
    pre_chain: list[structlog.types.Processor],
) -> structlog.stdlib.ProcessorFormatter:
    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        stream = sys.stdout if output.destination == "stdout" else sys.stderr
        renderer = structlog.dev.ConsoleRenderer(
            colors=output.destination in _STREAMS and stream.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _make_handler(destination: str) -> logging.Handler:
    """Stream handler for stderr/stdout, append-mode file handler otherwise."""
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Configure structlog and the root logger's handlers.

    Pass ``config`` for multi-output setups; otherwise a single stderr output
    is built from ``json_format`` and ``level``. Calling again replaces the
    previous configuration.
    """
    from shellfacts.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level_number(config.level, logging.INFO)
    pre_chain = _shared_processors()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach loggers that already emitted
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(root_level)

    for output in config.outputs:
        handler = _make_handler(output.destination)
        handler.setLevel(_level_number(output.level, root_level))
        handler.setFormatter(_make_formatter(output, pre_chain))
        root.addHandler(handler)


def get_logger(name: str | None = None, **context: Any) -> structlog.stdlib.BoundLogger:
    """Logger for module ``name`` with optional initial ``context``.

    Returns structlog's lazy proxy. Nothing is bound until the first event,
    so a logger created at import time still follows a later
    configure_logging().
    """
    return structlog.stdlib.get_logger(name, **context)  # type: ignore[no-any-return]
