"""Core module exports."""

from shellfacts.core.errors import (
    ConfigError,
    ErrorCode,
    GrammarError,
    InternalError,
    ShellFactsError,
)
from shellfacts.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "GrammarError",
    "InternalError",
    "ShellFactsError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
