"""Config module exports."""

from shellfacts.config.loader import ShellFactsSettings, load_config
from shellfacts.config.models import (
    ExtractionConfig,
    LoggingConfig,
    LogOutputConfig,
    ShellFactsConfig,
)

__all__ = [
    "load_config",
    "ExtractionConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ShellFactsConfig",
    "ShellFactsSettings",
]
