"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SHELLFACTS__SECTION__KEY)
3. Repo YAML (.shellfacts.yaml)
4. Global YAML (~/.config/shellfacts/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SHELLFACTS__<SECTION>__<KEY>=<VALUE>

Examples:
    SHELLFACTS__LOGGING__LEVEL=DEBUG
    SHELLFACTS__EXTRACTION__INCLUDE_STRINGS=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SHELLFACTS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG logs one event per extracted file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExtractionConfig(BaseModel):
    """Extraction driver configuration.

    Env vars:
        SHELLFACTS__EXTRACTION__MAX_FILE_SIZE_MB: Refuse files larger than this
        SHELLFACTS__EXTRACTION__INCLUDE_STRINGS: Collect string literals
        SHELLFACTS__EXTRACTION__INCLUDE_DYNAMIC_IMPORTS: Report unresolved imports
        SHELLFACTS__EXTRACTION__ATTACH_DOC_COMMENTS: Attach comment blocks to functions
    """

    max_file_size_mb: int = Field(
        default=5,
        description="Refuse to read script files larger than this (MB).",
    )
    include_strings: bool = Field(
        default=True,
        description="Collect string literals. Large generated scripts produce many.",
    )
    include_dynamic_imports: bool = Field(
        default=True,
        description="Report `source` statements whose path cannot be resolved statically.",
    )
    attach_doc_comments: bool = Field(
        default=True,
        description="Attach the comment block directly above a function as its doc.",
    )

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {v}")
        return v


class ShellFactsConfig(BaseModel):
    """Root configuration (type hint target for loaded settings)."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
