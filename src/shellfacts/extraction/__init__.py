"""Extraction driver and result records."""

from shellfacts.extraction.extractor import ShellExtractor, detect_grammar
from shellfacts.extraction.models import (
    DocComment,
    ExportInfo,
    FileFacts,
    FunctionInfo,
    StringLiteral,
)

__all__ = [
    "DocComment",
    "ExportInfo",
    "FileFacts",
    "FunctionInfo",
    "ShellExtractor",
    "StringLiteral",
    "detect_grammar",
]
