"""Records produced by the extraction driver for one script file."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

from shellfacts.grammar.types import FunctionParam, ImportInfo, SourceLocation

ExportKind = Literal["function", "variable"]


@dataclass(frozen=True)
class FunctionInfo:
    """A function definition with its inferred signature."""

    name: str
    params: tuple[FunctionParam, ...]
    body: str  # Normalized body text, braces included
    is_exported: bool
    location: SourceLocation
    doc: str | None = None


@dataclass(frozen=True)
class ExportInfo:
    """A name exported with export / declare -x / typeset -x."""

    name: str
    kind: ExportKind
    location: SourceLocation


@dataclass(frozen=True)
class StringLiteral:
    """A string literal. ``kind`` is the tree-sitter node type."""

    value: str
    kind: str
    location: SourceLocation


@dataclass(frozen=True)
class DocComment:
    """One comment line with its marker stripped."""

    text: str
    location: SourceLocation


@dataclass(frozen=True)
class FileFacts:
    """Everything extracted from one file."""

    file: str
    grammar_id: str
    functions: tuple[FunctionInfo, ...] = ()
    imports: tuple[ImportInfo, ...] = ()
    exports: tuple[ExportInfo, ...] = ()
    strings: tuple[StringLiteral, ...] = ()
    doc_comments: tuple[DocComment, ...] = ()
    error_count: int = 0

    def function(self, name: str) -> FunctionInfo | None:
        """First function defined with ``name``, if any."""
        return next((f for f in self.functions if f.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return asdict(self)
