"""Data contracts shared by queries, transforms and the extraction driver.

Every record here is a frozen dataclass. A GrammarDefinition is built once at
import time and shared read-only by every extraction call.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

# =========================================================================
# Grammar bundle
# =========================================================================


@dataclass(frozen=True)
class GrammarMeta:
    """Grammar metadata describing supported files and identification."""

    id: str  # Unique within the host registry
    name: str
    description: str = ""
    extensions: tuple[str, ...] = ()  # With leading dot (".sh")
    globs: tuple[str, ...] = ()  # Filenames without a standard extension


@dataclass(frozen=True)
class GrammarSource:
    """Where the tree-sitter grammar comes from. Opaque to the transforms."""

    source: str  # "pypi"
    package: str  # PyPI distribution ("tree-sitter-bash")
    module: str  # Python import ("tree_sitter_bash")
    min_version: str
    language_func: str = "language"


@dataclass(frozen=True)
class ExtractionQueries:
    """Extraction queries in tree-sitter S-expression format."""

    functions: str
    strings: str | None = None
    imports: str | None = None
    exports: str | None = None
    doc_comments: str | None = None

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield (category, query_text) for every query that is set."""
        for category in ("functions", "strings", "imports", "exports", "doc_comments"):
            text = getattr(self, category)
            if text:
                yield category, text


@dataclass(frozen=True)
class GrammarTransforms:
    """Language-specific processing applied to query captures."""

    parse_params: Callable[[str | None], list[FunctionParam]] | None = None
    normalize_body: Callable[[str], str] | None = None
    is_exported: Callable[[str, str], bool] | None = None
    parse_import: Callable[..., ImportInfo] | None = None
    parse_doc_comment: Callable[[str], str] | None = None


@dataclass(frozen=True)
class GrammarDefinition:
    """Complete grammar definition handed to the extraction driver."""

    meta: GrammarMeta
    grammar: GrammarSource
    queries: ExtractionQueries
    transforms: GrammarTransforms = field(default_factory=GrammarTransforms)


# =========================================================================
# Captures
# =========================================================================


@dataclass(frozen=True)
class Capture:
    """A named sub-match: the syntax node and its source text."""

    node: Any  # tree_sitter.Node, or anything with start_point/end_point
    text: str


class QueryCaptures(Mapping[str, Capture]):
    """Read-only mapping of capture label to Capture for one query match."""

    __slots__ = ("_captures",)

    def __init__(self, captures: Mapping[str, Capture] | None = None) -> None:
        self._captures: dict[str, Capture] = dict(captures or {})

    def __getitem__(self, name: str) -> Capture:
        return self._captures[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._captures)

    def __len__(self) -> int:
        return len(self._captures)

    def __repr__(self) -> str:
        labels = ", ".join(self._captures)
        return f"QueryCaptures({labels})"

    def has(self, name: str) -> bool:
        return name in self._captures

    def text(self, name: str, default: str = "") -> str:
        """Text of a capture, or default when the label is absent."""
        capture = self._captures.get(name)
        return capture.text if capture is not None else default

    def all(self) -> Mapping[str, Capture]:
        return dict(self._captures)


# =========================================================================
# Semantic records
# =========================================================================


@dataclass(frozen=True)
class FunctionParam:
    """An implicit shell function parameter ("$1", "$2", ..., or "$@")."""

    name: str
    optional: bool = False
    rest: bool = False
    default_value: str | None = None
    type: str | None = None  # Shell has no parameter types

    @property
    def index(self) -> int | None:
        """Positional index, or None for the rest parameter."""
        if self.rest:
            return None
        return int(self.name[1:])


@dataclass(frozen=True)
class SourceLocation:
    """A 1-indexed source span. ``file`` is filled in by the driver."""

    file: str = ""
    line: int = 0
    column: int = 0
    end_line: int = 0
    end_column: int = 0

    @classmethod
    def from_node(cls, node: Any, file: str = "") -> SourceLocation:
        """Convert a node's 0-indexed (row, column) points to 1-indexed lines."""
        if node is None:
            return cls(file=file)
        (start_row, start_col) = node.start_point
        (end_row, end_col) = node.end_point
        return cls(
            file=file,
            line=start_row + 1,
            column=start_col + 1,
            end_line=end_row + 1,
            end_column=end_col + 1,
        )


@dataclass(frozen=True)
class ImportInfo:
    """A `source` / `.` statement.

    Sourcing pulls every definition of the target into scope, so the record
    is always a namespace import and its name is the path itself. When the
    path depends on runtime expansion the record is the unresolved marker:
    ``name`` and ``from_path`` are empty and ``is_dynamic`` is True.
    """

    name: str
    from_path: str
    location: SourceLocation
    is_type_only: bool = False
    is_namespace: bool = True
    is_dynamic: bool = False
    raw: str = ""  # Argument as written, quotes included

    @property
    def is_resolved(self) -> bool:
        return bool(self.from_path)
