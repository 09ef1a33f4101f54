"""Extraction driver: source text -> tree -> query matches -> FileFacts.

The driver owns everything around the pure transforms: choosing the grammar,
reading files, running each query, handing captures to the transforms,
assembling comment blocks and filling in file names. Malformed scripts never
raise; they produce whatever the tree still yields plus an error count.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

from shellfacts.config.models import ExtractionConfig
from shellfacts.core.errors import GrammarError
from shellfacts.core.logging import get_logger
from shellfacts.extraction.models import (
    DocComment,
    ExportInfo,
    ExportKind,
    FileFacts,
    FunctionInfo,
    StringLiteral,
)
from shellfacts.grammar.bash import BASH, get_grammar_for_path, get_grammar_for_shebang
from shellfacts.grammar.transforms import normalize_heredoc
from shellfacts.grammar.types import (
    FunctionParam,
    GrammarDefinition,
    ImportInfo,
    QueryCaptures,
    SourceLocation,
)
from shellfacts.parsing.treesitter import ParseResult, TreeSitterParser

log = get_logger(__name__)

_SOURCE_COMMANDS = frozenset({"source", "."})
_BYTES_PER_MB = 1024 * 1024


def detect_grammar(path: Path, first_line: str = "") -> GrammarDefinition | None:
    """Pick a grammar by extension or filename, then by shebang."""
    grammar = get_grammar_for_path(path)
    if grammar is None and first_line:
        grammar = get_grammar_for_shebang(first_line)
    return grammar


class ShellExtractor:
    """Runs a grammar's queries and transforms over shell scripts.

    One extractor per thread (the underlying tree-sitter parser is not
    thread-safe). The grammar definition itself is shared read-only.
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        grammar: GrammarDefinition = BASH,
    ) -> None:
        self._config = config or ExtractionConfig()
        self._grammar = grammar
        self._parser = TreeSitterParser(grammar=grammar)

    @property
    def grammar(self) -> GrammarDefinition:
        return self._grammar

    def extract_path(self, path: Path) -> FileFacts:
        """Read and extract one file.

        Raises:
            GrammarError: If the file is not a shell script or is too large.
            OSError: If the file cannot be read.
        """
        limit = self._config.max_file_size_mb * _BYTES_PER_MB
        size = path.stat().st_size
        if size > limit:
            raise GrammarError.file_too_large(str(path), size, limit)

        content = path.read_bytes()
        first_line = content.split(b"\n", 1)[0].decode("utf-8", errors="replace")
        if detect_grammar(path, first_line) is None:
            raise GrammarError.unsupported_file(str(path))

        return self.extract(content.decode("utf-8", errors="replace"), file=str(path))

    def extract(self, source: str, file: str = "") -> FileFacts:
        """Extract functions, imports, exports, strings and comments from ``source``."""
        result = self._parser.parse(source)
        if result.has_errors:
            log.warning("parse_errors", file=file, error_count=result.error_count)

        doc_comments, comment_lines = self._extract_comments(result, file)
        functions = self._extract_functions(result, source, file, comment_lines)
        imports = self._extract_imports(result, file)
        exports = self._extract_exports(result, file)
        strings = self._extract_strings(result, file) if self._config.include_strings else []

        log.debug(
            "file_extracted",
            file=file,
            functions=len(functions),
            imports=len(imports),
            exports=len(exports),
            strings=len(strings),
        )
        return FileFacts(
            file=file,
            grammar_id=self._grammar.meta.id,
            functions=tuple(functions),
            imports=tuple(imports),
            exports=tuple(exports),
            strings=tuple(strings),
            doc_comments=tuple(doc_comments),
            error_count=result.error_count,
        )

    # ------------------------------------------------------------------
    # Functions
    # ------------------------------------------------------------------

    def _extract_functions(
        self,
        result: ParseResult,
        source: str,
        file: str,
        comment_lines: dict[int, str],
    ) -> list[FunctionInfo]:
        transforms = self._grammar.transforms
        functions: list[FunctionInfo] = []

        for captures in self._parser.run_query(result, "functions"):
            name = captures.text("function.name")
            if not name:
                continue
            body = captures.text("function.body")
            params_text = captures.text("function.params", body)

            params: list[FunctionParam] = []
            if transforms.parse_params is not None:
                params = transforms.parse_params(params_text)
            if transforms.normalize_body is not None:
                body = transforms.normalize_body(body)
            exported = False
            if transforms.is_exported is not None:
                exported = transforms.is_exported(name, source)

            anchor = captures.get("function") or captures["function.name"]
            location = SourceLocation.from_node(anchor.node, file)
            doc = None
            if self._config.attach_doc_comments:
                doc = _doc_block_above(comment_lines, location.line)

            functions.append(
                FunctionInfo(
                    name=name,
                    params=tuple(params),
                    body=body,
                    is_exported=exported,
                    location=location,
                    doc=doc,
                )
            )
        return functions

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def _extract_imports(self, result: ParseResult, file: str) -> list[ImportInfo]:
        parse_import = self._grammar.transforms.parse_import
        if parse_import is None:
            return []

        # One record per statement: extra words after the path are arguments
        # to the sourced script, not further imports.
        by_statement: dict[int, QueryCaptures] = {}
        for captures in self._parser.run_query(result, "imports"):
            if captures.has("_cmd") and captures.text("_cmd") not in _SOURCE_COMMANDS:
                continue
            statement = captures.get("import") or captures.get("import.from")
            if statement is None:
                continue
            key = statement.node.start_byte
            current = by_statement.get(key)
            if current is None or _from_start(captures) < _from_start(current):
                by_statement[key] = captures

        imports: list[ImportInfo] = []
        for captures in by_statement.values():
            info = parse_import(captures)
            info = replace(info, location=replace(info.location, file=file))
            if info.is_dynamic:
                log.warning(
                    "dynamic_import_unresolved",
                    file=file,
                    line=info.location.line,
                    raw=info.raw,
                )
                if not self._config.include_dynamic_imports:
                    continue
            imports.append(info)
        return imports

    # ------------------------------------------------------------------
    # Exports
    # ------------------------------------------------------------------

    def _extract_exports(self, result: ParseResult, file: str) -> list[ExportInfo]:
        # `export -f fn` matches both the plain and the -f pattern; merge per
        # (statement, name) and let the function kind win.
        exports: dict[tuple[int, str], ExportInfo] = {}
        for captures in self._parser.run_query(result, "exports"):
            name_capture = captures.get("export.name")
            if name_capture is None or not name_capture.text:
                continue
            statement = captures.get("export") or name_capture
            key = (statement.node.start_byte, name_capture.text)
            kind = _export_kind(captures.text("_flag"))

            existing = exports.get(key)
            if existing is not None and existing.kind == "function":
                continue
            exports[key] = ExportInfo(
                name=name_capture.text,
                kind=kind,
                location=SourceLocation.from_node(statement.node, file),
            )
        return sorted(exports.values(), key=lambda e: (e.location.line, e.location.column))

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def _extract_strings(self, result: ParseResult, file: str) -> list[StringLiteral]:
        strings: list[StringLiteral] = []
        for captures in self._parser.run_query(result, "strings"):
            capture = captures.get("string.value")
            if capture is None:
                continue
            value = capture.text
            location = SourceLocation.from_node(capture.node, file)
            if capture.node.type == "heredoc_body":
                value, location = _heredoc_body(result.source, capture.node, location)
            strings.append(StringLiteral(value=value, kind=capture.node.type, location=location))
        return strings

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _extract_comments(
        self, result: ParseResult, file: str
    ) -> tuple[list[DocComment], dict[int, str]]:
        """Parse every comment.

        Returns the comments plus a map of 1-indexed line -> text for the
        comments that stand alone on their line (doc block candidates).
        """
        parse_doc_comment = self._grammar.transforms.parse_doc_comment
        if parse_doc_comment is None:
            return [], {}

        lines = result.source.split(b"\n")
        comments: list[DocComment] = []
        standalone: dict[int, str] = {}
        for captures in self._parser.run_query(result, "doc_comments"):
            capture = captures.get("doc.content")
            if capture is None:
                continue
            (row, col) = capture.node.start_point
            if row == 0 and capture.text.startswith("#!"):
                continue
            location = SourceLocation.from_node(capture.node, file)
            text = parse_doc_comment(capture.text)
            comments.append(DocComment(text=text, location=location))
            if row < len(lines) and not lines[row][:col].strip():
                standalone[location.line] = text
        return comments, standalone


def _from_start(captures: QueryCaptures) -> int:
    capture = captures.get("import.from")
    return capture.node.start_byte if capture is not None else 0


def _heredoc_body(
    source: bytes, node: Any, location: SourceLocation
) -> tuple[str, SourceLocation]:
    """Body text from the start of its first line, normalized.

    The grammar starts the body node after the first line's indentation.
    """
    start = node.start_byte
    line_start = source.rfind(b"\n", 0, start) + 1
    if line_start < start and not source[line_start:start].strip(b" \t"):
        start = line_start
        location = replace(location, column=1)
    value = source[start : node.end_byte].decode("utf-8", errors="replace")
    return normalize_heredoc(value, _is_tab_stripped(node)), location


def _is_tab_stripped(heredoc_body: Any) -> bool:
    """True for bodies of `<<-` here-documents."""
    redirect = heredoc_body.parent
    return redirect is not None and any(child.type == "<<-" for child in redirect.children)


def _export_kind(flag: str) -> ExportKind:
    """`-f` (export) and `-fx` (declare/typeset) export functions."""
    if flag.startswith("-") and "f" in flag[1:]:
        return "function"
    return "variable"


def _doc_block_above(comment_lines: dict[int, str], line: int) -> str | None:
    """Join the run of standalone comment lines ending right above ``line``."""
    block: list[str] = []
    current = line - 1
    while current in comment_lines:
        block.append(comment_lines[current])
        current -= 1
    if not block:
        return None
    return "\n".join(reversed(block))
