"""Tree-sitter parsing and query execution.

This module is the boundary to the tree-sitter bindings:
- Grammar loading from the GrammarSource metadata
- Parsing source text into a tree (with error accounting)
- Running an extraction query and yielding one QueryCaptures per match

Nothing here interprets captures; that is the transforms' and the
extraction driver's job.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import tree_sitter
from tree_sitter import Query as _TSQuery
from tree_sitter import QueryCursor as _TSQueryCursor

from shellfacts.core.errors import GrammarError
from shellfacts.core.logging import get_logger
from shellfacts.grammar.bash import BASH
from shellfacts.grammar.types import Capture, GrammarDefinition, QueryCaptures

log = get_logger(__name__)


@dataclass
class ParseResult:
    """Result of parsing one source text."""

    tree: Any  # tree_sitter.Tree
    source: bytes
    grammar_id: str
    error_count: int
    total_nodes: int
    root_node: Any  # tree_sitter.Node

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


def node_text(src: bytes, node: Any) -> str:
    """Extract text content of a node."""
    return src[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def count_nodes(root: Any) -> tuple[int, int]:
    """Return (error_count, total_nodes) for the tree under ``root``."""
    error_count = 0
    total_nodes = 0
    stack = [root]
    while stack:
        node = stack.pop()
        total_nodes += 1
        if node.type == "ERROR" or node.is_missing:
            error_count += 1
        stack.extend(node.children)
    return error_count, total_nodes


@dataclass
class TreeSitterParser:
    """
    Tree-sitter parser bound to one grammar definition.

    Not thread-safe: create one parser per thread. The grammar definition it
    reads from is immutable and may be shared freely.

    Usage::

        parser = TreeSitterParser()
        result = parser.parse(source_text)
        for captures in parser.run_query(result, "functions"):
            name = captures.text("function.name")
    """

    grammar: GrammarDefinition = BASH
    _parser: Any = field(default=None, repr=False)
    _language: Any = field(default=None, repr=False)
    _queries: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        """Initialize the parser."""
        self._parser = tree_sitter.Parser()

    @property
    def language(self) -> Any:
        """The tree-sitter Language, loaded on first use."""
        if self._language is None:
            self._language = self._load_language()
        return self._language

    def _load_language(self) -> Any:
        """Load the tree-sitter Language using the grammar's source metadata."""
        source = self.grammar.grammar
        try:
            module = importlib.import_module(source.module)
            lang_fn = getattr(module, source.language_func)
        except (ImportError, AttributeError) as err:
            raise GrammarError.not_installed(source.module, source.package) from err
        log.debug("grammar_loaded", grammar=self.grammar.meta.id, module=source.module)
        return tree_sitter.Language(lang_fn())

    def parse(self, source: str | bytes) -> ParseResult:
        """
        Parse source text.

        Args:
            source: Script text. ``str`` is encoded as UTF-8.

        Returns:
            ParseResult with tree and error info. Malformed input still
            produces a tree; error nodes are counted, never raised.
        """
        content = source.encode("utf-8", errors="replace") if isinstance(source, str) else source

        self._parser.language = self.language
        tree = self._parser.parse(content)
        error_count, total_nodes = count_nodes(tree.root_node)

        return ParseResult(
            tree=tree,
            source=content,
            grammar_id=self.grammar.meta.id,
            error_count=error_count,
            total_nodes=total_nodes,
            root_node=tree.root_node,
        )

    def compile_query(self, category: str) -> Any | None:
        """Compile and cache the grammar's query for ``category``.

        Returns None if the grammar defines no query for the category.

        Raises:
            GrammarError: If the query text does not compile against the grammar.
        """
        if category in self._queries:
            return self._queries[category]

        query_text = getattr(self.grammar.queries, category, None)
        if not query_text or not query_text.strip():
            return None

        try:
            query = _TSQuery(self.language, query_text)
        except Exception as err:
            raise GrammarError.query_invalid(category, str(err)) from err

        self._queries[category] = query
        return query

    def run_query(self, result: ParseResult, category: str) -> Iterator[QueryCaptures]:
        """Run the ``category`` query and yield the captures of each match.

        Predicates (``#eq?``, ``#match?``) are applied by the bindings. When a
        label captures several nodes in one match, the first is kept.
        """
        query = self.compile_query(category)
        if query is None:
            return

        cursor = _TSQueryCursor(query)
        matches: list[tuple[int, dict[str, list[Any]]]] = cursor.matches(result.root_node)
        for _pattern_idx, captures_dict in matches:
            captures: dict[str, Capture] = {}
            for label, nodes in captures_dict.items():
                if nodes:
                    node = nodes[0]
                    captures[label] = Capture(node=node, text=node_text(result.source, node))
            if captures:
                yield QueryCaptures(captures)
