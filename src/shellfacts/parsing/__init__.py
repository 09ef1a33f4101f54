"""Tree-sitter parsing and query execution."""

from shellfacts.parsing.treesitter import (
    ParseResult,
    TreeSitterParser,
    count_nodes,
    node_text,
)

__all__ = [
    "ParseResult",
    "TreeSitterParser",
    "count_nodes",
    "node_text",
]
