"""Bash transform functions. Each is pure and safe to call concurrently."""

from shellfacts.grammar.transforms.docs import parse_doc_comment
from shellfacts.grammar.transforms.exports import is_exported
from shellfacts.grammar.transforms.imports import is_dynamic_path, parse_import, strip_quotes
from shellfacts.grammar.transforms.normalize import normalize_body, normalize_heredoc
from shellfacts.grammar.transforms.params import parse_params

__all__ = [
    "is_dynamic_path",
    "is_exported",
    "normalize_body",
    "normalize_heredoc",
    "parse_doc_comment",
    "parse_import",
    "parse_params",
    "strip_quotes",
]
