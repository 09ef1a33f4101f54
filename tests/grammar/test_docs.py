"""Tests for comment marker stripping."""

from __future__ import annotations

import pytest

from shellfacts.grammar.transforms import parse_doc_comment


@pytest.mark.parametrize(
    ("comment", "expected"),
    [
        ("# Build the project", "Build the project"),
        ("#Build the project", "Build the project"),
        ("#   note   ", "note"),
        ("#", ""),
        ("", ""),
        ("#  Usage: deploy <server> [port]", "Usage: deploy <server> [port]"),
        ("## double", "# double"),
        ("#\tTabbed", "Tabbed"),
    ],
)
def test_parse_doc_comment(comment: str, expected: str) -> None:
    """Marker and surrounding whitespace are removed, content is kept."""
    assert parse_doc_comment(comment) == expected


def test_text_without_marker_is_trimmed() -> None:
    assert parse_doc_comment("  plain  ") == "plain"
