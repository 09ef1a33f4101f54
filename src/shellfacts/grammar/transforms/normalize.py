"""Normalization of Bash code blocks.

Normalization is structural only: line endings and outer padding. Comments,
string literals and here-document content are left exactly as written.
"""

from __future__ import annotations


def normalize_body(body: str) -> str:
    """Unify line endings to ``\\n`` and trim the block's outer whitespace.

    Interior whitespace and blank lines are kept. Idempotent.
    """
    if not body:
        return ""
    return body.replace("\r\n", "\n").replace("\r", "\n").strip()


def normalize_heredoc(content: str, tab_stripped: bool) -> str:
    """Normalize a here-document body.

    ``<<-EOF`` here-documents have leading tabs removed from every line, the
    same way bash reads them. Other forms are returned unchanged.
    """
    if not tab_stripped:
        return content
    return "\n".join(line.lstrip("\t") for line in content.split("\n"))
