"""Documentation comment parsing for Bash."""

from __future__ import annotations

_MARKER = "#"


def parse_doc_comment(comment: str) -> str:
    """Strip the ``#`` marker and one following space, then trim.

    Works on a single comment line; joining consecutive lines into a block
    is left to the caller. ``"#   note   "`` gives ``"note"``, ``"#"`` gives ``""``.
    """
    text = comment or ""
    if text.startswith(_MARKER):
        text = text[1:]
        if text[:1].isspace():
            text = text[1:]
    return text.strip()
