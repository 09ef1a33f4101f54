"""Import resolution for Bash ``source`` / ``.`` statements.

Bash has no named imports: sourcing a file brings all of its definitions
into scope. The import name is therefore the path itself and every record is
a namespace import. Paths built at runtime (``$VAR``, ``${VAR}``, ``$(cmd)``,
backticks) are never guessed; they produce the unresolved marker instead.
"""

from __future__ import annotations

from typing import Any

from shellfacts.grammar.types import ImportInfo, QueryCaptures, SourceLocation

FROM_CAPTURE = "import.from"
STATEMENT_CAPTURE = "import"


def parse_import(captures: QueryCaptures, node: Any | None = None) -> ImportInfo:
    """Build an ImportInfo from one imports-query match.

    The location comes from the whole statement when captured, else from the
    path argument, else from ``node``. The driver fills in ``location.file``.

    Example::

        source ./lib/utils.sh

    gives ``ImportInfo(name="./lib/utils.sh", from_path="./lib/utils.sh", ...)``
    while ``source "$LIB_DIR/x.sh"`` gives the unresolved marker.
    """
    from_capture = captures.get(FROM_CAPTURE)
    statement_capture = captures.get(STATEMENT_CAPTURE)

    if statement_capture is not None:
        ref_node = statement_capture.node
    elif from_capture is not None:
        ref_node = from_capture.node
    else:
        ref_node = node

    raw = from_capture.text if from_capture is not None else ""
    path = strip_quotes(raw)
    is_dynamic = is_dynamic_path(path)
    if is_dynamic:
        path = ""

    return ImportInfo(
        name=path,
        from_path=path,
        location=SourceLocation.from_node(ref_node),
        is_type_only=False,
        is_namespace=True,
        is_dynamic=is_dynamic,
        raw=raw,
    )


def strip_quotes(text: str) -> str:
    """Remove one layer of matching single or double quotes."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


def is_dynamic_path(path: str) -> bool:
    """True if ``path`` needs runtime expansion to be known.

    Covers variable expansion and ``$(...)`` (both start with ``$``) and
    backtick command substitution.
    """
    return "$" in path or path.count("`") >= 2
