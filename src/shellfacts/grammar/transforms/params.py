"""Positional parameter inference for Bash function bodies.

Bash functions never declare parameters. A body uses them implicitly:

- ``$1``, ``$2``, ``$10`` - bare positional references (digits read greedily)
- ``${1}``, ``${1:-default}``, ``${1-default}`` - braced references
- ``$@``, ``$*``, ``${@}``, ``${*}`` - all remaining arguments

The scanner below reads the body left to right and recognises only those
token shapes. It never backtracks: a failed search for a closing brace is
remembered, so no character is examined more than a constant number of
times whatever the input looks like.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from dataclasses import dataclass

from shellfacts.grammar.types import FunctionParam

_DIGITS = frozenset("0123456789")
_REST_CHARS = frozenset("@*")


@dataclass(frozen=True, slots=True)
class _Reference:
    """One recognised positional or rest reference."""

    end: int  # Index just past the token
    index: int = 0
    default: str | None = None
    rest_marker: str | None = None


def parse_params(body: str | None) -> list[FunctionParam]:
    """Infer the parameter list implied by positional references in ``body``.

    Parameters ``$1`` through ``$N`` are emitted for the highest index ``N``
    referenced anywhere, even when some lower index never appears. A default
    value makes a parameter optional; the first default seen for an index
    wins. A rest reference anywhere appends one rest parameter last.

    Example::

        greet() {
            local name="$1"
            local greeting="${2:-Hello}"
            echo "$greeting, $name!" "$@"
        }

    yields ``$1`` (required), ``$2`` (optional, default "Hello") and ``$@``.
    """
    if not body:
        return []

    max_index = 0
    defaults: dict[int, str] = {}
    rest_marker: str | None = None

    for ref in _ReferenceScanner(body):
        if ref.rest_marker is not None:
            rest_marker = rest_marker or ref.rest_marker
            continue
        max_index = max(max_index, ref.index)
        if ref.default and ref.index not in defaults:
            defaults[ref.index] = ref.default

    params = [
        FunctionParam(
            name=f"${i}",
            optional=i in defaults,
            rest=False,
            default_value=defaults.get(i),
        )
        for i in range(1, max_index + 1)
    ]
    if rest_marker is not None:
        params.append(FunctionParam(name=rest_marker, optional=True, rest=True))
    return params


class _ReferenceScanner:
    """Iterates the positional and rest references of a body, in order."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._length = len(text)
        # Searches for "}" starting at or after this index are known to fail
        self._unclosed_from = self._length + 1

    def __iter__(self) -> Iterator[_Reference]:
        text = self._text
        pos = 0
        while pos < self._length:
            pos = text.find("$", pos)
            if pos < 0 or pos + 1 >= self._length:
                return

            nxt = text[pos + 1]
            if nxt in _DIGITS:
                end = self._scan_digits(pos + 1)
                index = self._index(pos + 1, end)
                if index is not None:
                    yield _Reference(end=end, index=index)
                pos = end
            elif nxt in _REST_CHARS:
                yield _Reference(end=pos + 2, rest_marker=f"${nxt}")
                pos += 2
            elif nxt == "{":
                ref = self._scan_braced(pos + 2)
                if ref is None:
                    pos += 1
                else:
                    yield ref
                    pos = ref.end
            else:
                pos += 1

    def _scan_digits(self, start: int) -> int:
        """Return the index just past the digit run starting at ``start``."""
        end = start
        while end < self._length and self._text[end] in _DIGITS:
            end += 1
        return end

    def _index(self, start: int, end: int) -> int | None:
        """Value of the digit run text[start:end], or None if too long to convert."""
        digits = self._text[start:end].lstrip("0") or "0"
        limit = sys.get_int_max_str_digits()
        if limit and len(digits) > limit:
            return None
        return int(digits)

    def _scan_braced(self, start: int) -> _Reference | None:
        """Scan a braced reference whose content begins at ``start`` (after ``${``).

        Returns None when the text is not one of the recognised shapes
        (``${N}``, ``${N:-text}``, ``${N-text}``, ``${@}``, ``${*}``).
        """
        text = self._text
        if start >= self._length:
            return None

        first = text[start]
        if first in _REST_CHARS:
            if start + 1 < self._length and text[start + 1] == "}":
                return _Reference(end=start + 2, rest_marker=f"${first}")
            return None

        digits_end = self._scan_digits(start)
        if digits_end == start or digits_end >= self._length:
            return None
        index = self._index(start, digits_end)
        if index is None:
            return None

        cursor = digits_end
        if text[cursor] == "}":
            return _Reference(end=cursor + 1, index=index)

        if text.startswith(":-", cursor):
            cursor += 2
        elif text[cursor] == "-":
            cursor += 1
        else:
            return None

        close = self._find_closing_brace(cursor)
        if close < 0:
            return None
        return _Reference(end=close + 1, index=index, default=text[cursor:close])

    def _find_closing_brace(self, start: int) -> int:
        """Index of the first unescaped ``}`` at or after ``start``, or -1.

        Default text has no nesting: ``${1:-${2}}`` yields the default ``${2``.
        """
        if start >= self._unclosed_from:
            return -1
        text = self._text
        pos = start
        while pos < self._length:
            ch = text[pos]
            if ch == "\\":
                pos += 2
                continue
            if ch == "}":
                return pos
            pos += 1
        self._unclosed_from = start
        return -1
