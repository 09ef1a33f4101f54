"""Export detection for Bash functions.

Bash exports a function to child processes with ``export -f name``. The
directive may appear before or after the definition and may list several
names, so detection is a scan over the whole file rather than a look at the
function's own node.
"""

from __future__ import annotations

_KEYWORD = "export"
_FLAG = "-f"
_BLANKS = frozenset(" \t")
# Characters that may precede a command word
_COMMAND_START = frozenset(" \t\r\n;&|({`")
# Characters that end a word, or the whole directive
_WORD_END = frozenset(" \t\r\n;&|()<>`")
_DIRECTIVE_END = frozenset("\r\n;&|()<>`#")


def is_exported(function_name: str, source: str) -> bool:
    """Return True if ``source`` holds an ``export -f`` naming ``function_name``.

    Names must match as whole words, so ``export -f test`` exports ``test``
    but not ``testing`` or ``tes``.

    Example::

        function greet() { echo "hello"; }
        export -f greet
    """
    if not function_name or not source:
        return False

    pos = 0
    while True:
        start = source.find(_KEYWORD, pos)
        if start < 0:
            return False
        pos = start + len(_KEYWORD)
        if start > 0 and source[start - 1] not in _COMMAND_START:
            continue

        names, end = _exported_function_names(source, pos)
        if names is None:
            continue
        if function_name in names:
            return True
        pos = end


def _exported_function_names(source: str, pos: int) -> tuple[list[str] | None, int]:
    """Read ``-f name...`` following the keyword.

    Returns the listed names and the index where the directive ends, or
    ``(None, pos)`` when the keyword is not followed by ``-f``.
    """
    after_keyword = _skip_blanks(source, pos)
    if after_keyword == pos:
        return None, pos

    flag, cursor = _read_word(source, after_keyword)
    if flag != _FLAG:
        return None, pos

    names: list[str] = []
    while True:
        word_start = _skip_blanks(source, cursor)
        if word_start >= len(source) or source[word_start] in _DIRECTIVE_END:
            return names, word_start
        if word_start == cursor:
            return names, cursor
        word, cursor = _read_word(source, word_start)
        names.append(_unquote(word))


def _skip_blanks(source: str, pos: int) -> int:
    """Skip horizontal whitespace and backslash-newline continuations."""
    length = len(source)
    while pos < length:
        ch = source[pos]
        if ch in _BLANKS:
            pos += 1
        elif ch == "\\" and source.startswith("\n", pos + 1):
            pos += 2
        else:
            break
    return pos


def _read_word(source: str, pos: int) -> tuple[str, int]:
    end = pos
    while end < len(source) and source[end] not in _WORD_END:
        end += 1
    return source[pos:end], end


def _unquote(word: str) -> str:
    if len(word) >= 2 and word[0] == word[-1] and word[0] in "\"'":
        return word[1:-1]
    return word
