"""Bash grammar definition and grammar registry.

BASH bundles the grammar metadata, the tree-sitter grammar package, the
five extraction queries and the transforms into one immutable definition.

GRAMMARS is the canonical lookup: ``GRAMMARS["bash"]``.
"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import PurePath

from shellfacts.grammar.queries import (
    DOC_COMMENTS_QUERY,
    EXPORTS_QUERY,
    FUNCTIONS_QUERY,
    IMPORTS_QUERY,
    STRINGS_QUERY,
)
from shellfacts.grammar.transforms import (
    is_exported,
    normalize_body,
    parse_doc_comment,
    parse_import,
    parse_params,
)
from shellfacts.grammar.types import (
    ExtractionQueries,
    GrammarDefinition,
    GrammarMeta,
    GrammarSource,
    GrammarTransforms,
)

BASH = GrammarDefinition(
    meta=GrammarMeta(
        id="bash",
        name="Bash",
        description="Bash and shell script grammar",
        extensions=(".sh", ".bash", ".zsh"),
        globs=(".bashrc", ".bash_profile", ".bash_aliases", ".profile", ".zshrc"),
    ),
    grammar=GrammarSource(
        source="pypi",
        package="tree-sitter-bash",
        module="tree_sitter_bash",
        min_version="0.23.0",
    ),
    queries=ExtractionQueries(
        functions=FUNCTIONS_QUERY,
        strings=STRINGS_QUERY,
        imports=IMPORTS_QUERY,
        exports=EXPORTS_QUERY,
        doc_comments=DOC_COMMENTS_QUERY,
    ),
    transforms=GrammarTransforms(
        parse_params=parse_params,
        normalize_body=normalize_body,
        is_exported=is_exported,
        parse_import=parse_import,
        parse_doc_comment=parse_doc_comment,
    ),
)

_ALL_GRAMMARS: tuple[GrammarDefinition, ...] = (BASH,)

# id -> GrammarDefinition
GRAMMARS: dict[str, GrammarDefinition] = {g.meta.id: g for g in _ALL_GRAMMARS}
GRAMMARS["shell"] = BASH
GRAMMARS["sh"] = BASH

# Extension -> GrammarDefinition
_EXT_TO_GRAMMAR: dict[str, GrammarDefinition] = {}
for _grammar in _ALL_GRAMMARS:
    for _ext in _grammar.meta.extensions:
        _EXT_TO_GRAMMAR[_ext] = _grammar


def get_grammar(grammar_id: str) -> GrammarDefinition | None:
    """Get a GrammarDefinition by id or alias."""
    return GRAMMARS.get(grammar_id.lower())


def get_grammar_for_ext(ext: str) -> GrammarDefinition | None:
    """Get a GrammarDefinition for a file extension (with or without leading dot)."""
    ext = ext.lower()
    if not ext.startswith("."):
        ext = f".{ext}"
    return _EXT_TO_GRAMMAR.get(ext)


def get_grammar_for_path(path: str | PurePath) -> GrammarDefinition | None:
    """Select a grammar by extension, falling back to filename globs."""
    pure = PurePath(path)
    if pure.suffix:
        grammar = get_grammar_for_ext(pure.suffix)
        if grammar is not None:
            return grammar
    for grammar in _ALL_GRAMMARS:
        if any(fnmatch(pure.name, glob) for glob in grammar.meta.globs):
            return grammar
    return None


# Interpreters whose scripts the Bash grammar parses acceptably
_SHELL_INTERPRETERS = frozenset({"sh", "bash", "dash", "ksh", "zsh"})


def get_grammar_for_shebang(first_line: str) -> GrammarDefinition | None:
    """Select a grammar from a ``#!`` line (``#!/bin/bash``, ``#!/usr/bin/env sh``)."""
    if not first_line.startswith("#!"):
        return None
    words = first_line[2:].split()
    if not words:
        return None
    interpreter = PurePath(words[0]).name
    if interpreter == "env":
        args = [w for w in words[1:] if not w.startswith("-")]
        if not args:
            return None
        interpreter = PurePath(args[0]).name
    return BASH if interpreter in _SHELL_INTERPRETERS else None
