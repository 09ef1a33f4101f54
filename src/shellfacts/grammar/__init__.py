"""Grammar definitions: metadata, queries and transforms."""

from shellfacts.grammar.bash import (
    BASH,
    GRAMMARS,
    get_grammar,
    get_grammar_for_ext,
    get_grammar_for_path,
    get_grammar_for_shebang,
)
from shellfacts.grammar.types import (
    Capture,
    ExtractionQueries,
    FunctionParam,
    GrammarDefinition,
    GrammarMeta,
    GrammarSource,
    GrammarTransforms,
    ImportInfo,
    QueryCaptures,
    SourceLocation,
)

__all__ = [
    "BASH",
    "GRAMMARS",
    "Capture",
    "ExtractionQueries",
    "FunctionParam",
    "GrammarDefinition",
    "GrammarMeta",
    "GrammarSource",
    "GrammarTransforms",
    "ImportInfo",
    "QueryCaptures",
    "SourceLocation",
    "get_grammar",
    "get_grammar_for_ext",
    "get_grammar_for_path",
    "get_grammar_for_shebang",
]
