"""shellfacts - semantic fact extraction for shell scripts.

Provides the Bash grammar definition (metadata, tree-sitter queries and
transforms) consumed by convention-linting engines, plus a reference
extraction driver.

Example::

    from shellfacts import BASH, ShellExtractor

    facts = ShellExtractor().extract(open("deploy.sh").read(), file="deploy.sh")
    for fn in facts.functions:
        print(fn.name, [p.name for p in fn.params], fn.is_exported)
"""

from shellfacts.extraction import FileFacts, ShellExtractor
from shellfacts.grammar import (
    BASH,
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

__version__ = "0.1.0"

__all__ = [
    "BASH",
    "ExtractionQueries",
    "FileFacts",
    "FunctionParam",
    "GrammarDefinition",
    "GrammarMeta",
    "GrammarSource",
    "GrammarTransforms",
    "ImportInfo",
    "QueryCaptures",
    "ShellExtractor",
    "SourceLocation",
]
