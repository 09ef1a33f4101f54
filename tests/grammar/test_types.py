"""Tests for the shared data contracts."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from types import SimpleNamespace

import pytest

from shellfacts.grammar.types import (
    Capture,
    ExtractionQueries,
    FunctionParam,
    ImportInfo,
    QueryCaptures,
    SourceLocation,
)


class TestQueryCaptures:
    """Read-only capture mapping."""

    @pytest.fixture
    def captures(self) -> QueryCaptures:
        node = SimpleNamespace(start_point=(0, 0), end_point=(0, 5))
        return QueryCaptures(
            {
                "function.name": Capture(node=node, text="greet"),
                "function.body": Capture(node=node, text="{ :; }"),
            }
        )

    def test_mapping_protocol(self, captures: QueryCaptures) -> None:
        assert len(captures) == 2
        assert list(captures) == ["function.name", "function.body"]
        assert captures["function.name"].text == "greet"
        assert captures.get("missing") is None

    def test_text_with_default(self, captures: QueryCaptures) -> None:
        assert captures.text("function.name") == "greet"
        assert captures.text("function.params") == ""
        assert captures.text("function.params", "fallback") == "fallback"

    def test_has_and_all(self, captures: QueryCaptures) -> None:
        assert captures.has("function.body")
        assert not captures.has("import.from")
        assert set(captures.all()) == {"function.name", "function.body"}

    def test_source_mapping_is_copied(self) -> None:
        """Mutating the input afterwards does not change the captures."""
        source: dict[str, Capture] = {}
        captures = QueryCaptures(source)
        source["late"] = Capture(node=None, text="x")
        assert len(captures) == 0

    def test_repr_lists_labels(self, captures: QueryCaptures) -> None:
        assert repr(captures) == "QueryCaptures(function.name, function.body)"


class TestFunctionParam:
    def test_index_of_positional(self) -> None:
        assert FunctionParam(name="$12").index == 12

    def test_rest_has_no_index(self) -> None:
        assert FunctionParam(name="$@", optional=True, rest=True).index is None

    def test_frozen(self) -> None:
        param = FunctionParam(name="$1")
        with pytest.raises(FrozenInstanceError):
            param.optional = True  # type: ignore[misc]


class TestSourceLocation:
    def test_from_node_is_one_indexed(self) -> None:
        node = SimpleNamespace(start_point=(0, 4), end_point=(2, 1))
        assert SourceLocation.from_node(node, "a.sh") == SourceLocation(
            file="a.sh", line=1, column=5, end_line=3, end_column=2
        )

    def test_from_none(self) -> None:
        assert SourceLocation.from_node(None, "a.sh") == SourceLocation(file="a.sh")


class TestImportInfo:
    def test_unresolved_marker(self) -> None:
        info = ImportInfo(name="", from_path="", location=SourceLocation(), is_dynamic=True)
        assert info.is_resolved is False
        assert info.is_namespace is True


class TestExtractionQueries:
    def test_items_skips_unset_categories(self) -> None:
        queries = ExtractionQueries(functions="(a)", exports="(b)")
        assert list(queries.items()) == [("functions", "(a)"), ("exports", "(b)")]
