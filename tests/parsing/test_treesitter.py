"""Tests for tree-sitter parsing and query execution against the Bash grammar."""

from __future__ import annotations

from dataclasses import replace

import pytest

from shellfacts.core.errors import ErrorCode, GrammarError
from shellfacts.grammar import BASH, ExtractionQueries, GrammarSource
from shellfacts.parsing import TreeSitterParser, count_nodes, node_text


@pytest.fixture(scope="module")
def parser() -> TreeSitterParser:
    return TreeSitterParser()


def _texts(parser: TreeSitterParser, source: str, category: str, label: str) -> list[str]:
    result = parser.parse(source)
    return [c.text(label) for c in parser.run_query(result, category) if c.has(label)]


class TestParse:
    """TreeSitterParser.parse."""

    def test_parses_valid_script(self, parser: TreeSitterParser) -> None:
        result = parser.parse("#!/bin/bash\necho hello\n")

        assert result.grammar_id == "bash"
        assert result.root_node.type == "program"
        assert result.has_errors is False
        assert result.total_nodes > 1

    def test_accepts_bytes(self, parser: TreeSitterParser) -> None:
        result = parser.parse(b"echo hi\n")
        assert result.source == b"echo hi\n"

    def test_malformed_script_counts_errors(self, parser: TreeSitterParser) -> None:
        """Broken input still gives a tree; errors are counted, never raised."""
        result = parser.parse("broken() {\n  if then fi fi\n")
        assert result.has_errors is True
        assert result.error_count >= 1

    def test_node_text_handles_multibyte(self, parser: TreeSitterParser) -> None:
        source = 'echo "héllo ✓"\n'
        result = parser.parse(source)
        strings = _texts(parser, source, "strings", "string.value")
        assert strings == ['"héllo ✓"']
        assert node_text(result.source, result.root_node).strip() == source.strip()

    def test_count_nodes_matches_result(self, parser: TreeSitterParser) -> None:
        result = parser.parse("a() { :; }\n")
        assert count_nodes(result.root_node) == (result.error_count, result.total_nodes)


class TestGrammarLoading:
    """Language loading and query compilation failures."""

    def test_missing_grammar_module(self) -> None:
        broken = replace(
            BASH,
            grammar=GrammarSource(
                source="pypi",
                package="tree-sitter-nonexistent",
                module="tree_sitter_nonexistent_xyz",
                min_version="0.0.0",
            ),
        )
        parser = TreeSitterParser(grammar=broken)

        with pytest.raises(GrammarError) as exc_info:
            parser.parse("echo hi")
        assert exc_info.value.code == ErrorCode.GRAMMAR_NOT_INSTALLED
        assert "tree-sitter-nonexistent" in exc_info.value.message

    def test_invalid_query(self) -> None:
        broken = replace(BASH, queries=ExtractionQueries(functions="(no_such_node) @x"))
        parser = TreeSitterParser(grammar=broken)

        with pytest.raises(GrammarError) as exc_info:
            parser.compile_query("functions")
        assert exc_info.value.code == ErrorCode.GRAMMAR_QUERY_INVALID
        assert exc_info.value.details["category"] == "functions"

    def test_unset_query_yields_nothing(self) -> None:
        parser = TreeSitterParser(grammar=replace(BASH, queries=ExtractionQueries(functions="")))
        result = parser.parse("a() { :; }")
        assert parser.compile_query("imports") is None
        assert list(parser.run_query(result, "imports")) == []

    @pytest.mark.parametrize(
        "category", ["functions", "strings", "imports", "exports", "doc_comments"]
    )
    def test_all_bash_queries_compile(self, parser: TreeSitterParser, category: str) -> None:
        assert parser.compile_query(category) is not None

    def test_compiled_query_is_cached(self, parser: TreeSitterParser) -> None:
        assert parser.compile_query("functions") is parser.compile_query("functions")


class TestFunctionsQuery:
    """All three definition syntaxes parse to the same captures."""

    @pytest.mark.parametrize(
        "source",
        [
            'greet() { echo "hi"; }',
            'function greet() { echo "hi"; }',
            'function greet { echo "hi"; }',
        ],
    )
    def test_definition_syntaxes(self, parser: TreeSitterParser, source: str) -> None:
        result = parser.parse(source)
        matches = list(parser.run_query(result, "functions"))

        assert len(matches) == 1
        captures = matches[0]
        assert captures.text("function.name") == "greet"
        assert captures.text("function.body") == '{ echo "hi"; }'
        assert captures.text("function.params") == captures.text("function.body")
        assert captures["function"].node.type == "function_definition"

    def test_multiple_functions(self, parser: TreeSitterParser) -> None:
        source = "a() { :; }\nb() { :; }\nfunction c { :; }\n"
        assert _texts(parser, source, "functions", "function.name") == ["a", "b", "c"]


class TestStringsQuery:
    def test_double_and_single_quoted(self, parser: TreeSitterParser) -> None:
        values = _texts(parser, "echo \"hello world\" 'raw text'\n", "strings", "string.value")
        assert '"hello world"' in values
        assert "'raw text'" in values

    def test_heredoc_body(self, parser: TreeSitterParser) -> None:
        source = "cat <<EOF\nThis is a here-document\nwith multiple lines\nEOF\n"
        values = _texts(parser, source, "strings", "string.value")
        assert any("This is a here-document" in v for v in values)

    def test_ansi_c_string(self, parser: TreeSitterParser) -> None:
        values = _texts(parser, "printf $'a\\tb'\n", "strings", "string.value")
        assert "$'a\\tb'" in values


class TestImportsQuery:
    @pytest.mark.parametrize("command", ["source", "."])
    def test_source_and_dot(self, parser: TreeSitterParser, command: str) -> None:
        source = f"{command} ./lib/utils.sh\n"
        assert _texts(parser, source, "imports", "import.from") == ["./lib/utils.sh"]

    def test_quoted_arguments(self, parser: TreeSitterParser) -> None:
        source = "source \"./a.sh\"\nsource './b.sh'\n"
        assert _texts(parser, source, "imports", "import.from") == ['"./a.sh"', "'./b.sh'"]

    def test_other_commands_ignored(self, parser: TreeSitterParser) -> None:
        source = "echo ./lib/utils.sh\nsourcery ./x.sh\n"
        assert _texts(parser, source, "imports", "import.from") == []

    def test_runtime_built_path_captured(self, parser: TreeSitterParser) -> None:
        source = "source $LIB_DIR/utils.sh\n"
        assert _texts(parser, source, "imports", "import.from") == ["$LIB_DIR/utils.sh"]


class TestExportsQuery:
    def test_export_assignment_and_plain(self, parser: TreeSitterParser) -> None:
        source = 'export MY_VAR="hello"\nexport PATH\n'
        names = _texts(parser, source, "exports", "export.name")
        assert "MY_VAR" in names
        assert "PATH" in names

    def test_export_function_flag(self, parser: TreeSitterParser) -> None:
        result = parser.parse("export -f greet\n")
        flags = {c.text("_flag") for c in parser.run_query(result, "exports")}
        assert "-f" in flags

    def test_declare_and_typeset_require_x(self, parser: TreeSitterParser) -> None:
        source = 'declare -x A="1"\ntypeset -x B\ndeclare -r C="2"\nlocal D=3\n'
        names = set(_texts(parser, source, "exports", "export.name"))
        assert names == {"A", "B"}


class TestDocCommentsQuery:
    def test_every_comment_captured(self, parser: TreeSitterParser) -> None:
        source = "#!/bin/bash\n# one\necho hi  # two\n"
        values = _texts(parser, source, "doc_comments", "doc.content")
        assert values == ["#!/bin/bash", "# one", "# two"]
