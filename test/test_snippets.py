"""Tests for snippet tables and the substitution engine."""

import logging
import tempfile
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from halgen.diagnostics import DiagnosticKind, Diagnostics
from halgen.snippets import (
    SnippetTable,
    fill,
    load_snippet_dir,
    load_snippet_file,
    load_snippets,
    make_inline,
    parse_snippet_name,
    resolve,
)


class TestFill:
    """Test placeholder filling."""

    def test_fills_placeholders(self):
        text = fill("const int32_t ${NAME} = ${VAL};", [("NAME", "MAX"), ("VAL", "3")])
        assert text == "const int32_t MAX = 3;"

    def test_repeated_placeholder(self):
        assert fill("${a}-${a}", [("a", "x")]) == "x-x"

    def test_unmatched_placeholder_is_empty(self):
        assert fill("a${missing}b", []) == "ab"

    def test_no_placeholders(self):
        assert fill("struct {};", [("a", "x")]) == "struct {};"

    def test_value_naming_another_key_is_not_resubstituted(self):
        """Swapped key names come out verbatim, regardless of pair order."""
        snippet = "${A} ${B}"
        assert fill(snippet, [("A", "B"), ("B", "A")]) == "B A"
        assert fill(snippet, [("B", "A"), ("A", "B")]) == "B A"

    def test_every_key_valued_with_another_key(self):
        """Each value lands exactly where its key was."""
        subs = [("x", "y"), ("y", "z"), ("z", "x")]
        assert fill("${x}|${y}|${z}", subs) == "y|z|x"

    def test_value_with_placeholder_syntax_stays_literal(self):
        subs = [("outer", "${inner}"), ("inner", "boom")]
        assert fill("<${outer}>", subs) == "<${inner}>"

    def test_overlapping_key_names(self):
        """A key that is a substring of another key does not interfere."""
        subs = [("name", "n"), ("enum_name", "E"), ("name_upper", "N")]
        assert fill("${name} ${enum_name} ${name_upper}", subs) == "n E N"

    def test_first_duplicate_wins(self):
        assert fill("${k}", [("k", "first"), ("k", "second")]) == "first"

    def test_keys_are_literal_text(self):
        """Pattern metacharacters in keys have no special meaning."""
        subs = [("a.b", "dot"), ("a+", "plus"), ("axb", "wrong")]
        assert fill("${a.b} ${a+}", subs) == "dot plus"

    def test_dollar_escape(self):
        assert fill("cost $$5 ${x}", [("x", "1")]) == "cost $5 1"

    def test_bare_dollar_untouched(self):
        assert fill("echo $HOME ${x} $", [("x", "1")]) == "echo $HOME 1 $"


class TestMakeInline:
    def test_newlines_become_spaces(self):
        assert make_inline("const hidl_vec<T>&\ndata\n") == "const hidl_vec<T>& data "


class TestResolve:
    """Test snippet lookup and its failure modes."""

    @pytest.fixture
    def table(self) -> SnippetTable:
        return SnippetTable(sections={"h": {"header": "// ${package_name}\n"}})

    def test_resolves_and_fills(self, table: SnippetTable):
        result = resolve(table, "h", "header", [("package_name", "INfc")])
        assert result == "// INfc\n"

    def test_unknown_section_warns(self, table: SnippetTable):
        diagnostics = Diagnostics()
        assert resolve(table, "unknownSection", "header", [], diagnostics) == ""
        assert len(diagnostics.warnings) == 1
        assert diagnostics.warnings[0].kind == DiagnosticKind.MISSING_SECTION
        assert diagnostics.errors == []

    def test_unknown_section_without_diagnostics_logs(self, table, caplog):
        with caplog.at_level(logging.WARNING, logger="halgen"):
            assert resolve(table, "unknownSection", "header") == ""
        assert "unknownSection" in caplog.text

    def test_missing_snippet_is_silent(self, table: SnippetTable, caplog):
        diagnostics = Diagnostics()
        with caplog.at_level(logging.WARNING, logger="halgen"):
            assert resolve(table, "h", "noSuchSnippet", [], diagnostics) == ""
        assert diagnostics.items == []
        assert caplog.records == []

    def test_subs_default_to_empty(self, table: SnippetTable):
        assert resolve(table, "h", "header") == "// \n"


class TestSnippetTable:
    """Test the snippet table model."""

    def test_lookup(self):
        table = SnippetTable(sections={"h": {"a": "A"}, "vts": {}})
        assert table.section_names == ["h", "vts"]
        assert table.has_section("vts")
        assert table.get("h", "a") == "A"
        assert table.get("h", "b") is None
        assert table.get("cpp", "a") is None

    def test_table_is_frozen(self):
        table = SnippetTable(sections={"h": {}})
        with pytest.raises(ValidationError):
            table.sections = {}


class TestParseSnippetName:
    def test_section_and_name(self):
        assert parse_snippet_name("h/const.snip") == ("h", "const")

    def test_top_level_file_ignored(self):
        assert parse_snippet_name("const.snip") == (None, None)

    def test_nested_file_ignored(self):
        assert parse_snippet_name("h/nested/const.snip") == (None, None)

    def test_other_extension_ignored(self):
        assert parse_snippet_name("h/README.md") == (None, None)


class TestLoadSnippets:
    """Test loading snippet tables from YAML files and directories."""

    SECTIONS = {
        "h": {"const": "const int32_t ${NAME} = ${VAL};\n", "file": "${declarations}"},
        "vts": {"file": "component_name: ${package_name}\n"},
    }

    def _write_dir(self, root: Path) -> None:
        for section, snippets in self.SECTIONS.items():
            (root / section).mkdir()
            for name, text in snippets.items():
                (root / section / f"{name}.snip").write_text(text)
        (root / "README.md").write_text("not a snippet")
        (root / "h" / "notes.txt").write_text("not a snippet either")

    def test_load_yaml_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "snippets.yml"
            path.write_text(yaml.dump(self.SECTIONS))

            table = load_snippet_file(path)
            assert table.sections == self.SECTIONS

    def test_load_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            self._write_dir(Path(tmpdir))

            table = load_snippet_dir(Path(tmpdir))
            assert table.sections == self.SECTIONS

    def test_file_and_directory_agree(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir) / "snippets"
            root.mkdir()
            self._write_dir(root)
            path = Path(tmpdir) / "snippets.yml"
            path.write_text(yaml.dump(self.SECTIONS))

            assert load_snippets(root) == load_snippets(path)

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_snippet_file(Path("/nonexistent/snippets.yml"))

    def test_missing_directory_raises(self):
        with pytest.raises(FileNotFoundError):
            load_snippet_dir(Path("/nonexistent/snippets"))

    def test_invalid_yaml_shape_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "snippets.yml"
            path.write_text(yaml.dump({"h": ["not", "a", "mapping"]}))

            with pytest.raises(RuntimeError):
                load_snippet_file(path)

    def test_example_table(self):
        table = load_snippets(Path(__file__).parent / "configs" / "snippets.yml")
        assert table.section_names == ["h", "vts"]
        assert "${header_guard}" in table.sections["h"]["file"]
