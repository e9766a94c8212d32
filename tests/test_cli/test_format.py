"""Tests for CLI output formatting helpers."""

from __future__ import annotations

import json

from grapheditor.cli._format import (
    SCHEMA_VERSION,
    format_number,
    json_envelope,
    print_json,
    print_lines,
    print_table,
    truncate_value,
)


class TestJsonEnvelope:
    def test_structure(self):
        envelope = json_envelope("inspect", {"nodes": []})
        assert envelope["schema_version"] == SCHEMA_VERSION
        assert envelope["command"] == "inspect"
        assert envelope["data"] == {"nodes": []}
        assert "generated_at" in envelope

    def test_print_json_to_file(self, tmp_path, capsys):
        out = tmp_path / "out.json"
        print_json("inspect", {"ok": True}, str(out))
        assert json.loads(out.read_text())["data"] == {"ok": True}
        assert "Wrote inspect output" in capsys.readouterr().out


class TestFormatting:
    def test_format_number(self):
        assert format_number(100.0) == "100"
        assert format_number(12.345) == "12.3"

    def test_truncate_short(self):
        assert truncate_value("hello") == "hello"

    def test_truncate_long(self):
        result = truncate_value("x" * 100, max_chars=10)
        assert result == "x" * 10 + "…"

    def test_truncate_non_string(self):
        assert truncate_value({"a": 1}) == '{"a": 1}'


class TestPrintTable:
    def test_empty_rows(self):
        assert print_table(["Id", "Label"], []) == []

    def test_alignment(self):
        lines = print_table(["Id", "Label"], [["1", "A"], ["12", "Long label"]])
        assert lines[0] == "  Id  Label     "
        assert lines[2] == "   1  A         "
        assert lines[3] == "  12  Long label"

    def test_print_lines_truncates(self, capsys):
        print_lines([str(i) for i in range(5)], max_lines=2)
        out = capsys.readouterr().out
        assert "# ... 3 more lines" in out
