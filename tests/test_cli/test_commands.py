"""Tests for the inspect, validate and replay commands."""

from __future__ import annotations

import json

import pytest

typer = pytest.importorskip("typer")
pytest.importorskip("rich")

from typer.testing import CliRunner  # noqa: E402

from grapheditor.cli import create_app  # noqa: E402
from grapheditor.cli.replay_cmd import ScriptError, parse_script  # noqa: E402
from grapheditor.serializers import load  # noqa: E402

runner_cli = CliRunner()

GRAPH = {
    "nodes": [
        {"id": 1, "label": "A", "x": 100, "y": 100},
        {"id": 2, "label": "B", "x": 300, "y": 100},
    ],
    "links": [],
}

# Grab node 1's handle, drag onto node 2 and release.
LINK_SCRIPT = [
    {"type": "down", "x": 100, "y": 70, "target": {"handle": 1}},
    {"type": "move", "x": 200, "y": 100},
    {"type": "move", "x": 300, "y": 100},
    {"type": "up", "x": 300, "y": 100},
]


@pytest.fixture
def graph_file(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(GRAPH))
    return path


@pytest.fixture
def app():
    return create_app()


def _script(tmp_path, steps):
    path = tmp_path / "script.json"
    path.write_text(json.dumps(steps))
    return path


# ---------------------------------------------------------------------------
# inspect / validate
# ---------------------------------------------------------------------------


class TestInspect:
    def test_table(self, app, graph_file):
        result = runner_cli.invoke(app, ["inspect", str(graph_file)])
        assert result.exit_code == 0
        assert "2 nodes | 0 links" in result.output
        assert "A" in result.output

    def test_json(self, app, graph_file):
        result = runner_cli.invoke(app, ["inspect", str(graph_file), "--json"])
        assert result.exit_code == 0
        envelope = json.loads(result.output)
        assert envelope["command"] == "inspect"
        assert envelope["data"]["node_count"] == 2
        assert [n["label"] for n in envelope["data"]["nodes"]] == ["A", "B"]

    def test_missing_file(self, app, tmp_path):
        result = runner_cli.invoke(app, ["inspect", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "File not found" in result.output


class TestValidate:
    def test_ok(self, app, graph_file):
        result = runner_cli.invoke(app, ["validate", str(graph_file)])
        assert result.exit_code == 0
        assert "OK: 2 nodes, 0 links" in result.output

    def test_dangling_link(self, app, tmp_path):
        path = tmp_path / "bad.json"
        bad = dict(GRAPH, links=[{"id": 1, "endpointA": 1, "endpointB": 5}])
        path.write_text(json.dumps(bad))
        result = runner_cli.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "unknown node 5" in result.output

    def test_duplicate_ids(self, app, tmp_path):
        path = tmp_path / "dup.json"
        path.write_text(json.dumps({"nodes": [{"id": 1}, {"id": 1}]}))
        result = runner_cli.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "Duplicate node id" in result.output

    def test_legacy_fields(self, app, tmp_path):
        path = tmp_path / "legacy.json"
        path.write_text(json.dumps({"nodes": [{"metadataId": 3}], "links": []}))
        result = runner_cli.invoke(app, ["validate", str(path), "--fields", "legacy"])
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# replay
# ---------------------------------------------------------------------------


class TestReplay:
    def test_json_reports_events_and_graph(self, app, graph_file, tmp_path):
        script = _script(tmp_path, LINK_SCRIPT)
        result = runner_cli.invoke(app, ["replay", str(graph_file), str(script), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        names = [event["name"] for event in data["events"]]
        assert names == ["linkDragStart", "linkDrag", "linkDrag", "linkCreated", "linkDragEnd"]
        assert data["graph"]["links"][0]["endpointA"] == 1
        assert data["graph"]["links"][0]["endpointB"] == 2

    def test_save_writes_edited_graph(self, app, graph_file, tmp_path):
        script = _script(tmp_path, LINK_SCRIPT)
        saved = tmp_path / "edited.json"
        result = runner_cli.invoke(app, ["replay", str(graph_file), str(script), "--save", str(saved)])
        assert result.exit_code == 0
        assert "linkCreated" in result.output
        assert len(load(saved).links) == 1

    def test_wait_step_fires_hover(self, app, graph_file, tmp_path):
        script = _script(
            tmp_path,
            [{"type": "move", "x": 100, "y": 100}, {"type": "wait", "seconds": 1.0}],
        )
        result = runner_cli.invoke(app, ["replay", str(graph_file), str(script), "--json"])
        data = json.loads(result.output)["data"]
        assert [event["name"] for event in data["events"]] == ["nodeHover"]
        assert data["events"][0]["payload"] == "node 1 'A'"

    def test_unknown_target_node(self, app, graph_file, tmp_path):
        script = _script(tmp_path, [{"type": "down", "x": 0, "y": 0, "target": {"node": 9}}])
        result = runner_cli.invoke(app, ["replay", str(graph_file), str(script)])
        assert result.exit_code == 1
        assert "Step 1: no node with id 9" in result.output


class TestParseScript:
    def test_rejects_unknown_type(self):
        with pytest.raises(ScriptError, match="unknown step type"):
            parse_script('[{"type": "hover"}]')

    def test_rejects_non_list(self):
        with pytest.raises(ScriptError):
            parse_script('{"type": "down"}')

    def test_wait_needs_seconds(self):
        with pytest.raises(ScriptError, match="seconds"):
            parse_script('[{"type": "wait"}]')

    def test_accepts_valid(self):
        steps = parse_script(json.dumps(LINK_SCRIPT))
        assert len(steps) == 4
