"""Replay a scripted pointer session against a graph file.

A script is a JSON list of steps. Pointer steps carry a ``type`` (one of
the ``PointerKind`` values), coordinates, and optionally the element they
target::

    [
      {"type": "down", "x": 130, "y": 100, "target": {"handle": 1}},
      {"type": "move", "x": 250, "y": 100},
      {"type": "up", "x": 300, "y": 100},
      {"type": "wait", "seconds": 1.0}
    ]

Targets are ``"canvas"`` or a one-key object naming a node, approach
ring, handle or link by id. Steps without a target are hit-tested.
``wait`` steps advance the hover clock.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import typer

from grapheditor.cli._format import print_json
from grapheditor.cli.graph_cmd import load_graph_file, print_graph, resolve_fields
from grapheditor.config import EditorConfig, load_project_config
from grapheditor.editor import GraphEditor
from grapheditor.events.listener import RecordingListener
from grapheditor.events.rich_log import RichEventLog, describe_payload
from grapheditor.pointer import (
    ApproachTarget,
    CanvasTarget,
    HandleTarget,
    LinkTarget,
    NodeTarget,
    PointerEvent,
    PointerKind,
)
from grapheditor.render import RecordingRenderAdapter
from grapheditor.serializers import graph_to_dict, save
from grapheditor.timers import ManualScheduler

if TYPE_CHECKING:
    from grapheditor.pointer import Target
    from grapheditor.store import GraphStore


class ScriptError(ValueError):
    """A replay script step could not be understood."""

    def __init__(self, index: int, message: str):
        self.index = index
        super().__init__(f"Step {index}: {message}")


WAIT = "wait"

_NODE_TARGETS = {
    "node": NodeTarget,
    "approach": ApproachTarget,
    "handle": HandleTarget,
}


def _resolve_target(raw: Any, store: GraphStore, index: int) -> Target | None:
    if raw is None:
        return None
    if raw == "canvas":
        return CanvasTarget()
    if not isinstance(raw, dict) or len(raw) != 1:
        raise ScriptError(index, f"target must be 'canvas' or a one-key object, got {raw!r}")

    kind, ident = next(iter(raw.items()))
    if kind in _NODE_TARGETS:
        node = store.get_node(ident)
        if node is None:
            raise ScriptError(index, f"no node with id {ident!r}")
        return _NODE_TARGETS[kind](node)
    if kind == "link":
        link = next((link for link in store.links if link.id == ident), None)
        if link is None:
            raise ScriptError(index, f"no link with id {ident!r}")
        return LinkTarget(link)
    raise ScriptError(index, f"unknown target kind {kind!r}")


def parse_script(text: str) -> list[dict[str, Any]]:
    """Parse and shape-check a replay script."""
    try:
        steps = json.loads(text)
    except json.JSONDecodeError as e:
        raise ScriptError(0, f"invalid JSON: {e}") from e
    if not isinstance(steps, list):
        raise ScriptError(0, "script must be a JSON list of steps")

    kinds = {kind.value for kind in PointerKind}
    for index, step in enumerate(steps, start=1):
        if not isinstance(step, dict):
            raise ScriptError(index, "each step must be an object")
        step_type = step.get("type")
        if step_type == WAIT:
            if not isinstance(step.get("seconds"), (int, float)):
                raise ScriptError(index, "wait needs numeric 'seconds'")
        elif step_type not in kinds:
            raise ScriptError(index, f"unknown step type {step_type!r}")
    return steps


def run_script(editor: GraphEditor, scheduler: ManualScheduler, steps: list[dict[str, Any]]) -> None:
    """Feed script steps to an editor, resolving targets against its store."""
    for index, step in enumerate(steps, start=1):
        if step["type"] == WAIT:
            scheduler.advance(float(step["seconds"]))
            continue
        try:
            x, y = float(step.get("x", 0)), float(step.get("y", 0))
        except (TypeError, ValueError):
            raise ScriptError(index, "'x' and 'y' must be numbers") from None
        editor.handle_pointer(
            PointerEvent(
                PointerKind(step["type"]),
                x,
                y,
                target=_resolve_target(step.get("target"), editor.store, index),
                related=_resolve_target(step.get("related"), editor.store, index),
            )
        )


def _event_record(event) -> dict[str, Any]:
    return {"name": event.name, "payload": describe_payload(event.payload)}


def register_commands(app: typer.Typer) -> None:
    """Register `replay` as a top-level command on the app."""

    @app.command("replay")
    def replay_cmd(
        path: Annotated[str, typer.Argument(help="Graph JSON file")],
        script: Annotated[str, typer.Argument(help="Replay script (JSON list of pointer steps)")],
        fields: Annotated[str | None, typer.Option("--fields", help="Key preset: 'default' or 'legacy'")] = None,
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
        save_to: Annotated[str | None, typer.Option("--save", help="Write the edited graph to this file")] = None,
    ):
        """Play pointer input against a graph and report the events it fires."""
        field_names = resolve_fields(fields)
        data = load_graph_file(path, field_names)

        if not Path(script).is_file():
            print(f"Error: File not found: {script}")
            raise typer.Exit(1)

        listener = RecordingListener() if as_json else RichEventLog(show_time=False)
        scheduler = ManualScheduler()
        config = EditorConfig(
            nodes=data.nodes,
            links=data.links,
            action_listener=listener,
            **load_project_config().editor_options(),
        )
        editor = GraphEditor(config, renderer=RecordingRenderAdapter(), scheduler=scheduler)

        try:
            run_script(editor, scheduler, parse_script(Path(script).read_text()))
        except ScriptError as e:
            print(f"Error: {e}")
            raise typer.Exit(1) from e

        result = editor.get_data()
        if save_to:
            save(result, save_to, field_names)

        if as_json:
            payload = {
                "events": [_event_record(event) for event in listener.events],
                "graph": graph_to_dict(result.nodes, result.links, field_names),
            }
            print_json("replay", payload, output)
            return

        print_graph(result)
        if save_to:
            print(f"\n  Saved graph to {save_to}")
