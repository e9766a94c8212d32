"""Graph file CLI commands: inspect, validate."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from grapheditor.cli._format import format_number, print_json, print_lines, print_table, truncate_value
from grapheditor.config import load_project_config
from grapheditor.exceptions import GraphDataError
from grapheditor.serializers import FieldNames, graph_to_dict, load
from grapheditor.store import GraphData, GraphStore


def resolve_fields(preset: str | None) -> FieldNames:
    """Field names from --fields, else from [tool.grapheditor], else defaults."""
    name = preset or load_project_config().field_names
    try:
        return FieldNames.named(name)
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(1) from e


def load_graph_file(path: str, fields: FieldNames) -> GraphData:
    """Load a graph JSON file, exiting with a message on bad input."""
    if not Path(path).is_file():
        print(f"Error: File not found: {path}")
        raise typer.Exit(1)
    try:
        data = load(path, fields)
        # Building a store checks ids and endpoints, and fills in missing ids.
        GraphStore(data.nodes, data.links)
    except GraphDataError as e:
        print(f"Error: {e.message}")
        raise typer.Exit(1) from e
    return data


def node_rows(data: GraphData) -> list[list[str]]:
    degree: dict[object, int] = {}
    for link in data.links:
        for endpoint in (link.endpoint_a, link.endpoint_b):
            degree[endpoint.id] = degree.get(endpoint.id, 0) + 1
    return [
        [
            str(node.id),
            truncate_value(node.label) if node.label else "—",
            format_number(node.x),
            format_number(node.y),
            str(degree.get(node.id, 0)),
        ]
        for node in data.nodes
    ]


def link_rows(data: GraphData) -> list[list[str]]:
    return [
        [
            str(link.id),
            f"{link.source.id} → {link.target.id}",
            truncate_value(link.label) if link.label else "—",
        ]
        for link in data.links
    ]


def print_graph(data: GraphData) -> None:
    """Print node and link tables."""
    print(f"\nGraph: {len(data.nodes)} nodes | {len(data.links)} links\n")
    print_lines(print_table(["Id", "Label", "X", "Y", "Links"], node_rows(data)))
    if data.links:
        print()
        print_lines(print_table(["Id", "Direction", "Label"], link_rows(data)))


def register_commands(app: typer.Typer) -> None:
    """Register `inspect` and `validate` as top-level commands on the app."""

    @app.command("inspect")
    def inspect_cmd(
        path: Annotated[str, typer.Argument(help="Graph JSON file")],
        fields: Annotated[str | None, typer.Option("--fields", help="Key preset: 'default' or 'legacy'")] = None,
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
    ):
        """Show the nodes and links of a graph file."""
        field_names = resolve_fields(fields)
        data = load_graph_file(path, field_names)

        if as_json:
            payload = graph_to_dict(data.nodes, data.links, field_names)
            payload["node_count"] = len(data.nodes)
            payload["link_count"] = len(data.links)
            print_json("inspect", payload, output)
            return

        print_graph(data)
        print(f"\n  For JSON: grapheditor inspect {path} --json")

    @app.command("validate")
    def validate_cmd(
        path: Annotated[str, typer.Argument(help="Graph JSON file")],
        fields: Annotated[str | None, typer.Option("--fields", help="Key preset: 'default' or 'legacy'")] = None,
    ):
        """Check that a graph file loads: unique ids, resolvable link endpoints."""
        data = load_graph_file(path, resolve_fields(fields))
        print(f"OK: {len(data.nodes)} nodes, {len(data.links)} links")
