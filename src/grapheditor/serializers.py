"""Import and export of graph data as plain dicts and JSON.

Links are written with the ids of their endpoints and resolved back to
node references on load. Dict keys are configurable through
``FieldNames`` so data produced by other tools can be read as-is.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from grapheditor.exceptions import GraphDataError
from grapheditor.model import Link, Node
from grapheditor.store import GraphData


@dataclass(frozen=True)
class FieldNames:
    """Dict keys used for each logical node and link field."""

    id: str = "id"
    label: str = "label"
    x: str = "x"
    y: str = "y"
    endpoint_a: str = "endpointA"
    endpoint_b: str = "endpointB"
    is_a_to_b: str = "isAtoB"
    link_id: str = "id"

    @classmethod
    def legacy(cls) -> FieldNames:
        """Keys used by older exports (`metadataId`, `endPointA`, `endPointB`)."""
        return cls(
            id="metadataId",
            endpoint_a="endPointA",
            endpoint_b="endPointB",
            link_id="metadataId",
        )

    @classmethod
    def named(cls, name: str) -> FieldNames:
        """Look up a preset by name: ``default`` or ``legacy``."""
        if name == "default":
            return cls()
        if name == "legacy":
            return cls.legacy()
        raise ValueError(f"Unknown field name preset '{name}'. Use 'default' or 'legacy'.")

    @property
    def node_keys(self) -> frozenset[str]:
        return frozenset({self.id, self.label, self.x, self.y})


DEFAULT_FIELDS = FieldNames()


def node_to_dict(node: Node, fields: FieldNames = DEFAULT_FIELDS) -> dict[str, Any]:
    data = dict(node.metadata)
    data[fields.id] = node.id
    data[fields.label] = node.label
    data[fields.x] = node.x
    data[fields.y] = node.y
    return data


def link_to_dict(link: Link, fields: FieldNames = DEFAULT_FIELDS) -> dict[str, Any]:
    return {
        fields.link_id: link.id,
        fields.endpoint_a: link.endpoint_a.id,
        fields.endpoint_b: link.endpoint_b.id,
        fields.label: link.label,
        fields.is_a_to_b: link.is_a_to_b,
    }


def graph_to_dict(
    nodes: list[Node],
    links: list[Link],
    fields: FieldNames = DEFAULT_FIELDS,
) -> dict[str, Any]:
    """Plain-dict form of a graph: ``{"nodes": [...], "links": [...]}``."""
    return {
        "nodes": [node_to_dict(node, fields) for node in nodes],
        "links": [link_to_dict(link, fields) for link in links],
    }


def _coordinate(raw: dict[str, Any], key: str, node_id: Any) -> float:
    value = raw.get(key, 0)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise GraphDataError(f"Node {node_id!r} has a non-numeric '{key}': {value!r}", node_id=node_id) from None


def _direction(raw: dict[str, Any], key: str, link_id: Any) -> bool:
    value = raw.get(key, True)
    if not isinstance(value, bool):
        raise GraphDataError(f"Link {link_id!r} has a non-boolean '{key}': {value!r}", link_id=link_id)
    return value


def node_from_dict(raw: dict[str, Any], fields: FieldNames = DEFAULT_FIELDS) -> Node:
    node_id = raw.get(fields.id)
    return Node(
        id=node_id,
        label=str(raw.get(fields.label, "") or ""),
        x=_coordinate(raw, fields.x, node_id),
        y=_coordinate(raw, fields.y, node_id),
        metadata={key: value for key, value in raw.items() if key not in fields.node_keys},
    )


def graph_from_dict(data: dict[str, Any], fields: FieldNames = DEFAULT_FIELDS) -> GraphData:
    """Build nodes and links from their dict form.

    Raises:
        GraphDataError: A link is missing an endpoint or names an id that no
            node has.
    """
    nodes = [node_from_dict(raw, fields) for raw in data.get("nodes") or []]
    by_id = {node.id: node for node in nodes if node.id is not None}

    links = []
    for raw in data.get("links") or []:
        link_id = raw.get(fields.link_id)
        endpoints = []
        for key in (fields.endpoint_a, fields.endpoint_b):
            if key not in raw:
                raise GraphDataError(f"Link {link_id!r} has no '{key}'", link_id=link_id)
            node = by_id.get(raw[key])
            if node is None:
                raise GraphDataError(
                    f"Link {link_id!r} references unknown node {raw[key]!r}",
                    node_id=raw[key],
                    link_id=link_id,
                )
            endpoints.append(node)
        links.append(
            Link(
                endpoints[0],
                endpoints[1],
                is_a_to_b=_direction(raw, fields.is_a_to_b, link_id),
                label=str(raw.get(fields.label, "") or ""),
                id=link_id,
            )
        )
    return GraphData(nodes=nodes, links=links)


class Serializer(ABC):
    """Base class for graph serialization to bytes."""

    @abstractmethod
    def serialize(self, data: GraphData) -> bytes:
        """Convert graph data to bytes for storage."""
        ...

    @abstractmethod
    def deserialize(self, raw: bytes) -> GraphData:
        """Convert bytes back to graph data."""
        ...


class JsonSerializer(Serializer):
    """JSON serializer (default). Human-readable and diff-friendly.

    Node metadata that is not JSON-serializable raises TypeError unless
    ``lossy=True``, which falls back to ``str()``.
    """

    def __init__(self, fields: FieldNames = DEFAULT_FIELDS, *, indent: int | None = 2, lossy: bool = False):
        self.fields = fields
        self._indent = indent
        self._default = str if lossy else None

    def serialize(self, data: GraphData) -> bytes:
        payload = graph_to_dict(data.nodes, data.links, self.fields)
        return json.dumps(payload, indent=self._indent, default=self._default).encode("utf-8")

    def deserialize(self, raw: bytes) -> GraphData:
        try:
            payload = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as e:
            raise GraphDataError(f"Invalid graph JSON: {e}") from e
        if not isinstance(payload, dict):
            raise GraphDataError("Graph JSON must be an object with 'nodes' and 'links'")
        return graph_from_dict(payload, self.fields)


def dumps(data: GraphData, fields: FieldNames = DEFAULT_FIELDS) -> str:
    return JsonSerializer(fields).serialize(data).decode("utf-8")


def loads(text: str, fields: FieldNames = DEFAULT_FIELDS) -> GraphData:
    return JsonSerializer(fields).deserialize(text.encode("utf-8"))


def save(data: GraphData, path: str | Path, fields: FieldNames = DEFAULT_FIELDS) -> None:
    Path(path).write_bytes(JsonSerializer(fields).serialize(data))


def load(path: str | Path, fields: FieldNames = DEFAULT_FIELDS) -> GraphData:
    return JsonSerializer(fields).deserialize(Path(path).read_bytes())
