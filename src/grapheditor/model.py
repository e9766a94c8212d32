"""Graph data model: nodes, links and drawing-surface points."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple, Union

Identifier = Union[int, str]


class Point(NamedTuple):
    """A position in drawing-surface coordinates."""

    x: float
    y: float


def is_numeric_id(value: Any) -> bool:
    """True for ids that take part in id allocation (ints and floats, not bools)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(eq=False)
class Node:
    """A positioned, labeled graph vertex.

    Nodes compare by identity: links and in-progress gestures hold
    references to the same object the store owns, and position updates
    made during a drag are visible through every reference.

    Attributes:
        id: Unique id. Left unset (None) to let the store allocate one.
        label: Display name.
        x: Center x coordinate in drawing-surface space.
        y: Center y coordinate in drawing-surface space.
        metadata: Arbitrary host data carried along with the node.
    """

    id: Identifier | None = None
    label: str = ""
    x: float = 0.0
    y: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def center(self) -> Point:
        return Point(self.x, self.y)

    def move_to(self, x: float, y: float) -> None:
        self.x = x
        self.y = y


@dataclass(eq=False)
class Link:
    """An edge between two nodes, drawn with an arrow at one end.

    Attributes:
        endpoint_a: Reference to node A.
        endpoint_b: Reference to node B.
        is_a_to_b: True puts the arrow at B, False puts it at A.
        label: Display name.
        id: Unique id. Left unset (None) to let the store allocate one.
    """

    endpoint_a: Node
    endpoint_b: Node
    is_a_to_b: bool = True
    label: str = ""
    id: Identifier | None = None

    @property
    def source(self) -> Node:
        """The node at the tail of the arrow."""
        return self.endpoint_a if self.is_a_to_b else self.endpoint_b

    @property
    def target(self) -> Node:
        """The node the arrow points at."""
        return self.endpoint_b if self.is_a_to_b else self.endpoint_a

    def connects(self, first: Node, second: Node) -> bool:
        """True if this link joins the two nodes, in either orientation."""
        ids = {self.endpoint_a.id, self.endpoint_b.id}
        return ids == {first.id, second.id} and first.id != second.id

    def touches(self, node: Node) -> bool:
        """True if *node* is one of this link's endpoints (by reference)."""
        return self.endpoint_a is node or self.endpoint_b is node
