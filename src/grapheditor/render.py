"""Render adapter contract and the adapters shipped with the editor.

The interaction core never draws anything itself. It tells a render
adapter which visuals to create, move, restyle or remove, passing along
the geometry it computed. Hosts plug in an adapter for their toolkit;
``RecordingRenderAdapter`` keeps the visual state in memory for headless
use and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from grapheditor.model import Identifier, Link, Node, Point


class RenderAdapter(Protocol):
    """Capabilities the interaction core needs from a view."""

    def create_node_visual(self, node: Node) -> None: ...

    def remove_node_visual(self, node: Node) -> None: ...

    def reposition_node_visual(self, node: Node) -> None: ...

    def bring_node_visual_to_front(self, node: Node) -> None: ...

    def set_node_selected_style(self, node: Node, selected: bool) -> None: ...

    def set_node_targeted(self, node: Node, targeted: bool) -> None: ...

    def set_node_label_expanded(self, node: Node, expanded: bool) -> None: ...

    def create_link_visual(self, link: Link, path: tuple[Point, Point], label_position: Point) -> None: ...

    def remove_link_visual(self, link: Link) -> None: ...

    def reposition_link_visual(self, link: Link, path: tuple[Point, Point], label_position: Point) -> None: ...

    def set_link_selected_style(self, link: Link, selected: bool) -> None: ...

    def update_link_label(self, link: Link) -> None: ...

    def set_handle_visibility(self, node: Node, visible: bool) -> None: ...

    def position_handle(self, node: Node, position: Point, rotation: float) -> None: ...

    def show_drag_line(self, start: Point, end: Point, with_arrow: bool) -> None: ...

    def hide_drag_line(self) -> None: ...


class NullRenderAdapter:
    """Adapter that draws nothing. Used when the host supplies none."""

    def create_node_visual(self, node: Node) -> None:
        pass

    def remove_node_visual(self, node: Node) -> None:
        pass

    def reposition_node_visual(self, node: Node) -> None:
        pass

    def bring_node_visual_to_front(self, node: Node) -> None:
        pass

    def set_node_selected_style(self, node: Node, selected: bool) -> None:
        pass

    def set_node_targeted(self, node: Node, targeted: bool) -> None:
        pass

    def set_node_label_expanded(self, node: Node, expanded: bool) -> None:
        pass

    def create_link_visual(self, link: Link, path: tuple[Point, Point], label_position: Point) -> None:
        pass

    def remove_link_visual(self, link: Link) -> None:
        pass

    def reposition_link_visual(self, link: Link, path: tuple[Point, Point], label_position: Point) -> None:
        pass

    def set_link_selected_style(self, link: Link, selected: bool) -> None:
        pass

    def update_link_label(self, link: Link) -> None:
        pass

    def set_handle_visibility(self, node: Node, visible: bool) -> None:
        pass

    def position_handle(self, node: Node, position: Point, rotation: float) -> None:
        pass

    def show_drag_line(self, start: Point, end: Point, with_arrow: bool) -> None:
        pass

    def hide_drag_line(self) -> None:
        pass


@dataclass
class NodeVisual:
    """In-memory state of one node's visuals."""

    node: Node
    x: float
    y: float
    selected: bool = False
    targeted: bool = False
    label_expanded: bool = False
    handle_visible: bool = False
    handle_position: Point | None = None
    handle_rotation: float | None = None


@dataclass
class LinkVisual:
    """In-memory state of one link's visuals."""

    link: Link
    path: tuple[Point, Point]
    label_position: Point
    label: str = ""
    arrow_at_b: bool = True
    selected: bool = False


@dataclass(frozen=True)
class DragLine:
    """The rubber-band line shown while drawing a link."""

    start: Point
    end: Point
    with_arrow: bool


@dataclass
class RecordingRenderAdapter:
    """Headless adapter that tracks what a real view would display.

    Visuals are keyed by entity id. Every call is also appended to
    ``calls`` as ``(method_name, args)``.
    """

    nodes: dict[Identifier, NodeVisual] = field(default_factory=dict)
    links: dict[Identifier, LinkVisual] = field(default_factory=dict)
    z_order: list[Identifier] = field(default_factory=list)
    drag_line: DragLine | None = None
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        """Arguments of every recorded call to *method*."""
        return [args for name, args in self.calls if name == method]

    @property
    def visible_handles(self) -> list[Identifier]:
        return [node_id for node_id, visual in self.nodes.items() if visual.handle_visible]

    # Nodes

    def create_node_visual(self, node: Node) -> None:
        self._record("create_node_visual", node)
        self.nodes[node.id] = NodeVisual(node=node, x=node.x, y=node.y)
        self.z_order.append(node.id)

    def remove_node_visual(self, node: Node) -> None:
        self._record("remove_node_visual", node)
        self.nodes.pop(node.id, None)
        if node.id in self.z_order:
            self.z_order.remove(node.id)

    def reposition_node_visual(self, node: Node) -> None:
        self._record("reposition_node_visual", node)
        visual = self.nodes.get(node.id)
        if visual is not None:
            visual.x, visual.y = node.x, node.y

    def bring_node_visual_to_front(self, node: Node) -> None:
        self._record("bring_node_visual_to_front", node)
        if node.id in self.z_order:
            self.z_order.remove(node.id)
            self.z_order.append(node.id)

    def set_node_selected_style(self, node: Node, selected: bool) -> None:
        self._record("set_node_selected_style", node, selected)
        if node.id in self.nodes:
            self.nodes[node.id].selected = selected

    def set_node_targeted(self, node: Node, targeted: bool) -> None:
        self._record("set_node_targeted", node, targeted)
        if node.id in self.nodes:
            self.nodes[node.id].targeted = targeted

    def set_node_label_expanded(self, node: Node, expanded: bool) -> None:
        self._record("set_node_label_expanded", node, expanded)
        if node.id in self.nodes:
            self.nodes[node.id].label_expanded = expanded

    # Links

    def create_link_visual(self, link: Link, path: tuple[Point, Point], label_position: Point) -> None:
        self._record("create_link_visual", link, path, label_position)
        self.links[link.id] = LinkVisual(
            link=link,
            path=path,
            label_position=label_position,
            label=link.label,
            arrow_at_b=link.is_a_to_b,
        )

    def remove_link_visual(self, link: Link) -> None:
        self._record("remove_link_visual", link)
        self.links.pop(link.id, None)

    def reposition_link_visual(self, link: Link, path: tuple[Point, Point], label_position: Point) -> None:
        self._record("reposition_link_visual", link, path, label_position)
        visual = self.links.get(link.id)
        if visual is not None:
            visual.path = path
            visual.label_position = label_position
            visual.arrow_at_b = link.is_a_to_b

    def set_link_selected_style(self, link: Link, selected: bool) -> None:
        self._record("set_link_selected_style", link, selected)
        if link.id in self.links:
            self.links[link.id].selected = selected

    def update_link_label(self, link: Link) -> None:
        self._record("update_link_label", link)
        if link.id in self.links:
            self.links[link.id].label = link.label

    # Handles and rubber-band line

    def set_handle_visibility(self, node: Node, visible: bool) -> None:
        self._record("set_handle_visibility", node, visible)
        if node.id in self.nodes:
            self.nodes[node.id].handle_visible = visible

    def position_handle(self, node: Node, position: Point, rotation: float) -> None:
        self._record("position_handle", node, position, rotation)
        visual = self.nodes.get(node.id)
        if visual is not None:
            visual.handle_position = position
            visual.handle_rotation = rotation

    def show_drag_line(self, start: Point, end: Point, with_arrow: bool) -> None:
        self._record("show_drag_line", start, end, with_arrow)
        self.drag_line = DragLine(start=start, end=end, with_arrow=with_arrow)

    def hide_drag_line(self) -> None:
        self._record("hide_drag_line")
        self.drag_line = None
