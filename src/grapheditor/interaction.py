"""Interaction state machine: turns pointer gestures into graph edits.

Three independent pieces of state are tracked:

- the drag axis (``DragState``): press on a node, move it, release;
- the link-draw axis (``LinkDrawState``): press on a node's direction
  handle, rubber-band to another node, release to link them;
- hover/approach detection, which only runs while both axes are idle.

Every handler is synchronous. Input that does not fit the
current state is ignored rather than rejected.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from grapheditor.events.types import EventName
from grapheditor.geometry import (
    clamp_to_surface,
    distance_to_segment,
    drag_handle_transform,
    link_label_position,
    trimmed_link_path,
    within_circle,
)
from grapheditor.model import Point

if TYPE_CHECKING:
    from grapheditor.events.dispatcher import EventDispatcher
    from grapheditor.model import Identifier, Link, Node
    from grapheditor.render import RenderAdapter
    from grapheditor.store import GraphStore
    from grapheditor.timers import HoverTimer

logger = logging.getLogger(__name__)

# Pointer distance within which a visible direction handle is hit.
HANDLE_HIT_RADIUS = 10.0

# Pointer distance within which a link line is hit.
LINK_HIT_TOLERANCE = 4.0


class DragState(Enum):
    """Progress of a node drag.

    Values:
        IDLE: No node is held.
        PENDING: A node was pressed but has not moved yet.
        DRAGGING: The held node has moved at least once.
    """

    IDLE = 0
    PENDING = 1
    DRAGGING = 2


class LinkDrawState(Enum):
    """Progress of a link-draw gesture.

    Values:
        INACTIVE: No link is being drawn.
        READY: A direction handle was pressed.
        DRAWING: The rubber-band line has followed the pointer at least once.
    """

    INACTIVE = 0
    READY = 1
    DRAWING = 2


class InteractionStateMachine:
    """Decides which editing operation a stream of pointer input performs.

    The machine mutates the store, publishes events through the
    dispatcher and asks the render adapter to update visuals. Handler
    methods mirror the pointer notifications a view delivers; the optional
    ``event`` argument is passed on as the subject of fired events.
    """

    def __init__(
        self,
        store: GraphStore,
        dispatcher: EventDispatcher,
        renderer: RenderAdapter,
        hover_timer: HoverTimer,
        *,
        node_radius: float,
        approach_radius: float,
        width: float,
        height: float,
    ) -> None:
        self.store = store
        self.dispatcher = dispatcher
        self.renderer = renderer
        self.hover_timer = hover_timer
        self.node_radius = node_radius
        self.approach_radius = approach_radius
        self.width = width
        self.height = height

        self.drag_state = DragState.IDLE
        self.drag_node: Node | None = None
        self.drag_enabled = True
        self.link_state = LinkDrawState.INACTIVE
        self.source_node: Node | None = None
        self.targeted_node: Node | None = None
        self.selected_node: Node | None = None
        self.selected_link: Link | None = None
        self.hovered_node: Node | None = None
        self.pointer: Point | None = None

        self._handles: dict[Identifier, tuple[Point, float]] = {}
        self._raised: dict[Identifier, int] = {}
        self._raise_seq = 0

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def approach_ring_radius(self) -> float:
        return self.node_radius + self.approach_radius

    @property
    def is_dragging(self) -> bool:
        return self.drag_state is not DragState.IDLE

    @property
    def is_drawing_link(self) -> bool:
        return self.link_state is not LinkDrawState.INACTIVE

    @property
    def visible_handles(self) -> dict[Identifier, tuple[Point, float]]:
        """Node id -> (position, rotation) for every handle currently shown."""
        return dict(self._handles)

    def hit_test(self, point: tuple[float, float]) -> Node | None:
        """Topmost node whose body contains *point*.

        Later nodes are drawn over earlier ones, and nodes brought to the
        front by a drag sit above all others.
        """
        best: Node | None = None
        best_rank: tuple[int, int] | None = None
        for index, node in enumerate(self.store.nodes):
            if not within_circle(self.node_radius, node.center, point):
                continue
            rank = (self._raised.get(node.id, 0), index)
            if best_rank is None or rank > best_rank:
                best, best_rank = node, rank
        return best

    def approach_hit(self, point: tuple[float, float]) -> Node | None:
        """Last node whose approach ring contains *point*."""
        hit = None
        for node in self.store.nodes:
            if within_circle(self.approach_ring_radius, node.center, point):
                hit = node
        return hit

    def handle_hit(self, point: tuple[float, float]) -> Node | None:
        """Node owning a visible direction handle under *point*."""
        for node in self.store.nodes:
            handle = self._handles.get(node.id)
            if handle is not None and within_circle(HANDLE_HIT_RADIUS, handle[0], point):
                return node
        return None

    def link_hit(self, point: tuple[float, float]) -> Link | None:
        """Last link whose drawn line passes within reach of *point*."""
        hit = None
        for link in self.store.links:
            start, end = self.link_path(link)
            if distance_to_segment(point, start, end) <= LINK_HIT_TOLERANCE:
                hit = link
        return hit

    # ------------------------------------------------------------------
    # Geometry and redraw requests
    # ------------------------------------------------------------------

    def link_path(self, link: Link) -> tuple[Point, Point]:
        return trimmed_link_path(link.endpoint_a, link.endpoint_b, self.node_radius, link.is_a_to_b)

    def draw_node(self, node: Node) -> None:
        self.renderer.create_node_visual(node)

    def draw_link(self, link: Link) -> None:
        self.renderer.create_link_visual(
            link,
            self.link_path(link),
            link_label_position(link.endpoint_a, link.endpoint_b),
        )
        self.renderer.set_link_selected_style(link, link is self.selected_link)

    def redraw_link(self, link: Link) -> None:
        self.renderer.reposition_link_visual(
            link,
            self.link_path(link),
            link_label_position(link.endpoint_a, link.endpoint_b),
        )

    def redraw_links(self) -> None:
        """Recompute and reposition every link, not just those of one node."""
        for link in self.store.links:
            self.redraw_link(link)

    def hide_all_handles(self) -> None:
        for node in self.store.nodes:
            self.renderer.set_handle_visibility(node, False)
        self._handles.clear()

    # ------------------------------------------------------------------
    # Lifecycle hooks used when the store changes outside a gesture
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Drop all gesture, selection and hover state."""
        self.hover_timer.cancel()
        if self.is_drawing_link:
            self.renderer.hide_drag_line()
        self.drag_state = DragState.IDLE
        self.drag_node = None
        self.drag_enabled = True
        self.link_state = LinkDrawState.INACTIVE
        self.source_node = None
        self.targeted_node = None
        self.selected_node = None
        self.selected_link = None
        self.hovered_node = None
        self._handles.clear()
        self._raised.clear()

    def forget_node(self, node: Node) -> None:
        """Clear every reference to a node that left the store."""
        if self.selected_node is not None and self.selected_node.id == node.id:
            self.selected_node = None
        if self.targeted_node is not None and self.targeted_node.id == node.id:
            self.targeted_node = None
        if self.hovered_node is not None and self.hovered_node.id == node.id:
            self.hovered_node = None
            self.hover_timer.cancel()
        if self.drag_node is not None and self.drag_node.id == node.id:
            self.hover_timer.cancel()
            self.drag_state = DragState.IDLE
            self.drag_node = None
        if self.source_node is not None and self.source_node.id == node.id:
            self._cancel_link_draw(None)
        self._handles.pop(node.id, None)
        self._raised.pop(node.id, None)

    def forget_link(self, link: Link) -> None:
        if self.selected_link is link:
            self.selected_link = None

    # ------------------------------------------------------------------
    # Drawing surface
    # ------------------------------------------------------------------

    def editor_click(self, event: Any = None) -> None:
        self._fire(EventName.EDITOR_CLICK, event, None)

    def editor_mouse_move(self, point: tuple[float, float], event: Any = None) -> None:
        """Pointer moved anywhere on the surface: tracks the rubber-band line."""
        self.pointer = Point(*point)
        if not self.is_drawing_link:
            return
        self._fire(EventName.LINK_DRAG, event, None)
        self.link_state = LinkDrawState.DRAWING
        self.renderer.show_drag_line(self.source_node.center, self.pointer, True)

    def editor_mouse_up(self, event: Any = None) -> None:
        """Release anywhere not resolved by a node: abandons link drawing."""
        if self.is_drawing_link:
            self._cancel_link_draw(event)

    def editor_mouse_leave(self, event: Any = None) -> None:
        """Pointer left the surface: abandons link drawing and ends any drag."""
        if self.is_drawing_link:
            self._cancel_link_draw(event)
        if self.is_dragging:
            node = self.drag_node
            self.drag_state = DragState.IDLE
            self.drag_node = None
            self._fire(EventName.NODE_DRAG_END, event, node)

    # ------------------------------------------------------------------
    # Node drag
    # ------------------------------------------------------------------

    def node_drag_start(self, node: Node, event: Any = None) -> None:
        if not self.drag_enabled:
            logger.debug("Drag start on %r ignored: drag disabled while drawing a link", node.id)
            return
        self.drag_node = node
        self.drag_state = DragState.PENDING
        self._fire(EventName.NODE_DRAG_START, event, node)
        self._bring_to_front(node)
        self.hover_timer.cancel()

    def node_drag(self, node: Node, dx: float, dy: float, event: Any = None) -> None:
        """Move the held node by a pointer delta, keeping it on the surface."""
        if not self.is_dragging or self.drag_node is None or self.drag_node.id != node.id:
            logger.debug("Drag move on %r ignored: no drag in progress", node.id)
            return
        if dx == 0 and dy == 0:
            return

        self.drag_state = DragState.DRAGGING
        self._fire(EventName.NODE_DRAG, event, node)
        x, y = clamp_to_surface(node.x + dx, node.y + dy, self.node_radius, self.width, self.height)
        node.move_to(x, y)
        self.renderer.reposition_node_visual(node)
        self.redraw_links()

    def node_drag_end(self, node: Node, event: Any = None) -> None:
        """Release a held node; a press without movement counts as a click."""
        if not self.is_dragging:
            return
        was_pending = self.drag_state is DragState.PENDING
        self._fire(EventName.NODE_DRAG_END, event, node)
        if was_pending:
            self.node_click(node, event)
        self.drag_state = DragState.IDLE
        self.drag_node = None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def node_click(self, node: Node, event: Any = None) -> None:
        """Toggle selection of *node*; a newly selected node replaces the old one."""
        self._fire(EventName.NODE_CLICK, event, node)

        previous = self.selected_node
        if previous is not None:
            self.selected_node = None
            self._fire(EventName.NODE_UNSELECT, event, previous)
            self.renderer.set_node_selected_style(previous, False)
            if previous.id == node.id:
                return

        self.selected_node = node
        self.renderer.set_node_selected_style(node, True)
        self._fire(EventName.NODE_SELECT, event, node)

    def link_mouse_down(self, link: Link, event: Any = None) -> None:
        """Toggle selection of *link*. Also clears the node selection."""
        self._fire(EventName.LINK_CLICK, event, link)
        self.selected_link = None if link is self.selected_link else link
        self._clear_node_selection(event)
        for existing in self.store.links:
            self.renderer.set_link_selected_style(existing, existing is self.selected_link)

    # ------------------------------------------------------------------
    # Approach rings and direction handles
    # ------------------------------------------------------------------

    def approach_enter(self, node: Node, point: tuple[float, float], event: Any = None) -> None:
        self._approach_changed(point)

    def approach_move(self, node: Node, point: tuple[float, float], event: Any = None) -> None:
        self._approach_changed(point)

    def approach_leave(self, node: Node, point: tuple[float, float], event: Any = None) -> None:
        self._approach_changed(point)

    def _approach_changed(self, point: tuple[float, float]) -> None:
        # Whichever ring reported it, rings can overlap: rescan them all.
        self.pointer = Point(*point)
        if self.is_drawing_link or self.is_dragging:
            return
        self.scan_approach_rings(self.pointer)

    def scan_approach_rings(self, point: tuple[float, float]) -> None:
        """Show and orient the handle of every node whose ring holds *point*."""
        for node in self.store.nodes:
            if within_circle(self.approach_ring_radius, node.center, point):
                position, rotation = drag_handle_transform(node.center, point, self.node_radius)
                self.renderer.set_handle_visibility(node, True)
                self.renderer.position_handle(node, position, rotation)
                self._handles[node.id] = (position, rotation)
            else:
                self.renderer.set_handle_visibility(node, False)
                self._handles.pop(node.id, None)

    def handle_mouse_down(self, node: Node, point: tuple[float, float], event: Any = None) -> None:
        """Grab a direction handle: starts drawing a link out of *node*."""
        self.pointer = Point(*point)
        self.hide_all_handles()
        self.source_node = node
        self.renderer.show_drag_line(node.center, self.pointer, True)
        if self.is_dragging:
            self.drag_state = DragState.IDLE
            self.drag_node = None
            self._fire(EventName.NODE_DRAG_END, event, node)
        self.link_state = LinkDrawState.READY
        self._fire(EventName.LINK_DRAG_START, event, node)
        self.drag_enabled = False
        self.hover_timer.cancel()

    def handle_mouse_leave(self, node: Node, entering_approach: bool, event: Any = None) -> None:
        """Hide a handle unless the pointer went back into an approach ring."""
        if entering_approach:
            return
        self.renderer.set_handle_visibility(node, False)
        self._handles.pop(node.id, None)

    # ------------------------------------------------------------------
    # Node hover and link drop
    # ------------------------------------------------------------------

    def node_mouse_over(self, node: Node, point: tuple[float, float] | None = None, event: Any = None) -> None:
        if point is not None:
            self.pointer = Point(*point)
        self.hide_all_handles()
        self.renderer.set_node_label_expanded(node, True)
        self.hovered_node = node

        if self.is_drawing_link and self.source_node is not None and self.source_node.id != node.id:
            self.targeted_node = node
            self.renderer.set_node_targeted(node, True)

        if not self.is_dragging and not self.is_drawing_link:
            self.hover_timer.start(lambda: self._fire(EventName.NODE_HOVER, event, node))

    def node_mouse_out(self, node: Node, point: tuple[float, float], event: Any = None) -> None:
        """Pointer left a node element; ignored while it is still over the body."""
        self.pointer = Point(*point)
        if within_circle(self.node_radius, node.center, point):
            return

        self.hover_timer.cancel()
        if self.hovered_node is not None and self.hovered_node.id == node.id:
            self.hovered_node = None
        if self.is_drawing_link:
            self.renderer.set_node_targeted(node, False)
            if self.targeted_node is not None and self.targeted_node.id == node.id:
                self.targeted_node = None
        self.renderer.set_node_label_expanded(node, False)

    def node_mouse_up(self, node: Node, event: Any = None) -> None:
        """Release over a node: completes a link draw onto it."""
        if not self.is_drawing_link:
            return
        source = self.source_node
        self.link_state = LinkDrawState.INACTIVE
        self.drag_enabled = True
        self.source_node = None
        self.renderer.hide_drag_line()

        if source is None or source.id == node.id:
            logger.debug("Link to self from %r ignored", node.id)
            self._fire(EventName.LINK_DRAG_END, event, None)
            return

        self.targeted_node = None
        self.renderer.set_node_targeted(node, False)

        link = self.store.find_link(source, node)
        if link is not None:
            is_a_to_b = node.id == link.endpoint_b.id
            if link.is_a_to_b != is_a_to_b:
                link.is_a_to_b = is_a_to_b
                self.redraw_link(link)
                self._fire(EventName.LINK_UPDATED, event, link)
        else:
            link = self.store.add_link(source, node, True)
            self.draw_link(link)
            self._fire(EventName.LINK_CREATED, event, link)

        self._clear_node_selection(event)
        self._fire(EventName.LINK_DRAG_END, event, None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cancel_link_draw(self, event: Any) -> None:
        self.renderer.hide_drag_line()
        if self.targeted_node is not None:
            self.renderer.set_node_targeted(self.targeted_node, False)
            self.targeted_node = None
        self.link_state = LinkDrawState.INACTIVE
        self.source_node = None
        self.drag_enabled = True
        logger.debug("Link draw cancelled")
        self._fire(EventName.LINK_DRAG_END, event, None)

    def _clear_node_selection(self, event: Any) -> None:
        previous = self.selected_node
        if previous is None:
            return
        self.selected_node = None
        self.renderer.set_node_selected_style(previous, False)
        self._fire(EventName.NODE_UNSELECT, event, previous)

    def _bring_to_front(self, node: Node) -> None:
        self._raise_seq += 1
        self._raised[node.id] = self._raise_seq
        self.renderer.bring_node_visual_to_front(node)

    def _fire(self, name: EventName, event: Any, payload: Any) -> None:
        self.dispatcher.fire_event(name, event, payload)
