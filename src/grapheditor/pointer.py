"""Pointer input: event types, hit targets and routing into the state machine.

A view reports what the pointer did as ``PointerEvent`` objects. Events
that name their target are delivered as-is, which is how a toolkit with
its own hit testing (one element per node, ring and handle) plugs in.
Events without a target are hit-tested against the editor's geometry,
and enter/leave/over/out notifications are synthesized from changes of
the target under the pointer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

from grapheditor.model import Link, Node, Point

if TYPE_CHECKING:
    from grapheditor.interaction import InteractionStateMachine


class PointerKind(str, Enum):
    """What the pointer did."""

    DOWN = "down"
    MOVE = "move"
    UP = "up"
    CLICK = "click"
    ENTER = "enter"
    LEAVE = "leave"
    OVER = "over"
    OUT = "out"


@dataclass(frozen=True)
class CanvasTarget:
    """Empty drawing surface."""


@dataclass(frozen=True)
class NodeTarget:
    """The body of a node."""

    node: Node


@dataclass(frozen=True)
class ApproachTarget:
    """The approach ring around a node."""

    node: Node


@dataclass(frozen=True)
class HandleTarget:
    """The direction handle of a node."""

    node: Node


@dataclass(frozen=True)
class LinkTarget:
    """The line of a link."""

    link: Link


Target = Union[CanvasTarget, NodeTarget, ApproachTarget, HandleTarget, LinkTarget]


@dataclass(frozen=True)
class PointerEvent:
    """One pointer notification in drawing-surface coordinates.

    Attributes:
        kind: What happened.
        x: Pointer x coordinate.
        y: Pointer y coordinate.
        target: Element under the pointer, or None to hit-test.
        related: For ``leave``/``out`` events, the element being entered.
    """

    kind: PointerKind
    x: float = 0.0
    y: float = 0.0
    target: Target | None = None
    related: Target | None = None

    def __post_init__(self) -> None:
        # Coerce string kinds to PointerKind
        if isinstance(self.kind, str) and not isinstance(self.kind, PointerKind):
            object.__setattr__(self, "kind", PointerKind(self.kind))

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


class PointerRouter:
    """Feeds pointer events to an ``InteractionStateMachine``.

    Also acts as the node drag recognizer: a press on a node body starts a
    drag (when the machine allows it), later moves report deltas from the
    previous pointer position, and the release ends it.
    """

    def __init__(self, machine: InteractionStateMachine) -> None:
        self.machine = machine
        self._current: Target = CanvasTarget()
        self._pressed: Target | None = None
        self._drag_node: Node | None = None
        self._last_point: Point | None = None
        self._moved_drag = False

    def reset(self) -> None:
        """Forget the pointer position, press and held node."""
        self._current = CanvasTarget()
        self._pressed = None
        self._drag_node = None
        self._last_point = None
        self._moved_drag = False

    @property
    def current_target(self) -> Target:
        """Element the pointer was last over."""
        return self._current

    def resolve(self, point: tuple[float, float]) -> Target:
        """Hit-test *point* in drawing order: handles, links, nodes, rings."""
        machine = self.machine
        node = machine.handle_hit(point)
        if node is not None:
            return HandleTarget(node)
        link = machine.link_hit(point)
        if link is not None:
            return LinkTarget(link)
        node = machine.hit_test(point)
        if node is not None:
            return NodeTarget(node)
        node = machine.approach_hit(point)
        if node is not None:
            return ApproachTarget(node)
        return CanvasTarget()

    def dispatch(self, event: PointerEvent) -> None:
        handler = getattr(self, f"_on_{event.kind.value}")
        handler(event)

    # ------------------------------------------------------------------
    # Target transitions
    # ------------------------------------------------------------------

    def _retarget(self, event: PointerEvent) -> Target:
        """Resolve the event's target, synthesizing leave/enter on change."""
        if event.target is not None:
            self._current = event.target
            return event.target

        target = self.resolve(event.point)
        if target != self._current:
            self._exit(self._current, event, target)
            self._enter(target, event)
            self._current = target
        return target

    def _exit(self, target: Target, event: PointerEvent, entering: Target | None) -> None:
        machine = self.machine
        if isinstance(target, NodeTarget):
            machine.node_mouse_out(target.node, event.point, event)
        elif isinstance(target, ApproachTarget):
            machine.approach_leave(target.node, event.point, event)
        elif isinstance(target, HandleTarget):
            machine.handle_mouse_leave(target.node, isinstance(entering, ApproachTarget), event)

    def _enter(self, target: Target, event: PointerEvent) -> None:
        machine = self.machine
        if isinstance(target, NodeTarget):
            machine.node_mouse_over(target.node, event.point, event)
        elif isinstance(target, ApproachTarget):
            machine.approach_enter(target.node, event.point, event)

    # ------------------------------------------------------------------
    # Kinds
    # ------------------------------------------------------------------

    def _on_enter(self, event: PointerEvent) -> None:
        if event.target is None:
            self._retarget(event)
            return
        self._enter(event.target, event)
        self._current = event.target

    _on_over = _on_enter

    def _on_leave(self, event: PointerEvent) -> None:
        target = event.target
        if target is None or isinstance(target, CanvasTarget):
            # Leaving the drawing surface altogether.
            self._exit(self._current, event, None)
            self.reset()
            self.machine.editor_mouse_leave(event)
            return
        self._exit(target, event, event.related)
        self._current = event.related or CanvasTarget()

    _on_out = _on_leave

    def _on_move(self, event: PointerEvent) -> None:
        machine = self.machine
        point = event.point

        # Move the held node first so it is still under the pointer when
        # the target is resolved.
        if self._drag_node is not None and self._last_point is not None:
            dx = point.x - self._last_point.x
            dy = point.y - self._last_point.y
            if dx or dy:
                self._moved_drag = True
            machine.node_drag(self._drag_node, dx, dy, event)

        target = self._retarget(event)
        if isinstance(target, ApproachTarget):
            machine.approach_move(target.node, point, event)
        machine.editor_mouse_move(point, event)
        self._last_point = point

    def _on_down(self, event: PointerEvent) -> None:
        target = self._retarget(event)
        machine = self.machine
        self._pressed = target
        self._last_point = event.point
        self._moved_drag = False

        if isinstance(target, NodeTarget):
            if machine.drag_enabled:
                self._drag_node = target.node
                machine.node_drag_start(target.node, event)
        elif isinstance(target, HandleTarget):
            machine.handle_mouse_down(target.node, event.point, event)
        elif isinstance(target, LinkTarget):
            machine.link_mouse_down(target.link, event)

    def _on_up(self, event: PointerEvent) -> None:
        target = self._retarget(event)
        machine = self.machine

        if isinstance(target, NodeTarget):
            machine.node_mouse_up(target.node, event)
        machine.editor_mouse_up(event)

        dragged = self._drag_node
        self._drag_node = None
        if dragged is not None:
            machine.node_drag_end(dragged, event)

        pressed, self._pressed = self._pressed, None
        self._last_point = event.point
        # A release on the element that was pressed completes a click,
        # unless a node was actually dragged.
        if event.target is None and pressed == target and not (dragged is not None and self._moved_drag):
            self._on_click(PointerEvent(PointerKind.CLICK, event.x, event.y, target))

    def _on_click(self, event: PointerEvent) -> None:
        target = event.target if event.target is not None else self.resolve(event.point)
        # Node clicks do not reach the surface; node selection is driven
        # by the drag recognizer instead.
        if isinstance(target, NodeTarget):
            return
        self.machine.editor_click(event)

