"""Action listener base classes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from grapheditor.events.types import EditorEvent, EventName

if TYPE_CHECKING:
    from grapheditor.model import Link, Node


# Mapping from event name to the handler method looked up on listener objects.
HANDLER_METHODS: dict[str, str] = {
    EventName.EDITOR_CLICK.value: "on_editor_click",
    EventName.NODE_CLICK.value: "on_node_click",
    EventName.NODE_SELECT.value: "on_node_select",
    EventName.NODE_UNSELECT.value: "on_node_unselect",
    EventName.NODE_HOVER.value: "on_node_hover",
    EventName.NODE_DRAG_START.value: "on_node_drag_start",
    EventName.NODE_DRAG.value: "on_node_drag",
    EventName.NODE_DRAG_END.value: "on_node_drag_end",
    EventName.LINK_CLICK.value: "on_link_click",
    EventName.LINK_CREATED.value: "on_link_created",
    EventName.LINK_UPDATED.value: "on_link_updated",
    EventName.LINK_DRAG_START.value: "on_link_drag_start",
    EventName.LINK_DRAG.value: "on_link_drag",
    EventName.LINK_DRAG_END.value: "on_link_drag_end",
}

# Key of the catch-all handler when the listener is a plain mapping.
CATCH_ALL_KEY = "event"


class ActionListener:
    """Base class for host event handlers.

    Override the ``on_*`` method for each event you care about; each one
    receives ``(subject, payload)``. Override ``on_event`` to see every
    event as ``(name, subject, payload)``. Handlers left alone do nothing.

    A plain mapping of event names (plus ``"event"`` for the catch-all) to
    callables is accepted wherever a listener is.
    """

    def on_event(self, name: str, subject: Any, payload: Any) -> None:
        """Called for every event, after the named handler."""

    def on_editor_click(self, subject: Any, payload: None) -> None: ...
    def on_node_click(self, subject: Any, payload: Node) -> None: ...
    def on_node_select(self, subject: Any, payload: Node) -> None: ...
    def on_node_unselect(self, subject: Any, payload: Node) -> None: ...
    def on_node_hover(self, subject: Any, payload: Node) -> None: ...
    def on_node_drag_start(self, subject: Any, payload: Node) -> None: ...
    def on_node_drag(self, subject: Any, payload: Node) -> None: ...
    def on_node_drag_end(self, subject: Any, payload: Node) -> None: ...
    def on_link_click(self, subject: Any, payload: Link) -> None: ...
    def on_link_created(self, subject: Any, payload: Link) -> None: ...
    def on_link_updated(self, subject: Any, payload: Link) -> None: ...
    def on_link_drag_start(self, subject: Any, payload: Node | None) -> None: ...
    def on_link_drag(self, subject: Any, payload: None) -> None: ...
    def on_link_drag_end(self, subject: Any, payload: None) -> None: ...


class RecordingListener(ActionListener):
    """Keeps every event it receives, in order.

    Example:
        >>> recorder = RecordingListener()
        >>> recorder.on_event("editorClick", None, None)
        >>> recorder.names
        ['editorClick']
    """

    def __init__(self) -> None:
        self.events: list[EditorEvent] = []

    def on_event(self, name: str, subject: Any, payload: Any) -> None:
        self.events.append(EditorEvent(name=str(name), subject=subject, payload=payload))

    @property
    def names(self) -> list[str]:
        return [event.name for event in self.events]

    def of(self, name: str) -> list[EditorEvent]:
        """Recorded events with the given name."""
        return [event for event in self.events if event.name == str(name)]

    def clear(self) -> None:
        self.events.clear()
