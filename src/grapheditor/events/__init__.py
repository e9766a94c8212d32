"""Event system for observing editor activity."""

from grapheditor.events.dispatcher import EventDispatcher
from grapheditor.events.listener import ActionListener, RecordingListener
from grapheditor.events.types import EditorEvent, EventName

__all__ = [
    # Event types
    "EditorEvent",
    "EventName",
    # Listener interfaces
    "ActionListener",
    "RecordingListener",
    # Dispatcher
    "EventDispatcher",
]
