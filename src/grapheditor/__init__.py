"""grapheditor - an interaction core for editing node/link graphs on a drawing surface."""

from grapheditor.config import EditorConfig
from grapheditor.editor import GraphEditor
from grapheditor.events import (
    ActionListener,
    EditorEvent,
    EventDispatcher,
    EventName,
    RecordingListener,
)
from grapheditor.exceptions import DuplicateIdError, EditorConfigError, GraphDataError
from grapheditor.interaction import DragState, InteractionStateMachine, LinkDrawState
from grapheditor.model import Link, Node, Point
from grapheditor.pointer import (
    ApproachTarget,
    CanvasTarget,
    HandleTarget,
    LinkTarget,
    NodeTarget,
    PointerEvent,
    PointerKind,
    PointerRouter,
)
from grapheditor.render import NullRenderAdapter, RecordingRenderAdapter, RenderAdapter
from grapheditor.store import GraphData, GraphStore
from grapheditor.timers import AsyncioScheduler, ManualScheduler, ThreadingScheduler

__all__ = [
    # Editor
    "GraphEditor",
    "EditorConfig",
    # Data model
    "Node",
    "Link",
    "Point",
    "GraphData",
    "GraphStore",
    # Interaction
    "InteractionStateMachine",
    "DragState",
    "LinkDrawState",
    "PointerEvent",
    "PointerKind",
    "PointerRouter",
    "CanvasTarget",
    "NodeTarget",
    "ApproachTarget",
    "HandleTarget",
    "LinkTarget",
    # Rendering
    "RenderAdapter",
    "NullRenderAdapter",
    "RecordingRenderAdapter",
    # Timers
    "ManualScheduler",
    "ThreadingScheduler",
    "AsyncioScheduler",
    # Events
    "ActionListener",
    "EditorEvent",
    "EventDispatcher",
    "EventName",
    "RecordingListener",
    # Errors
    "EditorConfigError",
    "GraphDataError",
    "DuplicateIdError",
]
