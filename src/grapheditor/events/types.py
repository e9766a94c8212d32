"""Domain events published by the editor."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventName(str, Enum):
    """Names of the events the editor fires.

    Values are the names hosts register handlers under.
    """

    EDITOR_CLICK = "editorClick"
    NODE_CLICK = "nodeClick"
    NODE_SELECT = "nodeSelect"
    NODE_UNSELECT = "nodeUnselect"
    NODE_HOVER = "nodeHover"
    NODE_DRAG_START = "nodeDragStart"
    NODE_DRAG = "nodeDrag"
    NODE_DRAG_END = "nodeDragEnd"
    LINK_CLICK = "linkClick"
    LINK_CREATED = "linkCreated"
    LINK_UPDATED = "linkUpdated"
    LINK_DRAG_START = "linkDragStart"
    LINK_DRAG = "linkDrag"
    LINK_DRAG_END = "linkDragEnd"

    def __str__(self) -> str:
        return self.value


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class EditorEvent:
    """A fired event, as recorded by listeners that keep history.

    Attributes:
        name: Event name (an ``EventName`` value).
        subject: What the event originated from, usually the pointer event
            being processed; None for timer or programmatic emissions.
        payload: The node or link the event concerns, or None.
        timestamp: Unix timestamp when the event was recorded.
    """

    name: str
    subject: Any = None
    payload: Any = None
    timestamp: float = field(default_factory=_now)
