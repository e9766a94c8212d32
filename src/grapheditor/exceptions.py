"""Exceptions raised by the graph editor outside of gesture handling.

Pointer gestures and removals never raise; these cover host-facing setup
and data problems only.
"""

from __future__ import annotations

from typing import Any


class EditorConfigError(ValueError):
    """A construction option could not be interpreted.

    Attributes:
        option: Name of the offending option
        value: The value that was rejected
        message: Human-readable error message
    """

    def __init__(self, option: str, value: Any, message: str | None = None) -> None:
        self.option = option
        self.value = value
        self.message = message or f"Invalid value for '{option}': {value!r}"
        super().__init__(self.message)


class GraphDataError(ValueError):
    """Graph data breaks a structural rule of the store.

    Raised when links reference nodes the store does not hold, when an id
    is already taken, or when imported data cannot be resolved.

    Attributes:
        message: Human-readable error message
        node_id: Id of the node involved, if any
        link_id: Id of the link involved, if any
    """

    def __init__(
        self,
        message: str,
        *,
        node_id: Any = None,
        link_id: Any = None,
    ) -> None:
        self.message = message
        self.node_id = node_id
        self.link_id = link_id
        super().__init__(message)


class DuplicateIdError(GraphDataError):
    """An entity was added with an id its collection already uses."""
