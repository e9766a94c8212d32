"""Rich-based live log of editor events."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from grapheditor.events.listener import RecordingListener
from grapheditor.model import Link, Node

if TYPE_CHECKING:
    from rich.console import Console


def _require_rich() -> None:
    """Raise a clear error if rich is not installed."""
    try:
        import rich  # noqa: F401
    except ImportError:
        raise ImportError(
            "The 'rich' package is required for RichEventLog. Install it with: pip install 'grapheditor[cli]' or pip install rich"
        ) from None


def _timestamp() -> str:
    """Return current time as [HH:MM:SS]."""
    return datetime.now().strftime("[%H:%M:%S]")


def describe_payload(payload: Any) -> str:
    """Short human-readable description of an event payload."""
    if payload is None:
        return "—"
    if isinstance(payload, Node):
        label = f" '{payload.label}'" if payload.label else ""
        return f"node {payload.id}{label}"
    if isinstance(payload, Link):
        arrow = "→" if payload.is_a_to_b else "←"
        return f"link {payload.id} ({payload.endpoint_a.id} {arrow} {payload.endpoint_b.id})"
    return repr(payload)


# Style per event-name prefix.
_STYLES = {
    "node": "cyan",
    "link": "magenta",
    "editor": "dim",
}


class RichEventLog(RecordingListener):
    """Prints every event to a Rich console as it is fired, and keeps it.

    Args:
        console: Console to print to. Defaults to a new stdout console.
        show_time: Prefix lines with the wall-clock time.
    """

    def __init__(self, console: Console | None = None, *, show_time: bool = True) -> None:
        _require_rich()
        from rich.console import Console
        from rich.markup import escape

        super().__init__()
        self._escape = escape
        self.console = console or Console()
        self._show_time = show_time

    def on_event(self, name: str, subject: Any, payload: Any) -> None:
        super().on_event(name, subject, payload)
        name = str(name)
        style = next((s for prefix, s in _STYLES.items() if name.startswith(prefix)), "white")
        prefix = f"{_timestamp()} " if self._show_time else ""
        self.console.print(
            f"{prefix}[{style}]{name:<14}[/{style}] {self._escape(describe_payload(payload))}",
            highlight=False,
        )
