"""Editor configuration.

``EditorConfig`` holds the construction-time options of an editor.
``load_project_config`` reads the ``[tool.grapheditor]`` section of the
nearest pyproject.toml to provide defaults for the CLI.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from grapheditor.exceptions import EditorConfigError

DEFAULT_NODE_RADIUS = 30
DEFAULT_APPROACH_RADIUS = 50
DEFAULT_FONT_SIZE = 12
DEFAULT_WIDTH = 960
DEFAULT_HEIGHT = 500
DEFAULT_HOVER_DELAY = 1.0

# Option names accepted from host property mappings, besides the field names.
_ALIASES: dict[str, str] = {
    "actionListener": "action_listener",
    "nodeRadius": "node_radius",
    "approachRadius": "approach_radius",
    "fontSize": "font_size",
    "hoverDelay": "hover_delay",
    "strictEvents": "strict_events",
}

_INT_OPTIONS: dict[str, int] = {
    "node_radius": DEFAULT_NODE_RADIUS,
    "approach_radius": DEFAULT_APPROACH_RADIUS,
    "font_size": DEFAULT_FONT_SIZE,
    "width": DEFAULT_WIDTH,
    "height": DEFAULT_HEIGHT,
}


def _coerce_int(option: str, value: Any, default: int) -> int:
    """Integer option value; unset or falsy values give the default."""
    if not value:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise EditorConfigError(option, value, f"'{option}' must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class EditorConfig:
    """Construction-time options of a graph editor.

    Attributes:
        nodes: Initial nodes.
        links: Initial links between those nodes.
        action_listener: Receives editor events (object or mapping).
        node_radius: Radius of a drawn node.
        approach_radius: Width of the approach ring around each node.
        font_size: Label font size, passed through to renderers.
        width: Width of the drawing surface; bounds node drags.
        height: Height of the drawing surface; bounds node drags.
        hover_delay: Seconds the pointer must rest on a node to fire nodeHover.
        strict_events: If True, listener exceptions propagate.
    """

    nodes: list[Any] = field(default_factory=list)
    links: list[Any] = field(default_factory=list)
    action_listener: Any = None
    node_radius: int = DEFAULT_NODE_RADIUS
    approach_radius: int = DEFAULT_APPROACH_RADIUS
    font_size: int = DEFAULT_FONT_SIZE
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    hover_delay: float = DEFAULT_HOVER_DELAY
    strict_events: bool = True

    def __post_init__(self) -> None:
        for option, default in _INT_OPTIONS.items():
            object.__setattr__(self, option, _coerce_int(option, getattr(self, option), default))
        if self.hover_delay is None:
            object.__setattr__(self, "hover_delay", DEFAULT_HOVER_DELAY)
        try:
            delay = float(self.hover_delay)
        except (TypeError, ValueError):
            raise EditorConfigError("hover_delay", self.hover_delay) from None
        if delay < 0:
            raise EditorConfigError("hover_delay", self.hover_delay, "'hover_delay' cannot be negative")
        object.__setattr__(self, "hover_delay", delay)
        object.__setattr__(self, "nodes", list(self.nodes or []))
        object.__setattr__(self, "links", list(self.links or []))

    @classmethod
    def from_mapping(cls, props: Mapping[str, Any] | None) -> EditorConfig:
        """Build a config from host properties.

        Accepts field names and their camelCase spellings
        (``nodeRadius``, ``actionListener``, ...). Unknown keys are ignored.
        """
        if not props:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in props.items():
            name = _ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    def with_options(self, **changes: Any) -> EditorConfig:
        """Copy of this config with some options replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class ProjectConfig:
    """Configuration from [tool.grapheditor] in pyproject.toml."""

    node_radius: int | None = None
    approach_radius: int | None = None
    width: int | None = None
    height: int | None = None
    field_names: str = "default"

    def editor_options(self) -> dict[str, Any]:
        """The options set in the project file, as EditorConfig keywords."""
        options = {
            "node_radius": self.node_radius,
            "approach_radius": self.approach_radius,
            "width": self.width,
            "height": self.height,
        }
        return {key: value for key, value in options.items() if value is not None}


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_project_config(start: Path | None = None) -> ProjectConfig:
    """Load [tool.grapheditor] from the nearest pyproject.toml.

    Returns default config if no pyproject.toml or no [tool.grapheditor] section.
    """
    path = find_pyproject(start)
    if path is None:
        return ProjectConfig()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return ProjectConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("grapheditor", {})
    if not section:
        return ProjectConfig()

    return ProjectConfig(
        node_radius=section.get("node_radius"),
        approach_radius=section.get("approach_radius"),
        width=section.get("width"),
        height=section.get("height"),
        field_names=section.get("field_names", "default"),
    )
