"""Shared fixtures: a headless editor with a manual hover clock."""

from __future__ import annotations

import pytest

from grapheditor import (
    EditorConfig,
    GraphEditor,
    ManualScheduler,
    Node,
    RecordingListener,
    RecordingRenderAdapter,
)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def renderer() -> RecordingRenderAdapter:
    return RecordingRenderAdapter()


@pytest.fixture
def editor(scheduler, listener, renderer) -> GraphEditor:
    """Empty 960x500 editor with default radii (30 node, 50 approach)."""
    return GraphEditor(
        EditorConfig(action_listener=listener),
        renderer=renderer,
        scheduler=scheduler,
    )


@pytest.fixture
def two_nodes(editor) -> tuple[Node, Node]:
    """Nodes A (100, 100) and B (300, 100), ids 1 and 2."""
    a = Node(label="A", x=100, y=100)
    b = Node(label="B", x=300, y=100)
    editor.add_node(a)
    editor.add_node(b)
    return a, b
