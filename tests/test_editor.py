"""Tests for the host-facing GraphEditor operations."""

from __future__ import annotations

import pytest

from grapheditor import (
    DuplicateIdError,
    EditorConfig,
    GraphEditor,
    HandleTarget,
    Link,
    ManualScheduler,
    Node,
    PointerEvent,
    RecordingListener,
    RecordingRenderAdapter,
)


class TestConstruction:
    def test_initial_data_is_drawn(self):
        a, b = Node(id=1, x=100, y=100), Node(id=2, x=300, y=100)
        renderer = RecordingRenderAdapter()
        editor = GraphEditor(
            EditorConfig(nodes=[a, b], links=[Link(a, b, id=1)]),
            renderer=renderer,
            scheduler=ManualScheduler(),
        )
        assert set(renderer.nodes) == {1, 2}
        assert set(renderer.links) == {1}
        assert len(editor.get_data().links) == 1

    def test_create_from_host_properties(self):
        listener = RecordingListener()
        editor = GraphEditor.create(
            {"nodeRadius": 20, "approachRadius": 10, "actionListener": listener},
            scheduler=ManualScheduler(),
        )
        assert editor.node_radius == 20
        assert editor.approach_radius == 10
        assert editor.interaction.approach_ring_radius == 30
        assert editor.action_listener is listener

    def test_instances_are_independent(self):
        first = GraphEditor(scheduler=ManualScheduler())
        second = GraphEditor(scheduler=ManualScheduler())
        first.add_node(Node(label="A"))
        node = Node(label="B")
        second.add_node(node)
        assert node.id == 1
        assert len(first.get_data().nodes) == 1


class TestNodes:
    def test_example_scenario(self, editor):
        a = Node(label="A", x=100, y=100)
        b = Node(label="B", x=300, y=100)
        editor.add_node(a)
        editor.add_node(b)
        assert (a.id, b.id) == (1, 2)

        editor.handle_pointer(PointerEvent("down", 100, 70, HandleTarget(a)))
        editor.handle_pointer(PointerEvent("move", 300, 100))
        editor.handle_pointer(PointerEvent("up", 300, 100))

        links = editor.get_data().links
        assert len(links) == 1
        assert links[0].endpoint_a.id == 1
        assert links[0].endpoint_b.id == 2
        assert links[0].is_a_to_b is True

    def test_add_node_draws_it(self, editor, renderer):
        node = Node(x=50, y=60)
        editor.add_node(node)
        assert renderer.nodes[node.id].x == 50

    def test_add_duplicate_id(self, editor):
        editor.add_node(Node(id=5))
        with pytest.raises(DuplicateIdError):
            editor.add_node(Node(id=5))

    def test_remove_node_cascades_visuals(self, editor, renderer, two_nodes):
        a, b = two_nodes
        c = Node(x=500, y=300)
        editor.add_node(c)
        ab = editor.add_link(a, b)
        bc = editor.add_link(b, c)

        editor.remove_node(a)

        assert editor.get_data().nodes == [b, c]
        assert editor.get_data().links == [bc]
        assert a.id not in renderer.nodes
        assert ab.id not in renderer.links
        assert bc.id in renderer.links

    def test_remove_node_by_equal_id(self, editor, two_nodes):
        a, b = two_nodes
        editor.remove_node(Node(id=a.id))
        assert editor.get_data().nodes == [b]

    @pytest.mark.parametrize("bogus", [Node(), Node(id=42), None])
    def test_remove_unknown_node_is_noop(self, editor, renderer, two_nodes, bogus):
        renderer.calls.clear()
        editor.remove_node(bogus)
        assert len(editor.get_data().nodes) == 2
        assert renderer.calls == []

    def test_remove_selected_node_clears_selection(self, editor, two_nodes):
        a, _ = two_nodes
        editor.handle_pointer(PointerEvent("down", 100, 100))
        editor.handle_pointer(PointerEvent("up", 100, 100))
        assert editor.selected_node is a
        editor.remove_node(a)
        assert editor.selected_node is None

    def test_remove_link_source_mid_gesture_cancels_draw(self, editor, renderer, two_nodes):
        a, _ = two_nodes
        editor.handle_pointer(PointerEvent("down", 100, 70, HandleTarget(a)))
        editor.remove_node(a)
        assert not editor.interaction.is_drawing_link
        assert renderer.drag_line is None

    def test_remove_hovered_node_cancels_hover(self, editor, listener, scheduler, two_nodes):
        a, _ = two_nodes
        editor.handle_pointer(PointerEvent("move", 100, 100))
        editor.remove_node(a)
        scheduler.advance(1.0)
        assert "nodeHover" not in listener.names
        assert scheduler.pending == 0

    def test_remove_other_node_keeps_hover(self, editor, listener, scheduler, two_nodes):
        a, b = two_nodes
        editor.handle_pointer(PointerEvent("move", 100, 100))
        editor.remove_node(b)
        scheduler.advance(1.0)
        assert [event.payload for event in listener.of("nodeHover")] == [a]


class TestLinks:
    def test_update_link_refreshes_label(self, editor, renderer, two_nodes):
        a, b = two_nodes
        link = editor.add_link(a, b)
        link.label = "depends on"
        editor.update_link(link)
        assert renderer.links[link.id].label == "depends on"

    def test_update_link_direction(self, editor, renderer, two_nodes):
        a, b = two_nodes
        link = editor.add_link(a, b)
        link.is_a_to_b = False
        editor.update_link(link)
        assert renderer.links[link.id].arrow_at_b is False

    def test_update_unknown_link_is_noop(self, editor, renderer, two_nodes):
        a, b = two_nodes
        renderer.calls.clear()
        editor.update_link(Link(a, b, id=9))
        assert renderer.calls == []

    def test_remove_link(self, editor, renderer, two_nodes):
        a, b = two_nodes
        link = editor.add_link(a, b)
        editor.interaction.link_mouse_down(link)
        editor.remove_link(link)
        assert editor.get_data().links == []
        assert link.id not in renderer.links
        assert editor.selected_link is None

    def test_remove_link_twice(self, editor, two_nodes):
        a, b = two_nodes
        link = editor.add_link(a, b)
        editor.remove_link(link)
        editor.remove_link(link)
        assert editor.get_data().links == []


class TestSetData:
    def test_replaces_visuals_and_state(self, editor, renderer, two_nodes):
        a, _ = two_nodes
        editor.handle_pointer(PointerEvent("down", 100, 100))
        editor.handle_pointer(PointerEvent("up", 100, 100))

        x = Node(id=10, x=50, y=50)
        editor.set_data([x], [])

        assert set(renderer.nodes) == {10}
        assert editor.selected_node is None
        fresh = Node()
        editor.add_node(fresh)
        assert fresh.id == 11

    def test_empty(self, editor, two_nodes):
        editor.set_data()
        assert editor.get_data().nodes == []
        assert repr(editor) == "GraphEditor(nodes=0, links=0)"
