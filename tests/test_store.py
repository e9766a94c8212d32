"""Tests for GraphStore: id allocation, cascading removal, pair lookup."""

from __future__ import annotations

import pytest

from grapheditor.exceptions import DuplicateIdError, GraphDataError
from grapheditor.model import Link, Node
from grapheditor.store import GraphStore


def _store_with(*labels: str) -> tuple[GraphStore, list[Node]]:
    store = GraphStore()
    nodes = [Node(label=label) for label in labels]
    for node in nodes:
        store.add_node(node)
    return store, nodes


# ---------------------------------------------------------------------------
# Id allocation
# ---------------------------------------------------------------------------


class TestIdAllocation:
    def test_sequential_ids_from_one(self):
        store, nodes = _store_with("A", "B", "C")
        assert [n.id for n in nodes] == [1, 2, 3]

    def test_ids_never_reused_after_removal(self):
        store, (a, b) = _store_with("A", "B")
        store.remove_node(b)
        c = Node(label="C")
        store.add_node(c)
        assert c.id == 3

    def test_falsy_ids_count_as_unset(self):
        store = GraphStore()
        zero, empty = Node(id=0), Node(id="")
        store.add_node(zero)
        store.add_node(empty)
        assert (zero.id, empty.id) == (1, 2)

    def test_explicit_numeric_id_moves_counter(self):
        store = GraphStore()
        store.add_node(Node(id=10))
        later = Node()
        store.add_node(later)
        assert later.id == 11

    def test_string_id_leaves_counter_alone(self):
        store = GraphStore()
        store.add_node(Node(id="start"))
        later = Node()
        store.add_node(later)
        assert later.id == 1

    def test_duplicate_id_rejected(self):
        store = GraphStore()
        store.add_node(Node(id=1))
        with pytest.raises(DuplicateIdError):
            store.add_node(Node(id=1))

    def test_link_ids_are_separate_sequence(self):
        store, (a, b, c) = _store_with("A", "B", "C")
        assert store.add_link(a, b).id == 1
        assert store.add_link(b, c).id == 2


# ---------------------------------------------------------------------------
# set_data
# ---------------------------------------------------------------------------


class TestSetData:
    def test_counters_follow_max_numeric_id(self):
        a, b = Node(id=4), Node(id="x")
        link = Link(a, b, id=7)
        store = GraphStore([a, b], [link])
        assert store.last_node_id == 4
        assert store.last_link_id == 7
        c = Node()
        store.add_node(c)
        assert c.id == 5
        assert store.add_link(a, c).id == 8

    def test_counters_reset_when_no_numeric_ids(self):
        store, _ = _store_with("A", "B")
        store.set_data([Node(id="only")], [])
        assert store.last_node_id == 0
        assert store.last_link_id == 0

    def test_id_less_entities_get_ids(self):
        a, b = Node(id=3), Node()
        link = Link(a, b)
        store = GraphStore([a, b], [link])
        assert b.id == 4
        assert link.id == 1

    def test_link_to_foreign_node_rejected(self):
        a, b = Node(id=1), Node(id=2)
        with pytest.raises(GraphDataError):
            GraphStore([a], [Link(a, b, id=1)])

    def test_link_to_same_id_but_other_object_rejected(self):
        a, b = Node(id=1), Node(id=2)
        impostor = Node(id=2)
        with pytest.raises(GraphDataError):
            GraphStore([a, b], [Link(a, impostor, id=1)])

    def test_duplicate_node_ids_rejected(self):
        with pytest.raises(DuplicateIdError):
            GraphStore([Node(id=1), Node(id=1)])

    def test_duplicate_link_ids_rejected(self):
        a, b, c = Node(id=1), Node(id=2), Node(id=3)
        with pytest.raises(DuplicateIdError):
            GraphStore([a, b, c], [Link(a, b, id=1), Link(b, c, id=1)])

    def test_rejected_data_leaves_store_and_counters_alone(self):
        store, (a, b, c) = _store_with("A", "B", "C")
        ab = store.add_link(a, b)
        fresh = Node()

        with pytest.raises(DuplicateIdError):
            store.set_data([fresh, Node(id=1), Node(id=1)], [])

        assert fresh.id is None
        assert (store.last_node_id, store.last_link_id) == (3, 1)
        assert store.nodes == [a, b, c]
        assert store.get_node(1) is a
        d = Node(label="D")
        store.add_node(d)
        assert d.id == 4
        assert store.find_link(a, b) is ab

    def test_rejected_links_get_no_ids(self):
        store, _ = _store_with("A")
        x, y = Node(), Node()
        pending = Link(x, y)
        with pytest.raises(GraphDataError):
            store.set_data([x], [pending])
        assert x.id is None
        assert pending.id is None
        assert store.last_node_id == 1

    def test_get_data_returns_copies_of_live_objects(self):
        store, (a, b) = _store_with("A", "B")
        data = store.get_data()
        data.nodes.clear()
        assert len(store) == 2
        assert store.get_data().nodes[0] is a


# ---------------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------------


class TestRemoveNode:
    def test_cascades_exactly_touching_links(self):
        store, (a, b, c) = _store_with("A", "B", "C")
        ab = store.add_link(a, b)
        bc = store.add_link(b, c)
        ca = store.add_link(c, a)

        removed = store.remove_node(a)

        assert removed == [ab, ca]
        assert store.links == [bc]
        assert store.nodes == [b, c]

    def test_matches_by_id(self):
        store, (a, b) = _store_with("A", "B")
        store.add_link(a, b)
        store.remove_node(Node(id=a.id))
        assert store.nodes == [b]
        assert store.links == []

    @pytest.mark.parametrize("bogus", [Node(), Node(id=0), Node(id=99), None, "1", object()])
    def test_unknown_or_malformed_is_noop(self, bogus):
        store, (a, b) = _store_with("A", "B")
        link = store.add_link(a, b)
        assert store.remove_node(bogus) == []
        assert store.nodes == [a, b]
        assert store.links == [link]

    def test_index_drops_removed_node(self):
        store, (a, b) = _store_with("A", "B")
        store.add_link(a, b)
        store.remove_node(a)
        assert a.id not in store.nx_graph
        assert store.nx_graph.number_of_edges() == 0


class TestRemoveLink:
    def test_by_identity(self):
        store, (a, b) = _store_with("A", "B")
        link = store.add_link(a, b)
        lookalike = Link(a, b, id=link.id)
        assert not store.remove_link(lookalike)
        assert store.links == [link]
        assert store.remove_link(link)
        assert store.links == []
        assert store.find_link(a, b) is None

    def test_twice_is_noop(self):
        store, (a, b) = _store_with("A", "B")
        link = store.add_link(a, b)
        store.remove_link(link)
        assert not store.remove_link(link)


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


class TestLinks:
    def test_find_link_either_orientation(self):
        store, (a, b, c) = _store_with("A", "B", "C")
        link = store.add_link(a, b)
        assert store.find_link(a, b) is link
        assert store.find_link(b, a) is link
        assert store.find_link(a, c) is None

    def test_find_link_by_ids_not_references(self):
        store, (a, b) = _store_with("A", "B")
        link = store.add_link(a, b)
        assert store.find_link(Node(id=b.id), Node(id=a.id)) is link

    def test_add_link_requires_stored_nodes(self):
        store, (a,) = _store_with("A")
        with pytest.raises(GraphDataError):
            store.add_link(a, Node(id=5))

    def test_add_link_rejects_self_link(self):
        store, (a,) = _store_with("A")
        with pytest.raises(GraphDataError):
            store.add_link(a, a)

    def test_links_of(self):
        store, (a, b, c) = _store_with("A", "B", "C")
        ab = store.add_link(a, b)
        store.add_link(b, c)
        assert store.links_of(a) == [ab]

    def test_update_link_recomputes_counter(self):
        store, (a, b, c) = _store_with("A", "B", "C")
        link = store.add_link(a, b)
        link.id = 40
        assert store.update_link(link)
        assert store.last_link_id == 40
        assert store.add_link(b, c).id == 41
        assert store.find_link(a, b) is link

    def test_update_unknown_link(self):
        store, (a, b) = _store_with("A", "B")
        assert not store.update_link(Link(a, b, id=1))

    def test_link_direction_helpers(self):
        a, b = Node(id=1), Node(id=2)
        link = Link(a, b, is_a_to_b=False)
        assert link.source is b
        assert link.target is a
        assert link.connects(b, a)
        assert not link.connects(a, a)
