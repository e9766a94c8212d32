"""Graph store: owns the node and link collections and id allocation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import networkx as nx

from grapheditor.exceptions import DuplicateIdError, GraphDataError
from grapheditor.model import Link, Node, is_numeric_id

if TYPE_CHECKING:
    from collections.abc import Iterable

    from grapheditor.model import Identifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphData:
    """Snapshot of the store's collections.

    The lists are fresh copies; the nodes and links inside are the live
    objects the store owns.
    """

    nodes: list[Node]
    links: list[Link]


def _max_numeric_id(ids: Iterable[object]) -> int | float:
    """Largest numeric id among *ids*, or 0 if there is none."""
    last: int | float = 0
    for value in ids:
        if is_numeric_id(value) and value > last:
            last = value
    return last


class GraphStore:
    """Node and link collections with id allocation and cascading removal.

    Links are indexed by the ids of their endpoints in a
    ``networkx.MultiGraph`` so pair lookups never depend on object
    identity. Removal operations are silent no-ops on anything the store
    does not hold.

    Example:
        >>> from grapheditor.model import Node
        >>> store = GraphStore()
        >>> a, b = Node(label="A"), Node(label="B")
        >>> store.add_node(a)
        >>> store.add_node(b)
        >>> (a.id, b.id)
        (1, 2)
        >>> store.add_link(a, b).id
        1
    """

    def __init__(
        self,
        nodes: Iterable[Node] | None = None,
        links: Iterable[Link] | None = None,
    ) -> None:
        self._nodes: list[Node] = []
        self._links: list[Link] = []
        self._graph = nx.MultiGraph()
        self.last_node_id: int | float = 0
        self.last_link_id: int | float = 0
        self.set_data(nodes, links)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> list[Node]:
        """Nodes in insertion order (copy of the collection)."""
        return list(self._nodes)

    @property
    def links(self) -> list[Link]:
        """Links in insertion order (copy of the collection)."""
        return list(self._links)

    @property
    def nx_graph(self) -> nx.MultiGraph:
        """Underlying NetworkX index: node ids as nodes, link ids as edge keys."""
        return self._graph

    def get_data(self) -> GraphData:
        return GraphData(nodes=self.nodes, links=self.links)

    def get_node(self, node_id: Identifier) -> Node | None:
        try:
            if node_id in self._graph:
                return self._graph.nodes[node_id]["node"]
        except TypeError:
            # Unhashable ids can never be stored.
            pass
        return None

    def contains_node(self, node: Node) -> bool:
        """True if the store holds this very node object."""
        return node.id is not None and self.get_node(node.id) is node

    def contains_link(self, link: Link) -> bool:
        return any(existing is link for existing in self._links)

    def find_link(self, first: Node, second: Node) -> Link | None:
        """The first link joining two nodes, in either orientation."""
        if first.id is None or second.id is None or first.id == second.id:
            return None
        edges = self._graph.get_edge_data(first.id, second.id)
        if not edges:
            return None
        return next(iter(edges.values()))["link"]

    def links_of(self, node: Node) -> list[Link]:
        """Links having *node* as an endpoint, in insertion order."""
        return [link for link in self._links if link.touches(node)]

    # ------------------------------------------------------------------
    # Whole-collection replacement
    # ------------------------------------------------------------------

    def set_data(
        self,
        nodes: Iterable[Node] | None = None,
        links: Iterable[Link] | None = None,
    ) -> None:
        """Replace both collections and recompute the id counters.

        The counters become the largest numeric id present (0 when there
        is none). Entities without an id are then given fresh ones.
        Nothing is changed, neither the store nor the given entities,
        when the data is rejected.

        Raises:
            DuplicateIdError: Two nodes or two links share an id.
            GraphDataError: A link endpoint is not among *nodes*.
        """
        new_nodes = list(nodes) if nodes else []
        new_links = list(links) if links else []

        last_node_id = _max_numeric_id(n.id for n in new_nodes)
        node_ids: dict[Node, Identifier] = {}
        graph = nx.MultiGraph()
        for node in new_nodes:
            node_id = node.id
            if not node_id:
                last_node_id += 1
                node_id = last_node_id
            if node_id in graph or node in node_ids:
                raise DuplicateIdError(f"Duplicate node id {node_id!r}", node_id=node_id)
            node_ids[node] = node_id
            graph.add_node(node_id, node=node)

        last_link_id = _max_numeric_id(link.id for link in new_links)
        link_ids: dict[Link, Identifier] = {}
        seen_links: set[Identifier] = set()
        for link in new_links:
            link_id = link.id
            if not link_id:
                last_link_id += 1
                link_id = last_link_id
            if link_id in seen_links or link in link_ids:
                raise DuplicateIdError(f"Duplicate link id {link_id!r}", link_id=link_id)
            for endpoint in (link.endpoint_a, link.endpoint_b):
                if endpoint not in node_ids:
                    raise GraphDataError(
                        f"Link {link_id!r} references node {endpoint.id!r} which is not in the graph",
                        node_id=endpoint.id,
                        link_id=link_id,
                    )
            link_ids[link] = link_id
            seen_links.add(link_id)
            graph.add_edge(node_ids[link.endpoint_a], node_ids[link.endpoint_b], key=link_id, link=link)

        # Validated: commit ids, counters and collections together.
        for node, node_id in node_ids.items():
            node.id = node_id
        for link, link_id in link_ids.items():
            link.id = link_id
        self.last_node_id = last_node_id
        self.last_link_id = last_link_id
        self._nodes = new_nodes
        self._links = new_links
        self._graph = graph

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> None:
        """Append *node*, allocating an id when it has none.

        A falsy id (None, 0, "") counts as unset. Explicit numeric ids
        move the allocation counter forward so later allocations stay
        unique.

        Raises:
            DuplicateIdError: The node's id is already in use.
        """
        if not node.id:
            node.id = self._next_node_id()
        elif node.id in self._graph:
            raise DuplicateIdError(f"Duplicate node id {node.id!r}", node_id=node.id)
        elif is_numeric_id(node.id) and node.id > self.last_node_id:
            self.last_node_id = node.id

        self._nodes.append(node)
        self._graph.add_node(node.id, node=node)

    def remove_node(self, node: Node) -> list[Link]:
        """Remove the stored node with *node*'s id and every link touching it.

        Returns the removed links. Unknown or id-less nodes are ignored.
        """
        node_id = getattr(node, "id", None)
        if not node_id:
            logger.debug("remove_node ignored: node has no id")
            return []
        stored = self.get_node(node_id)
        if stored is None:
            logger.debug("remove_node ignored: unknown node id %r", node_id)
            return []

        removed = self.links_of(stored)
        if removed:
            self._links = [link for link in self._links if not link.touches(stored)]
        self._nodes = [n for n in self._nodes if n is not stored]
        # Dropping the graph node drops its incident edges with it.
        self._graph.remove_node(stored.id)
        return removed

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def add_link(
        self,
        node_a: Node,
        node_b: Node,
        is_a_to_b: bool = True,
        label: str = "",
    ) -> Link:
        """Create and append a link between two stored nodes.

        Raises:
            GraphDataError: Either node is not in the store, or both are the
                same node.
        """
        for endpoint in (node_a, node_b):
            if not self.contains_node(endpoint):
                raise GraphDataError(
                    f"Cannot link node {endpoint.id!r}: it is not in the graph",
                    node_id=endpoint.id,
                )
        if node_a is node_b:
            raise GraphDataError(f"Cannot link node {node_a.id!r} to itself", node_id=node_a.id)

        link = Link(node_a, node_b, is_a_to_b=is_a_to_b, label=label, id=self._next_link_id())
        self._links.append(link)
        self._graph.add_edge(node_a.id, node_b.id, key=link.id, link=link)
        return link

    def update_link(self, link: Link) -> bool:
        """Resynchronise the store after a link was edited in place.

        A numeric id may have been edited, so the link counter is
        recomputed. Returns False if the link is not in the store.
        """
        if not self.contains_link(link):
            logger.debug("update_link ignored: link %r not in store", getattr(link, "id", None))
            return False
        if is_numeric_id(link.id):
            self.last_link_id = _max_numeric_id(existing.id for existing in self._links)
        self._reindex_links()
        return True

    def remove_link(self, link: Link) -> bool:
        """Remove *link* by identity. Returns False if it was not stored."""
        if not self.contains_link(link):
            logger.debug("remove_link ignored: link %r not in store", getattr(link, "id", None))
            return False
        self._links = [existing for existing in self._links if existing is not link]
        self._reindex_links()
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _next_node_id(self) -> int | float:
        self.last_node_id += 1
        return self.last_node_id

    def _next_link_id(self) -> int | float:
        self.last_link_id += 1
        return self.last_link_id

    def _reindex_links(self) -> None:
        self._graph.remove_edges_from(list(self._graph.edges(keys=True)))
        for link in self._links:
            self._graph.add_edge(link.endpoint_a.id, link.endpoint_b.id, key=link.id, link=link)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"GraphStore(nodes={len(self._nodes)}, links={len(self._links)})"
