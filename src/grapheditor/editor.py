"""GraphEditor: the host-facing editor object."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from grapheditor.config import EditorConfig
from grapheditor.events.dispatcher import EventDispatcher
from grapheditor.interaction import InteractionStateMachine
from grapheditor.pointer import PointerEvent, PointerRouter
from grapheditor.render import NullRenderAdapter
from grapheditor.store import GraphStore
from grapheditor.timers import HoverTimer, default_scheduler

if TYPE_CHECKING:
    from collections.abc import Iterable

    from grapheditor.model import Link, Node
    from grapheditor.render import RenderAdapter
    from grapheditor.store import GraphData
    from grapheditor.timers import Scheduler

logger = logging.getLogger(__name__)


class GraphEditor:
    """An editable graph bound to a view.

    Owns one graph store, one interaction state machine and one event
    dispatcher; nothing is shared between editor instances. The view
    feeds pointer input through ``handle_pointer`` (or calls the state
    machine handlers on ``interaction`` directly) and receives drawing
    requests through its render adapter.

    Args:
        config: Construction options. Defaults to ``EditorConfig()``.
        renderer: View adapter. Defaults to one that draws nothing.
        scheduler: Runs the hover timer. Defaults to the running asyncio
            loop when there is one, else a timer thread.

    Example:
        >>> from grapheditor import Node
        >>> editor = GraphEditor()
        >>> a, b = Node(label="A", x=100, y=100), Node(label="B", x=300, y=100)
        >>> editor.add_node(a)
        >>> editor.add_node(b)
        >>> [n.id for n in editor.get_data().nodes]
        [1, 2]
    """

    def __init__(
        self,
        config: EditorConfig | None = None,
        *,
        renderer: RenderAdapter | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.config = config or EditorConfig()
        self.renderer: RenderAdapter = renderer if renderer is not None else NullRenderAdapter()
        self.dispatcher = EventDispatcher(self.config.action_listener, strict=self.config.strict_events)
        self.store = GraphStore()
        self.interaction = InteractionStateMachine(
            self.store,
            self.dispatcher,
            self.renderer,
            HoverTimer(scheduler or default_scheduler(), self.config.hover_delay),
            node_radius=self.config.node_radius,
            approach_radius=self.config.approach_radius,
            width=self.config.width,
            height=self.config.height,
        )
        self.pointer = PointerRouter(self.interaction)

        if self.config.nodes or self.config.links:
            self.set_data(self.config.nodes, self.config.links)

    @classmethod
    def create(cls, props: dict[str, Any] | None = None, **kwargs: Any) -> GraphEditor:
        """Build an editor from a host property mapping (see ``EditorConfig.from_mapping``)."""
        return cls(EditorConfig.from_mapping(props), **kwargs)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def node_radius(self) -> float:
        return self.interaction.node_radius

    @property
    def approach_radius(self) -> float:
        return self.interaction.approach_radius

    @property
    def action_listener(self) -> Any:
        return self.dispatcher.listener

    @action_listener.setter
    def action_listener(self, listener: Any) -> None:
        self.dispatcher.listener = listener

    @property
    def selected_node(self) -> Node | None:
        return self.interaction.selected_node

    @property
    def selected_link(self) -> Link | None:
        return self.interaction.selected_link

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def set_data(self, nodes: Iterable[Node] | None = None, links: Iterable[Link] | None = None) -> None:
        """Replace the whole graph and redraw it."""
        old = self.store.get_data()
        self.store.set_data(nodes, links)
        self.interaction.reset()
        self.pointer.reset()
        for link in old.links:
            self.renderer.remove_link_visual(link)
        for node in old.nodes:
            self.renderer.remove_node_visual(node)
        for node in self.store.nodes:
            self.interaction.draw_node(node)
        for link in self.store.links:
            self.interaction.draw_link(link)
        logger.debug("Graph replaced: %d nodes, %d links", len(self.store), len(self.store.links))

    def get_data(self) -> GraphData:
        return self.store.get_data()

    def add_node(self, node: Node) -> None:
        """Add a node, allocating its id if it has none, and draw it."""
        self.store.add_node(node)
        self.interaction.draw_node(node)

    def remove_node(self, node: Node) -> None:
        """Remove a node and its links. Unknown nodes are ignored."""
        node_id = getattr(node, "id", None)
        stored = self.store.get_node(node_id) if node_id else None
        if stored is None:
            return
        removed = self.store.remove_node(stored)
        for link in removed:
            self.interaction.forget_link(link)
            self.renderer.remove_link_visual(link)
        self.interaction.forget_node(stored)
        self.pointer.reset()
        self.renderer.remove_node_visual(stored)

    def add_link(self, node_a: Node, node_b: Node, is_a_to_b: bool = True, label: str = "") -> Link:
        """Create a link between two nodes of this editor and draw it."""
        link = self.store.add_link(node_a, node_b, is_a_to_b, label)
        self.interaction.draw_link(link)
        return link

    def update_link(self, link: Link) -> None:
        """Refresh a link's label (and direction) after the host edited it."""
        if not self.store.update_link(link):
            return
        self.renderer.update_link_label(link)
        self.interaction.redraw_link(link)

    def remove_link(self, link: Link) -> None:
        """Remove a link. Unknown links are ignored."""
        if not self.store.remove_link(link):
            return
        self.interaction.forget_link(link)
        self.renderer.remove_link_visual(link)

    def hide_all_handles(self) -> None:
        self.interaction.hide_all_handles()

    def resize(self, width: float, height: float) -> None:
        """Change the drawing-surface bounds used to clamp node drags."""
        self.interaction.width = width
        self.interaction.height = height

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_pointer(self, event: PointerEvent) -> None:
        """Feed one pointer event from the view."""
        self.pointer.dispatch(event)

    def hit_test(self, point: tuple[float, float]) -> Node | None:
        """Topmost node whose body contains *point*."""
        return self.interaction.hit_test(point)

    def __repr__(self) -> str:
        return f"GraphEditor(nodes={len(self.store)}, links={len(self.store.links)})"
