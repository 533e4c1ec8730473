"""Graph Explorer Service.

Runs the assembly pipeline that turns fetched node/edge data into an
annotated view for the rendering layer:

    fetch base graph -> merge with extra graph -> index -> highlight

and exposes the selection and expansion operations an operator drives.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mc_explorer.app.config import ExplorerConfig, get_config
from mc_explorer.core import events
from mc_explorer.core.event_bus import EventBus
from mc_explorer.core.models.asset import AssetNode, GraphPayload
from mc_explorer.core.models.connection import ClassifiedEdge, RelationshipStats
from mc_explorer.domain.graph.classifier import is_activity_flow, relation_style
from mc_explorer.domain.graph.expansion import ExpansionEngine, ExpansionResult
from mc_explorer.domain.graph.highlighter import HighlightResult, highlight
from mc_explorer.domain.graph.indexer import ConnectivityIndex, index_connections
from mc_explorer.domain.graph.merger import merge_graphs
from mc_explorer.domain.graph.source import GraphSource
from mc_explorer.domain.graph.steps import AutomationStep, automation_steps
from mc_explorer.domain.session.state import GraphState
from mc_explorer.utils.logging import get_logger, log_error, log_operation

logger = get_logger("graph.service")


@dataclass
class GraphView:
    """An assembled graph, annotated for rendering.

    ``nodes`` are copies carrying derived ``isOrphan``/``connectionCount``
    metadata; the session state is never modified by annotation.
    """

    nodes: list[AssetNode] = field(default_factory=list)
    edges: list[ClassifiedEdge] = field(default_factory=list)
    index: ConnectivityIndex = field(default_factory=ConnectivityIndex)
    highlight: HighlightResult = field(default_factory=HighlightResult)
    generation: int = 0
    stale: bool = False
    used_extra_graph: bool = False

    @property
    def selected_node_id(self) -> str | None:
        return self.highlight.selected_node_id

    @property
    def stats(self) -> RelationshipStats:
        return self.index.stats()

    def node(self, node_id: str) -> AssetNode | None:
        return next((n for n in self.nodes if n.id == node_id), None)

    def to_payload(self) -> GraphPayload:
        return GraphPayload(nodes=list(self.nodes), edges=[e.edge for e in self.edges])

    def to_elements(self) -> list[dict[str, Any]]:
        """Renderer elements: nodes first, then valid edges."""
        elements = []
        for node in self.nodes:
            element = node.to_element()
            element["data"].update({
                "isOrphan": node.is_orphan,
                "isRelated": node.is_related,
                "isHighlighted": node.id in self.highlight.highlighted_nodes,
                "isFaded": self.highlight.is_faded_node(node.id),
            })
            elements.append(element)

        for classified in self.edges:
            element = classified.edge.to_element()
            backend_style = (classified.edge.model_extra or {}).get("relationStyle")
            element["data"].update({
                "tier": classified.tier.value,
                "relationStyle": backend_style or relation_style(classified.tier),
                "isActivityFlow": is_activity_flow(classified.type),
                "isHighlighted": classified.id in self.highlight.highlighted_edges,
                "isFaded": self.highlight.is_faded_edge(classified.id),
            })
            elements.append(element)
        return elements


def build_view(
    graph: GraphPayload,
    selected_node_id: str | None = None,
    generation: int = 0,
) -> GraphView:
    """Index and highlight an already-merged graph."""
    index = index_connections(graph.nodes, graph.edges)
    return GraphView(
        nodes=index.annotated_nodes(),
        edges=list(index.valid_edges),
        index=index,
        highlight=highlight(selected_node_id, index.records),
        generation=generation,
    )


class GraphExplorerService:
    """Owns the assembly pipeline for one exploration session."""

    def __init__(
        self,
        source: GraphSource,
        state: GraphState | None = None,
        event_bus: EventBus | None = None,
        config: ExplorerConfig | None = None,
    ):
        self.source = source
        self.state = state or GraphState()
        self.event_bus = event_bus
        self.config = config or get_config()
        self.engine = ExpansionEngine(
            source,
            event_bus=event_bus,
            warn_on_overlap=self.config.expansion.warn_on_overlap,
        )
        self._generation = 0
        self._last_graph: GraphPayload | None = None
        self.last_view: GraphView | None = None

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    async def assemble(self) -> GraphView:
        """Fetch, merge, index and highlight the current selection.

        A view whose assembly was overtaken by a newer one is returned with
        ``stale=True`` and is neither cached nor published.
        """
        self._generation += 1
        generation = self._generation

        base = await self._fetch_base()

        use_extra = (
            not self.state.has_active_selection()
            or self.config.graph.merge_extra_on_focus
        )
        # Base data first: it wins over expansion data for shared ids
        graphs = [base, self.state.extra_graph] if use_extra else [base]
        merged = merge_graphs(graphs)

        view = build_view(merged, self.state.selected_node_id, generation)
        view.used_extra_graph = use_extra

        if generation != self._generation:
            logger.debug(f"Discarding stale graph assembly #{generation}")
            view.stale = True
            return view

        self._last_graph = merged
        self.last_view = view
        log_operation(
            logger,
            "Assembled graph",
            generation=generation,
            nodes=len(view.nodes),
            edges=len(view.edges),
            orphan_ids=view.index.orphan_ids,
            dropped_edge_ids=view.index.dropped_edges,
        )
        await self._publish_view(view)
        return view

    async def _fetch_base(self) -> GraphPayload:
        try:
            raw = await self.source.fetch_graph(self.state.selection)
            return GraphPayload.from_raw(raw)
        except Exception as e:
            log_error(logger, "fetch_graph", e, selection=self.state.selection)
            return GraphPayload()

    async def _publish_view(self, view: GraphView) -> None:
        if self.event_bus is None:
            return
        if view.index.dropped_edges:
            await self.event_bus.publish(
                events.TOPIC_EDGE_DROPPED,
                events.create_edge_dropped_event(list(view.index.dropped_edges)),
            )
        await self.event_bus.publish(
            events.TOPIC_GRAPH_UPDATED,
            events.create_graph_updated_event(
                generation=view.generation,
                graph_stats=view.stats.to_dict(),
                selected_node_id=view.selected_node_id,
            ),
        )

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def set_selection(self, category: str, object_id: str, selected: bool = True) -> None:
        self.state.set_selection(category, object_id, selected)

    async def select_node(self, node_id: str) -> GraphView | None:
        """Toggle the focused node and re-highlight the last assembled graph.

        Returns:
            The re-highlighted view, or None if nothing was assembled yet
        """
        previous = self.state.selected_node_id
        current = self.state.toggle_selected_node(node_id)

        if self.event_bus is not None:
            await self.event_bus.publish(
                events.TOPIC_SELECTION_CHANGED,
                events.create_selection_changed_event(current, previous),
            )

        if self._last_graph is None:
            return None

        self._generation += 1
        view = build_view(self._last_graph, current, self._generation)
        view.used_extra_graph = self.last_view.used_extra_graph if self.last_view else False
        self.last_view = view
        await self._publish_view(view)
        return view

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    async def expand_selected(self) -> ExpansionResult | None:
        """Expand the focused node by one hop and reassemble."""
        node_id = self.state.selected_node_id
        if node_id is None:
            logger.info("No node selected; nothing to expand")
            return None
        result = await self.engine.expand_one(self.state, node_id)
        await self.assemble()
        return result

    async def expand_selected_recursively(self, max_depth: int | None = None) -> ExpansionResult | None:
        """Expand the focused node breadth-first and reassemble."""
        node_id = self.state.selected_node_id
        if node_id is None:
            logger.info("No node selected; nothing to expand")
            return None
        if max_depth is None:
            max_depth = self.config.expansion.default_max_depth
        result = await self.engine.expand_recursively(self.state, node_id, max_depth)
        await self.assemble()
        return result

    async def reset_expansions(self) -> GraphView:
        await self.engine.reset(self.state)
        return await self.assemble()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def automation_steps(self, automation_id: str) -> list[AutomationStep]:
        if self.last_view is None:
            return []
        return automation_steps(self.last_view.nodes, automation_id)
