"""
Expansion Engine.

Pulls one-hop neighborhoods from a GraphSource and accumulates them into
``GraphState.extra_graph``. Recursive expansion is a breadth-first walk over
a frontier: every fetch of one level runs concurrently and the level is
joined before the next frontier is computed, so latency grows with depth
rather than with frontier size.

Fetch failures never escape the engine. A failed node is logged, reported
in the result and left out of the next frontier; the rest of the level
carries on.

Only one expansion is expected in flight at a time. Starting another while
one is pending is a caller error; the engine logs it and proceeds with
undefined ordering.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum

from mc_explorer.core import events
from mc_explorer.core.event_bus import EventBus
from mc_explorer.core.models.asset import GraphPayload
from mc_explorer.domain.graph.merger import merge_graphs
from mc_explorer.domain.graph.source import GraphSource
from mc_explorer.domain.session.state import GraphState
from mc_explorer.utils.logging import get_logger, log_error, log_operation

logger = get_logger("graph.expansion")


class ExpansionStatus(str, Enum):
    IDLE = "idle"
    EXPANDING = "expanding"


@dataclass
class ExpansionResult:
    """Outcome of an expand_one or expand_recursively call.

    Attributes:
        root_id: Node the expansion started from
        depth_reached: Fetch rounds performed
        fetched_ids: Nodes whose neighborhood was fetched successfully
        failed_ids: Nodes whose fetch raised
        added_node_ids: Node ids that were new to the extra graph
        added_edge_ids: Edge ids that were new to the extra graph
        unexpanded: Ids discovered in the last round but never fetched because
            the depth limit was reached
        stale: The state was reset while fetches were in flight; late
            responses were discarded
    """

    root_id: str
    depth_reached: int = 0
    fetched_ids: list[str] = field(default_factory=list)
    failed_ids: list[str] = field(default_factory=list)
    added_node_ids: list[str] = field(default_factory=list)
    added_edge_ids: list[str] = field(default_factory=list)
    unexpanded: list[str] = field(default_factory=list)
    stale: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.stale and self.root_id in self.fetched_ids


class ExpansionEngine:
    """Frontier-based expansion of the session's extra graph."""

    def __init__(
        self,
        source: GraphSource,
        event_bus: EventBus | None = None,
        warn_on_overlap: bool = True,
    ):
        self.source = source
        self.event_bus = event_bus
        self.warn_on_overlap = warn_on_overlap
        self._status: dict[str, ExpansionStatus] = {}
        self._active_operations = 0

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def status(self, node_id: str) -> ExpansionStatus:
        return self._status.get(node_id, ExpansionStatus.IDLE)

    @property
    def is_expanding(self) -> bool:
        return self._active_operations > 0

    def _begin_operation(self, node_id: str) -> None:
        if self._active_operations and self.warn_on_overlap:
            logger.warning(
                f"Expansion of '{node_id}' started while another expansion is in flight; "
                "merge order between them is undefined"
            )
        self._active_operations += 1

    def _end_operation(self) -> None:
        self._active_operations -= 1

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def expand_one(self, state: GraphState, node_id: str) -> ExpansionResult:
        """Fetch the one-hop neighborhood of ``node_id`` into ``state.extra_graph``.

        A fetch failure is logged and leaves the extra graph unchanged.
        """
        result = ExpansionResult(root_id=node_id)
        epoch = state.epoch

        self._begin_operation(node_id)
        try:
            result.depth_reached = 1
            payload = await self._fetch_or_report(node_id, result)
            if payload is not None:
                self._accept(state, epoch, payload, result)
        finally:
            self._end_operation()

        await self._publish_result(result)
        log_operation(
            logger,
            "Expanded node",
            node=node_id,
            added_node_ids=result.added_node_ids,
            added_edge_ids=result.added_edge_ids,
            failed=bool(result.failed_ids),
        )
        return result

    async def expand_recursively(
        self,
        state: GraphState,
        node_id: str,
        max_depth: int,
    ) -> ExpansionResult:
        """Breadth-first expansion from ``node_id``, at most ``max_depth`` fetch rounds.

        ``visited`` starts as the node ids already in the extra graph. Each
        round fetches the whole frontier concurrently, merges responses as
        they arrive, and builds the next frontier from returned node ids not
        yet visited.

        Raises:
            ValueError: If ``max_depth`` is negative
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")

        result = ExpansionResult(root_id=node_id)
        epoch = state.epoch
        visited = state.extra_node_ids()
        frontier = [node_id]

        self._begin_operation(node_id)
        try:
            while frontier and result.depth_reached < max_depth and not result.stale:
                next_frontier: list[str] = []

                async def visit(current_id: str) -> None:
                    payload = await self._fetch_or_report(current_id, result)
                    if payload is None or not self._accept(state, epoch, payload, result):
                        return
                    for node in payload.nodes:
                        if node.id not in visited:
                            visited.add(node.id)
                            next_frontier.append(node.id)

                await asyncio.gather(*(visit(current_id) for current_id in frontier))
                result.depth_reached += 1
                logger.debug(
                    f"Expansion round {result.depth_reached} from '{node_id}': "
                    f"{len(frontier)} fetched, {len(next_frontier)} discovered"
                )
                frontier = next_frontier
        finally:
            self._end_operation()

        result.unexpanded = frontier
        await self._publish_result(result)
        log_operation(
            logger,
            "Finished recursive expansion",
            node=node_id,
            depth=result.depth_reached,
            added_node_ids=result.added_node_ids,
            failed_ids=result.failed_ids,
            unexpanded=result.unexpanded,
        )
        return result

    async def reset(self, state: GraphState) -> None:
        """Clear the extra graph; in-flight fetches from before the reset are discarded."""
        cleared_nodes, cleared_edges = state.reset_extra_graph()
        log_operation(logger, "Reset expansions", cleared_nodes=cleared_nodes, cleared_edges=cleared_edges)
        if self.event_bus is not None:
            await self.event_bus.publish(
                events.TOPIC_GRAPH_RESET,
                events.create_graph_reset_event(cleared_nodes, cleared_edges),
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch_or_report(
        self,
        node_id: str,
        result: ExpansionResult,
    ) -> GraphPayload | None:
        """Fetch one neighborhood; on failure record it and return None."""
        self._status[node_id] = ExpansionStatus.EXPANDING
        try:
            raw = await self.source.fetch_expansion(node_id)
            payload = GraphPayload.from_raw(raw)
        except Exception as e:
            log_error(logger, "fetch_expansion", e, node=node_id)
            result.failed_ids.append(node_id)
            if self.event_bus is not None:
                await self.event_bus.publish(
                    events.TOPIC_EXPANSION_FAILED,
                    events.create_expansion_failed_event(node_id, e),
                )
            return None
        finally:
            self._status[node_id] = ExpansionStatus.IDLE

        result.fetched_ids.append(node_id)
        return payload

    def _accept(
        self,
        state: GraphState,
        epoch: int,
        payload: GraphPayload,
        result: ExpansionResult,
    ) -> bool:
        """Merge a response into the extra graph unless the state was reset meanwhile.

        Returns:
            False if the response was discarded
        """
        if state.epoch != epoch:
            logger.debug(f"Discarding expansion response for '{result.root_id}' after reset")
            result.stale = True
            return False

        known_nodes = state.extra_node_ids()
        known_edges = set(state.extra_graph.edge_ids())
        # Accumulated data first: it wins over the new response
        state.extra_graph = merge_graphs([state.extra_graph, payload])

        for node in state.extra_graph.nodes:
            if node.id not in known_nodes:
                result.added_node_ids.append(node.id)
        for edge in state.extra_graph.edges:
            if edge.id not in known_edges:
                result.added_edge_ids.append(edge.id)
        return True

    async def _publish_result(self, result: ExpansionResult) -> None:
        if self.event_bus is None or result.stale:
            return
        await self.event_bus.publish(
            events.TOPIC_GRAPH_EXPANDED,
            events.create_graph_expanded_event(
                root_id=result.root_id,
                depth_reached=result.depth_reached,
                added_node_ids=list(result.added_node_ids),
                added_edge_ids=list(result.added_edge_ids),
                failed_ids=list(result.failed_ids),
            ),
        )
