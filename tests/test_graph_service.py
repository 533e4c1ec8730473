"""Graph Explorer Service Tests.

Tests for the assembly pipeline that merges, indexes and highlights the
graph handed to the rendering layer.
"""

import asyncio
import unittest

from graph_fixtures import FakeGraphSource, edge, graph, node, scenario_graph

from mc_explorer.app.config import ExplorerConfig, GraphConfig
from mc_explorer.core import events
from mc_explorer.core.event_bus import EventBus, EventPayload
from mc_explorer.core.models.asset import GraphPayload
from mc_explorer.domain.graph.service import GraphExplorerService, build_view
from mc_explorer.domain.session.state import GraphState


def _config(**graph_options) -> ExplorerConfig:
    return ExplorerConfig(graph=GraphConfig(**graph_options))


class GraphExplorerServiceTest(unittest.IsolatedAsyncioTestCase):
    """Test GraphExplorerService functionality."""

    async def asyncSetUp(self) -> None:
        self.bus = EventBus()
        self.updates: list[EventPayload] = []

        async def on_graph_updated(payload: EventPayload) -> None:
            self.updates.append(payload)

        await self.bus.subscribe(events.TOPIC_GRAPH_UPDATED, on_graph_updated)

    def _service(self, source, state=None, **graph_options) -> GraphExplorerService:
        return GraphExplorerService(source, state=state, event_bus=self.bus, config=_config(**graph_options))

    async def test_assemble_publishes_graph_update(self) -> None:
        service = self._service(FakeGraphSource(base=scenario_graph()))

        view = await service.assemble()
        await self.bus.drain()

        self.assertEqual([n.id for n in view.nodes], ["A", "B", "C"])
        self.assertEqual(len(self.updates), 1)
        stats = self.updates[0]["graph_stats"]
        self.assertEqual(stats["total_objects"], 3)
        self.assertEqual(stats["direct_relationships"], 1)
        self.assertEqual(stats["metadata_relationships"], 1)
        self.assertIs(service.last_view, view)

    async def test_orphans_are_kept_and_tagged(self) -> None:
        base = scenario_graph()
        base.nodes.append(node("D"))
        service = self._service(FakeGraphSource(base=base))

        view = await service.assemble()

        self.assertTrue(view.node("D").is_orphan)
        self.assertFalse(view.node("A").is_orphan)
        self.assertEqual(view.stats.orphan_objects, 1)

    async def test_base_fetch_failure_yields_empty_graph(self) -> None:
        service = self._service(FakeGraphSource(fail_base=True))

        view = await service.assemble()

        self.assertEqual(view.nodes, [])
        self.assertEqual(view.edges, [])

    async def test_base_fetch_failure_keeps_expansions(self) -> None:
        state = GraphState(extra_graph=graph(nodes=[node("X")]))
        service = self._service(FakeGraphSource(fail_base=True), state=state)

        view = await service.assemble()

        self.assertEqual([n.id for n in view.nodes], ["X"])
        self.assertEqual(state.extra_graph.node_ids(), ["X"])

    async def test_base_data_wins_over_expansion_data(self) -> None:
        base = graph(nodes=[node("A", label="from backend")])
        state = GraphState(extra_graph=graph(nodes=[node("A", label="from expansion"), node("Z")]))
        service = self._service(FakeGraphSource(base=base), state=state)

        view = await service.assemble()

        self.assertEqual(view.node("A").label, "from backend")
        self.assertIsNotNone(view.node("Z"))
        self.assertTrue(view.used_extra_graph)

    async def test_focused_selection_ignores_extra_graph(self) -> None:
        state = GraphState(extra_graph=graph(nodes=[node("Z")]))
        state.set_selection("Data Extensions", "A")
        service = self._service(FakeGraphSource(base=scenario_graph()), state=state)

        view = await service.assemble()

        self.assertIsNone(view.node("Z"))
        self.assertFalse(view.used_extra_graph)

    async def test_focused_selection_merges_when_configured(self) -> None:
        state = GraphState(extra_graph=graph(nodes=[node("Z")]))
        state.set_selection("Data Extensions", "A")
        service = self._service(FakeGraphSource(base=scenario_graph()), state=state, merge_extra_on_focus=True)

        view = await service.assemble()

        self.assertIsNotNone(view.node("Z"))

    async def test_selection_passed_to_source(self) -> None:
        source = FakeGraphSource(base=scenario_graph())
        service = self._service(source)
        service.set_selection("Queries", "q1")

        await service.assemble()

        self.assertEqual(source.graph_calls, [{"Queries": {"q1": True}}])

    async def test_select_node_toggles_highlight(self) -> None:
        service = self._service(FakeGraphSource(base=scenario_graph()))
        await service.assemble()

        selected = await service.select_node("B")
        self.assertEqual(selected.highlight.highlighted_nodes, {"A", "B"})
        self.assertEqual(selected.highlight.highlighted_edges, {"e_ab"})

        cleared = await service.select_node("B")
        self.assertIsNone(cleared.selected_node_id)
        self.assertEqual(cleared.highlight.highlighted_nodes, frozenset())
        self.assertEqual(cleared.highlight.highlighted_edges, frozenset())

    async def test_select_node_before_assembly(self) -> None:
        service = self._service(FakeGraphSource())

        self.assertIsNone(await service.select_node("A"))
        self.assertEqual(service.state.selected_node_id, "A")

    async def test_selection_change_event(self) -> None:
        changes: list[EventPayload] = []

        async def on_change(payload: EventPayload) -> None:
            changes.append(payload)

        await self.bus.subscribe(events.TOPIC_SELECTION_CHANGED, on_change)
        service = self._service(FakeGraphSource(base=scenario_graph()))

        await service.select_node("A")
        await service.select_node("C")
        await self.bus.drain()

        self.assertEqual(
            [(c["previous_node_id"], c["selected_node_id"]) for c in changes],
            [(None, "A"), ("A", "C")],
        )

    async def test_expand_selected_reassembles(self) -> None:
        source = FakeGraphSource(
            base=graph(nodes=[node("A")]),
            expansions={"A": graph(nodes=[node("A"), node("B")], edges=[edge("ab", "A", "B")])},
        )
        service = self._service(source)
        await service.select_node("A")

        result = await service.expand_selected()

        self.assertTrue(result.succeeded)
        view = service.last_view
        self.assertEqual([n.id for n in view.nodes], ["A", "B"])
        self.assertEqual(view.highlight.highlighted_nodes, {"A", "B"})

    async def test_expand_without_selection_is_noop(self) -> None:
        source = FakeGraphSource(base=scenario_graph())
        service = self._service(source)

        self.assertIsNone(await service.expand_selected())
        self.assertIsNone(await service.expand_selected_recursively())
        self.assertEqual(source.expansion_calls, [])

    async def test_recursive_expansion_uses_configured_depth(self) -> None:
        def chain(node_id: str):
            nxt = f"n{int(node_id[1:]) + 1}"
            return graph(nodes=[node(nxt)], edges=[edge(f"{node_id}{nxt}", node_id, nxt)])

        source = FakeGraphSource(base=graph(nodes=[node("n0")]), expand_fn=chain)
        config = ExplorerConfig()
        config.expansion.default_max_depth = 2
        service = GraphExplorerService(source, config=config)
        service.state.selected_node_id = "n0"

        result = await service.expand_selected_recursively()

        self.assertEqual(result.depth_reached, 2)
        self.assertEqual([n.id for n in service.last_view.nodes], ["n0", "n1", "n2"])
        self.assertEqual(service.last_view.stats.orphan_objects, 0)

    async def test_reset_expansions(self) -> None:
        state = GraphState(extra_graph=graph(nodes=[node("Z")]))
        service = self._service(FakeGraphSource(base=scenario_graph()), state=state)

        view = await service.reset_expansions()

        self.assertIsNone(view.node("Z"))
        self.assertTrue(state.extra_graph.is_empty)

    async def test_dropped_edges_reported(self) -> None:
        dropped: list[EventPayload] = []

        async def on_dropped(payload: EventPayload) -> None:
            dropped.append(payload)

        await self.bus.subscribe(events.TOPIC_EDGE_DROPPED, on_dropped)
        base = scenario_graph()
        base.edges.append(edge("e_ghost", "A", "ghost"))
        service = self._service(FakeGraphSource(base=base))

        view = await service.assemble()
        await self.bus.drain()

        self.assertEqual(view.index.dropped_edges, ["e_ghost"])
        self.assertEqual(dropped[0]["edge_ids"], ["e_ghost"])

    async def test_superseded_assembly_is_stale(self) -> None:
        service = self._service(FakeGraphSource(base=scenario_graph(), delay=0.02))

        first = asyncio.create_task(service.assemble())
        await asyncio.sleep(0)
        second = await service.assemble()
        first_view = await first
        await self.bus.drain()

        self.assertTrue(first_view.stale)
        self.assertFalse(second.stale)
        self.assertIs(service.last_view, second)
        self.assertEqual(len(self.updates), 1)

    async def test_automation_steps_from_last_view(self) -> None:
        base = graph(nodes=[
            node("auto1", category="Automations", type="Automation"),
            node("act2", category="Activity", label="Load → Customers", automationId="auto1", stepNumber=2),
            node("act1", category="Activity", label="Run query", automationId="auto1",
                 stepNumber=1, activityType="QueryActivity"),
            node("other", category="Activity", automationId="auto2", stepNumber=1),
        ])
        service = self._service(FakeGraphSource(base=base))
        await service.assemble()

        found = service.automation_steps("auto1")

        self.assertEqual([s.activity_id for s in found], ["act1", "act2"])
        self.assertEqual(found[0].activity_type, "QueryActivity")
        self.assertEqual(found[1].activity_type, "Unknown")
        self.assertEqual(found[1].target_asset, "Customers")


class GraphViewElementsTest(unittest.TestCase):

    def test_elements_carry_render_flags(self) -> None:
        base = scenario_graph()
        base.nodes.append(node("D"))
        view = build_view(base, selected_node_id="B")

        elements = {el["data"]["id"]: el["data"] for el in view.to_elements()}

        self.assertTrue(elements["B"]["isHighlighted"])
        self.assertTrue(elements["C"]["isFaded"])
        self.assertTrue(elements["D"]["isOrphan"])
        self.assertFalse(elements["A"]["isOrphan"])
        self.assertEqual(elements["e_ab"]["tier"], "direct")
        self.assertEqual(elements["e_ab"]["relationStyle"], "direct")
        self.assertTrue(elements["e_ab"]["isHighlighted"])
        self.assertEqual(elements["e_ca"]["relationStyle"], "metadata")
        self.assertTrue(elements["e_ca"]["isFaded"])

    def test_backend_relation_style_wins(self) -> None:
        raw = {
            "nodes": [{"id": "a"}, {"id": "b"}],
            "edges": [{"id": "ab", "source": "a", "target": "b", "type": "next_step", "relationStyle": "activity"}],
        }

        view = build_view(GraphPayload.from_raw(raw))
        edge_data = view.to_elements()[-1]["data"]

        self.assertEqual(edge_data["relationStyle"], "activity")
        self.assertTrue(edge_data["isActivityFlow"])
        self.assertEqual(edge_data["tier"], "indirect")


if __name__ == "__main__":
    unittest.main()
