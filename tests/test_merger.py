"""Graph merger tests: first-write-wins identity merging."""

from graph_fixtures import edge, graph, node, scenario_graph

from mc_explorer.core.models.asset import GraphPayload
from mc_explorer.domain.graph.merger import dedupe_by_id, merge_graphs


def test_merge_is_idempotent():
    g = scenario_graph()

    once = merge_graphs([g])
    twice = merge_graphs([g, g])

    assert twice == once
    assert twice.node_ids() == ["A", "B", "C"]
    assert twice.edge_ids() == ["e_ab", "e_ca"]


def test_first_graph_wins_on_duplicate_ids():
    a = graph(nodes=[node("n", label="from A")], edges=[edge("e", "n", "n", label="A edge")])
    b = graph(nodes=[node("n", label="from B")], edges=[edge("e", "n", "n", label="B edge")])

    assert merge_graphs([a, b]).get_node("n").label == "from A"
    assert merge_graphs([b, a]).get_node("n").label == "from B"
    assert merge_graphs([a, b]).edges[0].label == "A edge"


def test_merge_preserves_first_seen_order():
    a = graph(nodes=[node("x"), node("y")])
    b = graph(nodes=[node("z"), node("x")])

    assert merge_graphs([a, b]).node_ids() == ["x", "y", "z"]


def test_merge_accepts_raw_mappings_and_none():
    raw = {
        "nodes": [{"data": {"id": "q1", "label": "Nightly Query", "category": "Queries"}}],
        "edges": [],
    }

    merged = merge_graphs([None, raw, GraphPayload()])

    assert merged.node_ids() == ["q1"]
    assert merged.nodes[0].category == "Queries"


def test_merge_of_nothing_is_empty():
    assert merge_graphs([]).is_empty


def test_merge_does_not_mutate_inputs():
    a = graph(nodes=[node("x")])
    b = graph(nodes=[node("y")])

    merge_graphs([a, b])

    assert a.node_ids() == ["x"]
    assert b.node_ids() == ["y"]


def test_dedupe_by_id_keeps_first():
    first, second = node("d", label="first"), node("d", label="second")

    assert dedupe_by_id([first, second]) == [first]
