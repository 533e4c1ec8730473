"""
Graph merging by identity.

Merging is first-write-wins: when an id appears in more than one input, the
version from the earliest graph in the list is kept and later ones are
dropped. Callers control precedence purely through list order.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence, TypeVar

from mc_explorer.core.models.asset import AssetEdge, AssetNode, GraphPayload
from mc_explorer.utils.logging import get_logger

logger = get_logger("graph.merger")

_Element = TypeVar("_Element", AssetNode, AssetEdge)


def dedupe_by_id(elements: Iterable[_Element]) -> list[_Element]:
    """Drop elements whose id was already seen, preserving first-seen order."""
    seen: dict[str, _Element] = {}
    for element in elements:
        if element.id not in seen:
            seen[element.id] = element
    return list(seen.values())


def merge_graphs(
    graphs: Sequence[GraphPayload | Mapping | None],
) -> GraphPayload:
    """Merge node/edge collections by id.

    Args:
        graphs: Collections in precedence order. For a duplicated id the
            element from the earliest collection is retained; the order of
            this list is therefore part of the contract.

    Returns:
        A new payload holding the first occurrence of every node and edge id,
        in first-seen order.
    """
    payloads = [GraphPayload.from_raw(g) for g in graphs]
    nodes = dedupe_by_id(node for p in payloads for node in p.nodes)
    edges = dedupe_by_id(edge for p in payloads for edge in p.edges)

    total_nodes = sum(len(p.nodes) for p in payloads)
    total_edges = sum(len(p.edges) for p in payloads)
    if total_nodes != len(nodes) or total_edges != len(edges):
        logger.debug(
            f"Merged {len(payloads)} graph(s): dropped {total_nodes - len(nodes)} duplicate "
            f"node(s), {total_edges - len(edges)} duplicate edge(s)"
        )

    return GraphPayload(nodes=nodes, edges=edges)
