"""Selection highlighting over a connectivity index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from mc_explorer.core.models.connection import ConnectionRecord


@dataclass(frozen=True)
class HighlightResult:
    selected_node_id: str | None = None
    highlighted_nodes: frozenset[str] = field(default_factory=frozenset)
    highlighted_edges: frozenset[str] = field(default_factory=frozenset)

    @property
    def has_selection(self) -> bool:
        return self.selected_node_id is not None

    def is_faded_node(self, node_id: str) -> bool:
        """True when something is selected and ``node_id`` is outside its neighborhood."""
        return self.has_selection and node_id not in self.highlighted_nodes

    def is_faded_edge(self, edge_id: str) -> bool:
        return self.has_selection and edge_id not in self.highlighted_edges


def highlight(
    selected_node_id: str | None,
    records: Mapping[str, ConnectionRecord],
) -> HighlightResult:
    """Compute the one-hop neighborhood of the selected node.

    The selected node is always highlighted, even when it has no record in
    the current index. Reselect-to-clear is the caller's concern.
    """
    if selected_node_id is None:
        return HighlightResult()

    nodes = {selected_node_id}
    edges: set[str] = set()

    record = records.get(selected_node_id)
    if record is not None:
        for conn in record.inbound:
            nodes.add(conn.source_id)
            edges.add(conn.edge_id)
        for conn in record.outbound:
            nodes.add(conn.target_id)
            edges.add(conn.edge_id)

    return HighlightResult(
        selected_node_id=selected_node_id,
        highlighted_nodes=frozenset(nodes),
        highlighted_edges=frozenset(edges),
    )
