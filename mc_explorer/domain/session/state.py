"""
Exploration session state.

GraphState is owned by the caller and handed to the expansion engine and
the explorer service by reference. Its lifecycle is
``init (empty) -> accumulate via expansions -> reset (empty)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mc_explorer.core.models.asset import GraphPayload

# category -> object id -> selected
Selection = dict[str, dict[str, bool]]


@dataclass
class GraphState:
    """Session-scoped exploration state.

    Attributes:
        selection: Selected objects per category; empty means "all objects"
        extra_graph: Nodes and edges accumulated by expansions
        selected_node_id: Node currently focused in the graph, if any
        epoch: Incremented on every reset; work started under an older
            epoch must not write into extra_graph
    """

    selection: Selection = field(default_factory=dict)
    extra_graph: GraphPayload = field(default_factory=GraphPayload)
    selected_node_id: str | None = None
    epoch: int = 0

    def has_active_selection(self) -> bool:
        """True if at least one object in any category is selected."""
        return any(
            selected
            for objects in self.selection.values()
            for selected in (objects or {}).values()
        )

    def set_selection(self, category: str, object_id: str, selected: bool = True) -> None:
        self.selection.setdefault(category, {})[object_id] = selected

    def clear_selection(self) -> None:
        self.selection = {}

    def toggle_selected_node(self, node_id: str) -> str | None:
        """Select ``node_id``, or clear the selection if it is already selected.

        Returns:
            The selected node id after the toggle
        """
        if self.selected_node_id == node_id:
            self.selected_node_id = None
        else:
            self.selected_node_id = node_id
        return self.selected_node_id

    def extra_node_ids(self) -> set[str]:
        return set(self.extra_graph.node_ids())

    def reset_extra_graph(self) -> tuple[int, int]:
        """Clear accumulated expansions.

        Returns:
            (nodes cleared, edges cleared)
        """
        cleared = (len(self.extra_graph.nodes), len(self.extra_graph.edges))
        self.extra_graph = GraphPayload()
        self.epoch += 1
        return cleared

    def to_dict(self) -> dict[str, Any]:
        return {
            "selection": self.selection,
            "extra_graph": self.extra_graph.to_dict(),
            "selected_node_id": self.selected_node_id,
        }
