"""Canonical event definitions for the asset graph explorer."""

from __future__ import annotations

import time
from typing import Any, Dict, List

from .event_bus import EventPayload

# Event Topics
TOPIC_GRAPH_UPDATED = "graph.updated"
TOPIC_GRAPH_EXPANDED = "graph.expanded"
TOPIC_GRAPH_RESET = "graph.reset"
TOPIC_EXPANSION_FAILED = "expansion.failed"
TOPIC_EDGE_DROPPED = "edge.dropped"
TOPIC_SELECTION_CHANGED = "selection.changed"


def create_graph_updated_event(
    generation: int,
    graph_stats: Dict[str, Any],
    selected_node_id: str | None = None,
) -> EventPayload:
    """Create a graph updated event (a new annotated view is ready)."""
    return {
        "generation": generation,
        "graph_stats": graph_stats,
        "selected_node_id": selected_node_id,
        "ts": time.time(),
    }


def create_graph_expanded_event(
    root_id: str,
    depth_reached: int,
    added_node_ids: List[str],
    added_edge_ids: List[str],
    failed_ids: List[str] | None = None,
) -> EventPayload:
    """Create a graph expanded event.

    Args:
        root_id: Node the expansion started from
        depth_reached: Number of fetch rounds performed
        added_node_ids: Node ids new to the extra graph
        added_edge_ids: Edge ids new to the extra graph
        failed_ids: Node ids whose fetch failed
    """
    return {
        "root_id": root_id,
        "depth_reached": depth_reached,
        "added_node_ids": added_node_ids,
        "added_edge_ids": added_edge_ids,
        "failed_ids": failed_ids or [],
    }


def create_expansion_failed_event(node_id: str, error: BaseException) -> EventPayload:
    """Create an expansion failed event."""
    return {
        "node_id": node_id,
        "error_type": type(error).__name__,
        "error": str(error),
    }


def create_edge_dropped_event(edge_ids: List[str]) -> EventPayload:
    """Create an edge dropped event (edges referencing unknown nodes)."""
    return {
        "edge_ids": edge_ids,
        "count": len(edge_ids),
    }


def create_graph_reset_event(cleared_nodes: int, cleared_edges: int) -> EventPayload:
    return {
        "cleared_nodes": cleared_nodes,
        "cleared_edges": cleared_edges,
    }


def create_selection_changed_event(
    selected_node_id: str | None,
    previous_node_id: str | None = None,
) -> EventPayload:
    return {
        "selected_node_id": selected_node_id,
        "previous_node_id": previous_node_id,
    }
