"""
Snapshot Graph Source.

Serves graph data from a JSON or YAML snapshot instead of a live backend.
Snapshot layout::

    nodes: [...]
    edges: [...]
    expansions:            # optional, per-node one-hop responses
      <node id>: {nodes: [...], edges: [...]}

Nodes and edges may be flat or wrapped in ``{"data": {...}}`` elements.
When a node has no recorded expansion, its neighborhood is derived from the
base graph.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import yaml

from mc_explorer.core.errors import SnapshotFormatError, SourceError
from mc_explorer.core.models.asset import GraphPayload
from mc_explorer.domain.session.state import Selection
from mc_explorer.utils.logging import get_logger

logger = get_logger("infrastructure.snapshot")


class SnapshotGraphSource:
    """GraphSource backed by an in-memory snapshot.

    Usage:
        source = SnapshotGraphSource.from_file("exports/bu_graph.yaml")
        payload = await source.fetch_graph({})
    """

    def __init__(self, data: Mapping[str, Any]):
        try:
            self.graph = GraphPayload.from_raw(data)
            self.expansions = {
                str(node_id): GraphPayload.from_raw(raw)
                for node_id, raw in (data.get("expansions") or {}).items()
            }
        except (AttributeError, TypeError) as e:
            raise SnapshotFormatError(f"Malformed snapshot: {e}") from e

    @classmethod
    def from_file(cls, path: str | Path) -> "SnapshotGraphSource":
        """Load a snapshot from a .json, .yaml or .yml file.

        Raises:
            SourceError: If the file does not exist
            SnapshotFormatError: If the file cannot be parsed
        """
        path = Path(path)
        if not path.exists():
            raise SourceError(f"Snapshot not found: {path}")

        text = path.read_text(encoding="utf-8")
        try:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise SnapshotFormatError(f"Cannot parse snapshot {path}: {e}") from e

        if not isinstance(data, Mapping):
            raise SnapshotFormatError(f"Snapshot {path} must contain a mapping at the top level")

        source = cls(data)
        logger.info(
            f"Loaded snapshot {path.name}: {len(source.graph.nodes)} nodes, "
            f"{len(source.graph.edges)} edges, {len(source.expansions)} expansions"
        )
        return source

    async def fetch_graph(self, selection: Selection) -> GraphPayload:
        """Return the whole snapshot, or the selected objects plus their direct neighbors.

        Neighbors pulled in by a focused selection are marked ``isRelated``.
        """
        selected_ids = {
            object_id
            for objects in (selection or {}).values()
            for object_id, selected in (objects or {}).items()
            if selected
        }
        if not selected_ids:
            return self.graph.model_copy(deep=True)

        related_ids = set()
        for edge in self.graph.edges:
            if edge.source in selected_ids:
                related_ids.add(edge.target)
            if edge.target in selected_ids:
                related_ids.add(edge.source)
        related_ids -= selected_ids

        nodes = []
        for node in self.graph.nodes:
            if node.id in selected_ids:
                nodes.append(node.model_copy(deep=True))
            elif node.id in related_ids:
                nodes.append(node.with_metadata(isRelated=True))

        kept = {node.id for node in nodes}
        edges = [
            edge.model_copy(deep=True) for edge in self.graph.edges
            if edge.source in kept and edge.target in kept
        ]
        return GraphPayload(nodes=nodes, edges=edges)

    async def fetch_expansion(self, node_id: str) -> GraphPayload:
        """Return the recorded or derived one-hop neighborhood of ``node_id``.

        Raises:
            SourceError: If the node is unknown to the snapshot
        """
        if node_id in self.expansions:
            return self.expansions[node_id].model_copy(deep=True)

        if self.graph.get_node(node_id) is None:
            raise SourceError(f"Unknown node '{node_id}'", node_id=node_id)

        edges = [
            edge for edge in self.graph.edges
            if node_id in (edge.source, edge.target)
        ]
        neighborhood = {node_id}
        for edge in edges:
            neighborhood.update((edge.source, edge.target))

        nodes = [node for node in self.graph.nodes if node.id in neighborhood]
        return GraphPayload(
            nodes=[node.model_copy(deep=True) for node in nodes],
            edges=[edge.model_copy(deep=True) for edge in edges],
        )
