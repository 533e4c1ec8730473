"""
Connectivity Indexer.

Builds a bidirectional adjacency index over a merged graph, tags every valid
edge with its relationship tier and flags nodes without any valid edge as
orphans. Edges that reference a node missing from the graph are dropped and
recorded; orphan nodes are kept and tagged, never removed.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from mc_explorer.core.models.asset import AssetEdge, AssetNode
from mc_explorer.core.models.connection import (
    ClassifiedEdge,
    ConnectionRecord,
    InboundConnection,
    OutboundConnection,
    RelationshipStats,
    RelationshipTier,
)
from mc_explorer.domain.graph.classifier import classify
from mc_explorer.utils.logging import get_logger

logger = get_logger("graph.indexer")


@dataclass
class ConnectivityIndex:
    """Result of one indexing pass.

    Attributes:
        nodes: Input nodes, in input order
        records: Connection record per node id
        valid_edges: Edges whose endpoints both resolved, with their tier
        dropped_edges: Ids of edges referencing an unknown node
        total_edges: Number of edges handed to the indexer
    """

    nodes: list[AssetNode] = field(default_factory=list)
    records: dict[str, ConnectionRecord] = field(default_factory=dict)
    valid_edges: list[ClassifiedEdge] = field(default_factory=list)
    dropped_edges: list[str] = field(default_factory=list)
    total_edges: int = 0

    @property
    def orphan_ids(self) -> list[str]:
        return [node.id for node in self.nodes if self.records[node.id].is_orphan]

    @property
    def connected_ids(self) -> list[str]:
        return [node.id for node in self.nodes if not self.records[node.id].is_orphan]

    def is_orphan(self, node_id: str) -> bool:
        record = self.records.get(node_id)
        return record is not None and record.is_orphan

    def record(self, node_id: str) -> ConnectionRecord | None:
        return self.records.get(node_id)

    def annotated_nodes(self) -> list[AssetNode]:
        """Copies of every node with ``isOrphan`` and ``connectionCount`` derived from the index."""
        annotated = []
        for node in self.nodes:
            record = self.records[node.id]
            annotated.append(node.with_metadata(
                isOrphan=record.is_orphan,
                connectionCount=record.total_connections,
            ))
        return annotated

    def stats(self) -> RelationshipStats:
        tiers = Counter(edge.tier for edge in self.valid_edges)
        orphan_count = len(self.orphan_ids)
        return RelationshipStats(
            total_objects=len(self.nodes),
            connected_objects=len(self.nodes) - orphan_count,
            orphan_objects=orphan_count,
            total_relationships=self.total_edges,
            displayed_relationships=len(self.valid_edges),
            dropped_relationships=len(self.dropped_edges),
            direct_relationships=tiers[RelationshipTier.DIRECT],
            indirect_relationships=tiers[RelationshipTier.INDIRECT],
            metadata_relationships=tiers[RelationshipTier.METADATA],
            unknown_relationships=tiers[RelationshipTier.UNKNOWN],
        )


def index_connections(
    nodes: Sequence[AssetNode],
    edges: Iterable[AssetEdge],
) -> ConnectivityIndex:
    """Index the relationships of a merged graph.

    Args:
        nodes: Nodes of the merged graph; ids are expected to be unique
        edges: Edges of the merged graph

    Returns:
        A fresh ConnectivityIndex; nothing from earlier passes is reused.
    """
    index = ConnectivityIndex()
    for node in nodes:
        if node.id in index.records:
            logger.warning(f"Duplicate node id '{node.id}' passed to indexer; keeping first")
            continue
        index.nodes.append(node)
        index.records[node.id] = ConnectionRecord(node_id=node.id)

    for edge in edges:
        index.total_edges += 1
        source_record = index.records.get(edge.source)
        target_record = index.records.get(edge.target)

        if source_record is None or target_record is None:
            missing = [
                end for end, rec in (("source", source_record), ("target", target_record))
                if rec is None
            ]
            logger.warning(
                f"Invalid edge '{edge.id}': {edge.source} -> {edge.target} "
                f"(missing {' and '.join(missing)} node)"
            )
            index.dropped_edges.append(edge.id)
            continue

        tier = classify(edge.type)
        index.valid_edges.append(ClassifiedEdge(edge=edge, tier=tier))

        source_record.outbound.append(OutboundConnection(
            edge_id=edge.id,
            target_id=edge.target,
            type=edge.type,
            label=edge.label,
            level=tier,
        ))
        target_record.inbound.append(InboundConnection(
            edge_id=edge.id,
            source_id=edge.source,
            type=edge.type,
            label=edge.label,
            level=tier,
        ))

        source_record.mark_tier(tier)
        target_record.mark_tier(tier)
        source_record.total_connections += 1
        target_record.total_connections += 1

    logger.debug(
        f"Indexed {len(index.nodes)} nodes: {len(index.valid_edges)} valid edges, "
        f"{len(index.dropped_edges)} dropped, {len(index.orphan_ids)} orphans"
    )
    return index
