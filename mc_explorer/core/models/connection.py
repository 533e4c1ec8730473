"""
Connection Models.

Derived structures produced by the connectivity indexer. They are rebuilt
from scratch on every assembly pass and never patched incrementally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mc_explorer.core.models.asset import AssetEdge


# ============================================================================
# Enums
# ============================================================================


class RelationshipTier(str, Enum):
    """Classification tier of a relationship label."""
    DIRECT = "direct"        # Data flow
    INDIRECT = "indirect"    # Workflow / execution
    METADATA = "metadata"    # Configuration
    UNKNOWN = "unknown"


# ============================================================================
# Connection records
# ============================================================================


@dataclass(frozen=True)
class InboundConnection:
    edge_id: str
    source_id: str
    type: str
    label: str
    level: RelationshipTier

    def to_dict(self) -> dict[str, Any]:
        return {
            "edgeId": self.edge_id,
            "sourceId": self.source_id,
            "type": self.type,
            "label": self.label,
            "level": self.level.value,
        }


@dataclass(frozen=True)
class OutboundConnection:
    edge_id: str
    target_id: str
    type: str
    label: str
    level: RelationshipTier

    def to_dict(self) -> dict[str, Any]:
        return {
            "edgeId": self.edge_id,
            "targetId": self.target_id,
            "type": self.type,
            "label": self.label,
            "level": self.level.value,
        }


@dataclass
class ConnectionRecord:
    """Inbound and outbound relationships of one node."""

    node_id: str
    inbound: list[InboundConnection] = field(default_factory=list)
    outbound: list[OutboundConnection] = field(default_factory=list)
    has_direct: bool = False
    has_indirect: bool = False
    has_metadata: bool = False
    total_connections: int = 0

    @property
    def is_orphan(self) -> bool:
        return self.total_connections == 0

    def mark_tier(self, tier: RelationshipTier) -> None:
        if tier is RelationshipTier.DIRECT:
            self.has_direct = True
        elif tier is RelationshipTier.INDIRECT:
            self.has_indirect = True
        elif tier is RelationshipTier.METADATA:
            self.has_metadata = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "inbound": [c.to_dict() for c in self.inbound],
            "outbound": [c.to_dict() for c in self.outbound],
            "hasDirect": self.has_direct,
            "hasIndirect": self.has_indirect,
            "hasMetadata": self.has_metadata,
            "totalConnections": self.total_connections,
        }


@dataclass(frozen=True)
class ClassifiedEdge:
    """A valid edge paired with its relationship tier."""

    edge: AssetEdge
    tier: RelationshipTier

    @property
    def id(self) -> str:
        return self.edge.id

    @property
    def source(self) -> str:
        return self.edge.source

    @property
    def target(self) -> str:
        return self.edge.target

    @property
    def type(self) -> str:
        return self.edge.type


@dataclass(frozen=True)
class RelationshipStats:
    """Summary counts for one assembled graph."""

    total_objects: int = 0
    connected_objects: int = 0
    orphan_objects: int = 0
    total_relationships: int = 0
    displayed_relationships: int = 0
    dropped_relationships: int = 0
    direct_relationships: int = 0
    indirect_relationships: int = 0
    metadata_relationships: int = 0
    unknown_relationships: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total_objects": self.total_objects,
            "connected_objects": self.connected_objects,
            "orphan_objects": self.orphan_objects,
            "total_relationships": self.total_relationships,
            "displayed_relationships": self.displayed_relationships,
            "dropped_relationships": self.dropped_relationships,
            "direct_relationships": self.direct_relationships,
            "indirect_relationships": self.indirect_relationships,
            "metadata_relationships": self.metadata_relationships,
            "unknown_relationships": self.unknown_relationships,
        }
