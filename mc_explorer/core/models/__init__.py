"""
Core Models - asset nodes, edges, payloads and derived connection records.
"""

from mc_explorer.core.models.asset import AssetEdge, AssetNode, GraphPayload
from mc_explorer.core.models.connection import (
    ClassifiedEdge,
    ConnectionRecord,
    InboundConnection,
    OutboundConnection,
    RelationshipStats,
    RelationshipTier,
)

__all__ = [
    "AssetEdge",
    "AssetNode",
    "ClassifiedEdge",
    "ConnectionRecord",
    "GraphPayload",
    "InboundConnection",
    "OutboundConnection",
    "RelationshipStats",
    "RelationshipTier",
]
