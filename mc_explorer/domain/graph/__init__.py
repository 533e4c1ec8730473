"""
Relationship graph engine: classification, merging, indexing, highlighting
and expansion of asset graphs.
"""

from mc_explorer.domain.graph.classifier import classify, is_activity_flow, relation_style
from mc_explorer.domain.graph.expansion import ExpansionEngine, ExpansionResult, ExpansionStatus
from mc_explorer.domain.graph.highlighter import HighlightResult, highlight
from mc_explorer.domain.graph.indexer import ConnectivityIndex, index_connections
from mc_explorer.domain.graph.merger import dedupe_by_id, merge_graphs
from mc_explorer.domain.graph.service import GraphExplorerService, GraphView, build_view
from mc_explorer.domain.graph.source import GraphSource
from mc_explorer.domain.graph.steps import AutomationStep, automation_steps, extract_target_asset

__all__ = [
    "AutomationStep",
    "ConnectivityIndex",
    "ExpansionEngine",
    "ExpansionResult",
    "ExpansionStatus",
    "GraphExplorerService",
    "GraphSource",
    "GraphView",
    "HighlightResult",
    "automation_steps",
    "build_view",
    "classify",
    "dedupe_by_id",
    "extract_target_asset",
    "highlight",
    "index_connections",
    "is_activity_flow",
    "merge_graphs",
    "relation_style",
]
