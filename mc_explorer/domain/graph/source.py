"""
Graph source protocol.

A source is the black-box collaborator that talks to the backend. The
engine only awaits its two fetch operations; any exception they raise is
treated as "no data".
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from mc_explorer.core.models.asset import GraphPayload
from mc_explorer.domain.session.state import Selection

RawGraph = GraphPayload | Mapping[str, Any]


@runtime_checkable
class GraphSource(Protocol):
    """Protocol for backends that supply asset graph data."""

    async def fetch_graph(self, selection: Selection) -> RawGraph:
        """Return the subgraph induced by ``selection`` (empty selection means all)."""
        ...

    async def fetch_expansion(self, node_id: str) -> RawGraph:
        """Return the one-hop dependency/orchestrator neighborhood of ``node_id``."""
        ...
