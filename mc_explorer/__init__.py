"""Marketing-automation asset relationship explorer."""

from .core.event_bus import EventBus
from .domain.graph.service import GraphExplorerService
from .domain.session.state import GraphState

__all__ = ["EventBus", "GraphExplorerService", "GraphState"]
