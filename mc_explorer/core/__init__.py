"""
Core - event bus, event topics, error types and data models.
"""

from mc_explorer.core.errors import ExplorerError, SnapshotFormatError, SourceError
from mc_explorer.core.event_bus import EventBus, EventPayload

__all__ = [
    "EventBus",
    "EventPayload",
    "ExplorerError",
    "SnapshotFormatError",
    "SourceError",
]
