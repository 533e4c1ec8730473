"""
Exception types for the asset graph explorer.

Fetch failures are recovered by the engine; these classes give sources a
common vocabulary for reporting them.
"""

from __future__ import annotations


class ExplorerError(Exception):
    """Base exception for explorer errors."""

    def __init__(
        self,
        message: str,
        node_id: str | None = None,
    ):
        super().__init__(message)
        self.node_id = node_id


class SourceError(ExplorerError):
    """A graph source could not supply the requested data."""
    pass


class SnapshotFormatError(SourceError):
    """A snapshot file could not be parsed into nodes and edges."""
    pass
