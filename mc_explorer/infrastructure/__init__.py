from mc_explorer.infrastructure.snapshot_source import SnapshotGraphSource

__all__ = ["SnapshotGraphSource"]
