"""
Explorer Configuration.

Central configuration management for the asset graph explorer.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

CONFIG_FILENAME = "explorer_config.json"


# ============================================================================
# Default Paths
# ============================================================================


def get_default_data_dir() -> Path:
    """Get the default data directory for the explorer."""
    if env_path := os.environ.get("MC_EXPLORER_DATA_DIR"):
        return Path(env_path)

    return Path.home() / ".mc_explorer"


def get_default_snapshot_path() -> Path | None:
    if env_path := os.environ.get("MC_EXPLORER_SNAPSHOT"):
        return Path(env_path)
    return None


def get_default_log_level() -> str:
    return os.environ.get("MC_EXPLORER_LOG_LEVEL", "INFO").upper()


# ============================================================================
# Configuration Classes
# ============================================================================


@dataclass
class ExpansionConfig:
    """Configuration for dependency expansion."""

    default_max_depth: int = 3
    warn_on_overlap: bool = True  # Log when expansions overlap

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExpansionConfig":
        return cls(**{k: v for k, v in data.items() if hasattr(cls, k)})

    def to_dict(self) -> dict[str, Any]:
        return {
            "default_max_depth": self.default_max_depth,
            "warn_on_overlap": self.warn_on_overlap,
        }


@dataclass
class GraphConfig:
    """Configuration for graph assembly."""

    # Focused selections show only backend data unless this is set
    merge_extra_on_focus: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GraphConfig":
        return cls(**{k: v for k, v in data.items() if hasattr(cls, k)})

    def to_dict(self) -> dict[str, Any]:
        return {
            "merge_extra_on_focus": self.merge_extra_on_focus,
        }


@dataclass
class ExplorerConfig:
    """Main configuration for the explorer.

    Aggregates all sub-configurations and provides load/save functionality.
    """

    data_dir: Path = field(default_factory=get_default_data_dir)
    snapshot_path: Path | None = field(default_factory=get_default_snapshot_path)
    log_dir: Path | None = None

    expansion: ExpansionConfig = field(default_factory=ExpansionConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = field(
        default_factory=get_default_log_level
    )

    def __post_init__(self):
        if isinstance(self.data_dir, str):
            self.data_dir = Path(self.data_dir)
        if isinstance(self.snapshot_path, str):
            self.snapshot_path = Path(self.snapshot_path)
        if isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "ExplorerConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to config file. If None, uses default location.

        Returns:
            ExplorerConfig instance (defaults if the file does not exist)
        """
        if config_path is None:
            config_path = get_default_data_dir() / CONFIG_FILENAME

        config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExplorerConfig":
        """Create config from dictionary."""
        snapshot = data.get("snapshot_path")
        log_dir = data.get("log_dir")
        return cls(
            data_dir=Path(data.get("data_dir", get_default_data_dir())),
            snapshot_path=Path(snapshot) if snapshot else get_default_snapshot_path(),
            log_dir=Path(log_dir) if log_dir else None,
            expansion=ExpansionConfig.from_dict(data.get("expansion", {})),
            graph=GraphConfig.from_dict(data.get("graph", {})),
            log_level=data.get("log_level", get_default_log_level()),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "data_dir": str(self.data_dir),
            "snapshot_path": str(self.snapshot_path) if self.snapshot_path else None,
            "log_dir": str(self.log_dir) if self.log_dir else None,
            "expansion": self.expansion.to_dict(),
            "graph": self.graph.to_dict(),
            "log_level": self.log_level,
        }

    def save(self, config_path: str | Path | None = None) -> Path:
        """Save configuration to a JSON file.

        Args:
            config_path: Path to save to. If None, uses default location.

        Returns:
            Path to saved file
        """
        if config_path is None:
            config_path = self.data_dir / CONFIG_FILENAME

        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

        return config_path


# ============================================================================
# Global Config Instance
# ============================================================================


_global_config: ExplorerConfig | None = None


def get_config() -> ExplorerConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = ExplorerConfig.load()
    return _global_config


def set_config(config: ExplorerConfig) -> None:
    global _global_config
    _global_config = config


def reload_config(config_path: str | Path | None = None) -> ExplorerConfig:
    """Reload configuration from disk.

    Args:
        config_path: Optional path to load from

    Returns:
        Newly loaded configuration
    """
    global _global_config
    _global_config = ExplorerConfig.load(config_path)
    return _global_config
