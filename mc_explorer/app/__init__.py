from mc_explorer.app.config import (
    ExpansionConfig,
    ExplorerConfig,
    GraphConfig,
    get_config,
    reload_config,
    set_config,
)

__all__ = [
    "ExpansionConfig",
    "ExplorerConfig",
    "GraphConfig",
    "get_config",
    "reload_config",
    "set_config",
]
