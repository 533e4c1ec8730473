"""
Entry point for running the explorer as a module.

Usage:
    python -m mc_explorer show ./bu_graph.yaml
    python -m mc_explorer --help
"""

from mc_explorer.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
