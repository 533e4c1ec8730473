"""Asset graph explorer CLI.

Drives the relationship graph engine against a snapshot file.

Usage:
    mc-explorer show ./bu_graph.yaml --select de_customers
    mc-explorer expand ./bu_graph.yaml auto_nightly --depth 2
    mc-explorer steps ./bu_graph.yaml auto_nightly
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv

# Load .env early so MC_EXPLORER_* settings apply to the config defaults
load_dotenv()
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mc_explorer.app.config import ExplorerConfig, get_config
from mc_explorer.core.errors import SourceError
from mc_explorer.domain.graph.service import GraphExplorerService, GraphView
from mc_explorer.domain.session.state import GraphState
from mc_explorer.infrastructure.snapshot_source import SnapshotGraphSource
from mc_explorer.utils.logging import setup_logging

app = typer.Typer(
    name="mc-explorer",
    help="Explore marketing-automation asset relationships",
    add_completion=False,
)
console = Console()

SnapshotArg = Annotated[Path, typer.Argument(help="JSON or YAML graph snapshot")]


def _load_service(snapshot: Path, config: ExplorerConfig, state: GraphState | None = None) -> GraphExplorerService:
    setup_logging(level=config.log_level, log_dir=config.log_dir)
    try:
        source = SnapshotGraphSource.from_file(snapshot)
    except SourceError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    return GraphExplorerService(source, state=state, config=config)


def _parse_objects(objects: list[str]) -> dict[str, dict[str, bool]]:
    """Parse CATEGORY:ID pairs into a selection map."""
    selection: dict[str, dict[str, bool]] = {}
    for item in objects:
        category, sep, object_id = item.partition(":")
        if not sep or not object_id:
            console.print(f"[red]Error:[/red] Expected CATEGORY:ID, got '{item}'")
            raise typer.Exit(2)
        selection.setdefault(category, {})[object_id] = True
    return selection


def _render_view(view: GraphView) -> None:
    nodes = Table(title="Assets", show_lines=False)
    nodes.add_column("ID", style="cyan")
    nodes.add_column("Label")
    nodes.add_column("Category")
    nodes.add_column("Connections", justify="right")
    nodes.add_column("Flags")

    for node in view.nodes:
        record = view.index.records[node.id]
        flags = []
        if node.is_orphan:
            flags.append("[dim]orphan[/dim]")
        if node.is_related:
            flags.append("related")
        if node.id in view.highlight.highlighted_nodes:
            flags.append("[yellow]highlighted[/yellow]")
        nodes.add_row(node.id, node.label, node.category, str(record.total_connections), " ".join(flags))
    console.print(nodes)

    edges = Table(title="Relationships")
    edges.add_column("ID", style="cyan")
    edges.add_column("Source")
    edges.add_column("Type")
    edges.add_column("Target")
    edges.add_column("Tier")
    for edge in view.edges:
        style = "yellow" if edge.id in view.highlight.highlighted_edges else None
        edges.add_row(edge.id, edge.source, edge.type, edge.target, edge.tier.value, style=style)
    console.print(edges)

    stats = view.stats
    console.print(Panel(
        f"[bold]Objects:[/bold] {stats.total_objects} "
        f"({stats.connected_objects} connected, {stats.orphan_objects} orphan)\n"
        f"[bold]Relationships:[/bold] {stats.displayed_relationships}/{stats.total_relationships} shown, "
        f"{stats.dropped_relationships} dropped\n"
        f"[bold]Tiers:[/bold] direct={stats.direct_relationships} "
        f"indirect={stats.indirect_relationships} metadata={stats.metadata_relationships} "
        f"unknown={stats.unknown_relationships}",
        title="Relationship Stats",
        border_style="blue",
    ))


@app.command("show")
def show(
    snapshot: SnapshotArg,
    select: Annotated[Optional[str], typer.Option("--select", "-s", help="Node to highlight")] = None,
    objects: Annotated[Optional[list[str]], typer.Option("--object", "-o", help="Focus on CATEGORY:ID (repeatable)")] = None,
) -> None:
    """Assemble the graph and print assets, relationships and stats."""
    config = get_config()
    state = GraphState(selection=_parse_objects(objects or []), selected_node_id=select)
    service = _load_service(snapshot, config, state)
    view = asyncio.run(service.assemble())
    _render_view(view)


@app.command("expand")
def expand(
    snapshot: SnapshotArg,
    node_id: Annotated[str, typer.Argument(help="Node to expand from")],
    depth: Annotated[Optional[int], typer.Option("--depth", "-d", min=0, help="Maximum expansion rounds")] = None,
) -> None:
    """Expand a node's dependencies breadth-first and print the resulting graph."""
    config = get_config()
    state = GraphState(selected_node_id=node_id)
    service = _load_service(snapshot, config, state)

    async def _run():
        await service.assemble()
        result = await service.expand_selected_recursively(depth)
        return result, service.last_view

    result, view = asyncio.run(_run())

    console.print(Panel(
        f"[bold]Root:[/bold] {result.root_id}\n"
        f"[bold]Rounds:[/bold] {result.depth_reached}\n"
        f"[bold]Added:[/bold] {len(result.added_node_ids)} nodes, {len(result.added_edge_ids)} edges\n"
        f"[bold]Failed:[/bold] {', '.join(result.failed_ids) or 'none'}\n"
        f"[bold]Unexpanded:[/bold] {', '.join(result.unexpanded) or 'none'}",
        title="Expansion",
        border_style="green" if not result.failed_ids else "yellow",
    ))
    if view is not None:
        _render_view(view)


@app.command("steps")
def steps(
    snapshot: SnapshotArg,
    automation_id: Annotated[str, typer.Argument(help="Automation node id")],
) -> None:
    """List the activity steps of an automation in order."""
    config = get_config()
    service = _load_service(snapshot, config)
    asyncio.run(service.assemble())

    found = service.automation_steps(automation_id)
    if not found:
        console.print(f"[yellow]No activity steps found for {automation_id}[/yellow]")
        return

    table = Table(title=f"Steps of {automation_id}")
    table.add_column("#", justify="right")
    table.add_column("Activity")
    table.add_column("Type")
    table.add_column("Target")
    for step in found:
        table.add_row(str(step.step_number), step.name, step.activity_type, step.target_asset or "-")
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
