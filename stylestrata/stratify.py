"""Stratify an analyzed edge list into a directory-grouped dependents graph.

Pipeline: build the import graph, connect every stylesheet to a
synthetic ``ALL_CSS`` root, reverse it so edges point at dependents,
count dependents in one postorder pass, fold each dependent set into
directories, and serialize.
"""

from __future__ import annotations

import json
import logging
import time
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from stylestrata.aggregate import add_dependency_count
from stylestrata.config import ROOT_LABEL, SUMMARY_TABLE_ROWS
from stylestrata.errors import StrataError
from stylestrata.graph.digraph import DirectedGraph, VertexKey
from stylestrata.loader import EdgeEntry, build_graph, load_edge_list
from stylestrata.models import AssetData, VertexType, path_segments, vertex_type_for
from stylestrata.rollup import stratify_directories
from stylestrata.serialize import dumps

logger = logging.getLogger(__name__)

console = Console(stderr=True)


@dataclass
class StratifyResult:
    graph: DirectedGraph[AssetData]
    root: VertexKey
    name_to_key: dict[str, VertexKey]
    flat: DirectedGraph[AssetData]


# ---------------------------------------------------------------------------
# Pipeline stages
# ---------------------------------------------------------------------------

def map_path_to_asset(path: str, key: VertexKey, graph: DirectedGraph[str]) -> AssetData:
    """Turn a raw path payload into an ``AssetData`` with zero counts."""
    segments = path_segments(path)
    name = segments[-1] if segments else path
    return AssetData(name=name, path=path, type=vertex_type_for(path))


def prepare_graph(
    entries: Iterable[EdgeEntry],
    root_label: str = ROOT_LABEL,
) -> tuple[DirectedGraph[AssetData], VertexKey, dict[str, VertexKey]]:
    """Build the reversed, typed graph with the synthetic root attached.

    Returns ``(graph, root_key, name_to_key)``.  In the returned graph an
    edge runs from an asset to each file that imports it, and from the
    root to every stylesheet.
    """
    graph, name_to_key = build_graph(entries)

    root = graph.add_vertex(root_label)
    for key, name in graph.vertices():
        if key != root and vertex_type_for(name) is VertexType.CSS:
            graph.add_edge(key, root)

    reversed_graph = graph.reverse().map(map_path_to_asset)
    return reversed_graph, root, name_to_key


def stratify(
    entries: Iterable[EdgeEntry],
    root_label: str = ROOT_LABEL,
    on_visit: Callable[[], None] | None = None,
) -> StratifyResult:
    """Run the whole pipeline short of serialization."""
    flat, root, name_to_key = prepare_graph(entries, root_label)
    add_dependency_count(flat, root, on_visit)
    stratified = stratify_directories(flat, on_visit)
    return StratifyResult(graph=stratified, root=root, name_to_key=name_to_key, flat=flat)


# ---------------------------------------------------------------------------
# Summary printer
# ---------------------------------------------------------------------------

def _print_summary(result: StratifyResult, elapsed: float) -> None:
    """Pretty-print the stratify summary to stderr."""
    by_type = Counter(asset.type for _, asset in result.graph.vertices())
    root = result.graph.get_vertex(result.root)

    overview = (
        f"Pages: [bold]{by_type[VertexType.HTML]}[/bold]  |  "
        f"Stylesheets: [bold]{by_type[VertexType.CSS]}[/bold]  |  "
        f"Directories: [bold]{by_type[VertexType.DIRECTORY]}[/bold]  |  "
        f"Other: {by_type[VertexType.ROOT] - 1}\n"
        f"Edges: {result.graph.edge_count}  |  "
        f"Root dependents: direct={root.dependents_count.direct} "
        f"indirect={root.dependents_count.indirect}  |  "
        f"Elapsed: {elapsed:.1f}s"
    )
    console.print(Panel(overview, title="Stratify Summary", border_style="green"))

    stylesheets = sorted(
        (asset for _, asset in result.graph.vertices() if asset.type is VertexType.CSS),
        key=lambda asset: (-asset.dependents_count.total, asset.path),
    )
    if not stylesheets:
        return

    table = Table(title="Most Depended-On Stylesheets", show_header=True, header_style="bold cyan")
    table.add_column("Stylesheet", style="dim", max_width=60)
    table.add_column("Direct", justify="right")
    table.add_column("Indirect", justify="right")
    table.add_column("Total", justify="right")

    for asset in stylesheets[:SUMMARY_TABLE_ROWS]:
        counts = asset.dependents_count
        table.add_row(asset.path, str(counts.direct), str(counts.indirect), str(counts.total))

    if len(stylesheets) > SUMMARY_TABLE_ROWS:
        table.add_row("...", "", "", "", style="dim")

    console.print(table)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def run_stratify(input_path: str, out_file: str | None = None) -> None:
    """Stratify an analysis dataset into a graph of nodes and children.

    This is the function invoked by ``stylestrata stratify``.

    Parameters
    ----------
    input_path:
        JSON edge list produced by the analyzer.
    out_file:
        Where to write the serialized graph; stdout if None.
    """
    start = time.perf_counter()

    try:
        entries = load_edge_list(input_path)
    except (OSError, json.JSONDecodeError, StrataError) as exc:
        console.print(f"[red]Error: failed to load {input_path}: {exc}[/red]")
        raise SystemExit(1)

    flat, root, name_to_key = prepare_graph(entries)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        try:
            counting = progress.add_task("Counting dependents", total=None)
            order = add_dependency_count(flat, root, lambda: progress.advance(counting))
            progress.update(counting, total=len(order), completed=len(order))

            folding = progress.add_task("Folding directories", total=len(flat))
            stratified = stratify_directories(flat, lambda: progress.advance(folding))
        except StrataError as exc:
            console.print(f"[red]Error: {exc}[/red]")
            raise SystemExit(1)

    result = StratifyResult(graph=stratified, root=root, name_to_key=name_to_key, flat=flat)
    serialized = dumps(result.graph, {root: ROOT_LABEL})

    _print_summary(result, time.perf_counter() - start)

    if out_file:
        output_path = Path(out_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(serialized)
        console.print(f"\n  Output written to [bold green]{output_path}[/bold green]")
    else:
        click.echo(serialized)
