"""List the pages that depend on a stylesheet.

Answers "which pages break if I change this stylesheet?" from an
analyzed edge list: the pages that import it directly, and with
``recursive`` also the pages that import any stylesheet that imports it.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from typing import Iterable

import click
from rich.console import Console

from stylestrata.errors import StrataError, UnknownVertexError
from stylestrata.loader import EdgeEntry, build_graph, load_edge_list
from stylestrata.models import VertexType, vertex_type_for

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def list_dependents(
    entries: Iterable[EdgeEntry],
    css_file: str,
    recursive: bool = False,
) -> list[str]:
    """Return the non-stylesheet files that depend on *css_file*.

    Breadth-first over the reversed import graph.  Each stylesheet is
    expanded at most once, so cyclic imports terminate; each page is
    listed once, in discovery order.
    """
    graph, name_to_key = build_graph(entries)
    start = name_to_key.get(css_file)
    if start is None:
        raise UnknownVertexError(css_file, f"{css_file} does not appear in the dataset")

    graph = graph.reverse()
    collected: list[str] = []
    seen = {start}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        for edge_key in graph.get_edges(current):
            if edge_key in seen:
                continue
            seen.add(edge_key)
            name = graph.get_vertex(edge_key)
            if vertex_type_for(name) is VertexType.CSS:
                if recursive:
                    queue.append(edge_key)
            else:
                collected.append(name)

    logger.info("%s has %d dependents (recursive=%s)", css_file, len(collected), recursive)
    return collected


def run_dependents(input_path: str, css_file: str, recursive: bool = False) -> None:
    """Print the dependents of *css_file*, one per line.

    This is the function invoked by ``stylestrata dependents``.
    """
    try:
        entries = load_edge_list(input_path)
        dependents = list_dependents(entries, css_file, recursive=recursive)
    except (OSError, json.JSONDecodeError, StrataError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise SystemExit(1)

    for path in dependents:
        click.echo(path)
