"""Edge-list loader and graph builder.

Reads the JSON edge list produced by the page/stylesheet analyzer, a
document of the form::

    [
      ["/index.html", ["/css/site.css", "/css/print.css"]],
      ["/css/site.css", ["/css/base.css"]]
    ]

validates its shape, and builds a ``DirectedGraph`` whose payloads are
the raw path strings.  Vertex identity comes from a side mapping of
path -> ``VertexKey`` kept only by this construction layer.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from stylestrata.config import PATH_SEPARATOR
from stylestrata.errors import MalformedInputError
from stylestrata.graph.digraph import DirectedGraph, VertexKey

logger = logging.getLogger(__name__)

EdgeEntry = tuple[str, list[str]]

# Warnings logged before the remaining problems are summarized
MAX_REPORTED_PROBLEMS = 10


# ---------------------------------------------------------------------------
# Entry validation
# ---------------------------------------------------------------------------

def validate_entry(entry: Any) -> str | None:
    """Return a description of what is wrong with *entry*, or None if valid."""
    if not isinstance(entry, (list, tuple)) or len(entry) != 2:
        return "expected a [path, [dependencies]] pair"
    vertex, dependencies = entry
    if not isinstance(vertex, str) or not vertex:
        return f"vertex path must be a non-empty string, got {vertex!r}"
    if not vertex.startswith(PATH_SEPARATOR):
        return f"vertex path must start with '{PATH_SEPARATOR}', got {vertex!r}"
    if not isinstance(dependencies, list):
        return f"dependencies of {vertex} must be a list, got {type(dependencies).__name__}"
    for dependency in dependencies:
        if not isinstance(dependency, str) or not dependency:
            return f"dependency of {vertex} must be a non-empty string, got {dependency!r}"
        if not dependency.startswith(PATH_SEPARATOR):
            return f"dependency of {vertex} must start with '{PATH_SEPARATOR}', got {dependency!r}"
    return None


def parse_edge_list(data: Any) -> list[EdgeEntry]:
    """Validate a decoded JSON document and return its entries.

    Every malformed top-level entry is logged; if there is at least one,
    ``MalformedInputError`` is raised for the first.
    """
    if not isinstance(data, list):
        raise MalformedInputError(
            f"top-level document must be an array, got {type(data).__name__}"
        )

    entries: list[EdgeEntry] = []
    problems: list[tuple[int, str]] = []

    for index, entry in enumerate(data):
        problem = validate_entry(entry)
        if problem is not None:
            problems.append((index, problem))
            if len(problems) <= MAX_REPORTED_PROBLEMS:
                logger.warning("Malformed edge-list entry %d: %s", index, problem)
            continue
        vertex, dependencies = entry
        entries.append((vertex, list(dependencies)))

    if problems:
        if len(problems) > MAX_REPORTED_PROBLEMS:
            logger.warning(
                "%d malformed entries in total (showed first %d)",
                len(problems),
                MAX_REPORTED_PROBLEMS,
            )
        index, problem = problems[0]
        raise MalformedInputError(problem, index=index)

    return entries


def load_edge_list(filepath: str | Path) -> list[EdgeEntry]:
    """Read and validate an edge-list JSON file.

    ``OSError`` and ``json.JSONDecodeError`` propagate to the caller.
    """
    filepath = Path(filepath)
    with open(filepath, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    entries = parse_edge_list(data)
    logger.info("Loaded %d edge-list entries from %s", len(entries), filepath.name)
    return entries


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------

def build_graph(
    entries: Iterable[EdgeEntry],
) -> tuple[DirectedGraph[str], dict[str, VertexKey]]:
    """Build a path-payload graph from edge-list entries.

    Each distinct path gets exactly one vertex, created on first sight
    whether it appears as a vertex or only as a dependency.  Edges point
    from a file to what it imports.
    """
    graph: DirectedGraph[str] = DirectedGraph()
    name_to_key: dict[str, VertexKey] = {}

    def key_for(name: str) -> VertexKey:
        key = name_to_key.get(name)
        if key is None:
            key = graph.add_vertex(name)
            name_to_key[name] = key
        return key

    for vertex, dependencies in entries:
        vertex_key = key_for(vertex)
        for dependency in dependencies:
            graph.add_edge(vertex_key, key_for(dependency))

    logger.debug(
        "Built graph with %d vertices and %d edges", len(graph), graph.edge_count
    )
    return graph, name_to_key
