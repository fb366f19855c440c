"""Directory rollup: fold path-addressed dependents into directory vertices.

For every vertex of a counted, reversed graph, its dependents are grouped
by path into a tree of synthetic ``DIRECTORY`` vertices::

    /css/site.css                       /css/site.css
      -> /archive/marx/manifesto.html     -> archive/
      -> /archive/marx/capital/ch01.html       -> marx/
                                                 -> manifesto.html
                                                 -> capital/
                                                      -> ch01.html

Each directory vertex is private to the vertex whose dependents it
groups.  File vertices keep their original keys; they are re-pointed,
never duplicated.  Directory counts are combined bottom-up with the same
rule the dependent counter uses, so a directory is a transparent
regrouping and never changes any file vertex's count.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Iterable

from stylestrata.aggregate import combine_dependents, successor_payloads
from stylestrata.errors import UnknownVertexError
from stylestrata.graph.digraph import DirectedGraph, VertexKey
from stylestrata.models import (
    AssetData,
    Directory,
    FileEntry,
    VertexType,
    join_segments,
    path_segments,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Phase one: build the directory tree
# ---------------------------------------------------------------------------

def fold_paths(files: Iterable[tuple[VertexKey, AssetData]]) -> Directory:
    """Group files into a directory tree rooted at ``/``.

    Every path segment but the last becomes a directory level; the last
    is the file leaf.  Directories are shared by exact segment name.
    """
    root = Directory(name="/", path="/")

    for key, value in files:
        segments = path_segments(value.path)
        directory = root
        for depth, part in enumerate(segments[:-1]):
            child = directory.directories.get(part)
            if child is None:
                child = Directory(name=part, path=join_segments(segments[: depth + 1]))
                directory.directories[part] = child
            directory = child
        directory.files.append(FileEntry(key=key, value=value))

    return root


# ---------------------------------------------------------------------------
# Phase two: commit the tree to the output graph
# ---------------------------------------------------------------------------

def materialize(
    graph: DirectedGraph[AssetData],
    parent: VertexKey,
    tree: Directory,
) -> list[VertexKey]:
    """Add *tree*'s directories and edges below *parent* in *graph*.

    The tree's root stands for *parent* itself: its files and top-level
    directories become direct successors of *parent*.  Directory counts
    are finalized children-first.  Returns the new directory keys in
    creation order.
    """
    created: list[VertexKey] = []
    pending: list[tuple[VertexKey, Directory]] = [(parent, tree)]

    while pending:
        owner, directory = pending.pop()
        for entry in directory.files:
            graph.add_edge(owner, entry.key)
        for child in directory.directories.values():
            child_key = graph.add_vertex(
                AssetData(name=child.name, path=child.path, type=VertexType.DIRECTORY)
            )
            graph.add_edge(owner, child_key)
            created.append(child_key)
            pending.append((child_key, child))

    # A directory is always created after its parent, so walking the
    # creation order backwards finishes every child before its parent.
    for key in reversed(created):
        directory_data = graph.get_vertex(key)
        counts = combine_dependents(successor_payloads(graph, key))
        graph.set_vertex(key, dataclasses.replace(directory_data, dependents_count=counts))

    return created


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def stratify_directories(
    graph: DirectedGraph[AssetData],
    on_visit: Callable[[], None] | None = None,
) -> DirectedGraph[AssetData]:
    """Return a copy of *graph* with every dependent set folded into directories.

    *graph* must already carry final dependent counts on its file
    vertices; it is left unmodified.
    """
    directories_added = 0

    def fold(
        output: DirectedGraph[AssetData],
        payload: AssetData,
        key: VertexKey,
        edge_keys: tuple[VertexKey, ...],
        source: DirectedGraph[AssetData],
    ) -> None:
        nonlocal directories_added
        dependents = []
        for edge_key in edge_keys:
            dependent = source.get_vertex(edge_key)
            if dependent is None:
                raise UnknownVertexError(edge_key, f"Edge target {edge_key!r} has no payload")
            dependents.append((edge_key, dependent))

        tree = fold_paths(dependents)
        directories_added += len(materialize(output, key, tree))
        if on_visit is not None:
            on_visit()

    stratified = graph.transform(fold)
    logger.info(
        "Folded %d vertices into %d directory vertices", len(graph), directories_added
    )
    return stratified
