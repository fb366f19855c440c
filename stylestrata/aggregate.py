"""Dependent counting over a reversed asset graph.

In a reversed graph an edge runs from an asset to something that
depends on it.  A single postorder pass from the synthetic root
finalizes every dependent before the vertex it depends on, so each
vertex's count can be combined from its successors' finished payloads.

The combination rule:

- an ``HTML`` dependent adds one *direct* dependent;
- a ``CSS`` dependent contributes all of its own dependents as
  *indirect*, since they reach this vertex through a stylesheet hop;
- a ``DIRECTORY`` or ``ROOT`` dependent passes its counts through
  unchanged, since a directory only groups vertices.

The directory rollup reuses ``combine_dependents`` for directory
vertices, so the rule lives in one place.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Iterable

from stylestrata.errors import UnknownVertexError, UnsupportedVertexTypeError
from stylestrata.graph.digraph import DirectedGraph, VertexKey
from stylestrata.models import AssetData, DependentsCount, VertexType

logger = logging.getLogger(__name__)

PAGE_COUNT = DependentsCount(direct=1, indirect=0)


def combine_dependents(dependents: Iterable[AssetData]) -> DependentsCount:
    """Combine finished dependent payloads into one count."""
    direct = 0
    indirect = 0
    for dependent in dependents:
        counts = dependent.dependents_count
        if dependent.type is VertexType.HTML:
            direct += 1
        elif dependent.type is VertexType.CSS:
            indirect += counts.direct + counts.indirect
        elif dependent.type in (VertexType.DIRECTORY, VertexType.ROOT):
            direct += counts.direct
            indirect += counts.indirect
        else:
            raise UnsupportedVertexTypeError(dependent.type)
    return DependentsCount(direct=direct, indirect=indirect)


def count_dependents(asset: AssetData, dependents: Iterable[AssetData]) -> DependentsCount:
    """Dependent count for *asset* given its finished dependents.

    A page always counts as one direct dependent of whatever imports it.
    """
    if asset.type is VertexType.HTML:
        return PAGE_COUNT
    if asset.type in (VertexType.CSS, VertexType.DIRECTORY, VertexType.ROOT):
        return combine_dependents(dependents)
    raise UnsupportedVertexTypeError(asset.type)


def successor_payloads(graph: DirectedGraph[AssetData], key: VertexKey) -> list[AssetData]:
    payloads = []
    for successor in graph.get_edges(key):
        payload = graph.get_vertex(successor)
        if payload is None:
            raise UnknownVertexError(successor, f"Edge target {successor!r} has no payload")
        payloads.append(payload)
    return payloads


def add_dependency_count(
    graph: DirectedGraph[AssetData],
    root: VertexKey,
    on_visit: Callable[[], None] | None = None,
) -> list[VertexKey]:
    """Compute ``dependents_count`` for every vertex reachable from *root*.

    Payloads are overwritten in place.  Returns the postorder visit order.
    Raises ``CyclicGraphError`` before any payload changes if the
    reachable subgraph has a cycle.
    """
    order = graph.postorder(root)

    for key in order:
        asset = graph.get_vertex(key)
        if asset is None:
            raise UnknownVertexError(key)
        counts = count_dependents(asset, successor_payloads(graph, key))
        graph.set_vertex(key, dataclasses.replace(asset, dependents_count=counts))
        logger.debug(
            "%s %s: direct=%d indirect=%d",
            asset.type.value, asset.path, counts.direct, counts.indirect,
        )
        if on_visit is not None:
            on_visit()

    logger.info("Counted dependents for %d vertices", len(order))
    return order
