"""Generic directed graph keyed by opaque vertex handles.

Vertices are identified by ``VertexKey`` handles minted from a
process-wide counter, never by their payload, so two vertices that carry
the same path can never alias.  Each vertex holds an arbitrary payload
and an ordered set of successor keys.

Traversals use an explicit work stack instead of recursion so deep
import chains cannot exhaust the interpreter stack.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Generic, Iterator, TypeVar

from stylestrata.errors import CyclicGraphError, InvalidArgumentError, UnknownVertexError

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

_key_counter = itertools.count(1)

# Traversal colours
_IN_PROGRESS = 1
_DONE = 2


class VertexKey:
    """Opaque vertex identity.  Equal only to itself.

    Keys compare and hash by identity; the id is only a label for ``repr``,
    so a key rebuilt from another key's id never matches a stored vertex.
    """

    __slots__ = ("_id",)

    def __init__(self, key_id: int) -> None:
        self._id = key_id

    @classmethod
    def new(cls) -> VertexKey:
        return cls(next(_key_counter))

    def __repr__(self) -> str:
        return f"VertexKey({self._id})"


def _check_payload(payload: Any) -> None:
    # None is reserved for "no such vertex" in get_vertex
    if payload is None:
        raise InvalidArgumentError("vertex payload must not be None")


class DirectedGraph(Generic[T]):
    """Directed graph of payload-carrying vertices.

    Adjacency is a dict of dicts used as insertion-ordered sets, so edge
    insertion is O(1) amortized and duplicate edges collapse.
    """

    __slots__ = ("_payloads", "_adjacency")

    def __init__(self) -> None:
        self._payloads: dict[VertexKey, T] = {}
        self._adjacency: dict[VertexKey, dict[VertexKey, None]] = {}

    # ---- mutation --------------------------------------------------------

    def add_vertex(self, payload: T) -> VertexKey:
        """Store *payload* under a fresh key and return the key."""
        _check_payload(payload)
        key = VertexKey.new()
        self._payloads[key] = payload
        self._adjacency[key] = {}
        return key

    def set_vertex(self, *args: Any) -> VertexKey:
        """Overwrite or create a vertex.

        ``set_vertex(payload)`` creates a vertex under a fresh key.
        ``set_vertex(key, payload)`` stores *payload* under *key*, creating
        the vertex if the key is not yet present.  Returns the key.
        """
        if len(args) == 1 and not isinstance(args[0], VertexKey):
            return self.add_vertex(args[0])
        if len(args) == 2 and isinstance(args[0], VertexKey):
            key, payload = args
            _check_payload(payload)
            self._payloads[key] = payload
            self._adjacency.setdefault(key, {})
            return key
        raise InvalidArgumentError(
            "set_vertex takes either (payload) or (key, payload); "
            f"got {len(args)} argument(s)"
        )

    def add_edge(self, src: VertexKey, dst: VertexKey) -> None:
        """Add the edge src -> dst.  Both endpoints must already exist."""
        if src not in self._adjacency:
            raise UnknownVertexError(src, f"Edge source {src!r} is not in the graph")
        if dst not in self._adjacency:
            raise UnknownVertexError(dst, f"Edge target {dst!r} is not in the graph")
        self._adjacency[src][dst] = None

    # ---- queries ---------------------------------------------------------

    def has(self, key: VertexKey) -> bool:
        return key in self._payloads

    def get_vertex(self, key: VertexKey) -> T | None:
        return self._payloads.get(key)

    def get_edges(self, key: VertexKey) -> tuple[VertexKey, ...]:
        """Successors of *key*; empty for unknown vertices."""
        return tuple(self._adjacency.get(key, ()))

    def has_edge(self, src: VertexKey, dst: VertexKey) -> bool:
        return dst in self._adjacency.get(src, ())

    def vertices(self) -> Iterator[tuple[VertexKey, T]]:
        return iter(list(self._payloads.items()))

    def edges(self) -> Iterator[tuple[VertexKey, tuple[VertexKey, ...]]]:
        for key, successors in list(self._adjacency.items()):
            yield key, tuple(successors)

    @property
    def edge_count(self) -> int:
        return sum(len(successors) for successors in self._adjacency.values())

    # ---- derived graphs --------------------------------------------------

    def reverse(self) -> DirectedGraph[T]:
        """Return a new graph with every edge flipped.

        Payloads are shared, not copied.  Isolated vertices are kept.
        """
        reversed_graph: DirectedGraph[T] = DirectedGraph()
        for key, payload in self._payloads.items():
            reversed_graph.set_vertex(key, payload)
        for src, successors in self._adjacency.items():
            for dst in successors:
                reversed_graph.add_edge(dst, src)
        return reversed_graph

    def map(self, fn: Callable[[T, VertexKey, DirectedGraph[T]], U]) -> DirectedGraph[U]:
        """Return a graph with the same keys and edges and payloads from *fn*.

        *fn* is called exactly once per vertex with ``(payload, key, self)``.
        """
        mapped: DirectedGraph[U] = DirectedGraph()
        for key, payload in list(self._payloads.items()):
            mapped.set_vertex(key, fn(payload, key, self))
        for src, successors in self._adjacency.items():
            for dst in successors:
                mapped.add_edge(src, dst)
        return mapped

    def transform(
        self,
        mutator: Callable[
            [DirectedGraph[T], T, VertexKey, tuple[VertexKey, ...], DirectedGraph[T]],
            None,
        ],
    ) -> DirectedGraph[T]:
        """Rebuild the graph's edge structure through *mutator*.

        The output graph starts with every vertex of this graph and no
        edges.  *mutator* is called once per source vertex with
        ``(output, payload, key, edge_keys, self)`` and may add vertices
        and edges to *output*.  This graph is never modified.
        """
        output: DirectedGraph[T] = DirectedGraph()
        snapshot = list(self._payloads.items())
        for key, payload in snapshot:
            output.set_vertex(key, payload)
        for key, payload in snapshot:
            mutator(output, payload, key, self.get_edges(key), self)
        return output

    # ---- traversal -------------------------------------------------------

    def postorder(self, root: VertexKey) -> list[VertexKey]:
        """Depth-first postorder of every vertex reachable from *root*.

        A vertex is emitted only once all of its successors are finished.
        Raises ``CyclicGraphError`` if the reachable subgraph has a cycle.
        """
        if root not in self._adjacency:
            raise UnknownVertexError(root, f"Traversal root {root!r} is not in the graph")

        order: list[VertexKey] = []
        colour: dict[VertexKey, int] = {root: _IN_PROGRESS}
        stack: list[tuple[VertexKey, Iterator[VertexKey]]] = [
            (root, iter(tuple(self._adjacency[root])))
        ]

        while stack:
            key, successors = stack[-1]
            for successor in successors:
                state = colour.get(successor)
                if state == _DONE:
                    continue
                if state == _IN_PROGRESS:
                    raise CyclicGraphError(successor, self._payloads.get(successor))
                colour[successor] = _IN_PROGRESS
                stack.append((successor, iter(tuple(self._adjacency[successor]))))
                break
            else:
                stack.pop()
                colour[key] = _DONE
                order.append(key)

        logger.debug("postorder from %r visited %d vertices", root, len(order))
        return order

    # ---- dunder ----------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return key in self._payloads

    def __len__(self) -> int:
        return len(self._payloads)

    def __repr__(self) -> str:
        return f"DirectedGraph(vertices={len(self)}, edges={self.edge_count})"
