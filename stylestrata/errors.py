"""Exception hierarchy for stylestrata.

Core modules raise these; only the CLI layer catches them, reports the
problem, and exits non-zero.
"""

from __future__ import annotations

from typing import Any


class StrataError(Exception):
    """Base class for every error raised by stylestrata."""


class UnknownVertexError(StrataError):
    """An edge or lookup referenced a vertex that is not in the graph."""

    def __init__(self, vertex: Any, message: str | None = None) -> None:
        self.vertex = vertex
        super().__init__(message or f"Unknown vertex: {vertex!r}")


class InvalidArgumentError(StrataError, ValueError):
    """A dual-mode operation was called with an ambiguous set of arguments."""


class CyclicGraphError(StrataError):
    """A traversal revisited a vertex that was still in progress."""

    def __init__(self, vertex: Any, payload: Any = None) -> None:
        self.vertex = vertex
        self.payload = payload
        label = getattr(payload, "path", payload) if payload is not None else vertex
        super().__init__(f"Cycle detected at vertex {label!r}")


class MalformedInputError(StrataError, ValueError):
    """The input edge list does not have the ``[path, [path, ...]]`` shape."""

    def __init__(self, message: str, index: int | None = None) -> None:
        self.index = index
        if index is not None:
            message = f"Entry {index}: {message}"
        super().__init__(message)


class UnsupportedVertexTypeError(StrataError, ValueError):
    """A payload carried a vertex type the counting rule does not handle."""

    def __init__(self, vertex_type: Any) -> None:
        self.vertex_type = vertex_type
        super().__init__(f"Unhandled vertex type: {vertex_type!r}")
