"""Shared data models for the stylestrata pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from stylestrata.config import PAGE_SUFFIXES, PATH_SEPARATOR, STYLESHEET_SUFFIXES
from stylestrata.graph.digraph import VertexKey


class VertexType(str, Enum):
    CSS = "CSS"
    HTML = "HTML"
    ROOT = "ROOT"
    DIRECTORY = "DIRECTORY"


@dataclass(frozen=True)
class DependentsCount:
    """Number of pages depending on a vertex, split by hop kind."""
    direct: int = 0
    indirect: int = 0

    @property
    def total(self) -> int:
        return self.direct + self.indirect

    def __add__(self, other: DependentsCount) -> DependentsCount:
        return DependentsCount(
            direct=self.direct + other.direct,
            indirect=self.indirect + other.indirect,
        )

    def to_dict(self) -> dict[str, int]:
        return {"direct": self.direct, "indirect": self.indirect}


@dataclass(frozen=True)
class AssetData:
    """Payload attached to every vertex of a stratified graph."""
    name: str
    path: str
    type: VertexType
    dependents_count: DependentsCount = field(default_factory=DependentsCount)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": self.type.value,
            "dependentsCount": self.dependents_count.to_dict(),
        }


@dataclass
class FileEntry:
    """A file leaf of the transient directory tree."""
    key: VertexKey
    value: AssetData


@dataclass
class Directory:
    """A node of the transient directory tree built during rollup."""
    name: str
    path: str
    directories: dict[str, Directory] = field(default_factory=dict)
    files: list[FileEntry] = field(default_factory=list)


def vertex_type_for(path: str) -> VertexType:
    """Derive a vertex type from its path suffix."""
    lowered = path.lower()
    if lowered.endswith(STYLESHEET_SUFFIXES):
        return VertexType.CSS
    if lowered.endswith(PAGE_SUFFIXES):
        return VertexType.HTML
    return VertexType.ROOT


def path_segments(path: str) -> list[str]:
    """Split an absolute path into its non-empty segments.

    ``"/archive/marx/manifesto.html"`` -> ``["archive", "marx", "manifesto.html"]``
    """
    return [part for part in path.split(PATH_SEPARATOR) if part]


def join_segments(segments: list[str]) -> str:
    return PATH_SEPARATOR + PATH_SEPARATOR.join(segments)
