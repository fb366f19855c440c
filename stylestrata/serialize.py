"""Serialize a stratified graph into an id-keyed JSON-ready dict.

Vertex keys are process-local, so each vertex is given a fresh string id
the first time it is encountered while walking the edge relation.  Edges
become lists of ids under ``dependents``.  Callers can pin ids for
chosen vertices (the aggregation root is pinned to ``ALL_CSS``) so
downstream consumers can find them without searching.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

from stylestrata.config import JSON_INDENT
from stylestrata.errors import UnknownVertexError
from stylestrata.graph.digraph import DirectedGraph, VertexKey
from stylestrata.models import AssetData

logger = logging.getLogger(__name__)


def serialize_graph(
    graph: DirectedGraph[AssetData],
    key_to_id: dict[VertexKey, str] | None = None,
) -> dict[str, dict[str, Any]]:
    """Return ``{id: {name, path, type, dependentsCount, dependents, id}}``.

    Every vertex of *graph* is emitted.  *key_to_id* seeds fixed ids and
    is extended with the generated ones.
    """
    ids: dict[VertexKey, str] = key_to_id if key_to_id is not None else {}

    def id_for(key: VertexKey) -> str:
        if key not in ids:
            ids[key] = str(uuid.uuid4())
        return ids[key]

    serialized: dict[str, dict[str, Any]] = {}
    for key, edge_keys in graph.edges():
        data = graph.get_vertex(key)
        if data is None:
            raise UnknownVertexError(key)
        vertex_id = id_for(key)
        record = data.to_dict()
        record["dependents"] = [id_for(edge_key) for edge_key in edge_keys]
        record["id"] = vertex_id
        serialized[vertex_id] = record

    logger.debug("Serialized %d vertices", len(serialized))
    return serialized


def dumps(
    graph: DirectedGraph[AssetData],
    key_to_id: dict[VertexKey, str] | None = None,
    indent: int | None = JSON_INDENT,
) -> str:
    return json.dumps(serialize_graph(graph, key_to_id), indent=indent, ensure_ascii=False)
