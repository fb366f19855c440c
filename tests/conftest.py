import json

import pytest

from stylestrata.models import VertexType


@pytest.fixture
def chain_entries():
    """Two pages import x.css, which imports y.css."""
    return [
        ("/a.html", ["/x.css"]),
        ("/b.html", ["/x.css"]),
        ("/x.css", ["/y.css"]),
    ]


@pytest.fixture
def archive_entries():
    """A small site: archive pages share a stylesheet built on a base sheet.

    Flat dependent counts:
      /css/archive.css  direct=3 indirect=0  (ch01, manifesto, engels index)
      /css/print.css    direct=1 indirect=0  (engels index)
      /css/base.css     direct=1 indirect=3  (/index.html, via archive.css)
      ALL_CSS           direct=0 indirect=8
    """
    return [
        ("/archive/marx/capital/ch01.html", ["/css/archive.css"]),
        ("/archive/marx/manifesto.html", ["/css/archive.css"]),
        ("/archive/engels/index.htm", ["/css/archive.css", "/css/print.css"]),
        ("/index.html", ["/css/base.css"]),
        ("/css/archive.css", ["/css/base.css"]),
        ("/css/print.css", []),
        ("/about.html", []),
    ]


@pytest.fixture
def edge_list_file(tmp_path, archive_entries):
    path = tmp_path / "analysis.json"
    path.write_text(json.dumps([list(entry) for entry in archive_entries]), encoding="utf-8")
    return path


def find_vertices(graph, path, vertex_type=None):
    """All (key, asset) pairs in *graph* with the given path (and type)."""
    return [
        (key, asset)
        for key, asset in graph.vertices()
        if asset.path == path and (vertex_type is None or asset.type is vertex_type)
    ]


def find_file(graph, path):
    matches = [
        (key, asset)
        for key, asset in find_vertices(graph, path)
        if asset.type is not VertexType.DIRECTORY
    ]
    assert len(matches) == 1, f"expected exactly one file vertex for {path}, got {matches}"
    return matches[0]
