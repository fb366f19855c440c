"""Tests for edge-list loading and graph construction."""
import json

import pytest

from stylestrata.errors import MalformedInputError
from stylestrata.loader import build_graph, load_edge_list, parse_edge_list, validate_entry


class TestValidateEntry:
    def test_valid_entry(self):
        assert validate_entry(["/a.html", ["/x.css"]]) is None

    def test_entry_without_dependencies_is_valid(self):
        assert validate_entry(["/a.html", []]) is None

    @pytest.mark.parametrize("entry", [
        "/a.html",
        ["/a.html"],
        ["/a.html", ["/x.css"], "extra"],
        [42, ["/x.css"]],
        ["", ["/x.css"]],
        ["/a.html", "/x.css"],
        ["/a.html", [None]],
        ["/a.html", ["/x.css", 3]],
        ["docs/a.html", ["/x.css"]],
        ["/a.html", ["x.css"]],
        ["/a.html", ["/x.css", "css/y.css"]],
    ])
    def test_malformed_entries(self, entry):
        assert validate_entry(entry) is not None


class TestParseEdgeList:
    def test_entries_returned_in_order(self):
        data = [["/a.html", ["/x.css"]], ["/x.css", []]]
        assert parse_edge_list(data) == [("/a.html", ["/x.css"]), ("/x.css", [])]

    def test_non_array_document(self):
        with pytest.raises(MalformedInputError):
            parse_edge_list({"/a.html": ["/x.css"]})

    def test_first_bad_entry_is_reported(self, caplog):
        data = [["/a.html", ["/x.css"]], ["/b.html"], [1, []]]
        with pytest.raises(MalformedInputError) as excinfo:
            parse_edge_list(data)
        assert excinfo.value.index == 1
        assert "Entry 1" in str(excinfo.value)
        assert "Malformed edge-list entry 2" in caplog.text

    def test_relative_path_is_rejected_with_its_index(self):
        data = [["/a.html", ["/x.css"]], ["docs/b.html", ["/x.css"]]]
        with pytest.raises(MalformedInputError) as excinfo:
            parse_edge_list(data)
        assert excinfo.value.index == 1
        assert "must start with '/'" in str(excinfo.value)

    def test_malformed_input_is_value_error(self):
        with pytest.raises(ValueError):
            parse_edge_list("nope")


class TestLoadEdgeList:
    def test_load_from_file(self, edge_list_file, archive_entries):
        assert load_edge_list(edge_list_file) == [
            (vertex, list(deps)) for vertex, deps in archive_entries
        ]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[[", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_edge_list(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_edge_list(tmp_path / "missing.json")


class TestBuildGraph:
    def test_one_vertex_per_distinct_path(self, archive_entries):
        graph, name_to_key = build_graph(archive_entries)
        assert len(graph) == len(name_to_key) == 8
        for name, key in name_to_key.items():
            assert graph.get_vertex(key) == name

    def test_referenced_only_paths_become_vertices(self):
        graph, name_to_key = build_graph([("/a.html", ["/missing.css"])])
        assert "/missing.css" in name_to_key
        assert graph.get_edges(name_to_key["/a.html"]) == (name_to_key["/missing.css"],)

    def test_edges_point_at_imports(self, chain_entries):
        graph, keys = build_graph(chain_entries)
        assert graph.get_edges(keys["/x.css"]) == (keys["/y.css"],)
        assert graph.get_edges(keys["/y.css"]) == ()

    def test_duplicate_dependencies_collapse(self):
        graph, keys = build_graph([("/a.html", ["/x.css", "/x.css"]), ("/a.html", ["/x.css"])])
        assert graph.edge_count == 1
