import json

import pytest

from fxresolve.model.runtime_graph_model import RuntimeGraphError
from fxresolve.resolution.sources.runtime_graph_loader import load_default_runtime_graph, load_runtime_graph


def test_default_graph_is_embedded():
    """Without a path the shipped portable graph is used."""
    graph = load_runtime_graph()
    assert graph is load_default_runtime_graph()
    assert "linux-musl-x64" in graph
    assert list(graph.expand("linux-musl-x64"))[:3] == ["linux-musl-x64", "linux-musl", "linux-x64"]
    assert list(graph.expand("win-x64"))[-2:] == ["any", "base"]


def test_load_graph_file(tmp_path):
    """A runtime.json file is parsed from disk."""
    path = tmp_path / "runtime.json"
    path.write_text(json.dumps({"runtimes": {"any": {}, "tizen": {"#import": ["any"]}}}), encoding="utf-8")
    graph = load_runtime_graph(path)
    assert graph.imports("tizen") == ("any",)


def test_load_graph_file_is_cached(tmp_path):
    """Loading the same unchanged file twice returns the cached graph."""
    path = tmp_path / "runtime.json"
    path.write_text('{"runtimes": {"any": {}}}', encoding="utf-8")
    assert load_runtime_graph(path) is load_runtime_graph(str(path))


def test_missing_graph_file(tmp_path):
    """A missing graph file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_runtime_graph(tmp_path / "missing.json")


def test_invalid_json(tmp_path):
    """Malformed JSON is a RuntimeGraphError."""
    path = tmp_path / "runtime.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RuntimeGraphError, match="not valid JSON"):
        load_runtime_graph(path)


def test_non_object_document(tmp_path):
    """The document root must be an object."""
    path = tmp_path / "runtime.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(RuntimeGraphError, match="must be a JSON object"):
        load_runtime_graph(path)
