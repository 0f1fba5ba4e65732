import pytest

from fxresolve.model.runtime_graph_model import RuntimeGraph, RuntimeGraphError


def test_expand_yields_rid_first_then_breadth_first_ancestors(small_graph):
    """Expansion starts with the RID itself and walks imports breadth-first without repeats."""
    assert list(small_graph.expand("linux-musl-x64")) == [
        "linux-musl-x64", "linux-musl", "linux-x64", "linux", "unix", "any", "base",
    ]


def test_expand_unknown_rid_yields_only_itself(small_graph):
    """A RID that is not in the graph expands to itself alone."""
    assert list(small_graph.expand("osx-arm64")) == ["osx-arm64"]


def test_contains_and_len(small_graph):
    """Membership reflects the graph's nodes."""
    assert "linux-x64" in small_graph
    assert small_graph.contains("win")
    assert not small_graph.contains("osx-arm64")
    assert len(small_graph) == 10


def test_runtimes_are_read_only(small_graph):
    """The runtimes table cannot be mutated after construction."""
    with pytest.raises(TypeError):
        small_graph.runtimes["new"] = ()


def test_from_json_reads_import_lists():
    """A runtime.json document is parsed into imports per RID."""
    graph = RuntimeGraph.from_json(
        '{"runtimes": {"any": {}, "linux": {"#import": ["any"]}, "linux-x64": {"#import": ["linux"]}}}')
    assert graph.imports("linux-x64") == ("linux",)
    assert graph.imports("any") == ()
    assert graph.imports("missing") == ()


def test_from_mapping_requires_runtimes_table():
    """A document without a runtimes table is rejected."""
    with pytest.raises(RuntimeGraphError, match="no 'runtimes' table"):
        RuntimeGraph.from_mapping({"supports": {}})


@pytest.mark.parametrize("description", [["linux"], {"#import": "linux"}, {"#import": 3}])
def test_from_mapping_rejects_malformed_descriptions(description):
    """Non-table descriptions and non-list imports are rejected."""
    with pytest.raises(RuntimeGraphError):
        RuntimeGraph.from_mapping({"runtimes": {"linux-x64": description}})


def test_to_mapping_writes_import_lists(small_graph):
    """to_mapping produces a runtime.json shaped document."""
    data = small_graph.to_mapping()
    assert data["runtimes"]["linux-musl-x64"] == {"#import": ["linux-musl", "linux-x64"]}
