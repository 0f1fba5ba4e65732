import json

from fxresolve.model.framework_version_model import FrameworkVersion
from fxresolve.model.resolution_output_model import ResolutionResult, RuntimeFrameworkDescriptor
from fxresolve.resolution.output.runtime_config import (
    runtime_config_mapping,
    target_framework_moniker,
    write_runtime_config,
)


def _result(*names):
    return ResolutionResult(runtime_frameworks=[RuntimeFrameworkDescriptor(n, "8.0.4", n) for n in names])


def test_moniker_for_modern_and_old_core(context_factory):
    """net5+ uses the net prefix, older .NET Core uses netcoreapp."""
    assert target_framework_moniker(context_factory(target_framework_version=FrameworkVersion((8, 0, 0, 0)))) == "net8.0"
    assert target_framework_moniker(context_factory(target_framework_version=FrameworkVersion((3, 1)))) == "netcoreapp3.1"


def test_moniker_for_other_identifiers(context_factory):
    """Other identifiers fall back to the long form."""
    context = context_factory(target_framework_identifier=".NETStandard",
                              target_framework_version=FrameworkVersion((2, 0, 0, 0)))
    assert target_framework_moniker(context) == ".NETStandard,Version=v2.0"


def test_single_framework(context_factory):
    """One framework-dependent framework goes under 'framework'."""
    options = runtime_config_mapping(_result("Microsoft.NETCore.App"), context_factory(self_contained=False))
    assert options == {"runtimeOptions": {
        "tfm": "net6.0",
        "framework": {"name": "Microsoft.NETCore.App", "version": "8.0.4"},
    }}


def test_several_frameworks(context_factory):
    """Several frameworks go under 'frameworks'."""
    options = runtime_config_mapping(_result("A", "B"), context_factory(self_contained=False))["runtimeOptions"]
    assert [f["name"] for f in options["frameworks"]] == ["A", "B"]
    assert "framework" not in options


def test_self_contained_records_included_frameworks(context_factory):
    """Self-contained applications list their frameworks as included."""
    options = runtime_config_mapping(_result("A"), context_factory(self_contained=True))["runtimeOptions"]
    assert options["includedFrameworks"] == [{"name": "A", "version": "8.0.4"}]
    assert "framework" not in options


def test_no_frameworks(context_factory):
    """Without frameworks only the tfm is written."""
    assert runtime_config_mapping(ResolutionResult(), context_factory(self_contained=False)) == {
        "runtimeOptions": {"tfm": "net6.0"}}


def test_write_runtime_config(tmp_path, context_factory):
    """The document is written as JSON, creating parent directories."""
    path = tmp_path / "out" / "app.runtimeconfig.json"
    written = write_runtime_config(_result("A"), context_factory(self_contained=False), path)
    assert written == path
    assert json.loads(path.read_text(encoding="utf-8"))["runtimeOptions"]["framework"]["name"] == "A"
