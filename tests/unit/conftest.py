"""Fixtures shared by the resolution unit tests."""
import pytest

from fxresolve.model.framework_version_model import FrameworkVersion, TargetFramework
from fxresolve.model.known_framework_model import KnownFrameworkEntry
from fxresolve.model.resolution_context_model import ResolutionContext
from fxresolve.model.runtime_graph_model import RuntimeGraph


@pytest.fixture
def entry_factory():
    """Factory that creates KnownFrameworkEntry instances with customizable fields.

    Usage:
        def test_something(entry_factory):
            entry = entry_factory(name="Other", runtime_pack_rids=("win-x64",))
    """

    def _make(
            name="Core",
            target_framework="net6.0",
            runtime_framework_name=None,
            default_runtime_version="6.0.1",
            latest_runtime_version="6.0.9",
            targeting_pack_name=None,
            targeting_pack_version="6.0.9",
            runtime_pack_name_patterns=("Core.Runtime.**RID**",),
            runtime_pack_rids=("linux-x64", "win-x64")):
        return KnownFrameworkEntry(
            name=name,
            target_framework=TargetFramework.parse(target_framework),
            runtime_framework_name=runtime_framework_name or name,
            default_runtime_version=default_runtime_version,
            latest_runtime_version=latest_runtime_version,
            targeting_pack_name=targeting_pack_name or f"{name}.Ref",
            targeting_pack_version=targeting_pack_version,
            runtime_pack_name_patterns=tuple(runtime_pack_name_patterns),
            runtime_pack_rids=tuple(runtime_pack_rids))

    return _make


@pytest.fixture
def context_factory():
    """Factory for ResolutionContext targeting .NETCoreApp 6.0 by default."""

    def _make(**overrides):
        values = {
            "target_framework_identifier": ".NETCoreApp",
            "target_framework_version": FrameworkVersion.parse("6.0"),
            "self_contained": True,
            "runtime_identifier": "linux-x64",
        }
        values.update(overrides)
        return ResolutionContext(**values)

    return _make


@pytest.fixture
def small_graph():
    """A portable RID graph covering linux, windows and their ancestors."""
    return RuntimeGraph(runtimes={
        "base": (),
        "any": ("base",),
        "unix": ("any",),
        "linux": ("unix",),
        "linux-x64": ("linux",),
        "linux-arm": ("linux",),
        "linux-musl-x64": ("linux-musl", "linux-x64"),
        "linux-musl": ("linux",),
        "win": ("any",),
        "win-x64": ("win",),
    })
