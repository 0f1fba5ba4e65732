from fxresolve.model.framework_version_model import FrameworkVersion
from fxresolve.resolution.engine.catalog_filter import filter_catalog


def test_filter_keeps_matching_entries_in_catalog_order(entry_factory):
    """Entries for the requested framework are kept in their catalog order."""
    catalog = [
        entry_factory(name="Asp"),
        entry_factory(name="Core", target_framework="net8.0"),
        entry_factory(name="Core"),
    ]
    result = filter_catalog(catalog, ".NETCoreApp", "6.0")
    assert [e.name for e in result] == ["Asp", "Core"]
    assert all(str(e.target_framework.version) == "6.0.0.0" for e in result)


def test_filter_matches_identifier_ignoring_case(entry_factory):
    """Identifier comparison ignores case."""
    assert filter_catalog([entry_factory()], ".netcoreapp", "6.0")


def test_filter_matches_padded_version(entry_factory):
    """A four-part requested version matches the two-part catalog version."""
    assert filter_catalog([entry_factory()], ".NETCoreApp", FrameworkVersion.parse("6.0.0.0"))


def test_filter_no_match_is_empty(entry_factory):
    """No applicable entry yields an empty list."""
    assert filter_catalog([entry_factory()], ".NETStandard", "2.0") == []
    assert filter_catalog([], ".NETCoreApp", "6.0") == []
