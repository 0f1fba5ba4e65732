import pytest

from fxresolve.model.framework_version_model import (
    NET_CORE_APP,
    NET_FRAMEWORK,
    NET_STANDARD,
    FrameworkVersion,
    TargetFramework,
    normalize_version,
)


# ===========================
# FrameworkVersion
# ===========================

def test_parse_keeps_given_components():
    """Parsing keeps exactly the components that were written."""
    assert FrameworkVersion.parse("6.0").parts == (6, 0)
    assert FrameworkVersion.parse("6.0.0.0").parts == (6, 0, 0, 0)


def test_parse_accepts_leading_v():
    """A leading 'v' is accepted, as in long-form framework names."""
    assert FrameworkVersion.parse("v4.7.2").parts == (4, 7, 2)


@pytest.mark.parametrize("text", ["", "abc", "6", "1.2.3.4.5", "6.0rc1", "6.0.post1", "6.0+local"])
def test_parse_rejects_non_numeric_or_wrong_length(text):
    """Anything other than a plain 2 to 4 part numeric version is rejected."""
    with pytest.raises(ValueError):
        FrameworkVersion.parse(text)


@pytest.mark.parametrize("text, expected", [
    ("6.0.0.0", (6, 0)),
    ("6.0.1.0", (6, 0, 1)),
    ("6.0.0", (6, 0, 0)),
    ("6.0.0.1", (6, 0, 0, 1)),
    ("6.0", (6, 0)),
])
def test_normalized_drops_zero_revision_then_zero_build(text, expected):
    """Zero revision is dropped, then a zero build; three-part versions stay as they are."""
    assert FrameworkVersion.parse(text).normalized().parts == expected


def test_normalize_is_idempotent():
    """Normalizing twice gives the same value as normalizing once."""
    for text in ("6.0.0.0", "6.0.1.0", "6.0.0", "4.7.2.1"):
        once = normalize_version(text)
        assert normalize_version(once) == once


def test_normalize_makes_padded_and_short_forms_equal():
    """6.0.0.0 and 6.0 are equal after normalization."""
    assert normalize_version("6.0.0.0") == normalize_version("6.0")


def test_padded_and_str():
    """padded() fills up to four components; str() joins them with dots."""
    assert str(FrameworkVersion.parse("8.0").padded()) == "8.0.0.0"


# ===========================
# TargetFramework.parse
# ===========================

@pytest.mark.parametrize("text, identifier, parts, platform", [
    ("net8.0", NET_CORE_APP, (8, 0, 0, 0), None),
    ("net5.0", NET_CORE_APP, (5, 0, 0, 0), None),
    ("netcoreapp3.1", NET_CORE_APP, (3, 1, 0, 0), None),
    ("netstandard2.0", NET_STANDARD, (2, 0, 0, 0), None),
    ("net48", NET_FRAMEWORK, (4, 8, 0, 0), None),
    ("net472", NET_FRAMEWORK, (4, 7, 2, 0), None),
    ("net6.0-windows", NET_CORE_APP, (6, 0, 0, 0), "windows"),
    (".NETCoreApp,Version=v6.0", ".NETCoreApp", (6, 0, 0, 0), None),
    (".NETCoreApp,Version=v6", ".NETCoreApp", (6, 0, 0, 0), None),
])
def test_target_framework_parse(text, identifier, parts, platform):
    """Short monikers and the long form parse to an identifier and a four-part version."""
    tf = TargetFramework.parse(text)
    assert tf.identifier == identifier
    assert tf.version.parts == parts
    assert tf.platform == platform


@pytest.mark.parametrize("text", ["", "foo1.0", "net48-windows", "netstandard2.0-android"])
def test_target_framework_parse_rejects_unknown(text):
    """Unknown monikers and platform suffixes on old frameworks are rejected."""
    with pytest.raises(ValueError):
        TargetFramework.parse(text)


def test_target_framework_matches_ignores_case_and_padding():
    """matches() compares identifiers case-insensitively and versions after normalization."""
    tf = TargetFramework.parse("net6.0")
    assert tf.matches(".netcoreapp", "6.0")
    assert tf.matches(".NETCOREAPP", FrameworkVersion.parse("6.0.0.0"))
    assert not tf.matches(".NETCoreApp", "8.0")
    assert not tf.matches(".NETStandard", "6.0")


def test_target_framework_str_is_long_form():
    """str() renders the long form with a normalized version."""
    assert str(TargetFramework.parse("net6.0")) == ".NETCoreApp,Version=v6.0"


def test_long_form_single_component_version_means_minor_zero():
    """A long form written with only a major version, as in v6, is read as 6.0."""
    tf = TargetFramework.parse(".NETCoreApp,Version=v6")
    assert tf.matches(".NETCoreApp", "6.0")
    assert str(tf) == ".NETCoreApp,Version=v6.0"
