import pytest

from fxresolve.model.framework_request_model import (
    FrameworkRequest,
    convert_string_to_bool,
    index_requests,
    parse_tri_state,
)


@pytest.mark.parametrize("value", ["true", "TRUE", "on", "yes", "!false", "!off", "!no", " True "])
def test_convert_string_to_bool_true_values(value):
    """MSBuild true spellings convert to True."""
    assert convert_string_to_bool(value) is True


@pytest.mark.parametrize("value", ["false", "off", "no", "!true", "!on", "!yes"])
def test_convert_string_to_bool_false_values(value):
    """MSBuild false spellings convert to False, whatever the default."""
    assert convert_string_to_bool(value, default=True) is False


@pytest.mark.parametrize("value", [None, "", "maybe"])
def test_convert_string_to_bool_falls_back_to_default(value):
    """Empty or unrecognized strings yield the default."""
    assert convert_string_to_bool(value, default=True) is True
    assert convert_string_to_bool(value, default=False) is False


def test_parse_tri_state():
    """None and blank strings are unset; bools and strings are converted."""
    assert parse_tri_state(None) is None
    assert parse_tri_state("  ") is None
    assert parse_tri_state(True) is True
    assert parse_tri_state("off") is False
    assert parse_tri_state("yes") is True


def test_request_parse_name_only():
    """A bare name has no overrides."""
    request = FrameworkRequest.parse("Microsoft.NETCore.App")
    assert request == FrameworkRequest(name="Microsoft.NETCore.App")


def test_request_parse_with_overrides():
    """KEY=VALUE overrides after the colon are applied."""
    request = FrameworkRequest.parse(
        "Microsoft.NETCore.App:runtime_framework_version=8.0.4,target_latest_runtime_patch=true")
    assert request.runtime_framework_version == "8.0.4"
    assert request.target_latest_runtime_patch is True
    assert request.targeting_pack_version is None


def test_request_parse_rejects_bad_override():
    """Overrides without '=' are rejected."""
    with pytest.raises(ValueError, match="expected KEY=VALUE"):
        FrameworkRequest.parse("Core:oops")


def test_request_from_mapping_accepts_msbuild_aliases():
    """MSBuild metadata names map onto request fields."""
    request = FrameworkRequest.from_mapping({
        "Name": "Core",
        "TargetingPackVersion": "6.0.5",
        "TargetLatestRuntimePatch": "false",
    })
    assert request.targeting_pack_version == "6.0.5"
    assert request.target_latest_runtime_patch is False


def test_request_from_mapping_blank_values_are_unset():
    """Blank override strings are treated as absent."""
    request = FrameworkRequest.from_mapping({"name": "Core", "runtime_framework_version": " ",
                                             "target_latest_runtime_patch": ""})
    assert request.runtime_framework_version is None
    assert request.target_latest_runtime_patch is None


def test_request_from_mapping_requires_name():
    """A request without a name is rejected."""
    with pytest.raises(ValueError, match="needs a name"):
        FrameworkRequest.from_mapping({"runtime_framework_version": "8.0.4"})


def test_request_to_mapping_omits_unset_fields():
    """Only set overrides are written."""
    assert FrameworkRequest(name="Core", target_latest_runtime_patch=False).to_mapping() == {
        "name": "Core",
        "target_latest_runtime_patch": False,
    }


def test_index_requests_last_duplicate_wins():
    """When a name repeats, the later request replaces the earlier one."""
    first = FrameworkRequest(name="Core", runtime_framework_version="6.0.1")
    second = FrameworkRequest(name="Core", runtime_framework_version="6.0.2")
    other = FrameworkRequest(name="Other")
    indexed = index_requests([first, other, second])
    assert indexed["Core"] is second
    assert set(indexed) == {"Core", "Other"}
