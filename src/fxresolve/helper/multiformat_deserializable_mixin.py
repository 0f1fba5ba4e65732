from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import yaml

from fxresolve.helper.toml_utils import load_toml_text

_SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
}


def format_for_path(path: str | Path) -> str:
    """
    Determine the document format of a file from its suffix.

    Args:
        path (str | Path): The file path to inspect.

    Returns:
        str: One of "json", "yaml" or "toml".

    Raises:
        ValueError: If the suffix does not map to a supported format.
    """
    suffix = Path(path).suffix.lower()
    try:
        return _SUFFIX_FORMATS[suffix]
    except KeyError:
        raise ValueError(f"Cannot determine document format for {path} (suffix {suffix!r})") from None


def load_mapping_text(text: str, fmt: str) -> Mapping[str, Any]:
    if fmt == "json":
        data = json.loads(text)
    elif fmt == "yaml":
        data = next(iter(yaml.safe_load_all(text)), None) or {}
    elif fmt == "toml":
        data = load_toml_text(text)
    else:
        raise ValueError(f"unrecognized format: {fmt}")
    if not isinstance(data, Mapping):
        raise ValueError(f"Expected a mapping at the document root, got {type(data).__name__}")
    return data


def load_mapping_file(path: str | Path) -> Mapping[str, Any]:
    p = Path(path)
    return load_mapping_text(p.read_text(encoding="utf-8"), format_for_path(p))


class MultiformatDeserializableMixin:
    """
    Mixin for models that can be built from JSON, YAML, and TOML documents via from_mapping().
    """

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], **kwargs: Any):
        raise NotImplementedError(
            f"{cls.__name__} must implement from_mapping() "
            "to use MultiformatDeserializableMixin deserialization.")

    @classmethod
    def from_json(cls, s: str, **kwargs: Any):
        return cls.from_mapping(load_mapping_text(s, "json"), **kwargs)

    @classmethod
    def from_yaml(cls, s: str, **kwargs: Any):
        return cls.from_mapping(load_mapping_text(s, "yaml"), **kwargs)

    @classmethod
    def from_toml(cls, s: str, **kwargs: Any):
        return cls.from_mapping(load_mapping_text(s, "toml"), **kwargs)

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: Any):
        return cls.from_mapping(load_mapping_file(path), **kwargs)
