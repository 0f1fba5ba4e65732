from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml

from fxresolve.helper.toml_utils import dump_toml_to_str

SUPPORTED_FORMATS = ("json", "yaml", "toml")


def normalize_for_output(value: Any) -> Any:
    """
    Convert a mapping produced by ``to_mapping()`` into plain JSON/YAML/TOML types.

    Paths become POSIX strings, enums their value, sets sorted lists and
    tuples lists. Mapping keys are stringified; their order is kept.
    """
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): normalize_for_output(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted(normalize_for_output(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [normalize_for_output(v) for v in value]
    return value


class MultiformatSerializableMixin:
    """
    Mixin for models to support JSON, YAML, and TOML serialization via to_mapping().
    """

    def to_mapping(self, *args, **kwargs) -> Mapping[str, Any]:
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement to_mapping() "
            "to use MultiformatSerializableMixin serialization.")

    def to_json(self, *, indent: int = 2) -> str:
        return json.dumps(normalize_for_output(self.to_mapping()), ensure_ascii=False, indent=indent)

    def to_yaml(self, *, indent: int = 2) -> str:
        return yaml.safe_dump(
            normalize_for_output(self.to_mapping()),
            sort_keys=False,
            allow_unicode=True,
            indent=indent)

    def to_toml(self, *, indent: int = 2) -> str:
        return dump_toml_to_str(normalize_for_output(self.to_mapping()), indent)

    def serialize(self, *, fmt: str = "json", indent: int = 2) -> str:
        if fmt == "json":
            return self.to_json(indent=indent)
        elif fmt == "yaml":
            return self.to_yaml(indent=indent)
        elif fmt == "toml":
            return self.to_toml(indent=indent)
        else:
            raise ValueError(f"unrecognized format: {fmt}")
