from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from fxresolve.helper.multiformat_serializable_mixin import MultiformatSerializableMixin

_TRUE_VALUES = frozenset({"true", "on", "yes", "!false", "!off", "!no"})
_FALSE_VALUES = frozenset({"false", "off", "no", "!true", "!on", "!yes"})

_REQUEST_ALIASES: dict[str, str] = {
    "Name": "name",
    "ItemSpec": "name",
    "TargetingPackVersion": "targeting_pack_version",
    "RuntimeFrameworkVersion": "runtime_framework_version",
    "TargetLatestRuntimePatch": "target_latest_runtime_patch",
}


def convert_string_to_bool(value: str | None, default: bool = False) -> bool:
    """
    Convert an MSBuild-style boolean string.

    ``true``/``on``/``yes`` (and the negated false forms) are True,
    ``false``/``off``/``no`` (and the negated true forms) are False.
    Empty or unrecognized strings yield ``default``.
    """
    if not value:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def parse_tri_state(value: Any) -> Optional[bool]:
    """
    Parse an optional boolean override: None and empty strings mean "unset".
    """
    match value:
        case None:
            return None
        case bool():
            return value
        case str() if not value.strip():
            return None
        case str():
            return convert_string_to_bool(value, default=False)
        case _:
            return bool(value)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(slots=True, frozen=True)
class FrameworkRequest(MultiformatSerializableMixin):
    """
    A framework reference declared by the project, with optional per-reference
    overrides.

    Attributes:
        name (str): The known framework name being referenced.
        targeting_pack_version (Optional[str]): Overrides the catalog targeting pack version.
        runtime_framework_version (Optional[str]): Overrides the resolved runtime version.
        target_latest_runtime_patch (Optional[bool]): Overrides the global latest-patch
            flag; None means unset.
    """
    name: str
    targeting_pack_version: Optional[str] = None
    runtime_framework_version: Optional[str] = None
    target_latest_runtime_patch: Optional[bool] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> FrameworkRequest:
        data = {_REQUEST_ALIASES.get(str(k), str(k)): v for k, v in mapping.items()}
        name = _optional_str(data.get("name"))
        if name is None:
            raise ValueError("A framework request needs a name")
        return cls(
            name=name,
            targeting_pack_version=_optional_str(data.get("targeting_pack_version")),
            runtime_framework_version=_optional_str(data.get("runtime_framework_version")),
            target_latest_runtime_patch=parse_tri_state(data.get("target_latest_runtime_patch")))

    @classmethod
    def parse(cls, text: str) -> FrameworkRequest:
        """
        Parse the command-line form ``NAME[:KEY=VALUE[,KEY=VALUE...]]``.

        Example:
            ``Microsoft.NETCore.App:runtime_framework_version=8.0.4,target_latest_runtime_patch=true``
        """
        name, _, rest = text.partition(":")
        data: dict[str, Any] = {"name": name}
        for item in rest.split(","):
            if not item.strip():
                continue
            if "=" not in item:
                raise ValueError(f"Invalid framework override {item!r} in {text!r}; expected KEY=VALUE")
            key, value = item.split("=", 1)
            data[key.strip()] = value.strip()
        return cls.from_mapping(data)

    def to_mapping(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.targeting_pack_version is not None:
            result["targeting_pack_version"] = self.targeting_pack_version
        if self.runtime_framework_version is not None:
            result["runtime_framework_version"] = self.runtime_framework_version
        if self.target_latest_runtime_patch is not None:
            result["target_latest_runtime_patch"] = self.target_latest_runtime_patch
        return result


def index_requests(requests: Iterable[FrameworkRequest]) -> dict[str, FrameworkRequest]:
    # later duplicates replace earlier ones
    return {r.name: r for r in requests}
