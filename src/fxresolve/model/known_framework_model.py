from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from fxresolve.helper.multiformat_deserializable_mixin import MultiformatDeserializableMixin
from fxresolve.helper.multiformat_serializable_mixin import MultiformatSerializableMixin
from fxresolve.model.framework_version_model import FrameworkVersion, TargetFramework

RID_PLACEHOLDER = "**RID**"

# MSBuild item metadata names accepted as aliases of the snake_case keys
_METADATA_ALIASES: dict[str, str] = {
    "Name": "name",
    "ItemSpec": "name",
    "TargetFramework": "target_framework",
    "RuntimeFrameworkName": "runtime_framework_name",
    "DefaultRuntimeFrameworkVersion": "default_runtime_version",
    "LatestRuntimeFrameworkVersion": "latest_runtime_version",
    "TargetingPackName": "targeting_pack_name",
    "TargetingPackVersion": "targeting_pack_version",
    "RuntimePackNamePatterns": "runtime_pack_name_patterns",
    "RuntimePackRuntimeIdentifiers": "runtime_pack_rids",
}

_REQUIRED_FIELDS = (
    "name",
    "runtime_framework_name",
    "default_runtime_version",
    "latest_runtime_version",
    "targeting_pack_name",
    "targeting_pack_version",
)


class CatalogError(ValueError):
    pass


def split_semicolon_list(value: Any) -> tuple[str, ...]:
    """
    Normalize a semicolon-delimited string (or a list of strings) into an
    ordered tuple of non-empty, stripped items.
    """
    match value:
        case None:
            return ()
        case str():
            items = value.split(";")
        case list() | tuple():
            items = [str(v) for v in value]
        case _:
            items = [str(value)]
    return tuple(item.strip() for item in items if item and item.strip())


def _canonical_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {_METADATA_ALIASES.get(str(k), str(k)): v for k, v in data.items()}


def _parse_target_framework(data: Mapping[str, Any], name: str) -> TargetFramework:
    try:
        if data.get("target_framework"):
            return TargetFramework.parse(str(data["target_framework"]))
        identifier = data.get("target_framework_identifier")
        version = data.get("target_framework_version")
        if identifier and version:
            return TargetFramework(
                identifier=str(identifier),
                version=FrameworkVersion.parse(str(version)).padded())
    except ValueError as e:
        raise CatalogError(f"Known framework {name!r}: {e}") from e
    raise CatalogError(f"Known framework {name!r} has no target framework")


@dataclass(slots=True, frozen=True)
class KnownFrameworkEntry(MultiformatSerializableMixin):
    """
    One entry of the known-framework catalog.

    An entry describes a framework that a project can reference by name for
    one target framework: which shared runtime framework it maps to, which
    targeting pack provides its reference assemblies, and which runtime packs
    (one per name pattern, for the RIDs listed) ship its platform binaries.

    Attributes:
        name (str): The framework reference name, unique per target framework.
        target_framework (TargetFramework): The target framework this entry applies to.
        runtime_framework_name (str): Name written into the runtime configuration.
        default_runtime_version (str): Runtime version used when latest patch is not wanted.
        latest_runtime_version (str): Runtime version used when latest patch is wanted.
        targeting_pack_name (str): Package id of the targeting pack.
        targeting_pack_version (str): Default targeting pack version.
        runtime_pack_name_patterns (tuple[str, ...]): Runtime pack package id
            patterns; ``**RID**`` is replaced by the matched RID.
        runtime_pack_rids (tuple[str, ...]): RIDs for which runtime packs exist.
    """
    name: str
    target_framework: TargetFramework
    runtime_framework_name: str
    default_runtime_version: str
    latest_runtime_version: str
    targeting_pack_name: str
    targeting_pack_version: str
    runtime_pack_name_patterns: tuple[str, ...] = ()
    runtime_pack_rids: tuple[str, ...] = ()

    @property
    def has_runtime_packs(self) -> bool:
        return bool(self.runtime_pack_name_patterns)

    @property
    def key(self) -> tuple[str, str, str]:
        return (
            self.name.casefold(),
            self.target_framework.identifier.casefold(),
            str(self.target_framework.version.normalized()))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], **_: Any) -> KnownFrameworkEntry:
        """
        Build a catalog entry from a mapping using either snake_case keys or
        MSBuild metadata names.

        Args:
            mapping (Mapping[str, Any]): The raw entry.

        Returns:
            KnownFrameworkEntry: The parsed entry.

        Raises:
            CatalogError: If a required field is missing or the target
                framework cannot be parsed.
        """
        if not isinstance(mapping, Mapping):
            raise CatalogError(f"Known framework entries must be tables, got {type(mapping).__name__}")
        data = _canonical_keys(mapping)
        name = str(data.get("name") or "").strip()
        missing = [f for f in _REQUIRED_FIELDS if not str(data.get(f) or "").strip()]
        if missing:
            label = name or "<unnamed>"
            raise CatalogError(f"Known framework {label!r} is missing: {', '.join(missing)}")

        return cls(
            name=name,
            target_framework=_parse_target_framework(data, name),
            runtime_framework_name=str(data["runtime_framework_name"]).strip(),
            default_runtime_version=str(data["default_runtime_version"]).strip(),
            latest_runtime_version=str(data["latest_runtime_version"]).strip(),
            targeting_pack_name=str(data["targeting_pack_name"]).strip(),
            targeting_pack_version=str(data["targeting_pack_version"]).strip(),
            runtime_pack_name_patterns=split_semicolon_list(data.get("runtime_pack_name_patterns")),
            runtime_pack_rids=split_semicolon_list(data.get("runtime_pack_rids")))

    def to_mapping(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "target_framework_identifier": self.target_framework.identifier,
            "target_framework_version": str(self.target_framework.version),
            "runtime_framework_name": self.runtime_framework_name,
            "default_runtime_version": self.default_runtime_version,
            "latest_runtime_version": self.latest_runtime_version,
            "targeting_pack_name": self.targeting_pack_name,
            "targeting_pack_version": self.targeting_pack_version,
            "runtime_pack_name_patterns": list(self.runtime_pack_name_patterns),
            "runtime_pack_rids": list(self.runtime_pack_rids),
        }


@dataclass(slots=True)
class FrameworkCatalog(MultiformatSerializableMixin, MultiformatDeserializableMixin):
    """
    The ordered list of known frameworks, plus a description of where it was
    loaded from.
    """
    entries: list[KnownFrameworkEntry] = field(default_factory=list)
    source_description: Optional[str] = None

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], **kwargs: Any) -> FrameworkCatalog:
        raw = mapping.get("frameworks")
        if raw is None:
            raw = mapping.get("KnownFrameworkReference", [])
        if not isinstance(raw, list):
            raise CatalogError("Catalog 'frameworks' must be a list of tables")
        return cls(
            entries=[KnownFrameworkEntry.from_mapping(item) for item in raw],
            source_description=kwargs.get("source_description"))

    def to_mapping(self) -> dict[str, Any]:
        return {"frameworks": [e.to_mapping() for e in self.entries]}
