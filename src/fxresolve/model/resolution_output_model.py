from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from fxresolve.helper.multiformat_serializable_mixin import MultiformatSerializableMixin
from fxresolve.model.resolution_event import LevelType, ResolutionEvent

UNRECOGNIZED_RUNTIME_IDENTIFIER = "UNRECOGNIZED_RUNTIME_IDENTIFIER"


@dataclass(slots=True, frozen=True)
class PackageDownloadRequest(MultiformatSerializableMixin):
    package_name: str
    version: str

    def to_mapping(self) -> dict[str, Any]:
        return {"package_name": self.package_name, "version": self.version}


@dataclass(slots=True, frozen=True)
class RuntimeFrameworkDescriptor(MultiformatSerializableMixin):
    """A shared framework the application needs at launch, for the runtime configuration."""
    runtime_framework_name: str
    version: str
    source_entry_name: str

    def to_mapping(self) -> dict[str, Any]:
        return {
            "runtime_framework_name": self.runtime_framework_name,
            "version": self.version,
            "source_entry_name": self.source_entry_name,
        }


@dataclass(slots=True, frozen=True)
class TargetingPackDescriptor(MultiformatSerializableMixin):
    """A targeting pack to compile against; ``resolved_local_path`` is set when it is already on disk."""
    entry_name: str
    package_name: str
    version: str
    resolved_local_path: Optional[Path] = None

    def to_mapping(self) -> dict[str, Any]:
        return {
            "entry_name": self.entry_name,
            "package_name": self.package_name,
            "version": self.version,
            "resolved_local_path": str(self.resolved_local_path) if self.resolved_local_path else None,
        }


@dataclass(slots=True, frozen=True)
class RuntimePackDescriptor(MultiformatSerializableMixin):
    package_name: str
    version: str
    source_entry_name: str
    resolved_rid: str

    def to_mapping(self) -> dict[str, Any]:
        return {
            "package_name": self.package_name,
            "version": self.version,
            "source_entry_name": self.source_entry_name,
            "resolved_rid": self.resolved_rid,
        }


@dataclass(slots=True, frozen=True)
class UnavailableRuntimePackNotice(MultiformatSerializableMixin):
    """No runtime pack of ``entry_name`` fits the (graph-known) ``requested_rid``."""
    entry_name: str
    requested_rid: str

    def to_mapping(self) -> dict[str, Any]:
        return {"entry_name": self.entry_name, "requested_rid": self.requested_rid}


@dataclass(slots=True, frozen=True)
class ResolutionDiagnostic(MultiformatSerializableMixin):
    code: str
    message: str
    level: LevelType = LevelType.ERROR
    payload: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def unrecognized_runtime_identifier(cls, rid: str) -> ResolutionDiagnostic:
        return cls(
            code=UNRECOGNIZED_RUNTIME_IDENTIFIER,
            message=f"The specified runtime identifier '{rid}' is not recognized.",
            payload=MappingProxyType({"runtime_identifier": rid}))

    def to_mapping(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "level": self.level.value,
            "message": self.message,
            "payload": dict(self.payload),
        }


@dataclass(slots=True)
class ResolutionResult(MultiformatSerializableMixin):
    """
    Everything produced by one resolution run. Each collection follows
    catalog order; ``errors`` holds at most one unrecognized runtime
    identifier diagnostic.
    """
    packages_to_download: list[PackageDownloadRequest] = field(default_factory=list)
    runtime_frameworks: list[RuntimeFrameworkDescriptor] = field(default_factory=list)
    targeting_packs: list[TargetingPackDescriptor] = field(default_factory=list)
    runtime_packs: list[RuntimePackDescriptor] = field(default_factory=list)
    unavailable_runtime_packs: list[UnavailableRuntimePackNotice] = field(default_factory=list)
    errors: list[ResolutionDiagnostic] = field(default_factory=list)
    audit_log: list[ResolutionEvent] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.level == LevelType.ERROR for d in self.errors)

    @property
    def is_empty(self) -> bool:
        return not (self.packages_to_download or self.runtime_frameworks or self.targeting_packs
                    or self.runtime_packs or self.unavailable_runtime_packs or self.errors)

    def extend(self, other: ResolutionResult) -> None:
        """Append another (per-entry) result's collections to this one, keeping order."""
        self.packages_to_download.extend(other.packages_to_download)
        self.runtime_frameworks.extend(other.runtime_frameworks)
        self.targeting_packs.extend(other.targeting_packs)
        self.runtime_packs.extend(other.runtime_packs)
        self.unavailable_runtime_packs.extend(other.unavailable_runtime_packs)
        self.errors.extend(other.errors)
        self.audit_log.extend(other.audit_log)

    def to_mapping(self, include_audit_log: bool = False) -> dict[str, Any]:
        """
        Return the outputs as a mapping. Empty collections are left out, so a
        run that produced nothing serializes to an empty mapping.
        """
        sections = {
            "packages_to_download": self.packages_to_download,
            "runtime_frameworks": self.runtime_frameworks,
            "targeting_packs": self.targeting_packs,
            "runtime_packs": self.runtime_packs,
            "unavailable_runtime_packs": self.unavailable_runtime_packs,
            "errors": self.errors,
        }
        if include_audit_log:
            sections["audit_log"] = self.audit_log
        return {key: [item.to_mapping() for item in items] for key, items in sections.items() if items}
