from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from fxresolve.helper.multiformat_serializable_mixin import MultiformatSerializableMixin
from fxresolve.model.framework_version_model import FrameworkVersion


@dataclass(slots=True, frozen=True)
class ResolutionContext(MultiformatSerializableMixin):
    """
    Per-invocation settings shared by every framework reference being resolved.

    Attributes:
        target_framework_identifier (str): e.g. ``.NETCoreApp``.
        target_framework_version (FrameworkVersion): e.g. ``8.0``.
        self_contained (bool): Whether runtime packs are needed.
        runtime_identifier (Optional[str]): The requested RID, if any.
        runtime_framework_version (Optional[str]): Run-wide runtime version override.
        target_latest_runtime_patch (bool): Run-wide latest-patch flag.
        targeting_pack_root (Optional[Path]): Where installed targeting packs live.
        enable_targeting_pack_download (bool): Whether missing targeting packs
            are queued for download.
        runtime_graph_path (Optional[Path]): The RID graph document; None selects
            the embedded default graph.
    """
    target_framework_identifier: str
    target_framework_version: FrameworkVersion
    self_contained: bool = False
    runtime_identifier: Optional[str] = None
    runtime_framework_version: Optional[str] = None
    target_latest_runtime_patch: bool = False
    targeting_pack_root: Optional[Path] = None
    enable_targeting_pack_download: bool = False
    runtime_graph_path: Optional[Path] = None

    @property
    def wants_runtime_packs(self) -> bool:
        return self.self_contained and bool(self.runtime_identifier)

    def to_mapping(self) -> dict[str, Any]:
        return {
            "target_framework_identifier": self.target_framework_identifier,
            "target_framework_version": str(self.target_framework_version),
            "self_contained": self.self_contained,
            "runtime_identifier": self.runtime_identifier,
            "runtime_framework_version": self.runtime_framework_version,
            "target_latest_runtime_patch": self.target_latest_runtime_patch,
            "targeting_pack_root": str(self.targeting_pack_root) if self.targeting_pack_root else None,
            "enable_targeting_pack_download": self.enable_targeting_pack_download,
            "runtime_graph_path": str(self.runtime_graph_path) if self.runtime_graph_path else None,
        }
