from __future__ import annotations

import logging
from argparse import Namespace
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from fxresolve.helper.multiformat_serializable_mixin import MultiformatSerializableMixin
from fxresolve.helper.toml_utils import load_toml_text
from fxresolve.model.framework_request_model import FrameworkRequest, parse_tri_state
from fxresolve.model.framework_version_model import FrameworkVersion, TargetFramework
from fxresolve.model.resolution_context_model import ResolutionContext

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = (
    "target_framework",
    "target_framework_identifier",
    "target_framework_version",
    "runtime_identifier",
    "runtime_framework_version",
    "catalog_strategy",
)

_FLAG_FIELDS = (
    "self_contained",
    "target_latest_runtime_patch",
    "enable_targeting_pack_download",
)

_PATH_FIELDS = (
    "targeting_pack_root",
    "catalog",
    "runtime_graph",
)


class ResolveProjectError(Exception):
    pass


def _select_resolve_table(doc: Mapping[str, Any], toml_name: str) -> Mapping[str, Any] | None:
    # 1) pyproject.toml: only [tool.fxresolve]
    if toml_name == "pyproject.toml":
        table = doc.get("tool", {}).get("fxresolve")
        if isinstance(table, Mapping):
            return table
        logger.warning("[tool.fxresolve] not found in pyproject.toml")
        return None
    # 2) [tool.fxresolve] or [fxresolve] in any other file
    table = doc.get("tool", {}).get("fxresolve")
    if isinstance(table, Mapping):
        return table
    table = doc.get("fxresolve")
    if isinstance(table, Mapping):
        return table
    # 3) flat table
    logger.debug("Using the flat table of %s", toml_name)
    return doc


def _absolute(value: Any) -> Optional[Path | str]:
    # command-line paths are relative to the working directory, not the project file;
    # a blank value is passed through so that it clears the configured path
    if value is None:
        return None
    if not str(value).strip():
        return ""
    return Path(value).expanduser().resolve()


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_requests(value: Any) -> list[FrameworkRequest]:
    match value:
        case None:
            return []
        case str():
            return [FrameworkRequest.parse(value)]
        case list() | tuple():
            requests: list[FrameworkRequest] = []
            for item in value:
                if isinstance(item, FrameworkRequest):
                    requests.append(item)
                elif isinstance(item, Mapping):
                    requests.append(FrameworkRequest.from_mapping(item))
                else:
                    requests.append(FrameworkRequest.parse(str(item)))
            return requests
        case _:
            raise ResolveProjectError(f"frameworks must be a list, got {type(value).__name__}")


def _parse_known_frameworks(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, (list, tuple)):
        raise ResolveProjectError(f"known_frameworks must be a list of tables, got {type(value).__name__}")
    entries: list[dict[str, Any]] = []
    for item in value:
        if not isinstance(item, Mapping):
            raise ResolveProjectError(
                f"known_frameworks entries must be tables, got {type(item).__name__}")
        entries.append(dict(item))
    return entries


@dataclass(slots=True)
class ResolveProject(MultiformatSerializableMixin):
    """
    The resolution inputs of one project, as read from ``fxproject.toml`` (or
    ``[tool.fxresolve]`` in ``pyproject.toml``) and the command line.

    Values are kept loosely typed here; ``to_context()`` and ``to_requests()``
    parse them into the engine's types.
    """
    target_framework: Optional[str] = None
    target_framework_identifier: Optional[str] = None
    target_framework_version: Optional[str] = None
    runtime_identifier: Optional[str] = None
    runtime_framework_version: Optional[str] = None
    self_contained: Optional[bool] = None
    target_latest_runtime_patch: Optional[bool] = None
    enable_targeting_pack_download: Optional[bool] = None
    targeting_pack_root: Optional[Path] = None
    catalog: Optional[Path] = None
    catalog_strategy: Optional[str] = None
    runtime_graph: Optional[Path] = None

    frameworks: list[FrameworkRequest] = field(default_factory=list)
    known_frameworks: list[dict[str, Any]] = field(default_factory=list)

    # relative paths are resolved against this directory
    base_dir: Path = field(default_factory=Path)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None, *, base_dir: Path | None = None) -> ResolveProject:
        inst = cls(base_dir=base_dir or Path("."))
        inst.override_from_mapping(data)
        return inst

    def override_from_mapping(self, data: Mapping[str, Any] | None) -> None:
        """
        Apply values from ``data`` over the current ones. Keys that are absent
        or None leave the current value alone; lists replace wholesale.
        """
        if not data:
            return
        try:
            for name in _SCALAR_FIELDS:
                if data.get(name) is not None:
                    setattr(self, name, _optional_str(data[name]))
            for name in _FLAG_FIELDS:
                if data.get(name) is not None:
                    setattr(self, name, parse_tri_state(data[name]))
            for name in _PATH_FIELDS:
                if data.get(name) is not None:
                    setattr(self, name, self._resolve_path(data[name]))
            if data.get("frameworks") is not None:
                self.frameworks = _parse_requests(data["frameworks"])
            if data.get("known_frameworks") is not None:
                self.known_frameworks = _parse_known_frameworks(data["known_frameworks"])
        except ValueError as e:
            raise ResolveProjectError(str(e)) from e

    def _resolve_path(self, value: Any) -> Optional[Path]:
        text = str(value).strip()
        if not text:
            return None
        p = Path(text).expanduser()
        return p if p.is_absolute() else self.base_dir / p

    def to_context(self) -> ResolutionContext:
        """
        Parse the project into the engine's run-wide context.

        When ``target_latest_runtime_patch`` is not configured it follows
        ``self_contained``.

        Raises:
            ResolveProjectError: If no valid target framework is configured.
        """
        try:
            if self.target_framework:
                framework = TargetFramework.parse(self.target_framework)
                identifier, version = framework.identifier, framework.version
            elif self.target_framework_identifier and self.target_framework_version:
                identifier = self.target_framework_identifier
                version = FrameworkVersion.parse(self.target_framework_version)
            else:
                raise ResolveProjectError(
                    "A target framework is required (target_framework, or "
                    "target_framework_identifier with target_framework_version)")
        except ValueError as e:
            raise ResolveProjectError(str(e)) from e

        self_contained = bool(self.self_contained)
        latest_patch = self.target_latest_runtime_patch
        return ResolutionContext(
            target_framework_identifier=identifier,
            target_framework_version=version,
            self_contained=self_contained,
            runtime_identifier=self.runtime_identifier,
            runtime_framework_version=self.runtime_framework_version,
            target_latest_runtime_patch=self_contained if latest_patch is None else latest_patch,
            targeting_pack_root=self.targeting_pack_root,
            enable_targeting_pack_download=bool(self.enable_targeting_pack_download),
            runtime_graph_path=self.runtime_graph)

    def to_requests(self) -> list[FrameworkRequest]:
        return list(self.frameworks)

    def to_mapping(self) -> dict[str, Any]:
        return {
            "target_framework": self.target_framework,
            "target_framework_identifier": self.target_framework_identifier,
            "target_framework_version": self.target_framework_version,
            "runtime_identifier": self.runtime_identifier,
            "runtime_framework_version": self.runtime_framework_version,
            "self_contained": self.self_contained,
            "target_latest_runtime_patch": self.target_latest_runtime_patch,
            "enable_targeting_pack_download": self.enable_targeting_pack_download,
            "targeting_pack_root": str(self.targeting_pack_root) if self.targeting_pack_root else None,
            "catalog": str(self.catalog) if self.catalog else None,
            "catalog_strategy": self.catalog_strategy,
            "runtime_graph": str(self.runtime_graph) if self.runtime_graph else None,
            "frameworks": [r.to_mapping() for r in self.frameworks],
            "known_frameworks": [dict(m) for m in self.known_frameworks],
        }

    @staticmethod
    def load_file(path: Path) -> ResolveProject:
        """
        Read TOML from ``path``, select the fxresolve table and build a
        ResolveProject from it. Relative paths in the file are resolved
        against the file's directory.

        Raises:
            ResolveProjectError: If the file is missing, unreadable, or has
                no fxresolve configuration.
        """
        p = Path(path).expanduser().resolve()
        if not p.is_file():
            raise ResolveProjectError(f"Project file not found: {p}")
        try:
            doc = load_toml_text(p.read_text(encoding="utf-8"))
        except ValueError as e:
            raise ResolveProjectError(f"Invalid TOML in {p}: {e}") from e
        table = _select_resolve_table(doc, p.name)
        if table is None:
            raise ResolveProjectError(f"No fxresolve config found in {p}")
        return ResolveProject.from_mapping(table, base_dir=p.parent)

    @staticmethod
    def cli_to_mapping(args: Namespace) -> dict[str, Any]:
        """
        Normalize argparse.Namespace into the override_from_mapping() shape.
        Options that were not given are None and do not override anything.
        """
        return {
            "target_framework": args.target_framework,
            "runtime_identifier": args.runtime_identifier,
            "runtime_framework_version": args.runtime_framework_version,
            "self_contained": args.self_contained,
            "target_latest_runtime_patch": args.target_latest_runtime_patch,
            "enable_targeting_pack_download": args.enable_targeting_pack_download,
            "targeting_pack_root": _absolute(args.targeting_pack_root),
            "catalog": _absolute(args.catalog),
            "catalog_strategy": args.catalog_strategy,
            "runtime_graph": _absolute(args.runtime_graph),
            "frameworks": args.framework or None,
        }
