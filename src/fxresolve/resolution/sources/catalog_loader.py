from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from fxresolve.model.known_framework_model import FrameworkCatalog, KnownFrameworkEntry

_DEFAULT_CATALOG_RESOURCE_PACKAGE = "fxresolve.resolution.sources"
_DEFAULT_CATALOG_RESOURCE_NAME = "known_frameworks.toml"

CATALOG_STRATEGIES = ("merge", "override")

logger = logging.getLogger(__name__)


def _catalog_override(
        base: list[KnownFrameworkEntry],
        override: list[KnownFrameworkEntry]) -> list[KnownFrameworkEntry]:
    """
    Replace the base catalog with the override catalog wholesale.

    Args:
        base: The catalog being replaced (unused beyond logging).
        override: The catalog that takes its place.

    Returns:
        A copy of the override entries.
    """
    logger.debug("Replacing %d catalog entries with %d", len(base), len(override))
    return list(override)


def _catalog_merge(
        base: list[KnownFrameworkEntry],
        override: list[KnownFrameworkEntry]) -> list[KnownFrameworkEntry]:
    """
    Merge two catalogs keyed by framework name and target framework.

    An override entry with the same key as a base entry replaces it at the
    base entry's position; other override entries are appended in their own
    order.

    Args:
        base: The catalog merged into.
        override: The entries that replace or extend the base.

    Returns:
        The merged catalog.
    """
    result = list(base)
    positions = {entry.key: i for i, entry in enumerate(result)}
    for entry in override:
        index = positions.get(entry.key)
        if index is None:
            positions[entry.key] = len(result)
            result.append(entry)
        else:
            result[index] = entry
    return result


def load_default_catalog() -> FrameworkCatalog:
    """
    Loads the catalog shipped with the package.

    Returns:
        FrameworkCatalog: The parsed embedded catalog.
    """
    text = (
        resources.files(_DEFAULT_CATALOG_RESOURCE_PACKAGE)
        .joinpath(_DEFAULT_CATALOG_RESOURCE_NAME)
        .read_text(encoding="utf-8")
    )
    return FrameworkCatalog.from_toml(
        text,
        source_description=f"embedded:{_DEFAULT_CATALOG_RESOURCE_PACKAGE}/{_DEFAULT_CATALOG_RESOURCE_NAME}")


def _load_file_catalog(path: Path) -> FrameworkCatalog:
    """
    Loads a catalog file in TOML, JSON or YAML form.

    Raises:
        FileNotFoundError: If the specified file does not exist.
        CatalogError: If an entry is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Known framework catalog not found: {path}")
    return FrameworkCatalog.from_file(path, source_description=f"file:{path}")


def load_effective_catalog(
        *,
        strategy_name: str = "merge",
        user_catalog_path: Optional[Path] = None,
        inline_entries: Optional[Sequence[Mapping[str, Any]]] = None) -> FrameworkCatalog:
    """
    Loads the effective known-framework catalog by overlaying the embedded
    catalog, an optional user catalog file, and optional inline entries from
    the project configuration, in increasing order of precedence.

    Args:
        strategy_name (str): How the user catalog file combines with the
            embedded one: "merge" (replace same-key entries, append new ones)
            or "override" (use the user catalog alone).
        user_catalog_path (Optional[Path]): Path to the user catalog file. If
            None, this step will be skipped.
        inline_entries (Optional[Sequence[Mapping[str, Any]]]): Entries from
            the project configuration; always merged on top.

    Returns:
        FrameworkCatalog: The effective catalog with a description of its sources.

    Raises:
        ValueError: If ``strategy_name`` is not a known strategy.
    """
    if strategy_name not in CATALOG_STRATEGIES:
        raise ValueError(f"Unknown catalog strategy {strategy_name!r}; expected one of {CATALOG_STRATEGIES}")

    # 1) Start from the embedded catalog
    default_catalog = load_default_catalog()
    entries = list(default_catalog.entries)
    source_parts: list[str] = [default_catalog.source_description]

    # 2) Overlay the user catalog file, if present
    if user_catalog_path is not None:
        file_catalog = _load_file_catalog(user_catalog_path)
        if strategy_name == "override":
            entries = _catalog_override(entries, file_catalog.entries)
        else:
            entries = _catalog_merge(entries, file_catalog.entries)
        source_parts.append(f"file:{user_catalog_path} ({strategy_name})")

    # 3) Inline entries from the project configuration (the highest precedence)
    if inline_entries:
        inline_catalog = FrameworkCatalog.from_mapping({"frameworks": list(inline_entries)})
        entries = _catalog_merge(entries, inline_catalog.entries)
        source_parts.append("inline:project")

    return FrameworkCatalog(entries=entries, source_description=" + ".join(source_parts))
