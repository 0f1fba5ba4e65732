from __future__ import annotations

from typing import Iterable

from fxresolve.model.framework_version_model import FrameworkVersion, normalize_version
from fxresolve.model.known_framework_model import KnownFrameworkEntry


def filter_catalog(
        catalog: Iterable[KnownFrameworkEntry],
        identifier: str,
        version: FrameworkVersion | str) -> list[KnownFrameworkEntry]:
    """
    Select the catalog entries that apply to the requested target framework.

    An entry applies when its target framework identifier equals
    ``identifier`` ignoring case and its normalized version equals the
    normalized requested version (so ``6.0.0.0`` matches ``6.0``). Catalog
    order is preserved; no match yields an empty list.

    Args:
        catalog (Iterable[KnownFrameworkEntry]): The full known-framework catalog.
        identifier (str): The requested target framework identifier, e.g. ``.NETCoreApp``.
        version (FrameworkVersion | str): The requested target framework version.

    Returns:
        list[KnownFrameworkEntry]: The applicable entries in catalog order.
    """
    wanted = normalize_version(version)
    return [entry for entry in catalog if entry.target_framework.matches(identifier, wanted)]
