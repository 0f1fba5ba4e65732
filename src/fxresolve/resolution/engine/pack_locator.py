from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

PathProbe = Callable[[Path], bool]

logger = logging.getLogger(__name__)


def directory_exists(path: Path) -> bool:
    return path.is_dir()


def targeting_pack_path(pack_root: Path | str, package_name: str, version: str) -> Path:
    return Path(pack_root) / package_name / version


def locate_targeting_pack(
        pack_root: Optional[Path | str],
        package_name: str,
        version: str,
        exists: PathProbe = directory_exists) -> Optional[Path]:
    """
    Look for an installed targeting pack at ``pack_root/package_name/version``.

    Args:
        pack_root (Optional[Path | str]): The targeting pack root, e.g.
            ``/usr/share/dotnet/packs``. None or empty means no local packs.
        package_name (str): The targeting pack package id.
        version (str): The targeting pack version.
        exists (PathProbe): Filesystem probe; errors it raises propagate.

    Returns:
        Optional[Path]: The pack directory if present, otherwise None.
    """
    if not pack_root:
        return None
    candidate = targeting_pack_path(pack_root, package_name, version)
    if exists(candidate):
        logger.debug("Found targeting pack %s %s at %s", package_name, version, candidate)
        return candidate
    logger.debug("Targeting pack %s %s not found under %s", package_name, version, pack_root)
    return None
