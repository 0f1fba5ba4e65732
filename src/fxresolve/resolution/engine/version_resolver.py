from __future__ import annotations

from typing import Optional

from fxresolve.model.framework_request_model import FrameworkRequest
from fxresolve.model.known_framework_model import KnownFrameworkEntry


def resolve_targeting_pack_version(
        entry: KnownFrameworkEntry,
        request: Optional[FrameworkRequest]) -> str:
    """The request's targeting pack version override, else the catalog default."""
    if request is not None and request.targeting_pack_version:
        return request.targeting_pack_version
    return entry.targeting_pack_version


def use_latest_patch(request: Optional[FrameworkRequest], global_use_latest_patch: bool) -> bool:
    if request is not None and request.target_latest_runtime_patch is not None:
        return request.target_latest_runtime_patch
    return bool(global_use_latest_patch)


def resolve_runtime_framework_version(
        entry: KnownFrameworkEntry,
        request: Optional[FrameworkRequest],
        global_version: Optional[str],
        global_use_latest_patch: bool) -> str:
    """
    Compute the effective runtime framework version for one catalog entry.

    Precedence, first non-empty value wins:
      1. the runtime version override on the framework request
      2. the run-wide runtime framework version
      3. the entry's latest runtime version if latest patch is wanted
         (request override if set, else the run-wide flag), otherwise its
         default runtime version

    Args:
        entry (KnownFrameworkEntry): The matched catalog entry.
        request (Optional[FrameworkRequest]): The project's reference to it, if any.
        global_version (Optional[str]): The run-wide runtime framework version.
        global_use_latest_patch (bool): The run-wide latest-patch flag.

    Returns:
        str: The runtime framework version. Never empty, since catalog entries
        always carry both a default and a latest version.
    """
    if request is not None and request.runtime_framework_version:
        return request.runtime_framework_version
    if global_version:
        return global_version
    if use_latest_patch(request, global_use_latest_patch):
        return entry.latest_runtime_version
    return entry.default_runtime_version
