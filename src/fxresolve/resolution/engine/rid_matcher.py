from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterable, Optional

from fxresolve.model.known_framework_model import RID_PLACEHOLDER
from fxresolve.model.runtime_graph_model import RuntimeGraph


@dataclass(slots=True, frozen=True)
class RidMatch:
    """
    Outcome of matching a requested RID against a framework's supported RIDs.

    Attributes:
        matched_rid (Optional[str]): The best supported RID, or None.
        known_to_graph (bool): Whether the requested RID is a node of the graph.
            This does not depend on whether a match was found.
    """
    matched_rid: Optional[str]
    known_to_graph: bool

    @property
    def is_unrecognized(self) -> bool:
        return self.matched_rid is None and not self.known_to_graph

    @property
    def is_unavailable(self) -> bool:
        return self.matched_rid is None and self.known_to_graph


def match_runtime_identifier(
        graph: RuntimeGraph,
        requested_rid: str,
        supported_rids: Iterable[str]) -> RidMatch:
    """
    Find the best supported RID for ``requested_rid``.

    The requested RID itself is tried first, then the RIDs it falls back to in
    breadth-first order through the graph (e.g. ``linux-musl-x64`` →
    ``linux-x64`` → ``linux`` → ``unix`` → ``any``). The first one present in
    ``supported_rids`` wins.

    Args:
        graph (RuntimeGraph): The RID compatibility graph.
        requested_rid (str): The RID the project asked for.
        supported_rids (Iterable[str]): RIDs for which the framework ships runtime packs.

    Returns:
        RidMatch: The matched RID (or None) and whether the requested RID is
        known to the graph.
    """
    supported = frozenset(supported_rids)
    known = graph.contains(requested_rid)
    for candidate in graph.expand(requested_rid):
        if candidate in supported:
            return RidMatch(matched_rid=candidate, known_to_graph=known)
    return RidMatch(matched_rid=None, known_to_graph=known)


def runtime_pack_name(pattern: str, rid: str) -> str:
    return pattern.replace(RID_PLACEHOLDER, rid)


@dataclass(slots=True)
class RidDiagnostics:
    """
    Run-wide record of the unrecognized RID report.

    Shared by every catalog entry of one run so that the report is made once,
    however many entries (or worker threads) run into the same unknown RID.
    """
    _reported: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def unrecognized_reported(self) -> bool:
        return self._reported

    def claim_unrecognized(self) -> bool:
        """
        Compare-and-set: returns True for the first caller only, who is then
        responsible for reporting the unrecognized RID.
        """
        with self._lock:
            if self._reported:
                return False
            self._reported = True
            return True
