from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Optional

from fxresolve.model.framework_request_model import FrameworkRequest, index_requests
from fxresolve.model.known_framework_model import KnownFrameworkEntry
from fxresolve.model.resolution_context_model import ResolutionContext
from fxresolve.model.resolution_event import EventType, LevelType, ResolutionEvent, StageType
from fxresolve.model.resolution_output_model import (
    PackageDownloadRequest,
    ResolutionDiagnostic,
    ResolutionResult,
    RuntimeFrameworkDescriptor,
    RuntimePackDescriptor,
    TargetingPackDescriptor,
    UnavailableRuntimePackNotice,
)
from fxresolve.model.runtime_graph_model import RuntimeGraph
from fxresolve.resolution.engine.catalog_filter import filter_catalog
from fxresolve.resolution.engine.pack_locator import PathProbe, directory_exists, locate_targeting_pack
from fxresolve.resolution.engine.rid_matcher import RidDiagnostics, match_runtime_identifier, runtime_pack_name
from fxresolve.resolution.engine.version_resolver import (
    resolve_runtime_framework_version,
    resolve_targeting_pack_version,
)
from fxresolve.resolution.sources.runtime_graph_loader import load_runtime_graph

GraphLoader = Callable[[Optional[Path]], RuntimeGraph]

logger = logging.getLogger(__name__)


class _LazyRuntimeGraph:
    """Loads the RID graph on first use, at most once per run."""

    def __init__(self, loader: GraphLoader, path: Optional[Path]):
        self._loader = loader
        self._path = path
        self._graph: RuntimeGraph | None = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._graph is not None

    def get(self) -> RuntimeGraph:
        with self._lock:
            if self._graph is None:
                self._graph = self._loader(self._path)
            return self._graph


def _resolve_targeting_pack(
        entry: KnownFrameworkEntry,
        request: Optional[FrameworkRequest],
        context: ResolutionContext,
        pack_exists: PathProbe,
        out: ResolutionResult) -> None:
    version = resolve_targeting_pack_version(entry, request)
    path = locate_targeting_pack(context.targeting_pack_root, entry.targeting_pack_name, version, pack_exists)
    if path is not None:
        out.audit_log.append(ResolutionEvent.make(
            StageType.LOCATE,
            EventType.RESOLVE,
            message=f"Targeting pack {entry.targeting_pack_name} {version} found locally",
            payload={"entry": entry.name, "path": str(path)}))
    elif context.enable_targeting_pack_download:
        out.packages_to_download.append(PackageDownloadRequest(entry.targeting_pack_name, version))
        out.audit_log.append(ResolutionEvent.make(
            StageType.LOCATE,
            EventType.DECISION,
            message=f"Targeting pack {entry.targeting_pack_name} {version} queued for download",
            payload={"entry": entry.name}))
    out.targeting_packs.append(TargetingPackDescriptor(
        entry_name=entry.name,
        package_name=entry.targeting_pack_name,
        version=version,
        resolved_local_path=path))


def _resolve_runtime_packs(
        entry: KnownFrameworkEntry,
        runtime_version: str,
        context: ResolutionContext,
        graph: _LazyRuntimeGraph,
        diagnostics: RidDiagnostics,
        out: ResolutionResult) -> None:
    rid = context.runtime_identifier
    for pattern in entry.runtime_pack_name_patterns:
        match = match_runtime_identifier(graph.get(), rid, entry.runtime_pack_rids)
        if match.matched_rid is not None:
            package_name = runtime_pack_name(pattern, match.matched_rid)
            out.runtime_packs.append(RuntimePackDescriptor(
                package_name=package_name,
                version=runtime_version,
                source_entry_name=entry.name,
                resolved_rid=match.matched_rid))
            out.packages_to_download.append(PackageDownloadRequest(package_name, runtime_version))
            out.audit_log.append(ResolutionEvent.make(
                StageType.RID,
                EventType.RESOLVE,
                message=f"Runtime pack {package_name} {runtime_version} selected for {rid}",
                payload={"entry": entry.name, "requested_rid": rid, "resolved_rid": match.matched_rid}))
        elif match.known_to_graph:
            # may be harmless: the framework could be referenced only transitively
            out.unavailable_runtime_packs.append(UnavailableRuntimePackNotice(entry.name, rid))
            out.audit_log.append(ResolutionEvent.make(
                StageType.RID,
                EventType.DECISION,
                LevelType.WARN,
                message=f"No runtime pack of {entry.name} is available for {rid}",
                payload={"entry": entry.name, "requested_rid": rid}))
        elif diagnostics.claim_unrecognized():
            diagnostic = ResolutionDiagnostic.unrecognized_runtime_identifier(rid)
            out.errors.append(diagnostic)
            out.audit_log.append(ResolutionEvent.make(
                StageType.RID,
                EventType.FAIL,
                LevelType.ERROR,
                message=diagnostic.message,
                payload={"entry": entry.name, "requested_rid": rid}))


def resolve_entry(
        entry: KnownFrameworkEntry,
        request: Optional[FrameworkRequest],
        context: ResolutionContext,
        graph: _LazyRuntimeGraph,
        diagnostics: RidDiagnostics,
        pack_exists: PathProbe = directory_exists) -> ResolutionResult:
    """
    Resolve a single catalog entry into its share of the outputs.

    The returned partial result carries the entry's targeting pack, its
    runtime packs (or unavailable notices), its runtime framework and any
    download requests, in that order.
    """
    out = ResolutionResult()

    _resolve_targeting_pack(entry, request, context, pack_exists, out)

    runtime_version = resolve_runtime_framework_version(
        entry,
        request,
        context.runtime_framework_version,
        context.target_latest_runtime_patch)
    out.audit_log.append(ResolutionEvent.make(
        StageType.VERSION,
        EventType.RESOLVE,
        message=f"{entry.runtime_framework_name} resolved to {runtime_version}",
        payload={"entry": entry.name, "version": runtime_version, "requested": request is not None}))

    if context.wants_runtime_packs and entry.has_runtime_packs:
        _resolve_runtime_packs(entry, runtime_version, context, graph, diagnostics, out)

    out.runtime_frameworks.append(RuntimeFrameworkDescriptor(
        runtime_framework_name=entry.runtime_framework_name,
        version=runtime_version,
        source_entry_name=entry.name))
    return out


def resolve_framework_references(
        context: ResolutionContext,
        catalog: Iterable[KnownFrameworkEntry],
        requests: Iterable[FrameworkRequest],
        *,
        graph_loader: GraphLoader = load_runtime_graph,
        pack_exists: PathProbe = directory_exists,
        max_workers: int | None = None) -> ResolutionResult:
    """
    Resolve the project's framework references into targeting packs, runtime
    frameworks, runtime packs and download requests.

    Every catalog entry applicable to the context's target framework is
    resolved, not only the requested ones, so that frameworks pulled in
    transitively still get their packs. Requests naming an entry that is not
    in the filtered catalog are ignored.

    Problems are reported as data: an unknown RID adds one diagnostic to
    ``errors`` for the whole run; a known RID without a runtime pack adds an
    unavailable notice for that entry. Exceptions only come from the
    collaborators (graph loading, filesystem probe).

    Args:
        context (ResolutionContext): Run-wide settings.
        catalog (Iterable[KnownFrameworkEntry]): The full known-framework catalog.
        requests (Iterable[FrameworkRequest]): The project's framework references.
        graph_loader (GraphLoader): Loads the RID graph from
            ``context.runtime_graph_path``; called at most once, and only
            when runtime packs are needed.
        pack_exists (PathProbe): Filesystem probe for targeting packs.
        max_workers (int | None): Resolve entries on a thread pool of this
            size; None or 1 resolves sequentially. Output order is the same.

    Returns:
        ResolutionResult: The collected outputs and the run's audit log.
    """
    result = ResolutionResult()
    request_list = list(requests)

    if not request_list:
        result.audit_log.append(ResolutionEvent.make(
            StageType.LIFECYCLE,
            EventType.SKIP,
            message="No framework references; nothing to resolve"))
        return result

    result.audit_log.append(ResolutionEvent.make(
        StageType.LIFECYCLE,
        EventType.START,
        message="Resolving framework references",
        payload=context.to_mapping()))

    entries = filter_catalog(catalog, context.target_framework_identifier, context.target_framework_version)
    by_name = index_requests(request_list)
    result.audit_log.append(ResolutionEvent.make(
        StageType.FILTER,
        EventType.RESOLVE,
        message=f"{len(entries)} known framework(s) apply to "
                f"{context.target_framework_identifier} {context.target_framework_version}",
        payload={"entries": [e.name for e in entries]}))

    for name in by_name.keys() - {e.name for e in entries}:
        logger.debug("Ignoring framework reference %s: not in the catalog for this target framework", name)

    graph = _LazyRuntimeGraph(graph_loader, context.runtime_graph_path)
    diagnostics = RidDiagnostics()

    def work(entry: KnownFrameworkEntry) -> ResolutionResult:
        return resolve_entry(entry, by_name.get(entry.name), context, graph, diagnostics, pack_exists)

    if max_workers and max_workers > 1 and len(entries) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            partials = list(pool.map(work, entries))
    else:
        partials = [work(entry) for entry in entries]

    for partial in partials:
        result.extend(partial)

    result.audit_log.append(ResolutionEvent.make(
        StageType.LIFECYCLE,
        EventType.COMPLETE,
        LevelType.ERROR if result.has_errors else LevelType.INFO,
        message="Resolved framework references",
        payload={
            "targeting_packs": len(result.targeting_packs),
            "runtime_packs": len(result.runtime_packs),
            "packages_to_download": len(result.packages_to_download),
            "unavailable_runtime_packs": len(result.unavailable_runtime_packs),
            "graph_loaded": graph.loaded,
        }))
    return result
