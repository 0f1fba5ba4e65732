from __future__ import annotations

import logging
import sys
from importlib.metadata import PackageNotFoundError, version as get_version
from pathlib import Path
from typing import Sequence

from fxresolve.model.resolution_event import EventType, ResolutionEvent, StageType
from fxresolve.model.resolution_output_model import ResolutionResult
from fxresolve.model.resolveproject_model import ResolveProject
from fxresolve.resolution.audit.audit_emitter import emit_audit_log
from fxresolve.resolution.cli import create_arg_parser
from fxresolve.resolution.engine.orchestrator import resolve_framework_references
from fxresolve.resolution.output.runtime_config import write_runtime_config
from fxresolve.resolution.sources.catalog_loader import load_effective_catalog

logger = logging.getLogger(__name__)


def fxresolve_version() -> str:
    try:
        return get_version("fxresolve")
    except PackageNotFoundError:
        return "unknown"


def load_project(args) -> ResolveProject:
    """Project file values first, then command-line overrides."""
    if args.project:
        project = ResolveProject.load_file(args.project)
    else:
        project = ResolveProject(base_dir=Path.cwd())
    project.override_from_mapping(ResolveProject.cli_to_mapping(args))
    return project


def run(argv: Sequence[str] | None = None) -> ResolutionResult | None:
    """
    Central orchestration entry point for fxresolve.

    High-level flow:
      - parse arguments and load the project configuration
      - load the effective catalog
      - resolve framework references
      - write the result (and optionally a runtimeconfig.json)
      - emit the audit log when requested
    """
    args = create_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s")

    if args.version:
        print(f"fxresolve {fxresolve_version()}")
        return None

    project = load_project(args)
    context = project.to_context()
    catalog = load_effective_catalog(
        strategy_name=project.catalog_strategy or "merge",
        user_catalog_path=project.catalog,
        inline_entries=project.known_frameworks)
    logger.debug("Using catalog %s (%d entries)", catalog.source_description, len(catalog))

    result = resolve_framework_references(
        context,
        catalog,
        project.to_requests(),
        max_workers=args.workers)

    text = result.serialize(fmt=args.format)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        destination = str(args.output)
    else:
        print(text)
        destination = "stdout"
    result.audit_log.append(ResolutionEvent.make(
        StageType.OUTPUT,
        EventType.OUTPUT,
        message=f"Wrote {args.format} result to {destination}",
        payload={"format": args.format, "destination": destination}))

    if args.runtimeconfig:
        path = write_runtime_config(result, context, args.runtimeconfig)
        result.audit_log.append(ResolutionEvent.make(
            StageType.OUTPUT,
            EventType.OUTPUT,
            message=f"Wrote runtime configuration to {path}",
            payload={"path": str(path)}))

    if args.audit_log:
        emit_audit_log(result, dest=args.audit_log)

    for diagnostic in result.errors:
        print(f"fxresolve: error: {diagnostic.message}", file=sys.stderr)
    return result


def main(argv: Sequence[str] | None = None) -> None:
    try:
        result = run(argv)
    except KeyboardInterrupt:
        sys.exit(1)
    except Exception as e:
        print(f"fxresolve: error: {e}", file=sys.stderr)
        sys.exit(1)
    if result is not None and result.has_errors:
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
