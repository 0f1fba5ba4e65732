from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from fxresolve.model.resolution_context_model import ResolutionContext
from fxresolve.model.resolution_output_model import ResolutionResult


def target_framework_moniker(context: ResolutionContext) -> str:
    """Short moniker of the context's target framework, e.g. ``net8.0`` or ``netcoreapp3.1``."""
    version = context.target_framework_version
    if context.target_framework_identifier.casefold() == ".netcoreapp":
        prefix = "net" if version.major >= 5 else "netcoreapp"
        return f"{prefix}{version.major}.{version.minor}"
    return f"{context.target_framework_identifier},Version=v{version.normalized()}"


def runtime_config_mapping(result: ResolutionResult, context: ResolutionContext) -> dict[str, Any]:
    """
    Build the ``runtimeconfig.json`` document for the resolved runtime frameworks.

    A framework-dependent application lists the frameworks the launcher must
    find: one goes under ``framework``, several under ``frameworks``. A
    self-contained application carries its frameworks, recorded under
    ``includedFrameworks``.
    """
    frameworks = [
        {"name": rf.runtime_framework_name, "version": rf.version}
        for rf in result.runtime_frameworks
    ]
    options: dict[str, Any] = {"tfm": target_framework_moniker(context)}
    if context.self_contained:
        options["includedFrameworks"] = frameworks
    elif len(frameworks) == 1:
        options["framework"] = frameworks[0]
    elif frameworks:
        options["frameworks"] = frameworks
    return {"runtimeOptions": options}


def write_runtime_config(result: ResolutionResult, context: ResolutionContext, path: Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(runtime_config_mapping(result, context), indent=2) + "\n", encoding="utf-8")
    return p
