from __future__ import annotations

import functools
import json
import logging
from importlib import resources
from pathlib import Path
from typing import Optional

from fxresolve.model.runtime_graph_model import RuntimeGraph, RuntimeGraphError

_DEFAULT_GRAPH_RESOURCE_PACKAGE = "fxresolve.resolution.sources"
_DEFAULT_GRAPH_RESOURCE_NAME = "runtime.json"

logger = logging.getLogger(__name__)


def _parse_graph_text(text: str, source: str) -> RuntimeGraph:
    try:
        graph = RuntimeGraph.from_json(text)
    except RuntimeGraphError:
        raise
    except json.JSONDecodeError as e:
        raise RuntimeGraphError(f"Runtime graph {source} is not valid JSON: {e}") from e
    except ValueError as e:
        raise RuntimeGraphError(f"Runtime graph {source} must be a JSON object: {e}") from e
    logger.debug("Loaded runtime graph with %d RIDs from %s", len(graph), source)
    return graph


@functools.lru_cache(maxsize=1)
def load_default_runtime_graph() -> RuntimeGraph:
    """Load the RID graph shipped with the package."""
    text = (
        resources.files(_DEFAULT_GRAPH_RESOURCE_PACKAGE)
        .joinpath(_DEFAULT_GRAPH_RESOURCE_NAME)
        .read_text(encoding="utf-8")
    )
    return _parse_graph_text(text, f"embedded:{_DEFAULT_GRAPH_RESOURCE_PACKAGE}/{_DEFAULT_GRAPH_RESOURCE_NAME}")


@functools.lru_cache(maxsize=16)
def _load_graph_file(path: Path, mtime_ns: int) -> RuntimeGraph:
    return _parse_graph_text(path.read_text(encoding="utf-8"), str(path))


def load_runtime_graph(path: Optional[Path | str] = None) -> RuntimeGraph:
    """
    Load a ``runtime.json`` style RID graph.

    Loads are cached per resolved path and modification time, so repeated
    runs against the same unchanged file parse it once.

    Args:
        path (Optional[Path | str]): The graph document. None selects the
            embedded default graph.

    Returns:
        RuntimeGraph: The parsed graph.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        RuntimeGraphError: If the document is not a valid runtime graph.
    """
    if path is None:
        return load_default_runtime_graph()
    p = Path(path).expanduser().resolve()
    if not p.is_file():
        raise FileNotFoundError(f"Runtime graph file not found: {p}")
    return _load_graph_file(p, p.stat().st_mtime_ns)
