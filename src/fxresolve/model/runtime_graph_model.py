from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from fxresolve.helper.multiformat_deserializable_mixin import MultiformatDeserializableMixin
from fxresolve.helper.multiformat_serializable_mixin import MultiformatSerializableMixin


class RuntimeGraphError(ValueError):
    pass


@dataclass(slots=True, frozen=True)
class RuntimeGraph(MultiformatSerializableMixin, MultiformatDeserializableMixin):
    """
    Read-only RID compatibility graph.

    Each RID maps to its immediate, more general fallbacks in preference
    order, as in the ``#import`` lists of a ``runtime.json`` document:

        {"runtimes": {"linux-x64": {"#import": ["linux", "unix-x64"]}}}
    """
    runtimes: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self):
        frozen = {str(rid): tuple(imports) for rid, imports in self.runtimes.items()}
        object.__setattr__(self, "runtimes", MappingProxyType(frozen))

    def __contains__(self, rid: object) -> bool:
        return rid in self.runtimes

    def __len__(self) -> int:
        return len(self.runtimes)

    def contains(self, rid: str) -> bool:
        return rid in self.runtimes

    def imports(self, rid: str) -> tuple[str, ...]:
        return self.runtimes.get(rid, ())

    def expand(self, rid: str) -> Iterator[str]:
        """
        Yield ``rid`` followed by every RID it falls back to, breadth-first,
        each at most once. A RID unknown to the graph yields only itself.
        """
        yield rid
        seen = {rid}
        queue = deque([rid])
        while queue:
            current = queue.popleft()
            for parent in self.imports(current):
                if parent not in seen:
                    seen.add(parent)
                    yield parent
                    queue.append(parent)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], **_: Any) -> RuntimeGraph:
        """
        Build a graph from a ``runtime.json`` style mapping.

        Raises:
            RuntimeGraphError: If ``runtimes`` is missing or malformed.
        """
        raw = mapping.get("runtimes")
        if not isinstance(raw, Mapping):
            raise RuntimeGraphError("Runtime graph document has no 'runtimes' table")
        runtimes: dict[str, tuple[str, ...]] = {}
        for rid, description in raw.items():
            if description is None:
                description = {}
            if not isinstance(description, Mapping):
                raise RuntimeGraphError(f"Runtime {rid!r} must map to a table")
            imports = description.get("#import", [])
            if isinstance(imports, str) or not isinstance(imports, (list, tuple)):
                raise RuntimeGraphError(f"Runtime {rid!r} has a malformed '#import' list")
            runtimes[str(rid)] = tuple(str(i) for i in imports)
        return cls(runtimes=runtimes)

    def to_mapping(self) -> dict[str, Any]:
        return {"runtimes": {rid: {"#import": list(imports)} for rid, imports in self.runtimes.items()}}
