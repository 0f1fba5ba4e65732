from __future__ import annotations

import datetime
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional

from fxresolve.helper.multiformat_serializable_mixin import MultiformatSerializableMixin


# --------------------------------------------------------------------------- #
# Typed + runtime-safe event type definition
# --------------------------------------------------------------------------- #

class StageType(str, Enum):
    LIFECYCLE = "LIFECYCLE"  # the overall resolution run: start → complete
    FILTER = "FILTER"  # catalog filtering for the target framework
    VERSION = "VERSION"  # targeting pack and runtime framework versions
    RID = "RID"  # runtime identifier matching and runtime packs
    LOCATE = "LOCATE"  # targeting pack lookup on disk
    OUTPUT = "OUTPUT"  # serialization of results


class LevelType(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class EventType(str, Enum):
    COMPLETE = "COMPLETE"  # Successfully finished
    DECISION = "DECISION"  # Conditional logic branch taken
    FAIL = "FAIL"  # Run failed, unrecoverable
    INPUT = "INPUT"  # External input received or used
    OUTPUT = "OUTPUT"  # Descriptor or artifact produced
    RESOLVE = "RESOLVE"  # Item was resolved (version, RID, path)
    SKIP = "SKIP"  # Intentionally bypassed
    START = "START"  # Beginning of a stage


# --------------------------------------------------------------------------- #
# Data model
# --------------------------------------------------------------------------- #

@dataclass(slots=True, frozen=True)
class ResolutionEvent(MultiformatSerializableMixin):
    """
    Immutable audit event recorded while resolving framework references.
    """
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: EventType = EventType.DECISION
    level: LevelType = LevelType.INFO
    message: Optional[str] = field(default=None)
    payload: Mapping[str, Any] | None = field(default=None)
    stage: StageType | None = None
    timestamp: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc))

    def __post_init__(self):
        if not isinstance(self.stage, StageType):
            raise TypeError("ResolutionEvent.stage must be a StageType")
        if not isinstance(self.event_type, EventType):
            raise TypeError("ResolutionEvent.event_type must be an EventType")
        if not isinstance(self.level, LevelType):
            raise TypeError("ResolutionEvent.level must be a LevelType")

    def to_mapping(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.event_type.value,
            "level": self.level.value,
            "message": self.message or "",
            "payload": dict(self.payload or {}),
            "stage": self.stage.value if self.stage else None,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def make(
            cls,
            stage: StageType,
            event_type: EventType,
            level: LevelType = LevelType.INFO,
            *,
            message: str | None = None,
            payload: dict[str, Any] | None = None) -> ResolutionEvent:
        """Convenience factory for constructing and timestamping ResolutionEvents uniformly."""
        return cls(
            stage=stage,
            event_type=event_type,
            level=level,
            message=message,
            payload=MappingProxyType(dict(payload or {})))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], **_: Any) -> ResolutionEvent:
        return ResolutionEvent(
            event_id=mapping.get("event_id", str(uuid.uuid4())),
            event_type=EventType(mapping.get("event_type", EventType.DECISION.value)),
            level=LevelType(mapping.get("level", LevelType.INFO.value)),
            message=mapping.get("message"),
            payload=MappingProxyType(dict(mapping.get("payload") or {})),
            stage=StageType(mapping.get("stage", StageType.LIFECYCLE.value)),
            timestamp=datetime.datetime.fromisoformat(
                mapping.get("timestamp", datetime.datetime.now(datetime.timezone.utc).isoformat())))
