"""Schemas for current-state.yaml and tracking-plan.yaml.

current-state.yaml records what the audit observed in the codebase: each
event with its liveness, where it is fired and which properties it sends,
plus identify/group calls and free-text pattern notes.

tracking-plan.yaml is the target-state analog: the events, properties and
identity calls the product should emit.

Both files accept shorthand forms the audit skill tends to produce:
- locations as ``"src/app.ts:42"`` strings or ``{file, line}`` mappings
- properties as bare names or ``{name, type, required, description}`` mappings
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventStatus(str, Enum):
    """Liveness of an observed event.

    - LIVE: the tracking call is reachable and fires
    - ORPHANED: the event is defined (constant, wrapper, enum) but nothing fires it
    """

    LIVE = "LIVE"
    ORPHANED = "ORPHANED"


class Origin(str, Enum):
    """Where a tracking call runs."""

    FRONTEND = "frontend"
    BACKEND = "backend"


class IdentityCallType(str, Enum):
    IDENTIFY = "identify"
    GROUP = "group"


class SourceLocation(BaseModel):
    """A concrete ``file:line`` where a call was observed."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(..., min_length=1, description="Path relative to the project root")
    line: int = Field(..., ge=1, description="1-based line number")

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"

    @classmethod
    def parse(cls, value: str) -> "SourceLocation":
        """Parse ``"path/to/file.ts:42"``."""
        return cls(**_split_location(value))


def _split_location(value: str) -> dict[str, Any]:
    file_part, sep, line_part = value.strip().rpartition(":")
    if not sep or not file_part or not line_part.strip().isdigit():
        raise ValueError(f"location must look like 'path/to/file:line', got {value!r}")
    return {"file": file_part, "line": int(line_part)}


class Property(BaseModel):
    """An event property or identity trait."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: Optional[str] = Field(
        default=None,
        description="string | number | boolean | array | object (free text is accepted)",
    )
    required: Optional[bool] = None
    description: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value


def _coerce_properties(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, dict):
        # Mapping form: {plan: string, seats: {type: number}}
        items = []
        for key, definition in value.items():
            if isinstance(definition, dict):
                items.append({"name": key, **definition})
            elif isinstance(definition, str):
                items.append({"name": key, "type": definition})
            else:
                items.append({"name": key})
        return items
    if isinstance(value, list):
        return [{"name": item} if isinstance(item, str) else item for item in value]
    return value


def _coerce_locations(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if isinstance(value, list):
        return [_split_location(item) if isinstance(item, str) else item for item in value]
    return value


class IdentityCall(BaseModel):
    """An identify or group call with the traits it sends."""

    type: IdentityCallType
    traits: List[Property] = Field(default_factory=list)
    locations: List[SourceLocation] = Field(default_factory=list)
    group_type: Optional[str] = Field(
        default=None,
        description="Group/account type for group calls (e.g. 'company')",
    )

    @field_validator("traits", mode="before")
    @classmethod
    def coerce_traits(cls, value: Any) -> Any:
        return _coerce_properties(value)

    @field_validator("locations", mode="before")
    @classmethod
    def coerce_locations(cls, value: Any) -> Any:
        return _coerce_locations(value)

    @property
    def trait_names(self) -> set[str]:
        return {trait.name for trait in self.traits}


class ObservedEvent(BaseModel):
    """An event found by the audit."""

    name: str = Field(..., min_length=1)
    status: EventStatus = EventStatus.LIVE
    origin: Optional[Origin] = None
    description: Optional[str] = None
    locations: List[SourceLocation] = Field(default_factory=list)
    properties: List[Property] = Field(default_factory=list)

    @field_validator("properties", mode="before")
    @classmethod
    def coerce_properties(cls, value: Any) -> Any:
        return _coerce_properties(value)

    @field_validator("locations", mode="before")
    @classmethod
    def coerce_locations(cls, value: Any) -> Any:
        return _coerce_locations(value)

    @field_validator("status", mode="before")
    @classmethod
    def upper_status(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("origin", mode="before")
    @classmethod
    def lower_origin(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value


class PatternNotes(BaseModel):
    """Free-text observations about how the codebase tracks."""

    model_config = ConfigDict(extra="allow")

    naming_style: Optional[str] = None
    centralization: Optional[str] = None
    error_handling: Optional[str] = None
    notes: Optional[str] = None


class CurrentState(BaseModel):
    """Parsed current-state.yaml."""

    model_config = ConfigDict(extra="allow")

    generated_at: Optional[str] = None
    events: List[ObservedEvent] = Field(default_factory=list)
    identity: List[IdentityCall] = Field(default_factory=list)
    patterns: PatternNotes = Field(default_factory=PatternNotes)

    @field_validator("generated_at", mode="before")
    @classmethod
    def timestamp_text(cls, value: Any) -> Any:
        # YAML parses unquoted dates into date/datetime objects
        return str(value) if value is not None else None

    @field_validator("events", "identity", mode="before")
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("patterns", mode="before")
    @classmethod
    def none_is_default(cls, value: Any) -> Any:
        return {} if value is None else value

    def events_by_name(self) -> Dict[str, ObservedEvent]:
        return {event.name: event for event in self.events}


class PlannedEvent(BaseModel):
    """An event the tracking plan wants emitted."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    origin: Optional[Origin] = None
    properties: List[Property] = Field(default_factory=list)
    renamed_from: List[str] = Field(
        default_factory=list,
        description="Names this event replaces in the current implementation",
    )

    @field_validator("properties", mode="before")
    @classmethod
    def coerce_properties(cls, value: Any) -> Any:
        return _coerce_properties(value)

    @field_validator("renamed_from", mode="before")
    @classmethod
    def listify(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("origin", mode="before")
    @classmethod
    def lower_origin(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value


class TrackingPlan(BaseModel):
    """Parsed tracking-plan.yaml."""

    model_config = ConfigDict(extra="allow")

    version: Optional[str] = None
    events: List[PlannedEvent] = Field(default_factory=list)
    identity: List[IdentityCall] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def version_text(cls, value: Any) -> Any:
        return str(value) if value is not None else None

    @field_validator("events", "identity", mode="before")
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def events_by_name(self) -> Dict[str, PlannedEvent]:
        return {event.name: event for event in self.events}
