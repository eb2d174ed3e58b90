"""Result types for the current-state -> tracking-plan delta."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple


class ChangeKind(str, Enum):
    ADD = "add"
    RENAME = "rename"
    CHANGE = "change"
    REMOVE = "remove"


class RenameMatch(str, Enum):
    """How a rename was paired."""

    EXPLICIT = "explicit"      # planned event lists the old name in renamed_from
    NORMALIZED = "normalized"  # names differ only in casing/separators


@dataclass(frozen=True)
class PropertyChange:
    """A single property-level difference on one event."""

    property: str
    kind: str  # "added" | "removed" | "type_changed"
    old_type: Optional[str] = None
    new_type: Optional[str] = None

    def describe(self) -> str:
        if self.kind == "added":
            return f"add property `{self.property}`"
        if self.kind == "removed":
            return f"remove property `{self.property}`"
        return f"type of `{self.property}`: {self.old_type} -> {self.new_type}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"property": self.property, "kind": self.kind}
        if self.kind == "type_changed":
            data["old_type"] = self.old_type
            data["new_type"] = self.new_type
        return data


@dataclass(frozen=True)
class EventChange:
    """One entry in the delta.

    ``name`` is the target name for add/rename/change and the current name
    for remove. ``previous_name`` is set only for renames.
    """

    kind: ChangeKind
    name: str
    previous_name: Optional[str] = None
    matched_by: Optional[RenameMatch] = None
    property_changes: Tuple[PropertyChange, ...] = ()
    origin_change: Optional[Tuple[Optional[str], Optional[str]]] = None
    description: Optional[str] = None
    properties: Tuple[str, ...] = ()
    origin: Optional[str] = None
    status: Optional[str] = None
    locations: Tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, "name": self.name}
        if self.previous_name is not None:
            data["previous_name"] = self.previous_name
        if self.matched_by is not None:
            data["matched_by"] = self.matched_by.value
        if self.property_changes:
            data["property_changes"] = [change.to_dict() for change in self.property_changes]
        if self.origin_change is not None:
            data["origin_change"] = {"old": self.origin_change[0], "new": self.origin_change[1]}
        if self.description:
            data["description"] = self.description
        if self.properties:
            data["properties"] = list(self.properties)
        if self.origin:
            data["origin"] = self.origin
        if self.status:
            data["status"] = self.status
        if self.locations:
            data["locations"] = list(self.locations)
        return data


@dataclass(frozen=True)
class IdentityChange:
    """Trait differences for one identity call type.

    ``group_type_change`` is ``(old, new)`` when both sides declare a group
    type for group calls and they differ.
    """

    call_type: str
    added_traits: Tuple[str, ...] = ()
    removed_traits: Tuple[str, ...] = ()
    group_type_change: Optional[Tuple[str, str]] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "call_type": self.call_type,
            "added_traits": list(self.added_traits),
            "removed_traits": list(self.removed_traits),
        }
        if self.group_type_change is not None:
            data["group_type_change"] = {"old": self.group_type_change[0], "new": self.group_type_change[1]}
        return data


@dataclass
class Delta:
    """Complete difference between current state and tracking plan."""

    changes: List[EventChange] = field(default_factory=list)
    identity: List[IdentityChange] = field(default_factory=list)
    current_event_count: int = 0
    planned_event_count: int = 0

    def of_kind(self, kind: ChangeKind) -> List[EventChange]:
        return [change for change in self.changes if change.kind == kind]

    @property
    def adds(self) -> List[EventChange]:
        return self.of_kind(ChangeKind.ADD)

    @property
    def renames(self) -> List[EventChange]:
        return self.of_kind(ChangeKind.RENAME)

    @property
    def modifications(self) -> List[EventChange]:
        return self.of_kind(ChangeKind.CHANGE)

    @property
    def removals(self) -> List[EventChange]:
        return self.of_kind(ChangeKind.REMOVE)

    @property
    def is_empty(self) -> bool:
        return not self.changes and not self.identity

    def counts(self) -> dict[str, int]:
        return {kind.value: len(self.of_kind(kind)) for kind in ChangeKind}

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": {
                **self.counts(),
                "identity": len(self.identity),
                "current_events": self.current_event_count,
                "planned_events": self.planned_event_count,
            },
            "changes": [change.to_dict() for change in self.changes],
            "identity": [change.to_dict() for change in self.identity],
        }
