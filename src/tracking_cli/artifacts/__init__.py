"""Data model for the current-state and tracking-plan artifacts."""

from .loader import dump_artifact, load_current_state, load_tracking_plan, require_unique_event_names
from .models import (
    CurrentState,
    EventStatus,
    IdentityCall,
    IdentityCallType,
    ObservedEvent,
    Origin,
    PatternNotes,
    PlannedEvent,
    Property,
    SourceLocation,
    TrackingPlan,
)

__all__ = [
    "CurrentState",
    "EventStatus",
    "IdentityCall",
    "IdentityCallType",
    "ObservedEvent",
    "Origin",
    "PatternNotes",
    "PlannedEvent",
    "Property",
    "SourceLocation",
    "TrackingPlan",
    "dump_artifact",
    "load_current_state",
    "load_tracking_plan",
    "require_unique_event_names",
]
