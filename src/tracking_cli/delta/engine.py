"""Compute the delta between current-state.yaml and tracking-plan.yaml.

The delta is a pure function of the two artifacts, keyed on event name:

- same name, same definition: omitted
- same name, different properties/origin: CHANGE
- planned-only event paired with a current-only event: RENAME, either
  because the plan lists the old name in ``renamed_from`` or because the two
  names differ only in casing and separators
- remaining planned-only events: ADD
- remaining current-only events: REMOVE
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from tracking_cli.artifacts.models import (
    CurrentState,
    IdentityCall,
    IdentityCallType,
    ObservedEvent,
    PlannedEvent,
    Property,
    TrackingPlan,
)
from tracking_cli.naming import name_tokens

from .models import ChangeKind, Delta, EventChange, IdentityChange, PropertyChange, RenameMatch

logger = logging.getLogger(__name__)

_KIND_ORDER = {kind: index for index, kind in enumerate(ChangeKind)}


def diff_properties(current: Sequence[Property], planned: Sequence[Property]) -> Tuple[PropertyChange, ...]:
    """Compare two property lists by name.

    Types are compared only when both sides declare one; the audit often
    records bare property names.
    """
    current_by_name = {prop.name: prop for prop in current}
    planned_by_name = {prop.name: prop for prop in planned}
    changes: List[PropertyChange] = []

    for name in sorted(planned_by_name.keys() - current_by_name.keys()):
        changes.append(PropertyChange(name, "added", new_type=planned_by_name[name].type))

    for name in sorted(current_by_name.keys() - planned_by_name.keys()):
        changes.append(PropertyChange(name, "removed", old_type=current_by_name[name].type))

    for name in sorted(current_by_name.keys() & planned_by_name.keys()):
        old_type = current_by_name[name].type
        new_type = planned_by_name[name].type
        if old_type and new_type and old_type != new_type:
            changes.append(PropertyChange(name, "type_changed", old_type=old_type, new_type=new_type))

    return tuple(changes)


def _origin_change(current: ObservedEvent, planned: PlannedEvent) -> Optional[Tuple[Optional[str], Optional[str]]]:
    if current.origin and planned.origin and current.origin != planned.origin:
        return (current.origin.value, planned.origin.value)
    return None


def _pair_renames(
    planned_only: Dict[str, PlannedEvent],
    current_only: Dict[str, ObservedEvent],
) -> List[Tuple[PlannedEvent, ObservedEvent, RenameMatch]]:
    """Pair planned-only and current-only events that are the same event renamed.

    Explicit ``renamed_from`` hints are honoured first. The remaining events
    are paired when their name tokens are equal and the pairing is
    unambiguous (exactly one candidate on each side).
    """
    pairs: List[Tuple[PlannedEvent, ObservedEvent, RenameMatch]] = []
    claimed_planned: set[str] = set()
    claimed_current: set[str] = set()

    for name in sorted(planned_only):
        planned = planned_only[name]
        for old_name in planned.renamed_from:
            if old_name in current_only and old_name not in claimed_current:
                pairs.append((planned, current_only[old_name], RenameMatch.EXPLICIT))
                claimed_planned.add(name)
                claimed_current.add(old_name)
                break

    planned_by_tokens: Dict[Tuple[str, ...], List[str]] = defaultdict(list)
    current_by_tokens: Dict[Tuple[str, ...], List[str]] = defaultdict(list)
    for name in planned_only:
        if name not in claimed_planned:
            planned_by_tokens[name_tokens(name)].append(name)
    for name in current_only:
        if name not in claimed_current:
            current_by_tokens[name_tokens(name)].append(name)

    for tokens in sorted(planned_by_tokens.keys() & current_by_tokens.keys()):
        planned_names = planned_by_tokens[tokens]
        current_names = current_by_tokens[tokens]
        if not tokens or len(planned_names) != 1 or len(current_names) != 1:
            logger.debug("Skipping ambiguous normalized rename for tokens %s", tokens)
            continue
        pairs.append((planned_only[planned_names[0]], current_only[current_names[0]], RenameMatch.NORMALIZED))

    return pairs


def _call_traits(calls: Iterable[IdentityCall]) -> Dict[IdentityCallType, set[str]]:
    traits: Dict[IdentityCallType, set[str]] = {}
    for call in calls:
        traits.setdefault(call.type, set()).update(call.trait_names)
    return traits


def _group_type(calls: Iterable[IdentityCall]) -> Optional[str]:
    return next(
        (call.group_type for call in calls if call.type == IdentityCallType.GROUP and call.group_type),
        None,
    )


def diff_identity(current: Sequence[IdentityCall], planned: Sequence[IdentityCall]) -> List[IdentityChange]:
    """Compare identify/group calls by call type on trait keys and group type."""
    current_traits = _call_traits(current)
    planned_traits = _call_traits(planned)
    old_group_type = _group_type(current)
    new_group_type = _group_type(planned)
    changes: List[IdentityChange] = []

    for call_type in IdentityCallType:
        if call_type not in current_traits and call_type not in planned_traits:
            continue
        old = current_traits.get(call_type, set())
        new = planned_traits.get(call_type, set())
        added = tuple(sorted(new - old))
        removed = tuple(sorted(old - new))
        group_type_change = None
        if call_type == IdentityCallType.GROUP and old_group_type and new_group_type:
            if old_group_type != new_group_type:
                group_type_change = (old_group_type, new_group_type)
        if added or removed or group_type_change:
            changes.append(IdentityChange(call_type.value, added, removed, group_type_change))

    return changes


def compute_delta(current: CurrentState, plan: TrackingPlan) -> Delta:
    """Compute the delta from ``current`` to ``plan``.

    Args:
        current: Audited current state
        plan: Target tracking plan

    Returns:
        Delta with changes ordered by kind (add, rename, change, remove)
        then by name
    """
    current_events = current.events_by_name()
    planned_events = plan.events_by_name()
    changes: List[EventChange] = []

    for name in sorted(current_events.keys() & planned_events.keys()):
        observed = current_events[name]
        planned = planned_events[name]
        property_changes = diff_properties(observed.properties, planned.properties)
        origin_change = _origin_change(observed, planned)
        if property_changes or origin_change:
            changes.append(
                EventChange(
                    kind=ChangeKind.CHANGE,
                    name=name,
                    property_changes=property_changes,
                    origin_change=origin_change,
                    locations=tuple(str(loc) for loc in observed.locations),
                )
            )

    planned_only = {name: planned_events[name] for name in planned_events.keys() - current_events.keys()}
    current_only = {name: current_events[name] for name in current_events.keys() - planned_events.keys()}

    for planned, observed, matched_by in _pair_renames(planned_only, current_only):
        changes.append(
            EventChange(
                kind=ChangeKind.RENAME,
                name=planned.name,
                previous_name=observed.name,
                matched_by=matched_by,
                property_changes=diff_properties(observed.properties, planned.properties),
                origin_change=_origin_change(observed, planned),
                locations=tuple(str(loc) for loc in observed.locations),
            )
        )
        del planned_only[planned.name]
        del current_only[observed.name]

    for name, planned in planned_only.items():
        changes.append(
            EventChange(
                kind=ChangeKind.ADD,
                name=name,
                description=planned.description,
                properties=tuple(prop.name for prop in planned.properties),
                origin=planned.origin.value if planned.origin else None,
            )
        )

    for name, observed in current_only.items():
        changes.append(
            EventChange(
                kind=ChangeKind.REMOVE,
                name=name,
                origin=observed.origin.value if observed.origin else None,
                status=observed.status.value,
                locations=tuple(str(loc) for loc in observed.locations),
            )
        )

    changes.sort(key=lambda change: (_KIND_ORDER[change.kind], change.name))

    delta = Delta(
        changes=changes,
        identity=diff_identity(current.identity, plan.identity),
        current_event_count=len(current.events),
        planned_event_count=len(plan.events),
    )
    logger.debug("Delta counts: %s", delta.counts())
    return delta
