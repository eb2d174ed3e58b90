"""Render a Delta as delta.md."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from .models import ChangeKind, Delta, EventChange

SECTION_TITLES: dict[ChangeKind, str] = {
    ChangeKind.ADD: "Add",
    ChangeKind.RENAME: "Rename",
    ChangeKind.CHANGE: "Change",
    ChangeKind.REMOVE: "Remove",
}


def _code_list(names) -> str:
    return ", ".join(f"`{name}`" for name in names)


def _render_change(change: EventChange) -> List[str]:
    lines: List[str] = []

    if change.kind == ChangeKind.ADD:
        headline = f"- `{change.name}`"
        if change.origin:
            headline += f" ({change.origin})"
        if change.description:
            headline += f": {change.description}"
        lines.append(headline)
        if change.properties:
            lines.append(f"  - properties: {_code_list(change.properties)}")
        return lines

    if change.kind == ChangeKind.RENAME:
        lines.append(f"- `{change.previous_name}` -> `{change.name}` (matched: {change.matched_by.value})")
    elif change.kind == ChangeKind.REMOVE:
        status = f" ({change.status})" if change.status else ""
        lines.append(f"- `{change.name}`{status}")
    else:
        lines.append(f"- `{change.name}`")

    for prop_change in change.property_changes:
        lines.append(f"  - {prop_change.describe()}")
    if change.origin_change:
        old, new = change.origin_change
        lines.append(f"  - origin: {old} -> {new}")
    if change.locations:
        lines.append(f"  - found at: {', '.join(change.locations)}")
    return lines


def render_delta_markdown(delta: Delta, generated_at: Optional[datetime] = None) -> str:
    """Render ``delta`` as the contents of delta.md."""
    timestamp = (generated_at or datetime.now(timezone.utc)).replace(microsecond=0).isoformat()
    counts = delta.counts()

    lines: List[str] = [
        "# Tracking Plan Delta",
        "",
        f"Generated: {timestamp}",
        "",
        f"Current state: {delta.current_event_count} events. "
        f"Tracking plan: {delta.planned_event_count} events.",
        "",
        "## Summary",
        "",
        "| Change | Count |",
        "|--------|-------|",
    ]
    for kind in ChangeKind:
        lines.append(f"| {SECTION_TITLES[kind]} | {counts[kind.value]} |")
    lines.append(f"| Identity | {len(delta.identity)} |")
    lines.append("")

    if delta.is_empty:
        lines.append("No changes: the implementation matches the tracking plan.")
        lines.append("")
        return "\n".join(lines)

    for kind in ChangeKind:
        entries = delta.of_kind(kind)
        if not entries:
            continue
        lines.append(f"## {SECTION_TITLES[kind]}")
        lines.append("")
        for change in entries:
            lines.extend(_render_change(change))
        lines.append("")

    if delta.identity:
        lines.append("## Identity")
        lines.append("")
        for change in delta.identity:
            lines.append(f"- `{change.call_type}`")
            if change.added_traits:
                lines.append(f"  - add traits: {_code_list(change.added_traits)}")
            if change.removed_traits:
                lines.append(f"  - remove traits: {_code_list(change.removed_traits)}")
            if change.group_type_change:
                old, new = change.group_type_change
                lines.append(f"  - group type: `{old}` -> `{new}`")
        lines.append("")

    return "\n".join(lines)
