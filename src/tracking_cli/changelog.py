"""Maintain .telemetry/changelog.md from computed deltas.

Entries are dated sections inserted newest-first under the title, so the
file reads as a history of tracking-plan changes.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

from tracking_cli.delta.models import Delta, EventChange

logger = logging.getLogger(__name__)

CHANGELOG_TITLE = "# Tracking Changelog"
ENTRY_HEADING_RE = re.compile(r"^## \d{4}-\d{2}-\d{2}", re.MULTILINE)


def _change_details(change: EventChange) -> str:
    details = [prop.describe() for prop in change.property_changes]
    if change.origin_change:
        old, new = change.origin_change
        details.append(f"origin {old} -> {new}")
    return "; ".join(details)


def build_entry(delta: Delta, note: Optional[str] = None, today: Optional[date] = None) -> Optional[str]:
    """Build a changelog section for ``delta``.

    Args:
        delta: Computed delta
        note: Free-text note placed under the heading
        today: Entry date (defaults to today in UTC)

    Returns:
        Markdown section, or None when there is nothing to record
    """
    if delta.is_empty and not note:
        return None

    entry_date = today or datetime.now(timezone.utc).date()
    lines: List[str] = [f"## {entry_date.isoformat()}", ""]
    if note:
        lines.append(note.strip())
        lines.append("")

    for change in delta.adds:
        lines.append(f"- Added `{change.name}`")
    for change in delta.renames:
        line = f"- Renamed `{change.previous_name}` to `{change.name}`"
        details = _change_details(change)
        lines.append(f"{line}: {details}" if details else line)
    for change in delta.modifications:
        lines.append(f"- Changed `{change.name}`: {_change_details(change)}")
    for change in delta.removals:
        lines.append(f"- Removed `{change.name}`")
    for change in delta.identity:
        parts = []
        if change.added_traits:
            parts.append("added " + ", ".join(f"`{t}`" for t in change.added_traits))
        if change.removed_traits:
            parts.append("removed " + ", ".join(f"`{t}`" for t in change.removed_traits))
        line = f"- `{change.call_type}`"
        if parts:
            line += f" traits: {'; '.join(parts)}"
        if change.group_type_change:
            old, new = change.group_type_change
            line += f"{';' if parts else ''} group type `{old}` -> `{new}`"
        lines.append(line)

    return "\n".join(lines).rstrip() + "\n"


def count_entries(path: Path) -> int:
    """Number of dated entries in a changelog file."""
    if not path.exists():
        return 0
    return len(ENTRY_HEADING_RE.findall(path.read_text(encoding="utf-8")))


def append_entry(path: Path, entry: str) -> Path:
    """Insert ``entry`` at the top of the changelog, below its title."""
    if path.exists():
        content = path.read_text(encoding="utf-8")
    else:
        content = f"{CHANGELOG_TITLE}\n"

    match = ENTRY_HEADING_RE.search(content)
    if match:
        head = content[: match.start()].rstrip("\n")
        tail = content[match.start():]
        updated = f"{head}\n\n{entry.rstrip()}\n\n{tail}"
    else:
        updated = f"{content.rstrip()}\n\n{entry.rstrip()}\n"

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(updated, encoding="utf-8")
    logger.debug("Appended changelog entry to %s", path)
    return path
