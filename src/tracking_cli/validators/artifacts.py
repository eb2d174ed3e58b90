"""Consistency checks for current-state.yaml and tracking-plan.yaml.

The audit may only assert an event when it has evidence, so every observed
event must point at a concrete ``file:line``. The tracking plan is held to
the naming conventions, since it is the target state.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from tracking_cli.artifacts.models import CurrentState, SourceLocation, TrackingPlan
from tracking_cli.naming import NamingFinding, check_event_name, check_property_key

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCode(str, Enum):
    """Stable identifiers for validation issues."""

    MISSING_LOCATION = "missing-location"
    IDENTITY_MISSING_LOCATION = "identity-missing-location"
    STALE_LOCATION = "stale-location"
    DUPLICATE_EVENT = "duplicate-event"
    RENAME_CONFLICT = "rename-conflict"
    NAMING = "naming"
    ANTI_PATTERN = "anti-pattern"


@dataclass(frozen=True)
class ValidationIssue:
    """A single finding against one artifact."""

    severity: Severity
    code: IssueCode
    message: str
    artifact: str
    subject: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "severity": self.severity.value,
            "code": self.code.value,
            "message": self.message,
            "artifact": self.artifact,
            "subject": self.subject,
        }


@dataclass
class ValidationReport:
    """Collected issues for one or more artifacts."""

    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def extend(self, issues: Iterable[ValidationIssue]) -> None:
        self.issues.extend(issues)

    def to_dict(self) -> dict[str, object]:
        return {
            "ok": self.ok,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "issues": [issue.to_dict() for issue in self.issues],
        }


CURRENT_STATE = "current-state.yaml"
TRACKING_PLAN = "tracking-plan.yaml"


def _duplicates(names: Iterable[str]) -> List[str]:
    counts = Counter(names)
    return sorted(name for name, count in counts.items() if count > 1)


def _naming_issues(findings: Iterable[NamingFinding], artifact: str, severity: Severity) -> List[ValidationIssue]:
    issues = []
    for finding in findings:
        message = finding.message
        if finding.suggestion:
            message = f"{message} (suggest '{finding.suggestion}')"
        if finding.is_anti_pattern:
            # Anti-patterns never outrank format violations
            issue_severity = Severity.WARNING if severity == Severity.ERROR else severity
            code = IssueCode.ANTI_PATTERN
        else:
            issue_severity = severity
            code = IssueCode.NAMING
        issues.append(ValidationIssue(issue_severity, code, message, artifact, finding.subject))
    return issues


def _check_location(root: Path, location: SourceLocation) -> Optional[str]:
    # Locations are project-relative; anything resolving elsewhere is stale
    if Path(location.file).is_absolute():
        return f"{location} is not relative to the project root"
    path = root / location.file
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return f"{location} points outside the project"
    if not path.is_file():
        return f"{location} does not exist"
    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            line_count = sum(1 for _ in handle)
    except OSError as exc:
        return f"{location} could not be read: {exc}"
    if location.line > line_count:
        return f"{location} is past the end of the file ({line_count} lines)"
    return None


def validate_current_state(
    state: CurrentState,
    *,
    project_root: Path | None = None,
) -> List[ValidationIssue]:
    """Validate an audited current state.

    Args:
        state: Parsed current-state.yaml
        project_root: When given, each location is checked against the files
            on disk

    Returns:
        List of issues (possibly empty)
    """
    issues: List[ValidationIssue] = []

    for name in _duplicates(event.name for event in state.events):
        issues.append(
            ValidationIssue(
                Severity.ERROR,
                IssueCode.DUPLICATE_EVENT,
                f"Event '{name}' is listed more than once; merge its locations into one entry",
                CURRENT_STATE,
                name,
            )
        )

    for event in state.events:
        if not event.locations:
            issues.append(
                ValidationIssue(
                    Severity.ERROR,
                    IssueCode.MISSING_LOCATION,
                    f"Event '{event.name}' has no file:line location; an event cannot be asserted without evidence",
                    CURRENT_STATE,
                    event.name,
                )
            )

        # The audit records reality, so naming findings are informational here
        issues.extend(_naming_issues(check_event_name(event.name), CURRENT_STATE, Severity.INFO))
        for prop in event.properties:
            issues.extend(_naming_issues(check_property_key(prop.name), CURRENT_STATE, Severity.INFO))

    for call in state.identity:
        if not call.locations:
            issues.append(
                ValidationIssue(
                    Severity.WARNING,
                    IssueCode.IDENTITY_MISSING_LOCATION,
                    f"{call.type.value} call has no file:line location",
                    CURRENT_STATE,
                    call.type.value,
                )
            )

    if project_root is not None:
        located = [(event.name, loc) for event in state.events for loc in event.locations]
        located += [(call.type.value, loc) for call in state.identity for loc in call.locations]
        for subject, location in located:
            problem = _check_location(project_root, location)
            if problem:
                issues.append(
                    ValidationIssue(
                        Severity.WARNING,
                        IssueCode.STALE_LOCATION,
                        f"'{subject}': {problem}",
                        CURRENT_STATE,
                        subject,
                    )
                )

    logger.debug("current-state: %d issue(s)", len(issues))
    return issues


def validate_tracking_plan(plan: TrackingPlan, *, naming_strict: bool = True) -> List[ValidationIssue]:
    """Validate a tracking plan.

    Args:
        plan: Parsed tracking-plan.yaml
        naming_strict: Naming violations are errors when True, warnings otherwise

    Returns:
        List of issues (possibly empty)
    """
    issues: List[ValidationIssue] = []
    naming_severity = Severity.ERROR if naming_strict else Severity.WARNING
    plan_names = {event.name for event in plan.events}

    for name in _duplicates(event.name for event in plan.events):
        issues.append(
            ValidationIssue(
                Severity.ERROR,
                IssueCode.DUPLICATE_EVENT,
                f"Event '{name}' is planned more than once",
                TRACKING_PLAN,
                name,
            )
        )

    claimed: dict[str, str] = {}
    for event in plan.events:
        issues.extend(_naming_issues(check_event_name(event.name), TRACKING_PLAN, naming_severity))
        for prop in event.properties:
            issues.extend(_naming_issues(check_property_key(prop.name), TRACKING_PLAN, naming_severity))

        for old_name in event.renamed_from:
            if old_name in plan_names:
                issues.append(
                    ValidationIssue(
                        Severity.ERROR,
                        IssueCode.RENAME_CONFLICT,
                        f"'{event.name}' renames '{old_name}', which is still planned",
                        TRACKING_PLAN,
                        event.name,
                    )
                )
            elif old_name in claimed and claimed[old_name] != event.name:
                issues.append(
                    ValidationIssue(
                        Severity.ERROR,
                        IssueCode.RENAME_CONFLICT,
                        f"'{old_name}' is renamed by both '{claimed[old_name]}' and '{event.name}'",
                        TRACKING_PLAN,
                        event.name,
                    )
                )
            else:
                claimed[old_name] = event.name

    for call in plan.identity:
        for trait in call.traits:
            issues.extend(
                _naming_issues(
                    check_property_key(trait.name, event_property=False),
                    TRACKING_PLAN,
                    naming_severity,
                )
            )

    logger.debug("tracking-plan: %d issue(s)", len(issues))
    return issues
