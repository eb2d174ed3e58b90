"""Validators for the .telemetry/ YAML artifacts."""

from .artifacts import (
    IssueCode,
    Severity,
    ValidationIssue,
    ValidationReport,
    validate_current_state,
    validate_tracking_plan,
)

__all__ = [
    "IssueCode",
    "Severity",
    "ValidationIssue",
    "ValidationReport",
    "validate_current_state",
    "validate_tracking_plan",
]
