"""Delta between the audited current state and the tracking plan."""

from .engine import compute_delta, diff_identity, diff_properties
from .models import ChangeKind, Delta, EventChange, IdentityChange, PropertyChange, RenameMatch
from .rendering import render_delta_markdown

__all__ = [
    "ChangeKind",
    "Delta",
    "EventChange",
    "IdentityChange",
    "PropertyChange",
    "RenameMatch",
    "compute_delta",
    "diff_identity",
    "diff_properties",
    "render_delta_markdown",
]
