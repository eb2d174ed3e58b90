"""Naming conventions for events, properties and traits.

Conventions:
- Event names use dot.notation: ``object.action`` with lowercase snake_case
  segments, e.g. ``account.created`` or ``report.export_started``.
- Property and trait keys use snake_case, e.g. ``plan_tier``.

Besides the format checks this module flags common anti-patterns found in
tracking plans and suggests conventional spellings for offending names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List

EVENT_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)+$")
SNAKE_CASE_RE = re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)*$")

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_TOKEN_SPLIT_RE = re.compile(r"[^A-Za-z0-9]+")
_INTERPOLATION_MARKERS = ("${", "{", "}", "%s", "%d", "+", "`")

MAX_EVENT_SEGMENTS = 3

GENERIC_EVENT_NAMES = frozenset(
    {
        "click",
        "clicked",
        "event",
        "track",
        "action",
        "button.clicked",
        "link.clicked",
        "page.viewed",
        "user.action",
        "something.happened",
    }
)

# Keys that identify a person; they belong in identify traits, not event properties
PII_KEYS = frozenset(
    {
        "email",
        "email_address",
        "phone",
        "phone_number",
        "password",
        "first_name",
        "last_name",
        "full_name",
        "address",
        "ssn",
        "ip",
        "ip_address",
        "credit_card",
    }
)


class NamingRule(str, Enum):
    """Identifiers for naming findings."""

    EVENT_FORMAT = "event-format"
    PROPERTY_FORMAT = "property-format"
    GENERIC_NAME = "generic-name"
    DYNAMIC_NAME = "dynamic-name"
    TOO_DEEP = "too-deep"
    PII_PROPERTY = "pii-property"


# Rules that are style anti-patterns rather than hard format violations
ANTI_PATTERN_RULES = frozenset(
    {
        NamingRule.GENERIC_NAME,
        NamingRule.DYNAMIC_NAME,
        NamingRule.TOO_DEEP,
        NamingRule.PII_PROPERTY,
    }
)


@dataclass(frozen=True)
class NamingFinding:
    """A single naming problem."""

    rule: NamingRule
    subject: str
    message: str
    suggestion: str | None = None

    @property
    def is_anti_pattern(self) -> bool:
        return self.rule in ANTI_PATTERN_RULES


def name_tokens(raw: str) -> tuple[str, ...]:
    """Split a name of any casing into lowercase word tokens.

    ``"SignupCompleted"``, ``"signup_completed"``, ``"Signup Completed"`` and
    ``"signup.completed"`` all yield ``("signup", "completed")``.
    """
    spaced = _CAMEL_BOUNDARY_RE.sub(" ", raw.strip())
    return tuple(token.lower() for token in _TOKEN_SPLIT_RE.split(spaced) if token)


def suggest_property_name(raw: str) -> str:
    return "_".join(name_tokens(raw))


def suggest_event_name(raw: str) -> str:
    """Suggest a dot.notation spelling for ``raw``.

    Existing dot segments are kept as object/action boundaries. Without dots
    the first token becomes the object and the rest the action.
    """
    stripped = raw.strip()
    if "." in stripped:
        segments = [suggest_property_name(part) for part in stripped.split(".")]
        segments = [segment for segment in segments if segment]
        if len(segments) >= 2:
            return ".".join(segments)

    tokens = name_tokens(stripped)
    if not tokens:
        return ""
    if len(tokens) == 1:
        return tokens[0]
    return f"{tokens[0]}.{'_'.join(tokens[1:])}"


def is_event_name(name: str) -> bool:
    return bool(EVENT_NAME_RE.match(name))


def is_snake_case(key: str) -> bool:
    return bool(SNAKE_CASE_RE.match(key))


def check_event_name(name: str) -> List[NamingFinding]:
    """Check an event name against the format rule and anti-patterns."""
    findings: List[NamingFinding] = []

    if any(marker in name for marker in _INTERPOLATION_MARKERS):
        findings.append(
            NamingFinding(
                NamingRule.DYNAMIC_NAME,
                name,
                f"Event name '{name}' looks dynamically built; event names must be static strings",
            )
        )
        return findings

    if not is_event_name(name):
        suggestion = suggest_event_name(name)
        findings.append(
            NamingFinding(
                NamingRule.EVENT_FORMAT,
                name,
                f"Event name '{name}' is not dot.notation (object.action)",
                suggestion if suggestion and suggestion != name else None,
            )
        )

    normalized = suggest_event_name(name)
    if name.lower() in GENERIC_EVENT_NAMES or normalized in GENERIC_EVENT_NAMES:
        findings.append(
            NamingFinding(
                NamingRule.GENERIC_NAME,
                name,
                f"Event name '{name}' is too generic to analyse; name the object and the outcome",
            )
        )

    if name.count(".") + 1 > MAX_EVENT_SEGMENTS:
        findings.append(
            NamingFinding(
                NamingRule.TOO_DEEP,
                name,
                f"Event name '{name}' has more than {MAX_EVENT_SEGMENTS} segments",
            )
        )

    return findings


def check_property_key(key: str, *, event_property: bool = True) -> List[NamingFinding]:
    """Check a property or trait key.

    Args:
        key: The property key
        event_property: True for event properties (PII is flagged),
            False for identify/group traits

    Returns:
        List of findings, empty when the key is fine
    """
    findings: List[NamingFinding] = []

    if not is_snake_case(key):
        suggestion = suggest_property_name(key)
        findings.append(
            NamingFinding(
                NamingRule.PROPERTY_FORMAT,
                key,
                f"Key '{key}' is not snake_case",
                suggestion if suggestion and suggestion != key else None,
            )
        )

    if event_property and suggest_property_name(key) in PII_KEYS:
        findings.append(
            NamingFinding(
                NamingRule.PII_PROPERTY,
                key,
                f"Event property '{key}' carries personal data; send it as an identify trait instead",
            )
        )

    return findings
