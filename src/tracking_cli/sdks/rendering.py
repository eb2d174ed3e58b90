"""Render SDK calls and the instrument.md guide."""

from __future__ import annotations

import logging
import re
from string import Template
from typing import Iterable, List, Sequence

from tracking_cli.artifacts.models import IdentityCallType, TrackingPlan
from tracking_cli.naming import suggest_property_name

from .registry import CallKind, SdkTarget

logger = logging.getLogger(__name__)

DEFAULT_GROUP_TYPE = "company"

_JS_IDENTIFIER_RE = re.compile(r"^[A-Za-z_\$][A-Za-z0-9_\$]*$")


def _js_string(value: str) -> str:
    """Escape ``value`` for a single-quoted JavaScript string."""
    return value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")


def _variable_name(key: str) -> str:
    if _JS_IDENTIFIER_RE.match(key):
        return key
    name = suggest_property_name(key) or "value"
    return f"_{name}" if name[0].isdigit() else name


def _object_entry(key: str) -> str:
    # Shorthand only works when the key is itself a valid identifier
    if _JS_IDENTIFIER_RE.match(key):
        return key
    return f"'{_js_string(key)}': {_variable_name(key)}"


def _object_literal(keys: Sequence[str]) -> str:
    if not keys:
        return "{}"
    return "{ " + ", ".join(_object_entry(key) for key in keys) + " }"


def render_call(
    target: SdkTarget,
    kind: CallKind,
    name: str | None = None,
    properties: Iterable[str] = (),
    *,
    group_type: str = DEFAULT_GROUP_TYPE,
) -> str:
    """Render one identify/group/track call for ``target``.

    Properties (or traits) are rendered with object shorthand, so the
    generated code expects local variables named like the keys. Keys that
    are not JavaScript identifiers are quoted and read from a snake_case
    variable instead: ``{ 'Seat Count': seat_count }``.

    Args:
        target: SDK/platform pair
        kind: Call type
        name: Event name (required for track calls)
        properties: Property or trait keys
        group_type: Group type for group calls

    Returns:
        JavaScript source for the call
    """
    if kind == CallKind.TRACK and not name:
        raise ValueError("track calls need an event name")

    keys = list(properties)
    if kind == CallKind.TRACK and keys and not target.supports_event_properties:
        logger.warning("%s does not store event properties; dropping %s", target.label, ", ".join(keys))
        keys = []

    literal = _object_literal(keys)
    substitutions = {
        "event": _js_string(name or ""),
        "properties": literal,
        "traits": literal,
        "properties_tail": "".join(f", {_object_entry(key)}" for key in keys),
        "trait_sets": "\n".join(
            f"identifyEvent.set('{_js_string(key)}', {_variable_name(key)})" for key in keys
        ),
        "group_type": _js_string(group_type),
    }
    rendered = Template(target.templates[kind]).substitute(substitutions)
    # Drop blank lines left by empty $trait_sets
    return "\n".join(line for line in rendered.splitlines() if line.strip())


def _code_block(source: str) -> List[str]:
    return ["```javascript", source, "```", ""]


def render_instrument_guide(plan: TrackingPlan, target: SdkTarget) -> str:
    """Render instrument.md for ``plan`` on ``target``."""
    lines: List[str] = [
        "# Instrumentation Guide",
        "",
        f"Target SDK: **{target.label}** (`{target.key}`)",
        "",
        "## Install",
        "",
        "```bash",
        target.install,
        "```",
        "",
        "## Initialize",
        "",
        *_code_block(target.init),
    ]

    if target.notes:
        lines.append("## Notes")
        lines.append("")
        lines.extend(f"- {note}" for note in target.notes)
        lines.append("")

    if plan.identity:
        lines.append("## Identity")
        lines.append("")
        for call in plan.identity:
            kind = CallKind.IDENTIFY if call.type == IdentityCallType.IDENTIFY else CallKind.GROUP
            lines.append(f"### {call.type.value}")
            lines.append("")
            source = render_call(
                target,
                kind,
                properties=[trait.name for trait in call.traits],
                group_type=call.group_type or DEFAULT_GROUP_TYPE,
            )
            lines.extend(_code_block(source))

    lines.append("## Events")
    lines.append("")
    if not plan.events:
        lines.append("The tracking plan has no events yet.")
        lines.append("")

    for event in sorted(plan.events, key=lambda e: e.name):
        lines.append(f"### `{event.name}`")
        lines.append("")
        if event.description:
            lines.append(event.description)
            lines.append("")
        if event.origin:
            lines.append(f"Origin: {event.origin.value}")
            lines.append("")
        property_names = [prop.name for prop in event.properties]
        if property_names and not target.supports_event_properties:
            lines.append(
                f"> {target.label} does not store event properties; "
                f"{', '.join(f'`{p}`' for p in property_names)} will not be sent."
            )
            lines.append("")
        lines.extend(_code_block(render_call(target, CallKind.TRACK, event.name, property_names)))

    return "\n".join(lines).rstrip() + "\n"


def render_sdk_reference(targets: Iterable[SdkTarget]) -> str:
    """Render the identify/group/track shapes of every target as markdown."""
    lines: List[str] = [
        "# SDK Call Reference",
        "",
        "Example keys: traits `{ email }`, properties `{ plan }`.",
        "",
    ]
    for target in targets:
        lines.append(f"## {target.label} (`{target.key}`)")
        lines.append("")
        lines.append(f"Install: `{target.install}`")
        lines.append("")
        lines.extend(_code_block(target.init))
        for kind in CallKind:
            if kind == CallKind.TRACK:
                sample = ["plan"] if target.supports_event_properties else []
            else:
                sample = ["email"]
            lines.append(f"**{kind.value}**")
            lines.append("")
            lines.extend(_code_block(render_call(target, kind, "example.happened", sample)))
        for note in target.notes:
            lines.append(f"- {note}")
        if target.notes:
            lines.append("")
    return "\n".join(lines).rstrip() + "\n"
