"""Fixed names for the .telemetry/ artifact layout.

Every skill reads the previous phase's output from these paths, so the
filenames are part of the contract between skill invocations.
"""

from __future__ import annotations

from enum import Enum

TELEMETRY_DIRNAME = ".telemetry"
CONFIG_FILENAME = "config.yaml"


class Artifact(str, Enum):
    """Artifacts produced by the workflow phases."""

    BUSINESS_CASE = "business-case"
    PRODUCT = "product"
    CURRENT_STATE = "current-state"
    TRACKING_PLAN = "tracking-plan"
    DELTA = "delta"
    INSTRUMENT = "instrument"
    CHANGELOG = "changelog"


ARTIFACT_FILENAMES: dict[Artifact, str] = {
    Artifact.BUSINESS_CASE: "business-case.md",
    Artifact.PRODUCT: "product.md",
    Artifact.CURRENT_STATE: "current-state.yaml",
    Artifact.TRACKING_PLAN: "tracking-plan.yaml",
    Artifact.DELTA: "delta.md",
    Artifact.INSTRUMENT: "instrument.md",
    Artifact.CHANGELOG: "changelog.md",
}

# Agent name -> skills directory relative to the project root
AGENT_SKILL_DIRS: dict[str, str] = {
    "claude": ".claude/skills",
    "codex": ".codex/skills",
    "cursor": ".cursor/skills",
}

DEFAULT_AGENT = "claude"
