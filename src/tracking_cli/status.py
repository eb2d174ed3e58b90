"""Workflow phase progression derived from the .telemetry/ artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional

from tracking_cli.changelog import count_entries
from tracking_cli.core.constants import ARTIFACT_FILENAMES, Artifact
from tracking_cli.core.paths import artifact_path
from tracking_cli.scaffold import is_untouched_template


class Phase(str, Enum):
    BUSINESS_CASE = "business-case"
    MODEL = "model"
    AUDIT = "audit"
    DESIGN = "design"
    INSTRUMENT = "instrument"
    IMPLEMENT = "implement"
    MAINTAIN = "maintain"


# Phase -> artifact proving it ran (None: judged from the changelog)
PHASE_ARTIFACTS: dict[Phase, Optional[Artifact]] = {
    Phase.BUSINESS_CASE: Artifact.BUSINESS_CASE,
    Phase.MODEL: Artifact.PRODUCT,
    Phase.AUDIT: Artifact.CURRENT_STATE,
    Phase.DESIGN: Artifact.TRACKING_PLAN,
    Phase.INSTRUMENT: Artifact.INSTRUMENT,
    Phase.IMPLEMENT: None,
    Phase.MAINTAIN: Artifact.CHANGELOG,
}


@dataclass(frozen=True)
class PhaseState:
    phase: Phase
    artifact: Optional[str]
    done: bool
    modified_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "phase": self.phase.value,
            "artifact": self.artifact,
            "done": self.done,
            "modified_at": self.modified_at.isoformat() if self.modified_at else None,
        }


@dataclass(frozen=True)
class WorkflowStatus:
    phases: List[PhaseState]

    @property
    def next_phase(self) -> Optional[Phase]:
        for state in self.phases:
            if not state.done:
                return state.phase
        return None

    def to_dict(self) -> dict[str, object]:
        next_phase = self.next_phase
        return {
            "phases": [state.to_dict() for state in self.phases],
            "next_phase": next_phase.value if next_phase else None,
        }


def _mtime(path: Path) -> datetime:
    return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)


def phase_status(root: Path) -> WorkflowStatus:
    """Report which workflow phases have produced their artifacts.

    Templated documents still holding the unedited template do not count.
    Implement has no artifact of its own: it counts as done once the
    changelog records at least one dated entry. Maintain is done when the
    changelog exists alongside a completed implement phase.
    """
    changelog_path = artifact_path(root, Artifact.CHANGELOG)
    implemented = count_entries(changelog_path) > 0
    states: List[PhaseState] = []

    for phase, artifact in PHASE_ARTIFACTS.items():
        if artifact is None:
            states.append(PhaseState(phase, None, implemented))
            continue

        path = artifact_path(root, artifact)
        exists = path.is_file()
        done = exists and not is_untouched_template(root, artifact)
        if phase == Phase.MAINTAIN:
            done = exists and implemented
        states.append(
            PhaseState(
                phase,
                ARTIFACT_FILENAMES[artifact],
                done,
                _mtime(path) if exists else None,
            )
        )

    return WorkflowStatus(states)
