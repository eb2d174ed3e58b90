from __future__ import annotations

from pathlib import Path

import pytest

CURRENT_STATE_YAML = """\
generated_at: 2025-01-15
events:
  - name: Signup Completed
    status: LIVE
    origin: frontend
    locations: ["src/pages/signup.tsx:3"]
    properties: [plan, referralSource]
  - name: project.created
    status: live
    origin: backend
    locations:
      - file: api/projects.ts
        line: 2
    properties:
      - name: project_id
        type: string
      - name: template
        type: string
  - name: legacy.export
    status: ORPHANED
    locations: ["src/analytics/events.ts:1"]
identity:
  - type: identify
    traits: [email, name]
    locations: ["src/auth/session.ts:1"]
patterns:
  naming_style: mixed
"""

TRACKING_PLAN_YAML = """\
version: 1
events:
  - name: signup.completed
    description: A new user finished signup.
    origin: frontend
    renamed_from: Signup Completed
    properties:
      - name: plan
        type: string
      - name: referral_source
        type: string
  - name: project.created
    origin: backend
    properties:
      - name: project_id
        type: string
      - name: template
        type: number
  - name: report.exported
    description: A report was exported.
    origin: backend
    properties: [format]
identity:
  - type: identify
    traits: [email, name, created_at]
  - type: group
    group_type: workspace
    traits: [name, plan]
"""


@pytest.fixture()
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty project with .telemetry/ and the current directory inside it."""
    (tmp_path / ".telemetry").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TRACKING_SKILLS_SDK", raising=False)
    monkeypatch.delenv("TRACKING_SKILLS_PLATFORM", raising=False)
    return tmp_path


@pytest.fixture()
def populated_project(project: Path) -> Path:
    """A project with both YAML artifacts and the source files they cite."""
    telemetry = project / ".telemetry"
    (telemetry / "current-state.yaml").write_text(CURRENT_STATE_YAML, encoding="utf-8")
    (telemetry / "tracking-plan.yaml").write_text(TRACKING_PLAN_YAML, encoding="utf-8")

    sources = {
        "src/pages/signup.tsx": "import { analytics } from '../analytics'\n\nanalytics.track('Signup Completed')\n",
        "api/projects.ts": "// create\nanalytics.track({ event: 'project.created' })\n",
        "src/analytics/events.ts": "export const LEGACY_EXPORT = 'legacy.export'\n",
        "src/auth/session.ts": "analytics.identify(user.id, { email, name })\n",
    }
    for relative, content in sources.items():
        path = project / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return project
