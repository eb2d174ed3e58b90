"""Tests for .telemetry/ scaffolding and workflow status."""

from datetime import date

import pytest

from tracking_cli.changelog import append_entry
from tracking_cli.config import TrackingConfig, load_config
from tracking_cli.core.constants import Artifact
from tracking_cli.core.paths import artifact_path, config_path, locate_project_root, require_project_root
from tracking_cli.errors import ProjectNotFoundError
from tracking_cli.scaffold import is_untouched_template, scaffold
from tracking_cli.status import Phase, phase_status



def test_locate_prefers_telemetry(tmp_path):
    """Test .telemetry/ wins over an outer .git directory."""
    (tmp_path / ".git").mkdir()
    inner = tmp_path / "apps" / "web"
    (inner / ".telemetry").mkdir(parents=True)
    nested = inner / "src"
    nested.mkdir()

    assert locate_project_root(nested) == inner.resolve()


def test_locate_falls_back_to_git(tmp_path):
    """Test a fresh repository is found by its .git directory."""
    (tmp_path / ".git").mkdir()
    (tmp_path / "src").mkdir()

    assert locate_project_root(tmp_path / "src") == tmp_path.resolve()


def test_require_project_root_raises(tmp_path, monkeypatch):
    """Test a directory outside any project raises ProjectNotFoundError."""
    monkeypatch.setattr("tracking_cli.core.paths.locate_project_root", lambda start=None: None)

    with pytest.raises(ProjectNotFoundError):
        require_project_root(tmp_path)


def test_scaffold_creates_templates_and_config(tmp_path):
    """Test scaffolding writes the starter documents."""
    result = scaffold(tmp_path, TrackingConfig(sdk="posthog"))

    assert result.directory == tmp_path / ".telemetry"
    for artifact in (Artifact.BUSINESS_CASE, Artifact.PRODUCT, Artifact.CHANGELOG):
        assert artifact_path(tmp_path, artifact).is_file()
        assert is_untouched_template(tmp_path, artifact)
    assert not artifact_path(tmp_path, Artifact.TRACKING_PLAN).exists()
    assert load_config(tmp_path, apply_env=False).sdk == "posthog"


def test_scaffold_preserves_edits(tmp_path):
    """Test a second scaffold keeps edited documents and config."""
    scaffold(tmp_path, TrackingConfig(sdk="posthog"))
    business_case = artifact_path(tmp_path, Artifact.BUSINESS_CASE)
    business_case.write_text("# Our business case\n", encoding="utf-8")

    result = scaffold(tmp_path)

    assert business_case in result.preserved
    assert config_path(tmp_path) in result.preserved
    assert business_case.read_text(encoding="utf-8") == "# Our business case\n"
    assert load_config(tmp_path, apply_env=False).sdk == "posthog"


def test_scaffold_force_overwrites(tmp_path):
    """Test --force restores the templates."""
    scaffold(tmp_path)
    business_case = artifact_path(tmp_path, Artifact.BUSINESS_CASE)
    business_case.write_text("# edited\n", encoding="utf-8")

    scaffold(tmp_path, force=True)

    assert is_untouched_template(tmp_path, Artifact.BUSINESS_CASE)


def test_status_of_fresh_scaffold(tmp_path):
    """Test untouched templates do not complete a phase."""
    scaffold(tmp_path)

    workflow = phase_status(tmp_path)

    assert not any(state.done for state in workflow.phases)
    assert workflow.next_phase == Phase.BUSINESS_CASE


def test_status_progression(populated_project):
    """Test phases complete as their artifacts appear."""
    scaffold(populated_project)
    artifact_path(populated_project, Artifact.BUSINESS_CASE).write_text("# Why we track\n", encoding="utf-8")

    workflow = phase_status(populated_project)
    done = {state.phase for state in workflow.phases if state.done}

    assert done == {Phase.BUSINESS_CASE, Phase.AUDIT, Phase.DESIGN}
    assert workflow.next_phase == Phase.MODEL


def test_status_implement_and_maintain(populated_project):
    """Test a dated changelog entry completes implement and maintain."""
    scaffold(populated_project)
    append_entry(artifact_path(populated_project, Artifact.CHANGELOG), f"## {date(2025, 3, 1).isoformat()}\n\n- Added `a.b`\n")

    states = {state.phase: state for state in phase_status(populated_project).phases}

    assert states[Phase.IMPLEMENT].done
    assert states[Phase.IMPLEMENT].artifact is None
    assert states[Phase.MAINTAIN].done
    assert states[Phase.INSTRUMENT].done is False


def test_status_to_dict(tmp_path):
    """Test the JSON form lists every phase."""
    payload = phase_status(tmp_path).to_dict()

    assert [phase["phase"] for phase in payload["phases"]] == [phase.value for phase in Phase]
    assert payload["next_phase"] == "business-case"
