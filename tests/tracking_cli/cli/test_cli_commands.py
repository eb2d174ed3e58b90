"""CLI tests for tracking-skills commands."""

import json

import pytest
from typer.testing import CliRunner

from tracking_cli import __version__, app
from tracking_cli.cli.helpers import console
from tracking_cli.config import TrackingConfig, load_config, save_config
from tracking_cli.core.constants import AGENT_SKILL_DIRS, Artifact
from tracking_cli.core.paths import artifact_path, config_path

runner = CliRunner()

DUPLICATE_EVENTS_YAML = """\
events:
  - name: project.created
    locations: ["api/projects.ts:2"]
    properties: [project_id]
  - name: project.created
    locations: ["api/projects.ts:2"]
    properties: [template]
"""


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep Rich from wrapping long paths in command output."""
    monkeypatch.setattr(console, "width", 200)


def test_version():
    """Test --version prints the package version."""
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_no_command_shows_tagline():
    """Test running without a command prints the tagline."""
    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "tracking-skills" in result.stdout


class TestInit:
    """Tests for ``tracking-skills init``."""

    def test_scaffold_only(self, project):
        """Test init with --no-skills writes .telemetry/ and config."""
        result = runner.invoke(app, ["init", "--sdk", "posthog", "--platform", "node", "--no-skills"])

        assert result.exit_code == 0, result.stdout
        assert "Ready." in result.stdout
        assert artifact_path(project, Artifact.BUSINESS_CASE).is_file()
        config = load_config(project, apply_env=False)
        assert (config.sdk, config.platform) == ("posthog", "node")
        assert not (project / ".claude").exists()

    def test_installs_skills(self, tmp_path):
        """Test init installs the skills for the chosen agent."""
        result = runner.invoke(app, ["init", str(tmp_path), "--sdk", "segment", "--agent", "cursor"])

        assert result.exit_code == 0, result.stdout
        assert (tmp_path / ".cursor" / "skills" / "audit" / "SKILL.md").is_file()
        assert (tmp_path / ".cursor" / "skills" / "_reference" / "sdk-calls.md").is_file()
        assert load_config(tmp_path, apply_env=False).agent == "cursor"

    def test_unknown_sdk_writes_nothing(self, tmp_path):
        """Test an unsupported SDK fails before scaffolding."""
        result = runner.invoke(app, ["init", str(tmp_path), "--sdk", "heap"])

        assert result.exit_code == 1
        assert "Unsupported SDK" in result.stdout
        assert not (tmp_path / ".telemetry").exists()

    def test_unknown_agent_writes_nothing(self, tmp_path):
        """Test an unknown agent fails before scaffolding."""
        result = runner.invoke(app, ["init", str(tmp_path), "--sdk", "segment", "--agent", "bogus"])

        assert result.exit_code == 1
        assert "Unknown agent" in result.stdout
        assert not (tmp_path / ".telemetry").exists()

    def test_agent_defaults_to_config(self, tmp_path):
        """Test init installs for the agent recorded in config.yaml."""
        save_config(tmp_path, TrackingConfig(agent="codex"))

        result = runner.invoke(app, ["init", str(tmp_path), "--sdk", "segment"])

        assert result.exit_code == 0, result.stdout
        assert (tmp_path / AGENT_SKILL_DIRS["codex"] / "audit" / "SKILL.md").is_file()
        assert not (tmp_path / ".claude").exists()
        assert load_config(tmp_path, apply_env=False).agent == "codex"

    def test_rerun_preserves_config(self, project):
        """Test a second init keeps existing documents."""
        runner.invoke(app, ["init", "--sdk", "amplitude", "--no-skills"])
        artifact_path(project, Artifact.PRODUCT).write_text("# Product\n", encoding="utf-8")

        result = runner.invoke(app, ["init", "--sdk", "amplitude", "--no-skills"])

        assert result.exit_code == 0
        assert artifact_path(project, Artifact.PRODUCT).read_text(encoding="utf-8") == "# Product\n"


class TestValidate:
    """Tests for ``validate`` and ``lint``."""

    def test_valid_artifacts(self, populated_project):
        """Test the sample artifacts validate cleanly."""
        result = runner.invoke(app, ["validate", "--check-files"])

        assert result.exit_code == 0, result.stdout
        assert "0 error(s)" in result.stdout

    def test_json_output(self, populated_project):
        """Test --json reports the checked artifacts."""
        result = runner.invoke(app, ["validate", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["ok"] is True
        assert payload["checked"] == ["current-state.yaml", "tracking-plan.yaml"]

    def test_errors_exit_nonzero(self, project):
        """Test a plan with naming errors fails validation."""
        artifact_path(project, Artifact.TRACKING_PLAN).write_text(
            "events:\n  - name: Signup Completed\n", encoding="utf-8"
        )

        result = runner.invoke(app, ["validate", "--json"])

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["error_count"] == 1
        assert payload["issues"][0]["code"] == "naming"

    def test_relaxed_naming_passes(self, project):
        """Test naming_strict false turns naming errors into warnings."""
        artifact_path(project, Artifact.TRACKING_PLAN).write_text(
            "events:\n  - name: Signup Completed\n", encoding="utf-8"
        )
        config_path(project).write_text("naming:\n  strict: false\n", encoding="utf-8")

        result = runner.invoke(app, ["validate"])

        assert result.exit_code == 0
        assert "1 warning(s)" in result.stdout

    def test_missing_artifacts(self, project):
        """Test validate fails when there is nothing to check."""
        result = runner.invoke(app, ["validate"])

        assert result.exit_code == 1
        assert "Neither" in result.stdout

    def test_unparseable_artifact(self, project):
        """Test a broken YAML file is reported as an error."""
        artifact_path(project, Artifact.CURRENT_STATE).write_text("events: [\n", encoding="utf-8")

        result = runner.invoke(app, ["validate"])

        assert result.exit_code == 1
        assert "invalid YAML" in result.stdout

    def test_non_utf8_artifact(self, project):
        """Test an artifact that is not UTF-8 is reported instead of crashing."""
        artifact_path(project, Artifact.CURRENT_STATE).write_bytes(b"events:\n  - name: caf\xe9\n")

        result = runner.invoke(app, ["validate"])

        assert result.exit_code == 1
        assert "not UTF-8" in result.stdout

    def test_lint_suggests(self):
        """Test lint prints a suggestion and exits 1."""
        result = runner.invoke(app, ["lint", "Signup Completed", "project.created"])

        assert result.exit_code == 1
        assert "signup.completed" in result.stdout

    def test_lint_clean(self):
        """Test lint passes conventional names."""
        result = runner.invoke(app, ["lint", "project.created", "report.export_started"])

        assert result.exit_code == 0

    def test_lint_properties(self):
        """Test --properties checks snake_case keys."""
        result = runner.invoke(app, ["lint", "--properties", "planTier"])

        assert result.exit_code == 1
        assert "plan_tier" in result.stdout


class TestDelta:
    """Tests for ``delta`` and ``changelog``."""

    def test_writes_delta_md(self, populated_project):
        """Test delta writes .telemetry/delta.md."""
        result = runner.invoke(app, ["delta"])

        assert result.exit_code == 0, result.stdout
        content = artifact_path(populated_project, Artifact.DELTA).read_text(encoding="utf-8")
        assert content.startswith("# Tracking Plan Delta")
        assert "signup.completed" in content

    def test_check_fails_on_pending_changes(self, populated_project):
        """Test --check exits 1 when the plan is not implemented."""
        result = runner.invoke(app, ["delta", "--check", "--stdout"])

        assert result.exit_code == 1
        assert "## Rename" in result.stdout

    def test_json(self, populated_project):
        """Test --json prints the delta summary."""
        result = runner.invoke(app, ["delta", "--json"])

        assert result.exit_code == 0
        summary = json.loads(result.stdout)["summary"]
        assert (summary["add"], summary["rename"], summary["change"], summary["remove"]) == (1, 1, 1, 1)

    def test_missing_plan(self, project):
        """Test delta needs both artifacts."""
        result = runner.invoke(app, ["delta"])

        assert result.exit_code == 1
        assert "artifact not found" in result.stdout

    def test_duplicate_current_events_rejected(self, populated_project):
        """Test delta refuses a current state that audits one event twice."""
        artifact_path(populated_project, Artifact.CURRENT_STATE).write_text(DUPLICATE_EVENTS_YAML, encoding="utf-8")

        result = runner.invoke(app, ["delta"])

        assert result.exit_code == 1
        assert "duplicate event name" in result.stdout
        assert "current-state.yaml" in result.stdout
        assert not artifact_path(populated_project, Artifact.DELTA).exists()

    def test_duplicate_planned_events_rejected(self, populated_project):
        """Test delta and changelog refuse a plan that lists one event twice."""
        artifact_path(populated_project, Artifact.TRACKING_PLAN).write_text(DUPLICATE_EVENTS_YAML, encoding="utf-8")

        result = runner.invoke(app, ["delta", "--json"])
        logged = runner.invoke(app, ["changelog"])

        assert result.exit_code == 1
        assert "duplicate event name" in result.stdout
        assert "tracking-plan.yaml" in result.stdout
        assert logged.exit_code == 1
        assert not artifact_path(populated_project, Artifact.CHANGELOG).exists()

    def test_changelog_appends_entry(self, populated_project):
        """Test changelog records the delta."""
        result = runner.invoke(app, ["changelog", "--note", "Adopt dot.notation"])

        assert result.exit_code == 0, result.stdout
        content = artifact_path(populated_project, Artifact.CHANGELOG).read_text(encoding="utf-8")
        assert content.startswith("# Tracking Changelog")
        assert "Adopt dot.notation" in content
        assert "- Renamed `Signup Completed` to `signup.completed`" in content

    def test_changelog_dry_run(self, populated_project):
        """Test --dry-run prints without writing."""
        result = runner.invoke(app, ["changelog", "--dry-run"])

        assert result.exit_code == 0
        assert "- Added `report.exported`" in result.stdout
        assert not artifact_path(populated_project, Artifact.CHANGELOG).exists()


class TestSdk:
    """Tests for ``sdk`` and ``instrument``."""

    def test_snippet_plain(self, project):
        """Test a plain track snippet."""
        result = runner.invoke(
            app,
            ["sdk", "snippet", "track", "-e", "report.exported", "-k", "format", "--sdk", "segment", "--plain"],
        )

        assert result.exit_code == 0
        assert result.stdout.strip() == "analytics.track('report.exported', { format })"

    def test_snippet_uses_config(self, project):
        """Test the configured SDK is the default target."""
        config_path(project).write_text("sdk: posthog\nplatform: node\n", encoding="utf-8")

        result = runner.invoke(app, ["sdk", "snippet", "identify", "-k", "email", "--plain"])

        assert result.exit_code == 0
        assert "posthog.identify({ distinctId: userId, properties: { email } })" in result.stdout

    def test_snippet_track_needs_event(self, project):
        """Test track snippets require --event."""
        result = runner.invoke(app, ["sdk", "snippet", "track", "--plain"])

        assert result.exit_code == 1

    def test_list_json(self):
        """Test sdk list --json enumerates every target."""
        result = runner.invoke(app, ["sdk", "list", "--json"])

        assert result.exit_code == 0
        targets = json.loads(result.stdout)
        assert len(targets) == 12
        accoil = [t for t in targets if t["sdk"] == "accoil"]
        assert all(t["supports_event_properties"] is False for t in accoil)

    def test_instrument_writes_guide(self, populated_project):
        """Test instrument renders instrument.md for the configured SDK."""
        config_path(populated_project).write_text("sdk: mixpanel\n", encoding="utf-8")

        result = runner.invoke(app, ["instrument"])

        assert result.exit_code == 0, result.stdout
        guide = artifact_path(populated_project, Artifact.INSTRUMENT).read_text(encoding="utf-8")
        assert "mixpanel.track('report.exported', { format })" in guide

    def test_instrument_stdout_override(self, populated_project):
        """Test --sdk/--platform override the config."""
        result = runner.invoke(app, ["instrument", "--sdk", "rudderstack", "--platform", "node", "--stdout"])

        assert result.exit_code == 0
        assert "client.track({ userId, event: 'report.exported', properties: { format } })" in result.stdout
        assert not artifact_path(populated_project, Artifact.INSTRUMENT).exists()


class TestConfigAndStatus:
    """Tests for ``config`` and ``status``."""

    def test_set_and_show(self, project):
        """Test config set persists and config show reads it back."""
        result = runner.invoke(app, ["config", "set", "sdk", "amplitude"])
        assert result.exit_code == 0, result.stdout

        shown = runner.invoke(app, ["config", "show", "--json"])
        assert json.loads(shown.stdout)["sdk"] == "amplitude"

    def test_set_rejects_unknown_sdk(self, project):
        """Test config set validates the SDK/platform pair."""
        result = runner.invoke(app, ["config", "set", "sdk", "heap"])

        assert result.exit_code == 1
        assert not config_path(project).exists()

    def test_set_rejects_unknown_agent(self, project):
        """Test config set only accepts agents with a skills directory."""
        result = runner.invoke(app, ["config", "set", "agent", "vim"])

        assert result.exit_code == 1
        assert "Unknown agent" in result.stdout
        assert not config_path(project).exists()

    def test_set_rejects_unknown_key(self, project):
        """Test config set rejects keys it does not know."""
        result = runner.invoke(app, ["config", "set", "colour", "blue"])

        assert result.exit_code == 1
        assert "Unknown config key" in result.stdout

    def test_status_json(self, populated_project):
        """Test status reports the next phase."""
        result = runner.invoke(app, ["status", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["next_phase"] == "business-case"
        done = {phase["phase"] for phase in payload["phases"] if phase["done"]}
        assert done == {"audit", "design"}

    def test_status_table(self, project):
        """Test the status table names the next skill."""
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "Next: run the business-case skill" in result.stdout


class TestSkills:
    """Tests for the ``skills`` command group."""

    def test_list_json(self):
        """Test skills list --json returns the workflow."""
        result = runner.invoke(app, ["skills", "list", "--json"])

        assert result.exit_code == 0
        assert [skill["name"] for skill in json.loads(result.stdout)][:3] == ["business-case", "model", "audit"]

    def test_show_raw(self):
        """Test skills show --raw prints the markdown source."""
        result = runner.invoke(app, ["skills", "show", "audit", "--raw"])

        assert result.exit_code == 0
        assert "name: audit" in result.stdout

    def test_show_unknown(self):
        """Test an unknown skill exits 1."""
        result = runner.invoke(app, ["skills", "show", "deploy"])

        assert result.exit_code == 1
        assert "Unknown skill" in result.stdout

    def test_install_named(self, project):
        """Test installing a named skill into a custom directory."""
        result = runner.invoke(app, ["skills", "install", "design", "--dest", "agent/skills"])

        assert result.exit_code == 0, result.stdout
        assert (project / "agent" / "skills" / "design" / "SKILL.md").is_file()

    def test_install_twice_skips(self, project):
        """Test a second install reports the skill as present."""
        runner.invoke(app, ["skills", "install", "audit"])

        result = runner.invoke(app, ["skills", "install", "audit"])

        assert result.exit_code == 0
        assert "already installed" in result.stdout

    def test_install_uses_configured_agent(self, project):
        """Test skills install falls back to the agent in config.yaml."""
        runner.invoke(app, ["config", "set", "agent", "cursor"])

        result = runner.invoke(app, ["skills", "install", "audit"])

        assert result.exit_code == 0, result.stdout
        assert (project / ".cursor" / "skills" / "audit" / "SKILL.md").is_file()
        assert not (project / ".claude").exists()

    def test_install_agent_option_wins(self, project):
        """Test --agent overrides the configured agent."""
        runner.invoke(app, ["config", "set", "agent", "cursor"])

        result = runner.invoke(app, ["skills", "install", "audit", "--agent", "claude"])

        assert result.exit_code == 0, result.stdout
        assert (project / ".claude" / "skills" / "audit" / "SKILL.md").is_file()
