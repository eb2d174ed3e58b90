"""Tests for .telemetry/config.yaml handling."""

import pytest

from tracking_cli.config import TrackingConfig, load_config, save_config, set_config_value
from tracking_cli.core.paths import config_path
from tracking_cli.errors import ConfigError


def test_defaults_when_missing(project):
    """Test a project without config.yaml gets defaults."""
    config = load_config(project)

    assert config == TrackingConfig()
    assert config.sdk == "segment"
    assert config.naming_strict is True


def test_save_and_load(project):
    """Test values written by save_config load back."""
    save_config(project, TrackingConfig(sdk="posthog", platform="node", naming_strict=False, agent="codex"))

    config = load_config(project)

    assert config == TrackingConfig(sdk="posthog", platform="node", naming_strict=False, agent="codex")
    assert "strict: false" in config_path(project).read_text(encoding="utf-8")


def test_save_preserves_unknown_keys(project):
    """Test keys this tool does not manage survive a save."""
    config_path(project).write_text("sdk: amplitude\nowner: growth-team  # who to ask\n", encoding="utf-8")

    save_config(project, TrackingConfig(sdk="mixpanel"))

    text = config_path(project).read_text(encoding="utf-8")
    assert "owner: growth-team" in text
    assert "sdk: mixpanel" in text


def test_from_dict_is_tolerant():
    """Test odd values fall back to defaults."""
    config = TrackingConfig.from_dict({"sdk": " PostHog ", "platform": 3, "naming": {"strict": "no"}})

    assert config.sdk == "posthog"
    assert config.platform == "browser"
    assert config.naming_strict is True


def test_env_overrides(project, monkeypatch):
    """Test TRACKING_SKILLS_* variables override the file."""
    save_config(project, TrackingConfig(sdk="segment"))
    monkeypatch.setenv("TRACKING_SKILLS_SDK", "Amplitude")
    monkeypatch.setenv("TRACKING_SKILLS_PLATFORM", "node")

    assert load_config(project).sdk == "amplitude"
    assert load_config(project).platform == "node"
    assert load_config(project, apply_env=False).sdk == "segment"


def test_invalid_yaml_raises(project):
    """Test a broken config file raises ConfigError."""
    config_path(project).write_text("sdk: [segment\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(project)


def test_non_utf8_config_raises(project):
    """Test a config file that is not UTF-8 raises ConfigError."""
    config_path(project).write_bytes(b"sdk: s\xe9gment\n")

    with pytest.raises(ConfigError, match="Failed to read"):
        load_config(project)


def test_non_mapping_raises(project):
    """Test a config file must be a mapping."""
    config_path(project).write_text("- segment\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(project)


def test_set_config_value():
    """Test command-line values are parsed per key."""
    config = TrackingConfig()

    assert set_config_value(config, "sdk", "Mixpanel").sdk == "mixpanel"
    assert set_config_value(config, "naming_strict", "off").naming_strict is False
    assert set_config_value(config, "naming_strict", "YES").naming_strict is True
    assert set_config_value(config, "agent", "Cursor").agent == "cursor"


@pytest.mark.parametrize(
    "key, value, message",
    [
        ("colour", "blue", "Unknown config key"),
        ("naming_strict", "maybe", "true/false"),
        ("sdk", "  ", "cannot be empty"),
        ("agent", "vim", "Unknown agent"),
    ],
)
def test_set_config_value_errors(key, value, message):
    """Test bad keys and values raise ConfigError."""
    with pytest.raises(ConfigError, match=message):
        set_config_value(TrackingConfig(), key, value)
