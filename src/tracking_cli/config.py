"""Project-scoped configuration in .telemetry/config.yaml."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from tracking_cli.core.constants import AGENT_SKILL_DIRS, DEFAULT_AGENT
from tracking_cli.core.paths import config_path
from tracking_cli.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_SDK = "TRACKING_SKILLS_SDK"
ENV_PLATFORM = "TRACKING_SKILLS_PLATFORM"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True)
class TrackingConfig:
    """Configuration stored inside .telemetry/config.yaml."""

    sdk: str = "segment"
    platform: str = "browser"
    naming_strict: bool = True
    agent: str = DEFAULT_AGENT

    def to_dict(self) -> dict[str, object]:
        return {
            "sdk": self.sdk,
            "platform": self.platform,
            "agent": self.agent,
            "naming": {"strict": self.naming_strict},
        }

    @classmethod
    def from_dict(cls, data: dict[str, object] | None) -> "TrackingConfig":
        if not isinstance(data, dict):
            return cls()

        defaults = cls()

        def _text(key: str, fallback: str) -> str:
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip().lower()
            return fallback

        naming_strict = defaults.naming_strict
        naming = data.get("naming")
        if isinstance(naming, dict) and isinstance(naming.get("strict"), bool):
            naming_strict = naming["strict"]

        return cls(
            sdk=_text("sdk", defaults.sdk),
            platform=_text("platform", defaults.platform),
            naming_strict=naming_strict,
            agent=_text("agent", defaults.agent),
        )

    def with_env_overrides(self) -> "TrackingConfig":
        """Return a copy with TRACKING_SKILLS_* environment overrides applied."""
        sdk = os.environ.get(ENV_SDK, "").strip().lower() or self.sdk
        platform = os.environ.get(ENV_PLATFORM, "").strip().lower() or self.platform
        return TrackingConfig(
            sdk=sdk,
            platform=platform,
            naming_strict=self.naming_strict,
            agent=self.agent,
        )


CONFIG_KEYS = tuple(f.name for f in fields(TrackingConfig))


def _read_payload(path: Path) -> dict:
    yaml = YAML()
    yaml.preserve_quotes = True
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.load(handle) or {}
    except YAMLError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    except (UnicodeDecodeError, OSError) as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return payload


def load_config(root: Path, *, apply_env: bool = True) -> TrackingConfig:
    """Load configuration for the project at ``root``.

    Missing files yield defaults.
    """
    path = config_path(root)
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        config = TrackingConfig()
    else:
        config = TrackingConfig.from_dict(_read_payload(path))

    return config.with_env_overrides() if apply_env else config


def save_config(root: Path, config: TrackingConfig) -> Path:
    """Persist configuration, preserving keys this tool does not manage."""
    path = config_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = _read_payload(path) if path.exists() else {}
    payload.update(config.to_dict())

    yaml = YAML()
    yaml.preserve_quotes = True
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(payload, handle)
    return path


def set_config_value(config: TrackingConfig, key: str, raw_value: str) -> TrackingConfig:
    """Return ``config`` with ``key`` set from a command-line string."""
    if key not in CONFIG_KEYS:
        raise ConfigError(f"Unknown config key '{key}'. Valid keys: {', '.join(CONFIG_KEYS)}")

    data = {
        "sdk": config.sdk,
        "platform": config.platform,
        "naming_strict": config.naming_strict,
        "agent": config.agent,
    }
    if key == "naming_strict":
        lowered = raw_value.strip().lower()
        if lowered in _TRUE_VALUES:
            data[key] = True
        elif lowered in _FALSE_VALUES:
            data[key] = False
        else:
            raise ConfigError(f"naming_strict expects true/false, got '{raw_value}'")
    else:
        value = raw_value.strip().lower()
        if not value:
            raise ConfigError(f"{key} cannot be empty")
        if key == "agent" and value not in AGENT_SKILL_DIRS:
            raise ConfigError(f"Unknown agent '{value}'. Choose from: {', '.join(AGENT_SKILL_DIRS)}")
        data[key] = value

    return TrackingConfig(**data)
