"""Exception hierarchy for tracking-skills."""

from __future__ import annotations

from pathlib import Path


class TrackingSkillsError(Exception):
    """Base exception for tracking-skills errors."""
    pass


class ProjectNotFoundError(TrackingSkillsError):
    """Raised when no project root can be located."""

    def __init__(self, start: Path):
        self.start = start
        super().__init__(
            f"No project found from {start}. Run 'tracking-skills init' in your repository root."
        )


class ConfigError(TrackingSkillsError):
    """Raised when .telemetry/config.yaml is invalid."""


class ArtifactError(TrackingSkillsError):
    """Base class for artifact loading problems."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class ArtifactNotFoundError(ArtifactError):
    """Artifact file does not exist."""

    def __init__(self, path: Path):
        super().__init__(path, "artifact not found")


class ArtifactParseError(ArtifactError):
    """Artifact exists but is not valid YAML or violates its schema."""


class SkillNotFoundError(TrackingSkillsError):
    """Requested skill is not bundled."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(f"Unknown skill '{name}'. Available: {', '.join(available)}")


class UnknownSdkError(TrackingSkillsError):
    """Requested SDK or platform is not supported."""

    def __init__(self, sdk: str, platform: str | None = None):
        self.sdk = sdk
        self.platform = platform
        target = f"{sdk}/{platform}" if platform else sdk
        super().__init__(f"Unsupported SDK target: {target}")
