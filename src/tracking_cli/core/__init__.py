"""Core layout helpers for the .telemetry/ directory."""

from .constants import ARTIFACT_FILENAMES, TELEMETRY_DIRNAME, Artifact
from .paths import artifact_path, locate_project_root, require_project_root, telemetry_dir

__all__ = [
    "ARTIFACT_FILENAMES",
    "TELEMETRY_DIRNAME",
    "Artifact",
    "artifact_path",
    "locate_project_root",
    "require_project_root",
    "telemetry_dir",
]
