"""Project root discovery and artifact path resolution."""

from __future__ import annotations

import logging
from pathlib import Path

from tracking_cli.errors import ProjectNotFoundError

from .constants import ARTIFACT_FILENAMES, CONFIG_FILENAME, TELEMETRY_DIRNAME, Artifact

logger = logging.getLogger(__name__)


def locate_project_root(start: Path | None = None) -> Path | None:
    """Walk upward from ``start`` looking for a project root.

    A directory containing ``.telemetry/`` wins. Otherwise the nearest
    directory containing ``.git`` is used, so ``init`` works in a fresh
    repository.

    Args:
        start: Directory to start from (defaults to the current directory)

    Returns:
        Project root, or None when neither marker exists
    """
    current = (start or Path.cwd()).resolve()
    candidates = [current, *current.parents]

    for candidate in candidates:
        if (candidate / TELEMETRY_DIRNAME).is_dir():
            logger.debug("Project root %s (found %s)", candidate, TELEMETRY_DIRNAME)
            return candidate

    for candidate in candidates:
        if (candidate / ".git").exists():
            logger.debug("Project root %s (found .git)", candidate)
            return candidate

    return None


def require_project_root(start: Path | None = None) -> Path:
    """Resolve the project root or raise ProjectNotFoundError."""
    root = locate_project_root(start)
    if root is None:
        raise ProjectNotFoundError(start or Path.cwd())
    return root


def telemetry_dir(root: Path) -> Path:
    return root / TELEMETRY_DIRNAME


def artifact_path(root: Path, artifact: Artifact) -> Path:
    return telemetry_dir(root) / ARTIFACT_FILENAMES[artifact]


def config_path(root: Path) -> Path:
    return telemetry_dir(root) / CONFIG_FILENAME
