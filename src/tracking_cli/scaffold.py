"""Create the .telemetry/ directory with starter documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from importlib.resources import files
from pathlib import Path
from typing import List

from tracking_cli.config import TrackingConfig, save_config
from tracking_cli.core.constants import ARTIFACT_FILENAMES, Artifact
from tracking_cli.core.paths import artifact_path, config_path, telemetry_dir

logger = logging.getLogger(__name__)

# Artifacts that start from a template; the rest are written by later phases
TEMPLATED_ARTIFACTS = (Artifact.BUSINESS_CASE, Artifact.PRODUCT, Artifact.CHANGELOG)


@dataclass
class ScaffoldResult:
    directory: Path
    created: List[Path] = field(default_factory=list)
    preserved: List[Path] = field(default_factory=list)


def _template_text(artifact: Artifact) -> str:
    resource = files("tracking_cli").joinpath("templates", ARTIFACT_FILENAMES[artifact])
    return resource.read_text(encoding="utf-8")


def scaffold(root: Path, config: TrackingConfig | None = None, *, force: bool = False) -> ScaffoldResult:
    """Create ``.telemetry/`` under ``root``.

    Existing files are preserved unless ``force`` is set.

    Args:
        root: Project root
        config: Configuration to write (defaults when None)
        force: Overwrite existing templates and config

    Returns:
        ScaffoldResult listing created and preserved files
    """
    directory = telemetry_dir(root)
    directory.mkdir(parents=True, exist_ok=True)
    result = ScaffoldResult(directory=directory)

    for artifact in TEMPLATED_ARTIFACTS:
        path = artifact_path(root, artifact)
        if path.exists() and not force:
            result.preserved.append(path)
            continue
        path.write_text(_template_text(artifact), encoding="utf-8")
        result.created.append(path)

    cfg_path = config_path(root)
    if cfg_path.exists() and not force and config is None:
        result.preserved.append(cfg_path)
    else:
        save_config(root, config or TrackingConfig())
        result.created.append(cfg_path)

    logger.debug("Scaffolded %s: %d created, %d preserved", directory, len(result.created), len(result.preserved))
    return result


def is_untouched_template(root: Path, artifact: Artifact) -> bool:
    """True when a templated artifact still holds the unedited template."""
    if artifact not in TEMPLATED_ARTIFACTS:
        return False
    path = artifact_path(root, artifact)
    if not path.is_file():
        return False
    return path.read_text(encoding="utf-8").strip() == _template_text(artifact).strip()
