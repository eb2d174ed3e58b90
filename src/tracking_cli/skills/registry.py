"""Bundled skill documents and their installer.

Skills ship as package data under ``tracking_cli/skills/data/<name>/SKILL.md``.
Shared reference material lives in ``data/_reference/`` and is installed
next to the skills so relative links in the documents keep working.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from tracking_cli.core.constants import AGENT_SKILL_DIRS, DEFAULT_AGENT
from tracking_cli.errors import SkillNotFoundError, TrackingSkillsError
from tracking_cli.sdks import list_targets, render_sdk_reference

logger = logging.getLogger(__name__)

SKILL_FILENAME = "SKILL.md"
REFERENCE_DIRNAME = "_reference"
SDK_REFERENCE_FILENAME = "sdk-calls.md"


@dataclass(frozen=True)
class SkillInfo:
    """Metadata from a skill's front matter."""

    name: str
    description: str
    phase: int
    resource: Traversable

    @property
    def document(self) -> str:
        return self.resource.joinpath(SKILL_FILENAME).read_text(encoding="utf-8")


@dataclass
class InstallResult:
    """Outcome of an install run."""

    destination: Path
    installed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def _data_root() -> Traversable:
    return files("tracking_cli.skills").joinpath("data")


def parse_frontmatter(content: str) -> Optional[Dict[str, Any]]:
    """Parse YAML front matter from a markdown document.

    Args:
        content: Document content

    Returns:
        Front matter dict if present, None otherwise
    """
    if not content.startswith("---"):
        return None

    lines = content.split("\n")
    end_idx = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            end_idx = i
            break

    if end_idx is None:
        return None

    yaml = YAML(typ="safe")
    try:
        data = yaml.load("\n".join(lines[1:end_idx]))
    except YAMLError as exc:
        logger.warning("Invalid front matter: %s", exc)
        return None
    return data if isinstance(data, dict) else None


def _load_skill(resource: Traversable) -> SkillInfo:
    content = resource.joinpath(SKILL_FILENAME).read_text(encoding="utf-8")
    meta = parse_frontmatter(content) or {}
    try:
        phase = int(meta.get("phase", 99))
    except (TypeError, ValueError):
        phase = 99
    return SkillInfo(
        name=str(meta.get("name") or resource.name),
        description=str(meta.get("description") or "").strip(),
        phase=phase,
        resource=resource,
    )


def list_skills() -> List[SkillInfo]:
    """Return bundled skills in workflow order."""
    skills = [
        _load_skill(child)
        for child in _data_root().iterdir()
        if child.is_dir() and child.joinpath(SKILL_FILENAME).is_file()
    ]
    skills.sort(key=lambda skill: (skill.phase, skill.name))
    return skills


def get_skill(name: str) -> SkillInfo:
    skills = list_skills()
    for skill in skills:
        if skill.name == name:
            return skill
    raise SkillNotFoundError(name, [skill.name for skill in skills])


def copy_package_tree(resource: Traversable, dest: Path) -> None:
    """Recursively copy a packaged resource directory to ``dest``."""
    dest.mkdir(parents=True, exist_ok=True)
    for child in resource.iterdir():
        target = dest / child.name
        if child.is_dir():
            copy_package_tree(child, target)
        else:
            with child.open("rb") as src, open(target, "wb") as dst:
                shutil.copyfileobj(src, dst)


def skills_destination(project_root: Path, agent: str = DEFAULT_AGENT, dest: Path | None = None) -> Path:
    """Resolve where skills are installed for ``agent``."""
    if dest is not None:
        return dest if dest.is_absolute() else project_root / dest
    try:
        return project_root / AGENT_SKILL_DIRS[agent]
    except KeyError as exc:
        raise TrackingSkillsError(
            f"Unknown agent '{agent}'. Supported: {', '.join(sorted(AGENT_SKILL_DIRS))}"
        ) from exc


def install_skills(
    project_root: Path,
    names: Sequence[str] | None = None,
    *,
    agent: str = DEFAULT_AGENT,
    dest: Path | None = None,
    force: bool = False,
) -> InstallResult:
    """Copy skills into the agent's skills directory.

    Args:
        project_root: Consumer repository root
        names: Skills to install (all when empty)
        agent: Agent whose skills directory is used
        dest: Explicit destination, overrides ``agent``
        force: Overwrite skills that are already installed

    Returns:
        InstallResult listing installed and skipped skills
    """
    destination = skills_destination(project_root, agent, dest)
    selected = [get_skill(name) for name in names] if names else list_skills()
    result = InstallResult(destination=destination)

    for skill in selected:
        target = destination / skill.name
        if target.exists() and not force:
            logger.debug("Skipping %s: %s exists", skill.name, target)
            result.skipped.append(skill.name)
            continue
        if target.exists():
            shutil.rmtree(target)
        copy_package_tree(skill.resource, target)
        result.installed.append(skill.name)

    # Reference material is shared and always refreshed
    reference_dest = destination / REFERENCE_DIRNAME
    copy_package_tree(_data_root().joinpath(REFERENCE_DIRNAME), reference_dest)
    (reference_dest / SDK_REFERENCE_FILENAME).write_text(render_sdk_reference(list_targets()), encoding="utf-8")

    logger.info("Installed %d skill(s) into %s", len(result.installed), destination)
    return result
