"""Skill documents for the tracking workflow."""

from .registry import (
    InstallResult,
    SkillInfo,
    get_skill,
    install_skills,
    list_skills,
    parse_frontmatter,
    skills_destination,
)

__all__ = [
    "InstallResult",
    "SkillInfo",
    "get_skill",
    "install_skills",
    "list_skills",
    "parse_frontmatter",
    "skills_destination",
]
