"""CLI command modules for tracking-skills."""

from __future__ import annotations

import typer

from . import config_cmd, delta, init_cmd, sdk, skills, status, validate


def register_commands(app: typer.Typer) -> None:
    """Attach every command and command group to ``app``."""
    app.command()(init_cmd.init)
    app.command()(validate.validate)
    app.command()(validate.lint)
    app.command()(delta.delta)
    app.command()(delta.changelog)
    app.command()(sdk.instrument)
    app.command()(status.status)
    app.add_typer(skills.app, name="skills")
    app.add_typer(sdk.app, name="sdk")
    app.add_typer(config_cmd.app, name="config")


__all__ = ["register_commands"]
