"""Skill listing and installation commands."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.markdown import Markdown
from rich.table import Table

from tracking_cli.cli.helpers import console, get_project_root_or_exit, print_json, run_or_exit
from tracking_cli.config import load_config
from tracking_cli.skills import get_skill, install_skills, list_skills

app = typer.Typer(help="Bundled skill documents")


@app.command("list")
def list_cmd(
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
) -> None:
    """List bundled skills in workflow order."""
    skills = list_skills()
    if json_output:
        print_json([{"name": s.name, "phase": s.phase, "description": s.description} for s in skills])
        return

    table = Table(title="Tracking Skills")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Skill", style="cyan")
    table.add_column("Description")
    for skill in skills:
        table.add_row(str(skill.phase), skill.name, skill.description)
    console.print(table)


@app.command("show")
def show(
    name: str = typer.Argument(..., help="Skill name"),
    raw: bool = typer.Option(False, "--raw", help="Print the markdown source"),
) -> None:
    """Print a skill document."""
    skill = run_or_exit(lambda: get_skill(name))
    if raw:
        typer.echo(skill.document)
    else:
        console.print(Markdown(skill.document))


@app.command("install")
def install(
    names: Optional[List[str]] = typer.Argument(None, help="Skills to install (all when omitted)"),
    agent: Optional[str] = typer.Option(
        None, "--agent", help="Agent whose skills directory is used (defaults to config.yaml)"
    ),
    dest: Optional[Path] = typer.Option(None, "--dest", help="Install into this directory instead"),
    force: bool = typer.Option(False, "--force", help="Overwrite installed skills"),
) -> None:
    """Install skills into the agent's skills directory."""
    root = get_project_root_or_exit()
    chosen_agent = agent or run_or_exit(lambda: load_config(root)).agent
    result = run_or_exit(lambda: install_skills(root, names or None, agent=chosen_agent, dest=dest, force=force))

    for name in result.installed:
        console.print(f"[green]✓[/green] {name}")
    for name in result.skipped:
        console.print(f"[yellow]•[/yellow] {name} [dim](already installed, use --force)[/dim]")
    console.print(f"\nSkills directory: {result.destination}")
