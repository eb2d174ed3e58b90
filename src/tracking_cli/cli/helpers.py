"""Shared console and error plumbing for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, NoReturn, TypeVar

import typer
from rich.console import Console

from tracking_cli.core.paths import require_project_root
from tracking_cli.errors import TrackingSkillsError

console = Console()

T = TypeVar("T")


def print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))


def fail(message: str) -> NoReturn:
    """Print a red error and exit with status 1."""
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


def run_or_exit(fn: Callable[[], T]) -> T:
    """Run ``fn`` and turn library errors into a clean CLI exit."""
    try:
        return fn()
    except TrackingSkillsError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc


def get_project_root_or_exit(start: Path | None = None) -> Path:
    return run_or_exit(lambda: require_project_root(start))
