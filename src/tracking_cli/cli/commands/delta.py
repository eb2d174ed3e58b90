"""``delta`` and ``changelog`` commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from tracking_cli.artifacts import load_current_state, load_tracking_plan, require_unique_event_names
from tracking_cli.changelog import append_entry, build_entry
from tracking_cli.cli.helpers import console, get_project_root_or_exit, print_json, run_or_exit
from tracking_cli.core.constants import Artifact
from tracking_cli.core.paths import artifact_path
from tracking_cli.delta import ChangeKind, Delta, compute_delta, render_delta_markdown

logger = logging.getLogger(__name__)


def _compute(root: Path) -> Delta:
    current_path = artifact_path(root, Artifact.CURRENT_STATE)
    plan_path = artifact_path(root, Artifact.TRACKING_PLAN)
    current = load_current_state(current_path)
    require_unique_event_names(current, current_path)
    plan = load_tracking_plan(plan_path)
    require_unique_event_names(plan, plan_path)
    return compute_delta(current, plan)


def _summary_table(delta: Delta) -> Table:
    counts = delta.counts()
    table = Table(title="Tracking Plan Delta")
    table.add_column("Change", style="cyan")
    table.add_column("Count", justify="right")
    for kind in ChangeKind:
        table.add_row(kind.value, str(counts[kind.value]))
    table.add_row("identity", str(len(delta.identity)))
    return table


def delta(
    json_output: bool = typer.Option(False, "--json", help="Print the delta as JSON instead of writing delta.md"),
    stdout: bool = typer.Option(False, "--stdout", help="Print delta.md instead of writing it"),
    check: bool = typer.Option(False, "--check", help="Exit with status 1 when the delta is not empty"),
) -> None:
    """Compare current-state.yaml with tracking-plan.yaml and write delta.md."""
    root = get_project_root_or_exit()
    result = run_or_exit(lambda: _compute(root))
    exit_code = 1 if check and not result.is_empty else 0

    if json_output:
        print_json(result.to_dict())
        raise typer.Exit(exit_code)

    markdown = render_delta_markdown(result)
    if stdout:
        typer.echo(markdown)
        raise typer.Exit(exit_code)

    path = artifact_path(root, Artifact.DELTA)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(markdown, encoding="utf-8")
    logger.debug("Wrote %s", path)

    console.print(_summary_table(result))
    console.print(f"Wrote {path.relative_to(root)}")
    raise typer.Exit(exit_code)


def changelog(
    note: Optional[str] = typer.Option(None, "--note", "-n", help="Free-text note for the entry"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the entry without writing it"),
) -> None:
    """Append the current delta to changelog.md."""
    root = get_project_root_or_exit()
    result = run_or_exit(lambda: _compute(root))
    entry = build_entry(result, note=note)

    if entry is None:
        console.print("[yellow]Nothing to record:[/yellow] the delta is empty and no --note was given.")
        return

    if dry_run:
        typer.echo(entry)
        return

    path = append_entry(artifact_path(root, Artifact.CHANGELOG), entry)
    console.print(f"[green]✓[/green] Updated {path.relative_to(root)}")
