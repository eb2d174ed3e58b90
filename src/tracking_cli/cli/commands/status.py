"""``status``: show workflow phase progression."""

from __future__ import annotations

import typer
from rich.table import Table

from tracking_cli.cli.helpers import console, get_project_root_or_exit, print_json
from tracking_cli.status import phase_status


def status(
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
) -> None:
    """Show which workflow phases have produced their artifacts."""
    root = get_project_root_or_exit()
    workflow = phase_status(root)

    if json_output:
        print_json(workflow.to_dict())
        return

    table = Table(title="Tracking Workflow")
    table.add_column("Phase", style="cyan")
    table.add_column("Artifact")
    table.add_column("State")
    table.add_column("Updated", style="dim")
    for state in workflow.phases:
        marker = "[green]done[/green]" if state.done else "[dim]pending[/dim]"
        updated = state.modified_at.strftime("%Y-%m-%d %H:%M") if state.modified_at else ""
        table.add_row(state.phase.value, state.artifact or "-", marker, updated)
    console.print(table)

    next_phase = workflow.next_phase
    if next_phase is None:
        console.print("[green]All phases complete.[/green] Use the [cyan]maintain[/cyan] skill as the product changes.")
    else:
        console.print(f"Next: run the [cyan]{next_phase.value}[/cyan] skill.")
