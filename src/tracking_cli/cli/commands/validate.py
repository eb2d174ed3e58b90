"""``validate`` and ``lint`` commands."""

from __future__ import annotations

import logging
from typing import List

import typer
from rich.table import Table

from tracking_cli.artifacts import load_current_state, load_tracking_plan
from tracking_cli.cli.helpers import console, fail, get_project_root_or_exit, print_json, run_or_exit
from tracking_cli.config import load_config
from tracking_cli.core.constants import ARTIFACT_FILENAMES, Artifact
from tracking_cli.core.paths import artifact_path
from tracking_cli.naming import check_event_name, check_property_key
from tracking_cli.validators import Severity, ValidationReport, validate_current_state, validate_tracking_plan

logger = logging.getLogger(__name__)

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


def validate(
    check_files: bool = typer.Option(False, "--check-files", help="Check that every file:line location exists"),
    show_info: bool = typer.Option(False, "--info", help="Also show informational findings"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
) -> None:
    """Validate current-state.yaml and tracking-plan.yaml."""
    root = get_project_root_or_exit()
    config = run_or_exit(lambda: load_config(root))
    report = ValidationReport()
    checked: List[str] = []

    state_path = artifact_path(root, Artifact.CURRENT_STATE)
    if state_path.exists():
        state = run_or_exit(lambda: load_current_state(state_path))
        report.extend(validate_current_state(state, project_root=root if check_files else None))
        checked.append(ARTIFACT_FILENAMES[Artifact.CURRENT_STATE])

    plan_path = artifact_path(root, Artifact.TRACKING_PLAN)
    if plan_path.exists():
        plan = run_or_exit(lambda: load_tracking_plan(plan_path))
        report.extend(validate_tracking_plan(plan, naming_strict=config.naming_strict))
        checked.append(ARTIFACT_FILENAMES[Artifact.TRACKING_PLAN])

    if not checked:
        fail("Neither current-state.yaml nor tracking-plan.yaml exists in .telemetry/")

    if json_output:
        print_json({"checked": checked, **report.to_dict()})
        raise typer.Exit(0 if report.ok else 1)

    visible = [issue for issue in report.issues if show_info or issue.severity != Severity.INFO]
    if visible:
        table = Table(title="Validation Issues", show_lines=False)
        table.add_column("Severity")
        table.add_column("Artifact", style="cyan")
        table.add_column("Code", style="magenta")
        table.add_column("Message")
        for issue in visible:
            style = SEVERITY_STYLES[issue.severity]
            table.add_row(f"[{style}]{issue.severity.value}[/{style}]", issue.artifact, issue.code.value, issue.message)
        console.print(table)

    summary = f"Checked {', '.join(checked)}: {len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    if report.ok:
        console.print(f"[green]✓[/green] {summary}")
        return
    console.print(f"[red]✗[/red] {summary}")
    raise typer.Exit(1)


def lint(
    names: List[str] = typer.Argument(..., help="Event names to check"),
    properties: bool = typer.Option(False, "--properties", help="Treat the names as property keys"),
) -> None:
    """Check names against the naming conventions and suggest fixes."""
    failed = False
    for name in names:
        findings = check_property_key(name) if properties else check_event_name(name)
        if not findings:
            console.print(f"[green]✓[/green] {name}")
            continue
        failed = True
        for finding in findings:
            line = f"[red]✗[/red] {finding.message}"
            if finding.suggestion:
                line += f" [dim]→[/dim] [cyan]{finding.suggestion}[/cyan]"
            console.print(line)

    if failed:
        raise typer.Exit(1)
