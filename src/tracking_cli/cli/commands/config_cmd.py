"""``config`` commands for .telemetry/config.yaml."""

from __future__ import annotations

import typer
from rich.table import Table

from tracking_cli.cli.helpers import console, get_project_root_or_exit, print_json, run_or_exit
from tracking_cli.config import load_config, save_config, set_config_value
from tracking_cli.core.paths import config_path
from tracking_cli.sdks import get_target

app = typer.Typer(help="Read and change .telemetry/config.yaml")


@app.command("show")
def show(
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
) -> None:
    """Show the effective configuration (environment overrides applied)."""
    root = get_project_root_or_exit()
    config = run_or_exit(lambda: load_config(root))

    if json_output:
        print_json(config.to_dict())
        return

    table = Table(title=str(config_path(root).relative_to(root)))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("sdk", config.sdk)
    table.add_row("platform", config.platform)
    table.add_row("agent", config.agent)
    table.add_row("naming_strict", str(config.naming_strict).lower())
    console.print(table)


@app.command("set")
def set_cmd(
    key: str = typer.Argument(..., help="sdk, platform, agent or naming_strict"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set one configuration value."""
    root = get_project_root_or_exit()
    current = run_or_exit(lambda: load_config(root, apply_env=False))
    updated = run_or_exit(lambda: set_config_value(current, key, value))
    if key in ("sdk", "platform"):
        run_or_exit(lambda: get_target(updated.sdk, updated.platform))

    save_config(root, updated)
    console.print(f"[green]✓[/green] {key} = {value}")
