"""SDK reference commands and ``instrument``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.syntax import Syntax
from rich.table import Table

from tracking_cli.artifacts import load_tracking_plan
from tracking_cli.cli.helpers import console, fail, get_project_root_or_exit, print_json, run_or_exit
from tracking_cli.config import TrackingConfig, load_config
from tracking_cli.core.constants import Artifact
from tracking_cli.core.paths import artifact_path, locate_project_root
from tracking_cli.sdks import CallKind, SdkTarget, get_target, list_targets, render_call, render_instrument_guide

logger = logging.getLogger(__name__)

app = typer.Typer(help="Analytics SDK call reference")


def _resolve_target(sdk: Optional[str], platform: Optional[str], config: TrackingConfig) -> SdkTarget:
    return run_or_exit(lambda: get_target(sdk or config.sdk, platform or config.platform))


def _config_or_default() -> TrackingConfig:
    root = locate_project_root()
    if root is None:
        return TrackingConfig().with_env_overrides()
    return run_or_exit(lambda: load_config(root))


@app.command("list")
def list_cmd(
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
) -> None:
    """List supported SDKs and platforms."""
    targets = list_targets()
    if json_output:
        print_json(
            [
                {
                    "sdk": t.sdk,
                    "platform": t.platform.value,
                    "label": t.label,
                    "package": t.package or None,
                    "supports_event_properties": t.supports_event_properties,
                }
                for t in targets
            ]
        )
        return

    table = Table(title="Supported SDKs")
    table.add_column("SDK", style="cyan")
    table.add_column("Platform")
    table.add_column("Package")
    table.add_column("Event properties", justify="center")
    for target in targets:
        table.add_row(
            target.sdk,
            target.platform.value,
            target.package or "-",
            "yes" if target.supports_event_properties else "[yellow]no[/yellow]",
        )
    console.print(table)


@app.command("snippet")
def snippet(
    kind: CallKind = typer.Argument(..., help="identify, group or track"),
    event: Optional[str] = typer.Option(None, "--event", "-e", help="Event name (track calls)"),
    keys: Optional[List[str]] = typer.Option(None, "--key", "-k", help="Property or trait key (repeatable)"),
    group_type: str = typer.Option("company", "--group-type", help="Group type for group calls"),
    sdk: Optional[str] = typer.Option(None, "--sdk", help="SDK (defaults to config)"),
    platform: Optional[str] = typer.Option(None, "--platform", help="browser or node (defaults to config)"),
    plain: bool = typer.Option(False, "--plain", help="Print without syntax highlighting"),
) -> None:
    """Render one identify/group/track call."""
    target = _resolve_target(sdk, platform, _config_or_default())
    if kind == CallKind.TRACK and not event:
        fail("track snippets need --event")

    source = render_call(target, kind, event, keys or [], group_type=group_type)
    if plain:
        typer.echo(source)
    else:
        console.print(Syntax(source, "javascript", theme="ansi_dark"))


def instrument(
    sdk: Optional[str] = typer.Option(None, "--sdk", help="SDK (defaults to config)"),
    platform: Optional[str] = typer.Option(None, "--platform", help="browser or node (defaults to config)"),
    stdout: bool = typer.Option(False, "--stdout", help="Print instrument.md instead of writing it"),
) -> None:
    """Render instrument.md from the tracking plan."""
    root = get_project_root_or_exit()
    target = _resolve_target(sdk, platform, run_or_exit(lambda: load_config(root)))
    plan = run_or_exit(lambda: load_tracking_plan(artifact_path(root, Artifact.TRACKING_PLAN)))
    guide = render_instrument_guide(plan, target)

    if stdout:
        typer.echo(guide)
        return

    path: Path = artifact_path(root, Artifact.INSTRUMENT)
    path.write_text(guide, encoding="utf-8")
    console.print(f"[green]✓[/green] Wrote {path.relative_to(root)} for {target.label}")
