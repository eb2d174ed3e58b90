"""``tracking-skills init``: scaffold .telemetry/ and install skills."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from tracking_cli.cli import StepTracker, select_with_arrows
from tracking_cli.cli.helpers import console, fail, run_or_exit
from tracking_cli.config import TrackingConfig, load_config
from tracking_cli.scaffold import scaffold
from tracking_cli.sdks import SDK_NAMES, get_target
from tracking_cli.skills import install_skills, skills_destination

logger = logging.getLogger(__name__)

SDK_CHOICES = {
    "segment": "Segment",
    "amplitude": "Amplitude",
    "mixpanel": "Mixpanel",
    "posthog": "PostHog",
    "accoil": "Accoil",
    "rudderstack": "RudderStack",
}


def _choose_sdk(sdk: Optional[str], current: TrackingConfig) -> str:
    if sdk:
        return sdk.strip().lower()
    if sys.stdin.isatty():
        return select_with_arrows(SDK_CHOICES, "Choose your analytics SDK", default_key=current.sdk, console=console)
    return current.sdk


def init(
    path: Path = typer.Argument(Path("."), help="Project directory (defaults to the current directory)"),
    sdk: Optional[str] = typer.Option(None, "--sdk", help=f"Analytics SDK: {', '.join(SDK_NAMES)}"),
    platform: Optional[str] = typer.Option(None, "--platform", help="browser or node"),
    agent: Optional[str] = typer.Option(
        None, "--agent", help="Agent whose skills directory receives the skills (defaults to config.yaml)"
    ),
    no_skills: bool = typer.Option(False, "--no-skills", help="Only scaffold .telemetry/, do not install skills"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing templates, config and skills"),
) -> None:
    """Scaffold .telemetry/ and install the tracking skills."""
    root = path.resolve()
    if not root.is_dir():
        fail(f"{root} is not a directory")

    current = run_or_exit(lambda: load_config(root, apply_env=False))
    chosen_sdk = _choose_sdk(sdk, current)
    chosen_platform = (platform or current.platform).strip().lower()
    chosen_agent = (agent or current.agent).strip().lower()
    # Validate the choices before writing anything
    run_or_exit(lambda: get_target(chosen_sdk, chosen_platform))
    run_or_exit(lambda: skills_destination(root, chosen_agent))

    config = TrackingConfig(
        sdk=chosen_sdk,
        platform=chosen_platform,
        naming_strict=current.naming_strict,
        agent=chosen_agent,
    )

    tracker = StepTracker("Initialize tracking workspace")
    tracker.add("scaffold", "Create .telemetry/")
    tracker.add("config", "Write config.yaml")
    tracker.add("skills", "Install skills")

    result = run_or_exit(lambda: scaffold(root, config, force=force))
    tracker.complete("scaffold", f"{len(result.created)} created, {len(result.preserved)} kept")
    tracker.complete("config", f"{config.sdk}/{config.platform}")

    if no_skills:
        tracker.skip("skills", "--no-skills")
    else:
        installed = run_or_exit(lambda: install_skills(root, agent=chosen_agent, force=force))
        detail = f"{len(installed.installed)} installed"
        if installed.skipped:
            detail += f", {len(installed.skipped)} already present"
        tracker.complete("skills", detail)

    console.print(tracker.render())
    console.print()
    console.print("[bold green]Ready.[/bold green] Start with the [cyan]business-case[/cyan] skill.")
