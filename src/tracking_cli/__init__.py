"""
tracking-skills - analytics tracking skills for AI coding agents.

The skills guide an agent from business case to implemented tracking plan.
This CLI installs them and checks the artifacts they produce under
.telemetry/.

Usage:
    tracking-skills init
    tracking-skills validate --check-files
    tracking-skills delta
"""

from __future__ import annotations

import logging

import typer

from tracking_cli.cli.commands import register_commands
from tracking_cli.cli.helpers import console

__version__ = "0.1.0"

TAGLINE = "tracking-skills - analytics tracking plans for AI coding agents"

app = typer.Typer(
    name="tracking-skills",
    help="Install tracking skills and check the .telemetry/ artifacts they produce",
    add_completion=False,
    invoke_without_command=True,
    no_args_is_help=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tracking-skills {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Configure logging; show the tagline when no subcommand is given."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        console.print(f"[italic bright_yellow]{TAGLINE}[/italic bright_yellow]")
        console.print("[dim]Run 'tracking-skills --help' for usage information[/dim]")


register_commands(app)


def main():
    app()


if __name__ == "__main__":
    main()
