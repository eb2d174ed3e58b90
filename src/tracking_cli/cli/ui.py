"""Terminal widgets for ``tracking-skills init``: a step tree and an arrow-key picker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import readchar
import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

STATUS_SYMBOLS: Dict[str, str] = {
    "pending": "[green dim]○[/green dim]",
    "done": "[green]●[/green]",
    "error": "[red]●[/red]",
    "skipped": "[yellow]○[/yellow]",
}


@dataclass
class Step:
    key: str
    label: str
    status: str = "pending"
    detail: str = ""

    def render(self) -> str:
        symbol = STATUS_SYMBOLS.get(self.status, " ")
        line = f"{symbol} [white]{self.label}[/white]"
        if self.detail.strip():
            line += f" [bright_black]({self.detail.strip()})[/bright_black]"
        return line


class StepTracker:
    """Ordered setup steps rendered as a Rich tree."""

    def __init__(self, title: str):
        self.title = title
        self.steps: List[Step] = []

    def _find(self, key: str) -> Optional[Step]:
        return next((step for step in self.steps if step.key == key), None)

    def add(self, key: str, label: str) -> None:
        if self._find(key) is None:
            self.steps.append(Step(key, label))

    def complete(self, key: str, detail: str = "") -> None:
        self._update(key, "done", detail)

    def error(self, key: str, detail: str = "") -> None:
        self._update(key, "error", detail)

    def skip(self, key: str, detail: str = "") -> None:
        self._update(key, "skipped", detail)

    def status_of(self, key: str) -> Optional[str]:
        step = self._find(key)
        return step.status if step else None

    def _update(self, key: str, status: str, detail: str) -> None:
        step = self._find(key)
        if step is None:
            step = Step(key, key)
            self.steps.append(step)
        step.status = status
        if detail:
            step.detail = detail

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        for step in self.steps:
            tree.add(step.render())
        return tree


def get_key() -> str:
    """Read one keypress and name the navigation keys."""
    key = readchar.readkey()

    if key in (readchar.key.UP, readchar.key.CTRL_P):
        return "up"
    if key in (readchar.key.DOWN, readchar.key.CTRL_N):
        return "down"
    if key == readchar.key.ENTER:
        return "enter"
    if key in (readchar.key.ESC, "\x1b"):
        return "escape"
    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt
    return key


def _choice_panel(options: Dict[str, str], keys: List[str], index: int, prompt_text: str) -> Panel:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", width=3)
    table.add_column(style="white")
    for position, key in enumerate(keys):
        table.add_row("▶" if position == index else " ", f"[cyan]{key}[/cyan] [dim]({options[key]})[/dim]")
    table.add_row("", "")
    table.add_row("", "[dim]↑/↓ to move, Enter to choose, Esc to cancel[/dim]")
    return Panel(table, title=f"[bold]{prompt_text}[/bold]", border_style="cyan", padding=(1, 2))


def select_with_arrows(
    options: Dict[str, str],
    prompt_text: str = "Select an option",
    default_key: str | None = None,
    console: Console | None = None,
) -> str:
    """Let the user pick one of ``options`` (key -> label) with the arrow keys.

    Escape or Ctrl+C cancels with exit status 1.
    """
    console = console or Console()
    keys = list(options)
    index = keys.index(default_key) if default_key in options else 0

    console.print()
    with Live(_choice_panel(options, keys, index, prompt_text), console=console, transient=True, auto_refresh=False) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                key = "escape"

            if key == "enter":
                return keys[index]
            if key == "escape":
                console.print("\n[yellow]Selection cancelled[/yellow]")
                raise typer.Exit(1)
            if key == "up":
                index = (index - 1) % len(keys)
            elif key == "down":
                index = (index + 1) % len(keys)

            live.update(_choice_panel(options, keys, index, prompt_text), refresh=True)
