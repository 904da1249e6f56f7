"""Console, colors and output helpers shared by the CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Color palette
ELECTRIC_PURPLE = "#e135ff"
NEON_CYAN = "#80ffea"
ELECTRIC_YELLOW = "#f1fa8c"
SUCCESS_GREEN = "#50fa7b"
ERROR_RED = "#ff6363"

console = Console()

R = TypeVar("R")


def _say(mark: str, color: str, message: str) -> None:
    console.print(f"[{color}]{mark}[/{color}] {message}")


def success(message: str) -> None:
    _say("✓", SUCCESS_GREEN, message)


def error(message: str) -> None:
    _say("✗", ERROR_RED, message)


def warn(message: str) -> None:
    _say("!", ELECTRIC_YELLOW, message)


def info(message: str) -> None:
    _say("→", NEON_CYAN, message)


def hint(message: str) -> None:
    _say("Hint:", ELECTRIC_YELLOW, message)


def create_table(title: str | None = None, *columns: str) -> Table:
    """Table whose first column holds row labels."""
    table = Table(title=title, border_style=NEON_CYAN)
    for i, col in enumerate(columns):
        table.add_column(col, style=ELECTRIC_PURPLE if i == 0 else NEON_CYAN)
    return table


def prompt_panel(body: str, title: str, actions: list[str]) -> Panel:
    """Panel for a recovery prompt, with its action names as the subtitle."""
    return Panel(
        body,
        title=f"[{ELECTRIC_PURPLE}]{title}[/{ELECTRIC_PURPLE}]",
        subtitle=f"[{NEON_CYAN}]{', '.join(actions)}[/{NEON_CYAN}]",
        border_style=NEON_CYAN,
    )


def format_flag(value: bool) -> str:
    """Render a check result as a colored yes/no."""
    if value:
        return f"[{SUCCESS_GREEN}]yes[/{SUCCESS_GREEN}]"
    return f"[{ERROR_RED}]no[/{ERROR_RED}]"


def run_async(command: Callable[[], Awaitable[R]]) -> R:
    """Run a command's coroutine to completion from a sync typer callback."""
    return asyncio.run(command())
