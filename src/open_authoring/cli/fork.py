"""Fork registry CLI commands."""

from __future__ import annotations

import typer

from open_authoring.cli.common import error, info, success, warn
from open_authoring.registry import FileForkRegistry

app = typer.Typer(help="Show or change the fork edits are committed to")


@app.command("show")
def show_cmd() -> None:
    name = FileForkRegistry().get_fork_name()
    if name:
        info(f"Fork: {name}")
    else:
        warn("No fork selected (run: open-authoring edit)")


@app.command("set")
def set_cmd(name: str = typer.Argument(..., help="Fork full name, e.g. alice/site-fork")) -> None:
    if not name.strip():
        error("Fork name must not be empty (use: open-authoring fork clear)")
        raise typer.Exit(1)
    FileForkRegistry().set_fork_name(name)
    success(f"Fork set to {name.strip()}")


@app.command("clear")
def clear_cmd() -> None:
    FileForkRegistry().set_fork_name(None)
    success("Fork cleared")
