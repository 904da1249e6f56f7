"""Auth-related CLI commands."""

from __future__ import annotations

import typer

from open_authoring import store
from open_authoring.cli.common import error, success

app = typer.Typer(help="Authentication and credentials")


@app.command("status")
def status_cmd() -> None:
    if store.get_access_token():
        success(f"Access token found in {store.state_path()}")
    else:
        error("No access token found (set one with: open-authoring auth set-token <token>)")


@app.command("set-token")
def set_token_cmd(token: str) -> None:
    if not token.strip():
        error("Token must not be empty")
        raise typer.Exit(1)
    store.set_access_token(token)
    success(f"Access token saved to {store.state_path()}")


@app.command("clear-token")
def clear_token_cmd() -> None:
    store.clear_access_token()
    success("Access token cleared")
