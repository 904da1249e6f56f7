"""Main CLI application - ties all subcommands together.

This is the entry point for the open-authoring CLI.
"""

import asyncio
from collections import Counter

import typer

from open_authoring import config, configure_logging, store
from open_authoring.cli.auth import app as auth_app
from open_authoring.cli.common import (
    console,
    create_table,
    error,
    format_flag,
    hint,
    info,
    run_async,
    success,
)
from open_authoring.cli.fork import app as fork_app
from open_authoring.cli.ui import ConsoleRecoveryUI, Confirm, drive_recovery
from open_authoring.gate import AuthorizationGate
from open_authoring.github import GitHubClient
from open_authoring.prompts import RecoveryPrompt
from open_authoring.registry import FileForkRegistry

# Automatic confirmations per step with --yes before giving up
MAX_AUTO_ATTEMPTS = 3

app = typer.Typer(
    name="open-authoring",
    help="Edit a site through your own GitHub fork",
    add_completion=False,
    no_args_is_help=True,
)

app.add_typer(auth_app, name="auth")
app.add_typer(fork_app, name="fork")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    if verbose:
        configure_logging("DEBUG")


def _token() -> str | None:
    return config.settings.github_token.get_secret_value() or store.get_access_token()


async def _prompt_for_token() -> None:
    # Off the event loop so the action timeout can fire while waiting for input
    token = await asyncio.to_thread(
        typer.prompt, "GitHub personal access token", hide_input=True
    )
    if not token.strip():
        raise ValueError("empty token")
    store.set_access_token(token)


def _enter_edit_mode() -> None:
    store.set_edit_mode(True)
    fork_name = store.get_fork_name() or "(unknown)"
    success(f"Edit mode enabled: commits go to {fork_name} on {config.settings.head_branch}")


def _exit_edit_mode() -> None:
    store.set_edit_mode(False)
    success("Edit mode disabled")


def _build_gate(ui: ConsoleRecoveryUI) -> AuthorizationGate:
    s = config.settings
    client = GitHubClient(
        api_url=s.github_api_url,
        source_repo=s.source_repo,
        token_provider=_token,
        timeout=s.http_timeout,
    )
    return AuthorizationGate(
        session_oracle=client,
        fork_oracle=client,
        fork_registry=FileForkRegistry(),
        recovery_ui=ui,
        authenticate=_prompt_for_token,
        create_fork=client.create_fork,
        enter_edit_mode=_enter_edit_mode,
        exit_edit_mode=_exit_edit_mode,
        head_branch=s.head_branch,
        oracle_timeout=s.oracle_timeout_or_none,
        action_timeout=s.action_timeout_or_none,
    )


def _ask(prompt: RecoveryPrompt) -> bool:
    return typer.confirm(f"{prompt.actions[0].name.capitalize()} now?", default=True)


def _auto_confirm() -> Confirm:
    attempts: Counter[str] = Counter()

    def confirm(prompt: RecoveryPrompt) -> bool:
        attempts[prompt.step.value] += 1
        return attempts[prompt.step.value] <= MAX_AUTO_ATTEMPTS

    return confirm


@app.command("status")
def status_cmd() -> None:
    """Check sign-in and fork state."""

    async def _run() -> None:
        gate = _build_gate(ConsoleRecoveryUI(console))
        try:
            status = await gate.activate()
        finally:
            await gate.close()

        table = create_table("Open authoring", "Check", "Value")
        table.add_row("Signed in", format_flag(status.authenticated))
        table.add_row("Fork", store.get_fork_name() or "-")
        table.add_row("Head branch", gate.head_branch)
        table.add_row("Fork valid", format_flag(status.fork_valid))
        table.add_row("Edit mode", format_flag(store.is_edit_mode()))
        console.print(table)
        for issue in gate.issues:
            info(issue.message)

    run_async(_run)


@app.command("edit")
def edit_cmd(
    yes: bool = typer.Option(False, "--yes", "-y", help="Run recovery actions without asking"),
) -> None:
    """Enter edit mode, signing in and forking first if needed."""

    async def _run() -> bool:
        ui = ConsoleRecoveryUI(console)
        gate = _build_gate(ui)
        try:
            await gate.activate()
            if gate.request_edit_mode():
                return True
            return await drive_recovery(gate, ui, _auto_confirm() if yes else _ask)
        finally:
            await gate.close()

    if not run_async(_run):
        error("Edit mode not enabled")
        if not config.settings.source_repo:
            hint("Set OPEN_AUTHORING_SOURCE_REPO to the repository you want to edit")
        raise typer.Exit(1)


@app.command("exit")
def exit_cmd() -> None:
    """Leave edit mode."""
    _build_gate(ConsoleRecoveryUI(console)).exit_edit_mode()


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
