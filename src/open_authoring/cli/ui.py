"""Terminal Recovery UI for the authorization gate."""

from __future__ import annotations

from collections.abc import Callable

import structlog
from rich.console import Console

from open_authoring.cli.common import ELECTRIC_YELLOW, prompt_panel
from open_authoring.gate import AuthorizationGate
from open_authoring.prompts import RecoveryPrompt

log = structlog.get_logger()

Confirm = Callable[[RecoveryPrompt], bool]


class ConsoleRecoveryUI:
    """Renders recovery prompts as rich panels.

    The gate calls show()/dismiss(); drive_recovery() then asks the user to
    confirm and runs the prompt's action.
    """

    def __init__(self, console: Console) -> None:
        self.console = console
        self.prompt: RecoveryPrompt | None = None

    def show(self, prompt: RecoveryPrompt) -> None:
        self.prompt = prompt
        body = prompt.message
        if prompt.notice:
            body += f"\n\n[{ELECTRIC_YELLOW}]{prompt.notice}[/{ELECTRIC_YELLOW}]"
        actions = [action.name for action in prompt.actions]
        self.console.print(prompt_panel(body, prompt.title, actions))

    def dismiss(self) -> None:
        self.prompt = None


async def drive_recovery(gate: AuthorizationGate, ui: ConsoleRecoveryUI, confirm: Confirm) -> bool:
    """Run prompts until the gate unlocks or the user declines.

    Returns:
        True if edit mode was entered
    """
    while gate.authorizing and ui.prompt is not None:
        prompt = ui.prompt
        if not confirm(prompt):
            log.info("Recovery declined", step=prompt.step.value)
            return False
        await prompt.actions[0].action()
    return not gate.authorizing and gate.status.ready
