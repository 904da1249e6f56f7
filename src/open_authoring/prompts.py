"""Recovery prompts shown while the gate is authorizing.

Each prompt variant carries its own title, message and the single action that
resolves its precondition. The Recovery UI renders the prompt and awaits
``action.action()`` once the user confirms.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import ClassVar

from open_authoring.status import RecoveryStep


@dataclass(frozen=True)
class RecoveryAction:
    """A named action offered by a prompt."""

    name: str
    action: Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class AuthenticatePrompt:
    """Ask the user to sign in."""

    step: ClassVar[RecoveryStep] = RecoveryStep.AUTHENTICATE
    title: ClassVar[str] = "Sign in to GitHub"
    message: ClassVar[str] = (
        "Editing this site commits to your own fork on GitHub. Sign in so we can check it."
    )

    action: RecoveryAction
    notice: str | None = None

    @property
    def actions(self) -> list[RecoveryAction]:
        return [self.action]


@dataclass(frozen=True)
class CreateForkPrompt:
    """Ask the user to create (or re-create) their fork."""

    step: ClassVar[RecoveryStep] = RecoveryStep.CREATE_FORK
    title: ClassVar[str] = "Fork the repository"
    message: ClassVar[str] = (
        "You don't have a usable fork of this repository yet. "
        "Create one to save your edits there."
    )

    action: RecoveryAction
    notice: str | None = None

    @property
    def actions(self) -> list[RecoveryAction]:
        return [self.action]


RecoveryPrompt = AuthenticatePrompt | CreateForkPrompt

_PROMPTS: dict[RecoveryStep, type[AuthenticatePrompt] | type[CreateForkPrompt]] = {
    RecoveryStep.AUTHENTICATE: AuthenticatePrompt,
    RecoveryStep.CREATE_FORK: CreateForkPrompt,
}

ACTION_NAMES: dict[RecoveryStep, str] = {
    RecoveryStep.AUTHENTICATE: "authenticate",
    RecoveryStep.CREATE_FORK: "create fork",
}


def build_prompt(
    step: RecoveryStep,
    action: Callable[[], Awaitable[None]],
    notice: str | None = None,
) -> RecoveryPrompt:
    """Build the prompt variant for a recovery step."""
    prompt_cls = _PROMPTS[step]
    return prompt_cls(action=RecoveryAction(name=ACTION_NAMES[step], action=action), notice=notice)
