"""Contracts for the collaborators the authorization gate depends on."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from open_authoring.prompts import RecoveryPrompt

Authenticate = Callable[[], Awaitable[None]]
CreateFork = Callable[[], Awaitable[str]]
EditModeCallback = Callable[[], None]


class SessionOracle(Protocol):
    async def get_user(self) -> object | None:
        """Return the signed-in user, or None."""
        ...


class ForkOracle(Protocol):
    async def get_branch(self, fork_name: str | None, branch: str) -> bool:
        """Whether ``fork_name`` carries ``branch``. Empty names are never valid."""
        ...


class ForkRegistry(Protocol):
    def get_fork_name(self) -> str | None: ...

    def set_fork_name(self, name: str | None) -> None: ...


class RecoveryUI(Protocol):
    def show(self, prompt: RecoveryPrompt) -> None:
        """Render (or re-render) a recovery prompt."""
        ...

    def dismiss(self) -> None: ...
