"""Authorization status and the pure transition function driving the gate."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class GateState(str, Enum):
    """Coarse gate states derived from an AuthorizationStatus."""

    LOCKED = "locked"
    RECOVERING = "recovering"
    UNLOCKED = "unlocked"


class RecoveryStep(str, Enum):
    """Which precondition the recovery flow asks the user to resolve."""

    AUTHENTICATE = "authenticate"
    CREATE_FORK = "create_fork"


@dataclass(frozen=True)
class AuthorizationStatus:
    """Two independently checked flags plus whether recovery is in progress."""

    authenticated: bool = False
    fork_valid: bool = False
    authorizing: bool = False

    @property
    def ready(self) -> bool:
        """Whether edit mode may be entered."""
        return self.authenticated and self.fork_valid

    @property
    def state(self) -> GateState:
        if self.ready:
            return GateState.UNLOCKED
        if self.authorizing:
            return GateState.RECOVERING
        return GateState.LOCKED


@dataclass(frozen=True)
class Transition:
    """What the gate must do after a status change."""

    should_unlock: bool
    next_recovery_action: RecoveryStep | None = None


def next_state(status: AuthorizationStatus) -> Transition:
    """Decide whether to unlock or which recovery step to present.

    Authentication always comes before fork validity, so the user is never
    asked to resolve both at once.
    """
    if not status.authorizing:
        return Transition(should_unlock=False)
    if status.ready:
        return Transition(should_unlock=True)
    if not status.authenticated:
        return Transition(should_unlock=False, next_recovery_action=RecoveryStep.AUTHENTICATE)
    return Transition(should_unlock=False, next_recovery_action=RecoveryStep.CREATE_FORK)
