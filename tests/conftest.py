"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from open_authoring import config
from open_authoring.config import Settings
from open_authoring.gate import AuthorizationGate
from open_authoring.prompts import RecoveryPrompt
from open_authoring.registry import MemoryForkRegistry

USER = {"login": "alice", "id": 1}


class FakeRecoveryUI:
    """Records what the gate asks the Recovery UI to do."""

    def __init__(self) -> None:
        self.shown: list[RecoveryPrompt] = []
        self.dismissed = 0
        self.open = False

    @property
    def prompt(self) -> RecoveryPrompt | None:
        return self.shown[-1] if self.open else None

    def show(self, prompt: RecoveryPrompt) -> None:
        self.shown.append(prompt)
        self.open = True

    def dismiss(self) -> None:
        self.dismissed += 1
        self.open = False


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the state file at a temp dir and ignore ambient env."""
    for var in ("OPEN_AUTHORING_GITHUB_TOKEN", "OPEN_AUTHORING_SOURCE_REPO"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(_env_file=None, state_path=tmp_path / "state.json")
    monkeypatch.setattr(config, "settings", s)
    return s


@pytest.fixture
def session_oracle():
    """Session oracle with no signed-in user."""
    oracle = MagicMock()
    oracle.get_user = AsyncMock(return_value=None)
    return oracle


@pytest.fixture
def fork_oracle():
    """Fork oracle reporting every fork invalid."""
    oracle = MagicMock()
    oracle.get_branch = AsyncMock(return_value=False)
    return oracle


@pytest.fixture
def registry():
    return MemoryForkRegistry()


@pytest.fixture
def ui():
    return FakeRecoveryUI()


@pytest.fixture
def authenticate():
    return AsyncMock(return_value=None)


@pytest.fixture
def create_fork():
    return AsyncMock(return_value="alice/site-fork")


@pytest.fixture
def enter_edit_mode():
    return MagicMock()


@pytest.fixture
def exit_edit_mode():
    return MagicMock()


@pytest.fixture
def gate(
    session_oracle,
    fork_oracle,
    registry,
    ui,
    authenticate,
    create_fork,
    enter_edit_mode,
    exit_edit_mode,
):
    """Gate wired to fakes, head branch 'master'."""
    return AuthorizationGate(
        session_oracle=session_oracle,
        fork_oracle=fork_oracle,
        fork_registry=registry,
        recovery_ui=ui,
        authenticate=authenticate,
        create_fork=create_fork,
        enter_edit_mode=enter_edit_mode,
        exit_edit_mode=exit_edit_mode,
        head_branch="master",
    )
