"""Authorization gate for open authoring edit mode.

Edit mode writes to the user's fork of the source repository, so it is only
entered once two independent preconditions hold:

- a user is signed in (Session Oracle)
- the user's fork carries the head branch (Fork Oracle)

When either is missing, ``request_edit_mode()`` opens the Recovery UI, which
offers one action at a time (sign in first, then create the fork). Every
status change is run through ``next_state()``; as soon as the gate is
authorizing and both flags hold, the UI is dismissed and edit mode is entered.

Oracle and action failures never propagate out of the gate. They leave the
corresponding flag false and the same prompt is offered again.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import replace

import structlog

from open_authoring.collaborators import (
    Authenticate,
    CreateFork,
    EditModeCallback,
    ForkOracle,
    ForkRegistry,
    RecoveryUI,
    SessionOracle,
)
from open_authoring.errors import (
    ActionFailed,
    AuthUnresolved,
    ForkInvalid,
    OpenAuthoringError,
)
from open_authoring.prompts import ACTION_NAMES, RecoveryPrompt, build_prompt
from open_authoring.status import AuthorizationStatus, GateState, RecoveryStep, next_state

log = structlog.get_logger()


class AuthorizationGate:
    """Gates enter/exit edit mode behind authentication and fork validity."""

    def __init__(
        self,
        *,
        session_oracle: SessionOracle,
        fork_oracle: ForkOracle,
        fork_registry: ForkRegistry,
        recovery_ui: RecoveryUI,
        authenticate: Authenticate,
        create_fork: CreateFork,
        enter_edit_mode: EditModeCallback,
        exit_edit_mode: EditModeCallback,
        head_branch: str,
        oracle_timeout: float | None = None,
        action_timeout: float | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            session_oracle: Answers whether a user is signed in
            fork_oracle: Answers whether a fork carries a branch
            fork_registry: Persists the chosen fork name
            recovery_ui: Renders recovery prompts
            authenticate: Runs the external sign-in flow
            create_fork: Creates a fork and returns its full name
            enter_edit_mode: Called once per granted edit request
            exit_edit_mode: Called on exit_edit_mode(), ungated
            head_branch: Branch the fork must carry
            oracle_timeout: Seconds allowed per oracle call (None = unbounded)
            action_timeout: Seconds allowed per recovery action (None = unbounded)
        """
        self._session_oracle = session_oracle
        self._fork_oracle = fork_oracle
        self._fork_registry = fork_registry
        self._recovery_ui = recovery_ui
        self._authenticate = authenticate
        self._create_fork = create_fork
        self._enter_edit_mode = enter_edit_mode
        self._exit_edit_mode = exit_edit_mode
        self.head_branch = head_branch
        self.oracle_timeout = oracle_timeout
        self.action_timeout = action_timeout

        self._status = AuthorizationStatus()
        self._prompt: RecoveryPrompt | None = None
        self._notice: tuple[RecoveryStep, str] | None = None
        self._issues: tuple[OpenAuthoringError, ...] = ()
        self._last_action_error: ActionFailed | None = None
        self._issued_seq = 0
        self._committed_seq = 0
        self._tasks: set[asyncio.Task[AuthorizationStatus]] = set()
        self._closed = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def status(self) -> AuthorizationStatus:
        return self._status

    @property
    def state(self) -> GateState:
        return self._status.state

    @property
    def authenticated(self) -> bool:
        return self._status.authenticated

    @property
    def fork_valid(self) -> bool:
        return self._status.fork_valid

    @property
    def authorizing(self) -> bool:
        return self._status.authorizing

    @property
    def recovery_prompt(self) -> RecoveryPrompt | None:
        """Prompt currently shown by the Recovery UI, if any."""
        return self._prompt

    @property
    def issues(self) -> tuple[OpenAuthoringError, ...]:
        """Errors absorbed by the most recently committed check."""
        return self._issues

    @property
    def last_action_error(self) -> ActionFailed | None:
        return self._last_action_error

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def activate(self) -> AuthorizationStatus:
        """Run the initial checks."""
        log.debug("Activating authorization gate", head_branch=self.head_branch)
        return await self.update_auth_checks()

    async def close(self) -> None:
        """Tear down: cancel checks, leave recovery and dismiss an open prompt.

        Results and action failures arriving after this are ignored.
        """
        self._closed = True
        self._status = replace(self._status, authorizing=False)
        self._notice = None
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        if self._prompt is not None:
            self._prompt = None
            self._recovery_ui.dismiss()

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    async def update_auth_checks(self) -> AuthorizationStatus:
        """Query both oracles concurrently and commit both flags together.

        Safe to call while another check is in flight. A result is dropped
        only if a check issued after it has already been committed.
        """
        self._issued_seq += 1
        seq = self._issued_seq
        fork_name = self._fork_registry.get_fork_name()

        (authenticated, auth_issue), (fork_valid, fork_issue) = await asyncio.gather(
            self._probe(self._check_session, AuthUnresolved),
            self._probe(lambda: self._check_fork(fork_name), ForkInvalid),
        )

        if self._closed:
            return self._status
        if seq < self._committed_seq:
            log.debug("Discarding superseded auth check", seq=seq, committed=self._committed_seq)
            return self._status

        self._committed_seq = seq
        self._issues = tuple(issue for issue in (auth_issue, fork_issue) if issue is not None)
        log.debug(
            "Auth checks resolved",
            authenticated=authenticated,
            fork_valid=fork_valid,
            fork_name=fork_name,
        )
        self._set_status(
            replace(self._status, authenticated=authenticated, fork_valid=fork_valid)
        )
        return self._status

    def schedule_auth_checks(self) -> asyncio.Task[AuthorizationStatus]:
        """Start ``update_auth_checks()`` without waiting for it."""
        task = asyncio.get_running_loop().create_task(self.update_auth_checks())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _check_session(self) -> bool:
        user = await self._session_oracle.get_user()
        if not user:
            raise AuthUnresolved("No signed-in user")
        return True

    async def _check_fork(self, fork_name: str | None) -> bool:
        if not await self._fork_oracle.get_branch(fork_name, self.head_branch):
            raise ForkInvalid(
                f"Fork {fork_name or '(none)'} has no branch {self.head_branch}",
                details={"fork_name": fork_name, "branch": self.head_branch},
            )
        return True

    async def _probe(
        self,
        check: Callable[[], Awaitable[bool]],
        failure: type[OpenAuthoringError],
    ) -> tuple[bool, OpenAuthoringError | None]:
        """Run a check under the oracle timeout, mapping any failure to False."""
        try:
            async with asyncio.timeout(self.oracle_timeout):
                return await check(), None
        except OpenAuthoringError as e:
            issue = e if isinstance(e, failure) else failure(e.message, details=e.details)
            log.debug("Precondition not satisfied", reason=issue.message)
            return False, issue
        except TimeoutError:
            log.warning("Oracle call timed out", check=failure.__name__, timeout=self.oracle_timeout)
            return False, failure("Check timed out", details={"timeout": self.oracle_timeout})
        except Exception as e:
            log.warning("Oracle call failed", check=failure.__name__, error=str(e))
            return False, failure(str(e) or type(e).__name__, details={"error": repr(e)})

    # ------------------------------------------------------------------
    # Edit mode
    # ------------------------------------------------------------------

    def request_edit_mode(self) -> bool:
        """Enter edit mode now if allowed, otherwise open the recovery flow.

        Returns:
            True if edit mode was entered immediately
        """
        if self._closed:
            log.debug("Ignoring edit request on closed gate")
            return False
        if self._status.ready:
            log.info("Entering edit mode")
            self._enter_edit_mode()
            return True

        log.info(
            "Edit mode requires authorization",
            authenticated=self._status.authenticated,
            fork_valid=self._status.fork_valid,
        )
        self._set_status(replace(self._status, authorizing=True))
        return False

    def exit_edit_mode(self) -> None:
        self._exit_edit_mode()

    # ------------------------------------------------------------------
    # Recovery actions
    # ------------------------------------------------------------------

    async def authenticate(self) -> None:
        """Run the sign-in action, then re-check."""
        try:
            async with asyncio.timeout(self.action_timeout):
                await self._authenticate()
        except Exception as e:
            self._fail_action(RecoveryStep.AUTHENTICATE, e)
            return

        self._action_succeeded()
        await self.update_auth_checks()

    async def create_fork(self) -> None:
        """Create a fork, remember it, then re-check."""
        try:
            async with asyncio.timeout(self.action_timeout):
                full_name = await self._create_fork()
            if not full_name:
                raise ValueError("no fork name returned")
        except Exception as e:
            self._fail_action(RecoveryStep.CREATE_FORK, e)
            return

        self._fork_registry.set_fork_name(full_name)
        log.info("Fork created", fork_name=full_name)
        self._action_succeeded()
        # Newly created forks can take a moment to show up
        self._notice = (
            RecoveryStep.CREATE_FORK,
            f"Fork {full_name} was created but branch {self.head_branch} "
            "is not visible yet. Try again in a moment.",
        )
        await self.update_auth_checks()
        if self._status.fork_valid:
            self._notice = None

    def _fail_action(self, step: RecoveryStep, error: BaseException) -> None:
        action_name = ACTION_NAMES[step]
        if self._closed:
            log.debug("Ignoring recovery action failure on closed gate", action=action_name)
            return
        if isinstance(error, TimeoutError):
            failure = ActionFailed(action_name, f"timed out after {self.action_timeout}s")
        else:
            failure = ActionFailed(action_name, error)
        log.warning("Recovery action failed", action=action_name, error=failure.message)
        self._last_action_error = failure
        self._notice = (step, f"{failure.message}. Please try again.")
        self._reevaluate()

    def _action_succeeded(self) -> None:
        self._last_action_error = None
        self._notice = None

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _set_status(self, status: AuthorizationStatus) -> None:
        self._status = status
        self._reevaluate()

    def _reevaluate(self) -> None:
        """Apply next_state() to the current status."""
        transition = next_state(self._status)

        if transition.should_unlock:
            self._status = replace(self._status, authorizing=False)
            self._notice = None
            if self._prompt is not None:
                self._prompt = None
                self._recovery_ui.dismiss()
            log.info("Authorization complete, entering edit mode")
            self._enter_edit_mode()
            return

        if transition.next_recovery_action is None:
            return

        step = transition.next_recovery_action
        notice = self._notice[1] if self._notice and self._notice[0] is step else None
        self._prompt = build_prompt(step, self._action_for(step), notice=notice)
        self._recovery_ui.show(self._prompt)

    def _action_for(self, step: RecoveryStep) -> Callable[[], Awaitable[None]]:
        if step is RecoveryStep.AUTHENTICATE:
            return self.authenticate
        return self.create_fork
