"""GitHub-backed session oracle, fork oracle and create-fork action."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from open_authoring.errors import GitHubClientError

log = structlog.get_logger()

_FORK_NAME = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


class GitHubUser(BaseModel):
    """Subset of the authenticated user payload."""

    login: str
    id: int
    name: str | None = None


class GitHubFork(BaseModel):
    """Subset of the fork creation payload."""

    full_name: str
    default_branch: str | None = None


class GitHubClient:
    """Async client for the three GitHub calls open authoring needs.

    Satisfies the SessionOracle and ForkOracle protocols and provides the
    create-fork action. The token is looked up on every request, so a token
    stored by a sign-in action is used straight away.
    """

    def __init__(
        self,
        *,
        api_url: str = "https://api.github.com",
        source_repo: str = "",
        token_provider: Callable[[], str | None] = lambda: None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.source_repo = source_repo
        self._token_provider = token_provider
        self._timeout = timeout
        self._transport = transport

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def _request(self, method: str, path: str, token: str) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self.api_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                return await client.request(method, path, headers=self._headers(token))
        except httpx.HTTPError as e:
            raise GitHubClientError(f"GitHub request failed: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise GitHubClientError(
                "GitHub returned invalid JSON", status_code=response.status_code
            ) from e

    async def get_user(self) -> GitHubUser | None:
        """Return the signed-in user, or None without a valid token."""
        token = self._token_provider()
        if not token:
            return None

        response = await self._request("GET", "/user", token)
        if response.status_code in (401, 403):
            log.debug("GitHub token rejected", status=response.status_code)
            return None
        if response.status_code != 200:
            raise GitHubClientError(
                f"Unexpected status fetching user: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return GitHubUser.model_validate(self._json(response))
        except ValidationError as e:
            raise GitHubClientError("Malformed user payload", status_code=200) from e

    async def get_branch(self, fork_name: str | None, branch: str) -> bool:
        """Whether ``fork_name`` (owner/repo) has ``branch``."""
        if not fork_name or not _FORK_NAME.match(fork_name):
            return False
        token = self._token_provider()
        if not token:
            return False

        path = f"/repos/{fork_name}/branches/{quote(branch, safe='/')}"
        response = await self._request("GET", path, token)
        if response.status_code == 200:
            return True
        if response.status_code == 404:
            log.debug("Branch not found on fork", fork_name=fork_name, branch=branch)
            return False
        raise GitHubClientError(
            f"Unexpected status checking {fork_name}@{branch}: {response.status_code}",
            status_code=response.status_code,
        )

    async def create_fork(self) -> str:
        """Fork the source repository and return the fork's full name."""
        if not self.source_repo:
            raise GitHubClientError("No source repository configured")
        token = self._token_provider()
        if not token:
            raise GitHubClientError("Not signed in", status_code=401)

        response = await self._request("POST", f"/repos/{self.source_repo}/forks", token)
        # GitHub answers 202 Accepted while the fork is being created
        if response.status_code not in (200, 201, 202):
            raise GitHubClientError(
                f"Fork creation failed: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            fork = GitHubFork.model_validate(self._json(response))
        except ValidationError as e:
            raise GitHubClientError("Malformed fork payload", status_code=response.status_code) from e

        log.info("Requested fork", source_repo=self.source_repo, fork_name=fork.full_name)
        return fork.full_name
