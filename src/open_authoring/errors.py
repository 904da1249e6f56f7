"""Custom exceptions for open authoring."""


class OpenAuthoringError(Exception):
    """Base exception for all open authoring errors."""

    def __init__(self, message: str, *, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AuthUnresolved(OpenAuthoringError):
    """Raised when no authenticated user could be resolved."""


class ForkInvalid(OpenAuthoringError):
    """Raised when the fork is missing or lacks the head branch."""


class ActionFailed(OpenAuthoringError):
    """Raised when a recovery action (authenticate, create fork) fails."""

    def __init__(self, action_name: str, cause: BaseException | str) -> None:
        reason = str(cause) or type(cause).__name__
        super().__init__(
            f"{action_name} failed: {reason}",
            details={"action": action_name, "error": reason},
        )
        self.action_name = action_name


class GitHubClientError(OpenAuthoringError):
    """Raised when a GitHub API request fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, details={"status_code": status_code})
        self.status_code = status_code
