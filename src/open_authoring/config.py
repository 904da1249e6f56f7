"""Configuration management for open authoring."""

import re
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_REPO_NAME = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OPEN_AUTHORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # GitHub
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL",
    )
    github_token: SecretStr = Field(
        default=SecretStr(""),
        description="Access token override (falls back to the stored token when empty)",
    )
    source_repo: str = Field(
        default="",
        description="Repository to fork, as owner/repo",
    )
    head_branch: str = Field(
        default="master",
        min_length=1,
        description="Branch the fork must carry for edits to be accepted",
    )

    # Local state
    state_path: Path | None = Field(
        default=None,
        description="State file for token, fork name and edit mode (default ~/.open-authoring)",
    )

    # Timeouts (seconds, 0 disables)
    oracle_timeout: float = Field(default=10.0, ge=0, description="Per session/fork check")
    action_timeout: float = Field(default=300.0, ge=0, description="Per authenticate/fork action")
    http_timeout: float = Field(default=10.0, gt=0, description="HTTP client timeout")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level",
    )

    @field_validator("source_repo")
    @classmethod
    def validate_source_repo(cls, value: str) -> str:
        value = value.strip().strip("/")
        if value and not _REPO_NAME.match(value):
            raise ValueError(f"source_repo must look like owner/repo, got {value!r}")
        return value

    @property
    def oracle_timeout_or_none(self) -> float | None:
        return self.oracle_timeout or None

    @property
    def action_timeout_or_none(self) -> float | None:
        return self.action_timeout or None


settings = Settings()
