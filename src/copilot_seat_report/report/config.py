"""Configuration for the seat report.

Configuration is loaded from:
- environment variables (including the ones GitHub Actions sets for every step)
- and a local `.env` file (if present)

Two tokens are supported. Issue operations (labels, comments, close) use
`COPILOT_REPORT_GITHUB_TOKEN` or the workflow's `GITHUB_TOKEN`. Reading
`/orgs/{org}/copilot/billing/seats` needs a token with billing access to the
organization, which the workflow passes as `GH_TOKEN` (or
`COPILOT_REPORT_SEATS_TOKEN`); when absent the issue token is used for both.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from copilot_seat_report.report.actions import run_url

DEFAULT_TRIGGER_TITLE = "List Copilot Users"
DEFAULT_ORGANIZATION_HEADING = "Organization Name"
GITHUB_API_VERSION = "2022-11-28"

# GitHub rejects issue comments longer than this many characters.
MAX_COMMENT_CHARS = 65536


class ReportSettings(BaseSettings):
    """Settings for the seat report CLI.

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `ReportSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("COPILOT_REPORT_GITHUB_TOKEN", "GITHUB_TOKEN"),
        description="Token used for issue labels, assignees and comments",
    )
    seats_token: str = Field(
        default="",
        validation_alias=AliasChoices("COPILOT_REPORT_SEATS_TOKEN", "GH_TOKEN"),
        description="Token with access to the organization's Copilot billing seats",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias=AliasChoices("GITHUB_API_URL", "GITHUB_BASE_URL"),
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )
    github_server_url: str = Field(
        default="https://github.com",
        validation_alias="GITHUB_SERVER_URL",
    )
    github_repository: str = Field(
        default="",
        validation_alias="GITHUB_REPOSITORY",
        description="Repository hosting the request issues, as 'owner/repo'",
    )
    github_run_id: str = Field(default="", validation_alias="GITHUB_RUN_ID")
    github_actions: bool = Field(default=False, validation_alias="GITHUB_ACTIONS")

    github_event_path: Path | None = Field(default=None, validation_alias="GITHUB_EVENT_PATH")
    github_output: Path | None = Field(default=None, validation_alias="GITHUB_OUTPUT")
    github_step_summary: Path | None = Field(default=None, validation_alias="GITHUB_STEP_SUMMARY")

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    trigger_title: str = Field(
        default=DEFAULT_TRIGGER_TITLE,
        validation_alias="COPILOT_REPORT_TRIGGER_TITLE",
        description="Issue title that requests a seat report",
    )
    organization_heading: str = Field(
        default=DEFAULT_ORGANIZATION_HEADING,
        validation_alias="COPILOT_REPORT_ORG_HEADING",
        description="Issue form heading whose answer is the organization login",
    )
    output_dir: Path = Field(
        default=Path("copilot-report"),
        validation_alias="COPILOT_REPORT_OUTPUT_DIR",
        description="Directory where the JSON, CSV and Markdown files are written",
    )
    comment_max_chars: int = Field(
        default=MAX_COMMENT_CHARS,
        validation_alias="COPILOT_REPORT_COMMENT_MAX_CHARS",
        ge=1000,
        le=MAX_COMMENT_CHARS,
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _require_github_auth(self) -> ReportSettings:
        if not self.github_token.strip() and not self.seats_token.strip():
            raise ValueError("COPILOT_REPORT_GITHUB_TOKEN (or GITHUB_TOKEN) is required")
        return self

    @property
    def issue_token(self) -> str:
        """Token used for issue operations."""

        return self.github_token.strip() or self.seats_token.strip()

    @property
    def billing_token(self) -> str:
        """Token used for the Copilot billing seats endpoint."""

        return self.seats_token.strip() or self.github_token.strip()

    @property
    def run_url(self) -> str | None:
        """Link to the current workflow run, when running under GitHub Actions."""

        return run_url(self.github_server_url, self.github_repository, self.github_run_id)
