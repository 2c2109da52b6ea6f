"""Configuration for the webhook server.

Unlike :class:`copilot_seat_report.report.config.ReportSettings`, this does NOT
require a GitHub token at startup; the webhook endpoint validates credentials at
request time so the health endpoint works without any configuration.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from copilot_seat_report.report.config import (
    DEFAULT_ORGANIZATION_HEADING,
    DEFAULT_TRIGGER_TITLE,
    MAX_COMMENT_CHARS,
)


class ServerSettings(BaseSettings):
    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("COPILOT_REPORT_GITHUB_TOKEN", "GITHUB_TOKEN"),
    )
    seats_token: str = Field(
        default="",
        validation_alias=AliasChoices("COPILOT_REPORT_SEATS_TOKEN", "GH_TOKEN"),
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias=AliasChoices("GITHUB_API_URL", "GITHUB_BASE_URL"),
    )

    webhook_secret: str = Field(
        default="",
        validation_alias="COPILOT_REPORT_WEBHOOK_SECRET",
        description=(
            "Secret configured on the GitHub webhook. When set, deliveries without a valid "
            "X-Hub-Signature-256 are rejected."
        ),
    )

    trigger_title: str = Field(
        default=DEFAULT_TRIGGER_TITLE, validation_alias="COPILOT_REPORT_TRIGGER_TITLE"
    )
    organization_heading: str = Field(
        default=DEFAULT_ORGANIZATION_HEADING, validation_alias="COPILOT_REPORT_ORG_HEADING"
    )
    comment_max_chars: int = Field(
        default=MAX_COMMENT_CHARS,
        validation_alias="COPILOT_REPORT_COMMENT_MAX_CHARS",
        ge=1000,
        le=MAX_COMMENT_CHARS,
    )

    state_path: Path = Field(
        default=Path("report_state"),
        validation_alias="COPILOT_REPORT_STATE_PATH",
        description="Directory for job records and per-job report files",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_prefix="", env_file=".env", extra="ignore", populate_by_name=True
    )

    @property
    def jobs_state_file(self) -> Path:
        return self.state_path / "jobs.json"

    def job_output_dir(self, job_id: str) -> Path:
        return self.state_path / "reports" / job_id

    @property
    def issue_token(self) -> str:
        return self.github_token.strip() or self.seats_token.strip()

    @property
    def billing_token(self) -> str:
        return self.seats_token.strip() or self.github_token.strip()
