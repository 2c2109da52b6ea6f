"""Test configuration and fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
from _factories import issue_event_payload, make_seat

from copilot_seat_report.report.github.client import GitHubClient

_ENV_VARS = (
    "COPILOT_REPORT_GITHUB_TOKEN",
    "GITHUB_TOKEN",
    "COPILOT_REPORT_SEATS_TOKEN",
    "GH_TOKEN",
    "GITHUB_API_URL",
    "GITHUB_BASE_URL",
    "GITHUB_REPOSITORY",
    "GITHUB_RUN_ID",
    "GITHUB_SERVER_URL",
    "GITHUB_ACTIONS",
    "GITHUB_EVENT_PATH",
    "GITHUB_OUTPUT",
    "GITHUB_STEP_SUMMARY",
    "LOG_LEVEL",
    "COPILOT_REPORT_OUTPUT_DIR",
    "COPILOT_REPORT_TRIGGER_TITLE",
    "COPILOT_REPORT_ORG_HEADING",
    "COPILOT_REPORT_WEBHOOK_SECRET",
    "COPILOT_REPORT_STATE_PATH",
    "COPILOT_REPORT_COMMENT_MAX_CHARS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from the caller's environment and any local `.env`."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def seats() -> list[dict[str, Any]]:
    """Two seats: one active user, one that never used Copilot."""
    return [make_seat("octocat"), make_seat("hubot", last_activity_at=None, editor=None)]


@pytest.fixture
def event_file(tmp_path: Path) -> Path:
    path = tmp_path / "event.json"
    path.write_text(json.dumps(issue_event_payload()), encoding="utf-8")
    return path


@pytest.fixture
def repo() -> Mock:
    """A PyGithub Repository stand-in; `get_issue` always returns the same issue mock."""
    repository = Mock()
    repository.get_issue.return_value = Mock()
    return repository


@pytest.fixture
def github_client(repo: Mock) -> GitHubClient:
    # Inject a repo to avoid any network calls during construction.
    return GitHubClient(token="test-token", repository="octo-org/requests", repo=repo)
