"""Unit tests for the CLI subcommands (mocked GitHub)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
from _factories import issue_event_payload

import copilot_seat_report.report.main as cli
from copilot_seat_report.report.github.client import GitHubClient, SeatQueryResult, SeatsQueryError


@pytest.fixture
def github(monkeypatch: pytest.MonkeyPatch, seats: list[dict[str, Any]]) -> Mock:
    mock_github = Mock(spec=GitHubClient)
    mock_github.repository = "octo-org/requests"
    mock_github.list_copilot_seats.return_value = SeatQueryResult(
        organization="octo-org", seats=seats, total_seats=len(seats)
    )
    monkeypatch.setattr(cli, "_github_client", lambda settings, repository: mock_github)
    return mock_github


@pytest.fixture
def actions_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, event_file: Path) -> Path:
    output = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_TOKEN", "test-token")
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo-org/requests")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_file))
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))
    monkeypatch.setenv("COPILOT_REPORT_OUTPUT_DIR", str(tmp_path / "out"))
    return output


def test_missing_token_is_a_configuration_error() -> None:
    assert cli.main(["start", "--repo", "o/r", "--issue-number", "1"]) == cli.EXIT_CONFIG


def test_start_uses_event(actions_env: Path, github: Mock) -> None:
    assert cli.main(["start"]) == cli.EXIT_OK

    github.add_assignees.assert_called_once_with(issue_number=7, assignees=["requester"])
    github.add_labels.assert_called_once_with(issue_number=7, labels=["query-processing"])
    github.close.assert_called_once()


def test_collect_writes_files_and_outputs(actions_env: Path, github: Mock, tmp_path: Path) -> None:
    assert cli.main(["collect"]) == cli.EXIT_OK

    outputs = actions_env.read_text(encoding="utf-8")
    assert "organization=octo-org\n" in outputs
    assert "seat_count=2\n" in outputs
    assert (tmp_path / "out" / "copilot-user-list.csv").exists()
    github.create_comment.assert_not_called()


def test_collect_with_explicit_organization(actions_env: Path, github: Mock) -> None:
    assert cli.main(["collect", "--org", "other-org"]) == cli.EXIT_OK

    github.list_copilot_seats.assert_called_once_with("other-org")


def test_collect_query_error_sets_error_output(actions_env: Path, github: Mock) -> None:
    github.list_copilot_seats.side_effect = SeatsQueryError("Not Found", status_code=404)

    assert cli.main(["collect"]) == cli.EXIT_SEATS_QUERY
    assert "error=GitHub API error 404: Not Found\n" in actions_env.read_text(encoding="utf-8")


def test_collect_issue_form_error(actions_env: Path, github: Mock) -> None:
    assert cli.main(["collect", "--body", "no organization here"]) == cli.EXIT_ISSUE_FORM
    github.list_copilot_seats.assert_not_called()


def test_publish_after_collect(actions_env: Path, github: Mock) -> None:
    assert cli.main(["collect"]) == cli.EXIT_OK
    assert cli.main(["publish", "--artifact-url", "https://example.com/a/1"]) == cli.EXIT_OK

    bodies = [c.kwargs["body"] for c in github.create_comment.call_args_list]
    assert "[here](https://example.com/a/1)" in bodies[0]
    assert "| octocat |" in bodies[1]
    github.add_labels.assert_called_with(issue_number=7, labels=["query-succeeded"])


def test_fail_closes_issue(actions_env: Path, github: Mock) -> None:
    assert cli.main(["fail", "--error", "boom"]) == cli.EXIT_OK

    assert "> boom" in github.create_comment.call_args.kwargs["body"]
    github.add_labels.assert_called_once_with(issue_number=7, labels=["query-error"])
    github.close_issue.assert_called_once_with(issue_number=7)


def test_run_ignores_non_trigger_events(
    actions_env: Path, github: Mock, tmp_path: Path
) -> None:
    event = tmp_path / "other.json"
    event.write_text(json.dumps(issue_event_payload(title="Bug report")), encoding="utf-8")

    assert cli.main(["run", "--event", str(event)]) == cli.EXIT_NOT_TRIGGERED
    github.add_labels.assert_not_called()


def test_run_end_to_end(actions_env: Path, github: Mock) -> None:
    assert cli.main(["run"]) == cli.EXIT_OK

    assert github.create_comment.call_count == 2
    github.close_issue.assert_not_called()


def test_run_seats_query_failure_exit_code(actions_env: Path, github: Mock) -> None:
    github.list_copilot_seats.side_effect = SeatsQueryError("Bad credentials", status_code=401)

    assert cli.main(["run"]) == cli.EXIT_SEATS_QUERY
    github.close_issue.assert_called_once_with(issue_number=7)


def test_run_issue_form_failure_exit_code(
    actions_env: Path, github: Mock, tmp_path: Path
) -> None:
    event = tmp_path / "no-answer.json"
    event.write_text(
        json.dumps(issue_event_payload(body="### Organization Name\n\n_No response_")),
        encoding="utf-8",
    )

    assert cli.main(["run", "--event", str(event)]) == cli.EXIT_ISSUE_FORM
    github.list_copilot_seats.assert_not_called()
    github.close_issue.assert_called_once_with(issue_number=7)


def test_run_unexpected_failure_exit_code(actions_env: Path, github: Mock) -> None:
    github.add_assignees.side_effect = RuntimeError("boom")

    assert cli.main(["run"]) == cli.EXIT_FAILED


def test_bootstrap_labels_rejects_unknown(actions_env: Path, github: Mock) -> None:
    assert cli.main(["bootstrap-labels", "--label", "nope"]) == cli.EXIT_CONFIG
    github.ensure_labels.assert_not_called()


def test_bootstrap_labels(actions_env: Path, github: Mock) -> None:
    github.ensure_labels.return_value = ["query-error"]

    assert cli.main(["bootstrap-labels", "--label", "query-error"]) == cli.EXIT_OK

    (specs,) = github.ensure_labels.call_args.args
    assert [s.name for s in specs] == ["query-error"]


def test_publish_without_report_files_posts_nothing(actions_env: Path, github: Mock) -> None:
    assert cli.main(["publish"]) == cli.EXIT_FAILED
    github.create_comment.assert_not_called()
