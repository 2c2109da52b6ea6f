"""Label, assignment and comment bookkeeping for a report request issue.

The issue is the only state a report has: labels record where the request is,
comments carry the results (or the error) back to the requester.
"""

from __future__ import annotations

import logging
from pathlib import Path

from copilot_seat_report.github_labels import (
    LABEL_QUERY_CREATED,
    LABEL_QUERY_ERROR,
    LABEL_QUERY_PROCESSING,
    LABEL_QUERY_SUCCEEDED,
)
from copilot_seat_report.report.config import MAX_COMMENT_CHARS
from copilot_seat_report.report.github.client import GitHubClient

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "A step in the workflow failed. Please check the logs for more information."
TABLE_SUMMARY = (
    "Click to view the user list.\nComment body could be truncated based on 10k limit."
)


def download_comment(
    *,
    artifact_url: str | None,
    run_url: str | None = None,
    output_dir: Path | None = None,
) -> str:
    """Comment body pointing the requester at the JSON/CSV files."""

    if artifact_url:
        return (
            "User list has been successfully retrieved. You can download both the CSV and "
            f"JSON format of the data [here]({artifact_url})."
        )
    if run_url:
        return (
            "User list has been successfully retrieved. The CSV and JSON format of the data "
            f"are attached to the [workflow run]({run_url})."
        )
    location = f" to `{output_dir.as_posix()}`" if output_dir is not None else ""
    return (
        "User list has been successfully retrieved. The CSV and JSON format of the data "
        f"were saved{location}."
    )


def _wrap_table(table: str, note: str = "") -> str:
    suffix = f"\n\n{note}" if note else ""
    return f"<details><summary>{TABLE_SUMMARY}</summary>\n\n{table}{suffix}\n\n</details>"


def _omitted_note(dropped: int, total: int) -> str:
    return f"_{dropped} of {total} rows omitted; download the CSV for the full list._"


def table_comment(markdown: str, *, max_chars: int = MAX_COMMENT_CHARS) -> str:
    """Wrap a Markdown table in a collapsed block, dropping trailing rows to fit.

    The header and separator rows are always kept.
    """

    table = markdown.strip("\n")
    body = _wrap_table(table)
    if len(body) <= max_chars:
        return body

    lines = table.split("\n")
    header, rows = lines[:2], lines[2:]

    # The widest note is the one with every row dropped.
    overhead = len(_wrap_table("\n".join(header), _omitted_note(len(rows), len(rows))))
    budget = max_chars - overhead
    kept: list[str] = []
    used = 0
    for row in rows:
        used += len(row) + 1
        if used > budget:
            break
        kept.append(row)

    body = _wrap_table("\n".join(header + kept), _omitted_note(len(rows) - len(kept), len(rows)))

    logger.warning(
        "User table truncated to fit the comment size limit",
        extra={"rows": len(rows), "kept_rows": len(kept), "max_chars": max_chars},
    )
    return body


def failure_comment(error: str | None = None) -> str:
    if not error or not error.strip():
        return FAILURE_MESSAGE
    detail = "\n".join(f"> {line}" for line in error.strip().splitlines())
    return f"{FAILURE_MESSAGE}\n\n{detail}"


class IssueLifecycle:
    """Moves a report request issue through its labels and posts the results."""

    def __init__(self, *, github: GitHubClient, comment_max_chars: int = MAX_COMMENT_CHARS) -> None:
        self._github = github
        self._comment_max_chars = comment_max_chars

    def mark_processing(self, *, issue_number: int, actor: str | None) -> None:
        if actor and actor.strip():
            self._github.add_assignees(issue_number=issue_number, assignees=[actor])
        else:
            logger.warning("No actor to assign", extra={"issue_number": issue_number})
        self._github.remove_label(issue_number=issue_number, label=LABEL_QUERY_CREATED)
        self._github.add_labels(issue_number=issue_number, labels=[LABEL_QUERY_PROCESSING])

    def post_download_link(
        self,
        *,
        issue_number: int,
        artifact_url: str | None,
        run_url: str | None = None,
        output_dir: Path | None = None,
    ) -> str | None:
        body = download_comment(artifact_url=artifact_url, run_url=run_url, output_dir=output_dir)
        return self._github.create_comment(issue_number=issue_number, body=body)

    def post_user_table(self, *, issue_number: int, markdown: str) -> str | None:
        body = table_comment(markdown, max_chars=self._comment_max_chars)
        return self._github.create_comment(issue_number=issue_number, body=body)

    def mark_succeeded(self, *, issue_number: int) -> None:
        self._github.remove_label(issue_number=issue_number, label=LABEL_QUERY_PROCESSING)
        self._github.add_labels(issue_number=issue_number, labels=[LABEL_QUERY_SUCCEEDED])

    def mark_failed(self, *, issue_number: int, error: str | None = None) -> None:
        """Comment the failure, label the issue `query-error` and close it."""

        self._github.create_comment(issue_number=issue_number, body=failure_comment(error))
        self._github.remove_label(issue_number=issue_number, label=LABEL_QUERY_PROCESSING)
        self._github.add_labels(issue_number=issue_number, labels=[LABEL_QUERY_ERROR])
        self._github.close_issue(issue_number=issue_number)
