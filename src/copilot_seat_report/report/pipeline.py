"""The seat report pipeline.

    start    label `query-processing`, assign the requester
    collect  organization from the issue body -> billing seats -> report files
    publish  download-link comment, user table comment, label `query-succeeded`
    fail     failure comment, label `query-error`, close the issue

Under GitHub Actions each step runs as its own CLI subcommand so the artifact
upload can happen between `collect` and `publish`. `run` chains them in one
process (local use and the webhook server).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from copilot_seat_report.report.artifacts import ReportFiles, write_report_files
from copilot_seat_report.report.config import DEFAULT_ORGANIZATION_HEADING, MAX_COMMENT_CHARS
from copilot_seat_report.report.events import IssueEvent
from copilot_seat_report.report.github.client import GitHubClient
from copilot_seat_report.report.github.issue_lifecycle import IssueLifecycle
from copilot_seat_report.report.issue_form import extract_organization
from copilot_seat_report.report.seats import SeatRecord, project_seats

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CollectResult:
    organization: str
    records: list[SeatRecord]
    total_seats: int
    files: ReportFiles


@dataclass(frozen=True, slots=True)
class ReportOutcome:
    issue_number: int
    succeeded: bool
    organization: str | None = None
    seat_count: int = 0
    files: ReportFiles | None = None
    error: str | None = None
    exception: Exception | None = None


class SeatReportPipeline:
    def __init__(
        self,
        *,
        github: GitHubClient,
        output_dir: Path,
        organization_heading: str = DEFAULT_ORGANIZATION_HEADING,
        comment_max_chars: int = MAX_COMMENT_CHARS,
        run_url: str | None = None,
    ) -> None:
        self._github = github
        self._output_dir = output_dir
        self._organization_heading = organization_heading
        self._run_url = run_url
        self._lifecycle = IssueLifecycle(github=github, comment_max_chars=comment_max_chars)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def start(self, *, issue_number: int, actor: str | None) -> None:
        logger.info("Report request received", extra={"issue_number": issue_number, "actor": actor})
        self._lifecycle.mark_processing(issue_number=issue_number, actor=actor)

    def collect(self, *, body: str | None) -> CollectResult:
        """Query the organization named in the issue body and write the report files."""

        return self.collect_organization(self.organization_from(body))

    def organization_from(self, body: str | None) -> str:
        return extract_organization(body, heading=self._organization_heading)

    def collect_organization(self, organization: str) -> CollectResult:
        logger.info("Querying Copilot seats", extra={"organization": organization})

        result = self._github.list_copilot_seats(organization)
        records = project_seats(result.seats)
        if len(records) != result.total_seats:
            logger.warning(
                "Seat count differs from the reported total",
                extra={"organization": organization, "records": len(records), "total_seats": result.total_seats},
            )

        files = write_report_files(records, self._output_dir)
        return CollectResult(
            organization=organization,
            records=records,
            total_seats=result.total_seats,
            files=files,
        )

    def publish(
        self,
        *,
        issue_number: int,
        files: ReportFiles,
        artifact_url: str | None = None,
    ) -> None:
        markdown = files.read_markdown()
        self._lifecycle.post_download_link(
            issue_number=issue_number,
            artifact_url=artifact_url,
            run_url=self._run_url,
            output_dir=self._output_dir,
        )
        self._lifecycle.post_user_table(issue_number=issue_number, markdown=markdown)
        self._lifecycle.mark_succeeded(issue_number=issue_number)
        logger.info("Report published", extra={"issue_number": issue_number})

    def fail(self, *, issue_number: int, error: str | None = None) -> None:
        logger.error("Report request failed", extra={"issue_number": issue_number, "error": error})
        self._lifecycle.mark_failed(issue_number=issue_number, error=error)

    def run(self, event: IssueEvent, *, artifact_url: str | None = None) -> ReportOutcome:
        """Run every step; any failure takes the failure branch instead of raising."""

        issue_number = event.issue_number
        organization: str | None = None
        try:
            self.start(issue_number=issue_number, actor=event.sender)
            organization = self.organization_from(event.body)
            collected = self.collect_organization(organization)
            self.publish(issue_number=issue_number, files=collected.files, artifact_url=artifact_url)
        except Exception as e:
            logger.exception("Report step failed", extra={"issue_number": issue_number})
            error = str(e)
            try:
                self.fail(issue_number=issue_number, error=error)
            except Exception:
                logger.exception(
                    "Failed to report the failure on the issue",
                    extra={"issue_number": issue_number},
                )
            return ReportOutcome(
                issue_number=issue_number,
                succeeded=False,
                organization=organization,
                error=error,
                exception=e,
            )

        return ReportOutcome(
            issue_number=issue_number,
            succeeded=True,
            organization=collected.organization,
            seat_count=len(collected.records),
            files=collected.files,
        )
