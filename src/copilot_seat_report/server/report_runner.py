"""Background runner for webhook-triggered report jobs."""

from __future__ import annotations

import logging
import threading
import uuid

from copilot_seat_report.report.events import IssueEvent
from copilot_seat_report.report.github.client import GitHubClient
from copilot_seat_report.report.pipeline import SeatReportPipeline
from copilot_seat_report.server.config import ServerSettings
from copilot_seat_report.server.job_store import JobStore

logger = logging.getLogger(__name__)


def start_report_job(
    *,
    event: IssueEvent,
    settings: ServerSettings,
    job_store: JobStore,
) -> str:
    job_id = uuid.uuid4().hex
    job_store.create(job_id=job_id, repository=event.repository, issue_number=event.issue_number)

    thread = threading.Thread(
        target=run_report_job,
        name=f"seat-report-{event.issue_number}-{job_id}",
        daemon=True,
        kwargs={
            "job_id": job_id,
            "event": event,
            "settings": settings,
            "job_store": job_store,
        },
    )
    thread.start()
    return job_id


def run_report_job(
    *,
    job_id: str,
    event: IssueEvent,
    settings: ServerSettings,
    job_store: JobStore,
) -> None:
    job_store.update(job_id, status="running")

    try:
        github = GitHubClient(
            token=settings.issue_token,
            seats_token=settings.billing_token,
            repository=event.repository,
            base_url=settings.github_base_url,
        )
    except Exception as e:
        logger.exception(
            "Report job could not connect to GitHub",
            extra={"job_id": job_id, "issue_number": event.issue_number},
        )
        job_store.update(job_id, status="failed", error=str(e))
        return

    try:
        pipeline = SeatReportPipeline(
            github=github,
            output_dir=settings.job_output_dir(job_id),
            organization_heading=settings.organization_heading,
            comment_max_chars=settings.comment_max_chars,
        )
        outcome = pipeline.run(event)
        job_store.update(
            job_id,
            status="succeeded" if outcome.succeeded else "failed",
            organization=outcome.organization,
            seat_count=outcome.seat_count if outcome.succeeded else None,
            error=outcome.error,
        )
    except Exception as e:
        logger.exception(
            "Report job failed", extra={"job_id": job_id, "issue_number": event.issue_number}
        )
        job_store.update(job_id, status="failed", error=str(e))
    finally:
        github.close()
