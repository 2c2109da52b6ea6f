"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the report pipeline.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from datetime import UTC, datetime
from typing import cast

from fastapi import FastAPI, HTTPException, Request
from pydantic import ValidationError

from copilot_seat_report import __version__
from copilot_seat_report.report.events import IssueEvent, matches_trigger
from copilot_seat_report.server.config import ServerSettings
from copilot_seat_report.server.job_store import JobRecord, JobStore
from copilot_seat_report.server.models import JobStatus, ReportJob, WebhookAck
from copilot_seat_report.server.report_runner import start_report_job

logger = logging.getLogger(__name__)


def _iso_to_dt(value: str) -> datetime:
    # Best-effort parsing; the store always writes ISO format.
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.now(tz=UTC)


def _to_report_job(record: JobRecord) -> ReportJob:
    return ReportJob(
        job_id=record.job_id,
        repository=record.repository,
        issue_number=record.issue_number,
        status=cast(JobStatus, record.status),
        created_at=_iso_to_dt(record.created_at),
        updated_at=_iso_to_dt(record.updated_at),
        organization=record.organization,
        seat_count=record.seat_count,
        error=record.error,
    )


def signature_matches(secret: str, body: bytes, signature: str | None) -> bool:
    """Check an `X-Hub-Signature-256` header against the delivery body."""

    if not signature or not signature.startswith("sha256="):
        return False
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(f"sha256={digest}", signature)


def create_app() -> FastAPI:
    settings = ServerSettings()

    app = FastAPI(
        title="Copilot Seat Report",
        version=__version__,
        description="GitHub webhook receiver that posts Copilot seat reports on request issues.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Expose settings for request handlers that want to read it.
    app.state.settings = settings

    job_store = JobStore(settings.jobs_state_file)
    app.state.job_store = job_store

    @app.get("/api/v1/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.post("/api/v1/webhooks/github", response_model=WebhookAck, status_code=202)
    async def github_webhook(request: Request) -> WebhookAck:
        body = await request.body()

        if settings.webhook_secret:
            signature = request.headers.get("x-hub-signature-256")
            if not signature_matches(settings.webhook_secret, body, signature):
                logger.warning(
                    "Rejected webhook delivery with an invalid signature",
                    extra={"delivery": request.headers.get("x-github-delivery")},
                )
                raise HTTPException(status_code=401, detail="Invalid webhook signature")

        event_type = request.headers.get("x-github-event", "").lower()
        if event_type != "issues":
            return WebhookAck(status="ignored", reason=f"Unsupported event: {event_type or 'none'}")

        try:
            payload = json.loads(body or b"null")
        except json.JSONDecodeError as e:
            raise HTTPException(status_code=400, detail="Body is not valid JSON") from e
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Body is not a JSON object")

        try:
            event = IssueEvent.from_payload(payload)
        except (ValueError, ValidationError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid issues event: {e}") from e

        if not matches_trigger(event, settings.trigger_title):
            return WebhookAck(status="ignored", reason="Issue does not request a seat report")
        if not event.repository.strip():
            raise HTTPException(status_code=400, detail="Event has no repository")

        if not settings.issue_token:
            raise HTTPException(
                status_code=409,
                detail="COPILOT_REPORT_GITHUB_TOKEN is required to process report requests",
            )

        active = job_store.find_active(
            repository=event.repository, issue_number=event.issue_number
        )
        if active is not None:
            return WebhookAck(status="accepted", reason="Already in progress", job_id=active.job_id)

        job_id = start_report_job(event=event, settings=settings, job_store=job_store)
        logger.info(
            "Report job started",
            extra={"job_id": job_id, "repo": event.repository, "issue_number": event.issue_number},
        )
        return WebhookAck(status="accepted", job_id=job_id)

    @app.get("/api/v1/jobs", response_model=list[ReportJob])
    def list_jobs() -> list[ReportJob]:
        return [_to_report_job(record) for record in job_store.list()]

    @app.get("/api/v1/jobs/{job_id}", response_model=ReportJob)
    def get_job(job_id: str) -> ReportJob:
        record = job_store.get(job_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Job not found")
        return _to_report_job(record)

    return app
