"""Pydantic models for the webhook server."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

JobStatus = Literal["queued", "running", "succeeded", "failed"]


class WebhookAck(BaseModel):
    status: Literal["accepted", "ignored"]
    reason: str | None = None
    job_id: str | None = None


class ReportJob(BaseModel):
    job_id: str
    repository: str
    issue_number: int
    status: JobStatus

    created_at: datetime
    updated_at: datetime

    organization: str | None = None
    seat_count: int | None = None
    error: str | None = None
