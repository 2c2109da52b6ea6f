"""Issue event payloads (GitHub Actions event file or webhook body)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class IssueEvent(BaseModel):
    """The subset of an `issues` event the report needs."""

    action: str
    issue_number: int = Field(gt=0)
    title: str = ""
    body: str = ""
    sender: str = ""
    repository: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> IssueEvent:
        issue = payload.get("issue")
        if not isinstance(issue, dict):
            raise ValueError("Event payload has no issue")

        sender = payload.get("sender")
        sender_login = sender.get("login") if isinstance(sender, dict) else None
        if not isinstance(sender_login, str) or not sender_login.strip():
            # Fall back to the issue author.
            user = issue.get("user")
            sender_login = user.get("login") if isinstance(user, dict) else ""

        repository = payload.get("repository")
        full_name = repository.get("full_name") if isinstance(repository, dict) else ""

        return cls(
            action=str(payload.get("action") or ""),
            issue_number=issue.get("number"),
            title=issue.get("title") or "",
            body=issue.get("body") or "",
            sender=sender_login or "",
            repository=full_name or "",
        )


def load_issue_event(path: Path) -> IssueEvent:
    """Load an `issues` event from a JSON file (e.g. `$GITHUB_EVENT_PATH`)."""

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Event file is not a JSON object: {path}")
    return IssueEvent.from_payload(raw)


def matches_trigger(event: IssueEvent, title: str) -> bool:
    """True when the event opens an issue with the report trigger title."""

    return event.action == "opened" and event.title.strip() == title.strip()
