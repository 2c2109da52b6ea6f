"""Payload builders shared by the unit tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock


def make_seat(
    login: str,
    *,
    last_activity_at: str | None = "2024-05-01T10:00:00Z",
    editor: str | None = "vscode/1.89.0/copilot/1.190.0",
    site_admin: bool = False,
) -> dict[str, Any]:
    return {
        "created_at": "2024-01-10T08:00:00Z",
        "updated_at": "2024-02-01T08:00:00Z",
        "pending_cancellation_date": None,
        "last_activity_at": last_activity_at,
        "last_activity_editor": editor,
        "plan_type": "business",
        "assignee": {
            "login": login,
            "id": 1,
            "type": "User",
            "site_admin": site_admin,
            "url": f"https://api.github.com/users/{login}",
            "html_url": f"https://github.com/{login}",
        },
    }


def issue_body(organization: str) -> str:
    return f"### Organization Name\n\n{organization}\n"


def issue_event_payload(
    *,
    title: str = "List Copilot Users",
    body: str | None = None,
    action: str = "opened",
    number: int = 7,
) -> dict[str, Any]:
    return {
        "action": action,
        "issue": {
            "number": number,
            "title": title,
            "body": body if body is not None else issue_body("octo-org"),
            "user": {"login": "requester"},
        },
        "sender": {"login": "requester"},
        "repository": {"full_name": "octo-org/requests"},
    }


def fake_response(
    payload: Any,
    *,
    status_code: int = 200,
    next_url: str | None = None,
    reason: str = "OK",
) -> Mock:
    """A `requests.Response` stand-in."""
    resp = Mock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.reason = reason
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    resp.links = {"next": {"url": next_url}} if next_url else {}
    return resp
