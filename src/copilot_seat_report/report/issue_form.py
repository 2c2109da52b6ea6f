"""Parsing of the "List Copilot Users" issue form body.

Issue forms render every field as a `### <label>` heading followed by a blank
line and the answer. Empty optional answers are rendered as `_No response_`.
"""

from __future__ import annotations

import re

from copilot_seat_report.report.config import DEFAULT_ORGANIZATION_HEADING

NO_RESPONSE = "_No response_"

# GitHub logins: alphanumerics and single hyphens, no leading/trailing hyphen, max 39 chars.
_ORGANIZATION_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")


class IssueFormError(ValueError):
    """Raised when the issue body does not name a usable organization."""


def _answer_after_heading(body: str, heading: str) -> str | None:
    lines = body.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    target = heading.strip().lower()
    for idx, line in enumerate(lines):
        stripped = line.strip()
        if not stripped.startswith("###"):
            continue
        if stripped.lstrip("#").strip().lower() != target:
            continue
        for candidate in lines[idx + 1 :]:
            value = candidate.strip()
            if not value:
                continue
            if value.startswith("###"):
                return None
            return value
        return None
    return None


def is_valid_organization(name: str) -> bool:
    return bool(_ORGANIZATION_RE.match(name))


def extract_organization(body: str | None, heading: str = DEFAULT_ORGANIZATION_HEADING) -> str:
    """Return the organization login answered under `### <heading>`.

    Raises:
        IssueFormError: if the heading is missing, unanswered, or the answer is not
            a valid organization login.
    """

    if not body or not body.strip():
        raise IssueFormError("Issue body is empty; expected an organization name")

    answer = _answer_after_heading(body, heading)
    if answer is None:
        raise IssueFormError(f"Issue body has no answer under '### {heading}'")

    if answer == NO_RESPONSE:
        raise IssueFormError(f"No organization name was provided under '### {heading}'")

    organization = answer.strip("`").strip()
    if not is_valid_organization(organization):
        raise IssueFormError(f"Invalid organization name: {organization!r}")
    return organization
