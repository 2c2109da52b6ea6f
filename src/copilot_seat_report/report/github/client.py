"""GitHub API client wrapper.

This wraps PyGithub (issue operations) and a `requests` session (Copilot
billing seats) to keep GitHub calls out of CLI code and make tests easy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests
from github import Auth, Github, GithubException
from github.Repository import Repository

from copilot_seat_report.github_labels import LabelSpec
from copilot_seat_report.report.config import GITHUB_API_VERSION

logger = logging.getLogger(__name__)

SEATS_PER_PAGE = 100


class SeatsQueryError(Exception):
    """Raised when the Copilot billing seats endpoint does not return seat data."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        documentation_url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.documentation_url = documentation_url

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"GitHub API error {self.status_code}: {self.message}"
        return f"GitHub API error: {self.message}"


@dataclass(frozen=True, slots=True)
class SeatQueryResult:
    """Aggregated seats of every page returned for an organization."""

    organization: str
    seats: list[dict[str, Any]]
    total_seats: int
    pages: int = 1


@dataclass(slots=True)
class _PageCursor:
    url: str | None
    params: dict[str, int] | None = None


def _error_from_response(resp: requests.Response) -> SeatsQueryError:
    message = resp.reason or "request failed"
    documentation_url = None
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        if isinstance(payload.get("message"), str) and payload["message"].strip():
            message = payload["message"]
        if isinstance(payload.get("documentation_url"), str):
            documentation_url = payload["documentation_url"]
    return SeatsQueryError(
        message, status_code=resp.status_code, documentation_url=documentation_url
    )


class GitHubClient:
    """Small wrapper around PyGithub and the REST API for the operations the report needs."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        seats_token: str | None = None,
        repo: Repository | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository.strip("/ "):
            raise ValueError("GitHub repository is required")

        self._repository_name = repository.strip().strip("/")
        self._rest_base_url = base_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {seats_token or token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
                "User-Agent": "copilot-seat-report",
            }
        )

        if repo is not None:
            self._repo = repo
            self._github = None
            logger.debug("Using injected Repository instance")
            return

        auth = Auth.Token(token)
        self._github = github_api or Github(auth=auth, base_url=self._rest_base_url)

        self._repo = self._github.get_repo(self._repository_name)
        logger.info(
            "Authenticated with GitHub and connected to repository",
            extra={"repo": self._repository_name},
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _seats_url(self, organization: str) -> str:
        org = organization.strip()
        if not org:
            raise ValueError("organization is required")
        return f"{self._rest_base_url}/orgs/{org}/copilot/billing/seats"

    def list_copilot_seats(self, organization: str) -> SeatQueryResult:
        """Fetch every Copilot seat assigned in an organization.

        Follows the `Link: rel="next"` header until the last page and concatenates the
        `seats` arrays in page order.

        Raises:
            SeatsQueryError: on an HTTP error, a non-JSON body or a body without `seats`.
        """

        cursor = _PageCursor(
            url=self._seats_url(organization), params={"per_page": SEATS_PER_PAGE}
        )
        seats: list[dict[str, Any]] = []
        total_seats: int | None = None
        pages = 0

        while cursor.url:
            try:
                resp = self._session.get(cursor.url, params=cursor.params, timeout=30)
            except requests.RequestException as e:
                raise SeatsQueryError(str(e)) from e

            if not resp.ok:
                raise _error_from_response(resp)

            try:
                payload = resp.json()
            except ValueError as e:
                raise SeatsQueryError(
                    "Response is not valid JSON", status_code=resp.status_code
                ) from e

            if not isinstance(payload, dict) or not isinstance(payload.get("seats"), list):
                message = "Response has no seats list"
                if isinstance(payload, dict) and isinstance(payload.get("message"), str):
                    message = payload["message"]
                raise SeatsQueryError(message, status_code=resp.status_code)

            pages += 1
            seats.extend(s for s in payload["seats"] if isinstance(s, dict))
            if total_seats is None and isinstance(payload.get("total_seats"), int):
                total_seats = payload["total_seats"]

            # The next link already carries the query string.
            cursor = _PageCursor(url=resp.links.get("next", {}).get("url"))

        logger.info(
            "Copilot seats fetched",
            extra={"organization": organization, "seats": len(seats), "pages": pages},
        )
        return SeatQueryResult(
            organization=organization,
            seats=seats,
            total_seats=total_seats if total_seats is not None else len(seats),
            pages=pages,
        )

    def add_assignees(self, *, issue_number: int, assignees: list[str]) -> None:
        normalized = [a.strip() for a in assignees if a.strip()]
        if not normalized:
            raise ValueError("At least one assignee is required")
        issue = self._repo.get_issue(issue_number)
        issue.add_to_assignees(*normalized)
        logger.info(
            "Issue assigned",
            extra={"repo": self._repository_name, "issue_number": issue_number, "assignees": normalized},
        )

    def add_labels(self, *, issue_number: int, labels: list[str]) -> None:
        normalized = [label.strip() for label in labels if label.strip()]
        if not normalized:
            return
        issue = self._repo.get_issue(issue_number)
        issue.add_to_labels(*normalized)
        logger.info(
            "Issue labels added",
            extra={"repo": self._repository_name, "issue_number": issue_number, "labels": normalized},
        )

    def remove_label(self, *, issue_number: int, label: str) -> bool:
        """Remove a label from an issue.

        Returns:
            False when the label was not on the issue.
        """

        issue = self._repo.get_issue(issue_number)
        try:
            issue.remove_from_labels(label)
        except GithubException as e:
            if e.status == 404:
                logger.warning(
                    "Label not present on issue",
                    extra={"issue_number": issue_number, "label": label},
                )
                return False
            raise
        logger.info(
            "Issue label removed",
            extra={"repo": self._repository_name, "issue_number": issue_number, "label": label},
        )
        return True

    def create_comment(self, *, issue_number: int, body: str) -> str | None:
        """Comment on an issue and return the comment URL."""

        if not body.strip():
            raise ValueError("Comment body is required")
        issue = self._repo.get_issue(issue_number)
        comment = issue.create_comment(body)
        url = getattr(comment, "html_url", None)
        logger.info(
            "Issue comment created",
            extra={"repo": self._repository_name, "issue_number": issue_number, "url": url},
        )
        return url if isinstance(url, str) and url.strip() else None

    def close_issue(self, *, issue_number: int) -> None:
        issue = self._repo.get_issue(issue_number)
        issue.edit(state="closed")
        logger.info(
            "Issue closed", extra={"repo": self._repository_name, "issue_number": issue_number}
        )

    def ensure_labels(self, specs: tuple[LabelSpec, ...]) -> list[str]:
        """Create any missing labels; returns the names that were created."""

        existing = {label.name for label in self._repo.get_labels()}
        created: list[str] = []
        for spec in specs:
            if spec.name in existing:
                continue
            try:
                self._repo.create_label(
                    name=spec.name, color=spec.color, description=spec.description
                )
            except GithubException as e:
                # 422: created concurrently.
                if e.status != 422:
                    raise
                continue
            created.append(spec.name)
        if created:
            logger.info("Labels created", extra={"repo": self._repository_name, "labels": created})
        return created

    def close(self) -> None:
        self._session.close()
        if self._github is not None:
            self._github.close()
