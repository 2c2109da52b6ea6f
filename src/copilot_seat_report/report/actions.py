"""Helpers for the GitHub Actions runner files (`$GITHUB_OUTPUT`, step summary)."""

from __future__ import annotations

import uuid
from pathlib import Path


def write_output(path: Path | None, name: str, value: str) -> None:
    """Append a step output; multi-line values use the heredoc delimiter form."""

    if path is None:
        return
    if not name.strip() or "=" in name:
        raise ValueError(f"Invalid output name: {name!r}")

    if "\n" in value or "\r" in value:
        delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
        entry = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
    else:
        entry = f"{name}={value}\n"

    with path.open("a", encoding="utf-8") as fh:
        fh.write(entry)


def append_step_summary(path: Path | None, markdown: str) -> None:
    if path is None:
        return
    with path.open("a", encoding="utf-8") as fh:
        fh.write(markdown.rstrip("\n") + "\n")


def run_url(server_url: str, repository: str, run_id: str) -> str | None:
    """Link to a workflow run, or None outside of GitHub Actions."""

    if not repository.strip() or not run_id.strip():
        return None
    return f"{server_url.rstrip('/')}/{repository.strip()}/actions/runs/{run_id.strip()}"
