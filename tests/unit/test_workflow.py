"""Checks on the shipped GitHub Actions workflow."""

from __future__ import annotations

from pathlib import Path

WORKFLOW = Path(__file__).resolve().parents[2] / ".github" / "workflows" / "list-copilot-users.yml"


def _step(text: str, name: str) -> str:
    start = text.index(f"- name: {name}\n")
    end = text.find("\n    - name:", start + 1)
    return text[start:] if end == -1 else text[start:end]


def test_cli_failure_step_requires_installed_cli() -> None:
    step = _step(WORKFLOW.read_text(encoding="utf-8"), "Report failure and close issue")

    assert "failure() && steps.install.outcome == 'success'" in step
    assert "copilot-seat-report fail" in step


def test_setup_failure_step_does_not_need_the_cli() -> None:
    step = _step(WORKFLOW.read_text(encoding="utf-8"), "Report setup failure and close issue")

    assert "failure() && steps.install.outcome != 'success'" in step
    assert "uses: actions/github-script@" in step
    assert "copilot-seat-report" not in step
    assert "labels: ['query-error']" in step
    assert "state: 'closed'" in step
