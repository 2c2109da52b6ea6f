"""Unit tests for structured logging."""

from __future__ import annotations

import json
import logging

import pytest

from copilot_seat_report.report.logging import (
    ActionsAnnotationFormatter,
    JsonFormatter,
    configure_logging,
)


def _record(level: int, msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("copilot_seat_report.test", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra() -> None:
    line = JsonFormatter().format(_record(logging.INFO, "Seats fetched", organization="octo-org"))

    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["message"] == "Seats fetched"
    assert payload["extra"] == {"organization": "octo-org"}


def test_annotation_formatter_escapes_newlines() -> None:
    line = ActionsAnnotationFormatter().format(
        _record(logging.ERROR, "Query failed\n100% broken", issue_number=7)
    )

    assert line == (
        "::error title=copilot_seat_report.test::Query failed%0A100%25 broken (issue_number=7)"
    )


def test_annotation_formatter_warning() -> None:
    line = ActionsAnnotationFormatter().format(_record(logging.WARNING, "Label missing"))

    assert line.startswith("::warning ")


def test_configure_logging_adds_annotations_under_actions(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("INFO", github_actions=True)
    try:
        logging.getLogger("copilot_seat_report.test").error("Seat query failed")
    finally:
        configure_logging("WARNING")

    out = capsys.readouterr().out.splitlines()
    assert any(json.loads(line)["message"] == "Seat query failed" for line in out if line.startswith("{"))
    assert "::error title=copilot_seat_report.test::Seat query failed" in out
