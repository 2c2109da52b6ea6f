"""Unit tests for seat projection and report rendering."""

from __future__ import annotations

import csv
import io
import json
from typing import Any

from _factories import make_seat

from copilot_seat_report.report.seats import (
    REPORT_FIELDS,
    SeatRecord,
    flatten_seat,
    project_seat,
    project_seats,
    records_to_csv,
    records_to_json,
    records_to_markdown,
)


def test_project_seat_picks_report_fields() -> None:
    record = project_seat(make_seat("octocat", site_admin=True))

    assert record.model_dump() == {
        "login": "octocat",
        "last_activity_at": "2024-05-01T10:00:00Z",
        "last_activity_editor": "vscode/1.89.0/copilot/1.190.0",
        "pending_cancellation_date": None,
        "created_at": "2024-01-10T08:00:00Z",
        "updated_at": "2024-02-01T08:00:00Z",
        "type": "User",
        "site_admin": True,
        "url": "https://github.com/octocat",
    }


def test_assignee_keys_win_over_seat_keys() -> None:
    seat = make_seat("octocat")
    seat["assignee"]["created_at"] = "2011-01-25T18:44:36Z"

    assert flatten_seat(seat)["created_at"] == "2011-01-25T18:44:36Z"
    assert "assignee" not in flatten_seat(seat)


def test_seat_without_assignee_has_empty_user_fields() -> None:
    seat: dict[str, Any] = make_seat("ghost")
    seat["assignee"] = None

    record = project_seat(seat)

    assert record.login is None
    assert record.url is None
    assert record.created_at == "2024-01-10T08:00:00Z"


def test_json_keeps_field_order(seats: list[dict[str, Any]]) -> None:
    payload = json.loads(records_to_json(project_seats(seats)))

    assert [item["login"] for item in payload] == ["octocat", "hubot"]
    assert tuple(payload[0]) == REPORT_FIELDS
    assert payload[1]["last_activity_at"] is None


def test_csv_has_header_and_rendered_values(seats: list[dict[str, Any]]) -> None:
    text = records_to_csv(project_seats(seats))

    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == list(REPORT_FIELDS)
    assert rows[1][0] == "octocat"
    assert rows[1][REPORT_FIELDS.index("site_admin")] == "false"
    assert rows[2][REPORT_FIELDS.index("last_activity_at")] == ""
    assert len(rows) == 3


def test_markdown_table_shape(seats: list[dict[str, Any]]) -> None:
    lines = records_to_markdown(project_seats(seats)).splitlines()

    assert lines[0] == "| " + " | ".join(REPORT_FIELDS) + " |"
    assert lines[1] == "|" + "|".join(["---"] * len(REPORT_FIELDS)) + "|"
    assert lines[2].startswith("| octocat | 2024-05-01T10:00:00Z |")
    assert lines[3].startswith("| hubot |  |  |")
    assert len(lines) == 4


def test_markdown_escapes_pipes_and_newlines() -> None:
    record = SeatRecord(login="octo", last_activity_editor="a|b\nc")

    row = records_to_markdown([record]).splitlines()[2]

    assert "a\\|b c" in row


def test_empty_records_render_header_only() -> None:
    assert records_to_csv([]) == ",".join(f'"{name}"' for name in REPORT_FIELDS) + "\n"
    assert len(records_to_markdown([]).splitlines()) == 2
    assert json.loads(records_to_json([])) == []


def test_csv_quotes_strings_like_jq() -> None:
    records = [
        SeatRecord(login="octocat", type="User", site_admin=False, last_activity_editor='vs "code"'),
    ]

    lines = records_to_csv(records).splitlines()

    assert lines[0] == ",".join(f'"{name}"' for name in REPORT_FIELDS)
    assert lines[1] == '"octocat",,"vs ""code""",,,,"User",false,'
