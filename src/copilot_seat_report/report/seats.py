"""Projection of Copilot billing seats into per-user report records.

Each API seat carries seat-level timestamps plus a nested `assignee` user
object. A record is the seat without `assignee`, overlaid with the assignee's
own keys, reduced to the report columns.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

REPORT_FIELDS: tuple[str, ...] = (
    "login",
    "last_activity_at",
    "last_activity_editor",
    "pending_cancellation_date",
    "created_at",
    "updated_at",
    "type",
    "site_admin",
    "url",
)


class SeatRecord(BaseModel):
    """One Copilot seat holder, as rendered in the report."""

    login: str | None = None
    last_activity_at: str | None = None
    last_activity_editor: str | None = None
    pending_cancellation_date: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    type: str | None = None
    site_admin: bool | None = None
    url: str | None = None


def flatten_seat(seat: Mapping[str, Any]) -> dict[str, Any]:
    """Merge the assignee's keys over the seat (assignee wins on collision)."""

    merged = {key: value for key, value in seat.items() if key != "assignee"}
    assignee = seat.get("assignee")
    if isinstance(assignee, Mapping):
        merged.update(assignee)
    return merged


def project_seat(seat: Mapping[str, Any]) -> SeatRecord:
    merged = flatten_seat(seat)
    values = {name: merged.get(name) for name in REPORT_FIELDS if name != "url"}
    values["url"] = merged.get("html_url")
    return SeatRecord.model_validate(values)


def project_seats(seats: Iterable[Mapping[str, Any]]) -> list[SeatRecord]:
    return [project_seat(seat) for seat in seats]


def _cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def records_to_json(records: list[SeatRecord]) -> str:
    payload = [record.model_dump(mode="json") for record in records]
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def _csv_field(value: object) -> str:
    # jq @csv: strings quoted with doubled quotes; booleans and numbers bare; null empty.
    if isinstance(value, str):
        return '"' + value.replace('"', '""') + '"'
    return _cell(value)


def _csv_line(values: Iterable[object]) -> str:
    return ",".join(_csv_field(value) for value in values) + "\n"


def records_to_csv(records: list[SeatRecord]) -> str:
    """Render records as CSV with a header row of the report field names.

    Every string cell is quoted, so the file matches `jq -r '... | @csv'` output.
    """

    lines = [_csv_line(REPORT_FIELDS)]
    for record in records:
        row = record.model_dump()
        lines.append(_csv_line(row[name] for name in REPORT_FIELDS))
    return "".join(lines)


def _markdown_cell(value: object) -> str:
    text = _cell(value).replace("\r\n", " ").replace("\n", " ")
    return text.replace("|", "\\|")


def markdown_header() -> list[str]:
    return [
        "| " + " | ".join(REPORT_FIELDS) + " |",
        "|" + "|".join("---" for _ in REPORT_FIELDS) + "|",
    ]


def markdown_row(record: SeatRecord) -> str:
    row = record.model_dump()
    return "| " + " | ".join(_markdown_cell(row[name]) for name in REPORT_FIELDS) + " |"


def records_to_markdown(records: list[SeatRecord]) -> str:
    """Render records as a GitHub-flavoured Markdown table."""

    lines = markdown_header()
    lines.extend(markdown_row(record) for record in records)
    return "\n".join(lines) + "\n"
