"""Report files written for upload as a workflow artifact."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from copilot_seat_report.report.seats import (
    SeatRecord,
    records_to_csv,
    records_to_json,
    records_to_markdown,
)

logger = logging.getLogger(__name__)

ARTIFACT_NAME = "Copilot-User-List"
JSON_FILENAME = "copilot-user-list.json"
CSV_FILENAME = "copilot-user-list.csv"
MARKDOWN_FILENAME = "copilot-user-list.md"


@dataclass(frozen=True, slots=True)
class ReportFiles:
    json_path: Path
    csv_path: Path
    markdown_path: Path

    @classmethod
    def in_directory(cls, output_dir: Path) -> ReportFiles:
        return cls(
            json_path=output_dir / JSON_FILENAME,
            csv_path=output_dir / CSV_FILENAME,
            markdown_path=output_dir / MARKDOWN_FILENAME,
        )

    def read_markdown(self) -> str:
        if not self.markdown_path.exists():
            raise FileNotFoundError(f"Markdown report not found: {self.markdown_path}")
        return self.markdown_path.read_text(encoding="utf-8")


def write_report_files(records: list[SeatRecord], output_dir: Path) -> ReportFiles:
    files = ReportFiles.in_directory(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    files.json_path.write_text(records_to_json(records), encoding="utf-8")
    files.csv_path.write_text(records_to_csv(records), encoding="utf-8")
    files.markdown_path.write_text(records_to_markdown(records), encoding="utf-8")

    logger.info(
        "Report files written",
        extra={"output_dir": str(output_dir), "records": len(records)},
    )
    return files
