#!/usr/bin/env python3
"""Programmatic seat listing example.

This demonstrates using the report components directly, without any issue:

* load settings from `.env`
* fetch every Copilot seat of an organization
* write `copilot-user-list.{json,csv,md}` to the output directory

The repository argument is only needed to authenticate the client.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from copilot_seat_report.report.artifacts import write_report_files
from copilot_seat_report.report.config import ReportSettings
from copilot_seat_report.report.github.client import GitHubClient, SeatsQueryError
from copilot_seat_report.report.logging import configure_logging
from copilot_seat_report.report.seats import project_seats


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List Copilot seats (programmatic example).")
    parser.add_argument("--repo", required=True, help='Any repository you can read, "owner/repo"')
    parser.add_argument("--org", required=True, help="Organization login to query")
    parser.add_argument("--output-dir", default="copilot-report", help="Where to write the files")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = ReportSettings()
    configure_logging(settings.log_level)

    github = GitHubClient(
        token=settings.issue_token,
        seats_token=settings.billing_token,
        repository=args.repo,
        base_url=settings.github_base_url,
    )

    try:
        result = github.list_copilot_seats(args.org)
    except SeatsQueryError as exc:
        print(str(exc))
        return 1
    finally:
        github.close()

    records = project_seats(result.seats)
    files = write_report_files(records, Path(args.output_dir))

    print(f"{len(records)} of {result.total_seats} seat(s) listed for {args.org}")
    print(f"Written to: {files.json_path.parent}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
