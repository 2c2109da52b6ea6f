"""CLI entrypoint for the Copilot seat report.

Each workflow step is a subcommand; `run` chains them in one process.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from copilot_seat_report import __version__
from copilot_seat_report.github_labels import FIXED_LABEL_SPECS, fixed_label_spec_by_name
from copilot_seat_report.report.actions import append_step_summary, write_output
from copilot_seat_report.report.artifacts import ARTIFACT_NAME, ReportFiles
from copilot_seat_report.report.config import ReportSettings
from copilot_seat_report.report.events import IssueEvent, load_issue_event, matches_trigger
from copilot_seat_report.report.github.client import GitHubClient, SeatsQueryError
from copilot_seat_report.report.issue_form import IssueFormError
from copilot_seat_report.report.logging import configure_logging
from copilot_seat_report.report.pipeline import SeatReportPipeline

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_ISSUE_FORM = 3
EXIT_SEATS_QUERY = 4
EXIT_NOT_TRIGGERED = 5


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        default=None,
        help="Repository hosting the request issue, as 'owner/repo' (default: $GITHUB_REPOSITORY)",
    )
    parser.add_argument(
        "--event",
        dest="event_path",
        type=Path,
        default=None,
        help="Path to the issues event JSON (default: $GITHUB_EVENT_PATH)",
    )
    parser.add_argument(
        "--issue-number",
        type=int,
        default=None,
        help="Request issue number (default: taken from the event)",
    )


def _add_output_dir_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the report files (default: $COPILOT_REPORT_OUTPUT_DIR)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copilot-seat-report",
        description="Report an organization's Copilot seat assignments on a GitHub issue",
    )
    parser.add_argument(
        "--version", action="version", version=f"copilot-seat-report {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    start = subparsers.add_parser(
        "start",
        help="Assign the requester and label the issue query-processing",
    )
    _add_common_arguments(start)
    start.add_argument(
        "--actor",
        default=None,
        help="Login to assign (default: the event sender)",
    )

    collect = subparsers.add_parser(
        "collect",
        help="Read the organization from the issue body, query its seats and write the report files",
    )
    _add_common_arguments(collect)
    _add_output_dir_argument(collect)
    collect.add_argument(
        "--body",
        default=None,
        help="Issue body to read the organization from (default: the event issue body)",
    )
    collect.add_argument(
        "--organization",
        "--org",
        dest="organization",
        default=None,
        help="Query this organization instead of reading it from the issue body",
    )

    publish = subparsers.add_parser(
        "publish",
        help="Comment the download link and user table, then label the issue query-succeeded",
    )
    _add_common_arguments(publish)
    _add_output_dir_argument(publish)
    publish.add_argument(
        "--artifact-url",
        default=None,
        help=f"URL of the uploaded '{ARTIFACT_NAME}' artifact",
    )

    fail = subparsers.add_parser(
        "fail",
        help="Comment the failure, label the issue query-error and close it",
    )
    _add_common_arguments(fail)
    fail.add_argument("--error", default=None, help="Error detail to include in the comment")

    run = subparsers.add_parser(
        "run",
        help="Run every step for a triggering event in one process",
    )
    _add_common_arguments(run)
    _add_output_dir_argument(run)
    run.add_argument(
        "--artifact-url",
        default=None,
        help="URL to link from the download comment, if the files are hosted somewhere",
    )
    run.add_argument(
        "--force",
        action="store_true",
        help="Run even if the event is not an opened issue with the trigger title",
    )

    labels = subparsers.add_parser(
        "bootstrap-labels",
        help="Create the query-* labels in the repository if missing",
    )
    labels.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        default=None,
        help="Target repository, as 'owner/repo' (default: $GITHUB_REPOSITORY)",
    )
    labels.add_argument(
        "--label",
        dest="labels",
        action="append",
        default=None,
        help="Only create this label (repeatable)",
    )

    serve = subparsers.add_parser("serve", help="Run the webhook server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def _load_event(args: argparse.Namespace, settings: ReportSettings) -> IssueEvent | None:
    path = args.event_path or settings.github_event_path
    if path is None:
        return None
    return load_issue_event(Path(path))


def _resolve_repository(
    args: argparse.Namespace, settings: ReportSettings, event: IssueEvent | None
) -> str:
    repository = args.repository or settings.github_repository or (event.repository if event else "")
    if not repository.strip():
        raise ValueError("Repository is required (--repo or GITHUB_REPOSITORY)")
    return repository.strip()


def _resolve_issue_number(args: argparse.Namespace, event: IssueEvent | None) -> int:
    if args.issue_number is not None:
        return args.issue_number
    if event is not None:
        return event.issue_number
    raise ValueError("Issue number is required (--issue-number or an event file)")


def _github_client(settings: ReportSettings, repository: str) -> GitHubClient:
    return GitHubClient(
        token=settings.issue_token,
        seats_token=settings.billing_token,
        repository=repository,
        base_url=settings.github_base_url,
    )


def _pipeline(
    github: GitHubClient, settings: ReportSettings, output_dir: Path | None
) -> SeatReportPipeline:
    return SeatReportPipeline(
        github=github,
        output_dir=output_dir or settings.output_dir,
        organization_heading=settings.organization_heading,
        comment_max_chars=settings.comment_max_chars,
        run_url=settings.run_url,
    )


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from copilot_seat_report.server.app import create_app
    from copilot_seat_report.server.config import ServerSettings

    configure_logging(ServerSettings().log_level)
    uvicorn.run(create_app(), host=args.host, port=args.port, log_config=None)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        return _serve(args)

    try:
        settings = ReportSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG

    configure_logging(settings.log_level, github_actions=settings.github_actions)

    try:
        if args.command == "bootstrap-labels":
            repository = _resolve_repository(args, settings, None)
            specs = FIXED_LABEL_SPECS
            if args.labels:
                selected = [fixed_label_spec_by_name(name) for name in args.labels]
                unknown = [name for name, spec in zip(args.labels, selected) if spec is None]
                if unknown:
                    print(f"Unknown label(s): {', '.join(unknown)}", file=sys.stderr)
                    return EXIT_CONFIG
                specs = tuple(spec for spec in selected if spec is not None)

            github = _github_client(settings, repository)
            try:
                created = github.ensure_labels(specs)
            finally:
                github.close()
            print(f"Created labels: {', '.join(created) or 'none'}")
            return EXIT_OK

        event = _load_event(args, settings)
        repository = _resolve_repository(args, settings, event)

        if args.command == "run":
            if event is None:
                raise ValueError("An event file is required (--event or GITHUB_EVENT_PATH)")
            if not args.force and not matches_trigger(event, settings.trigger_title):
                print(
                    f"Issue #{event.issue_number} ({event.action}) does not request a seat report"
                )
                return EXIT_NOT_TRIGGERED
            if args.issue_number is not None:
                event = event.model_copy(update={"issue_number": args.issue_number})

            github = _github_client(settings, repository)
            try:
                pipeline = _pipeline(github, settings, args.output_dir)
                outcome = pipeline.run(event, artifact_url=args.artifact_url)
            finally:
                github.close()

            if not outcome.succeeded:
                print(f"Seat report failed for issue #{outcome.issue_number}: {outcome.error}")
                if isinstance(outcome.exception, IssueFormError):
                    return EXIT_ISSUE_FORM
                if isinstance(outcome.exception, SeatsQueryError):
                    return EXIT_SEATS_QUERY
                return EXIT_FAILED
            print(
                f"Posted {outcome.seat_count} Copilot seat(s) for {outcome.organization} "
                f"on issue #{outcome.issue_number}"
            )
            return EXIT_OK

        issue_number = _resolve_issue_number(args, event)

        if args.command == "start":
            actor = args.actor or (event.sender if event else None)
            github = _github_client(settings, repository)
            try:
                _pipeline(github, settings, None).start(issue_number=issue_number, actor=actor)
            finally:
                github.close()
            print(f"Issue #{issue_number} marked as processing")
            return EXIT_OK

        if args.command == "collect":
            github = _github_client(settings, repository)
            try:
                pipeline = _pipeline(github, settings, args.output_dir)
                if args.organization:
                    body = f"### {settings.organization_heading}\n\n{args.organization}\n"
                else:
                    body = args.body if args.body is not None else (event.body if event else None)
                try:
                    collected = pipeline.collect(body=body)
                except (IssueFormError, SeatsQueryError) as e:
                    write_output(settings.github_output, "error", str(e))
                    raise
            finally:
                github.close()

            write_output(settings.github_output, "organization", collected.organization)
            write_output(settings.github_output, "seat_count", str(len(collected.records)))
            write_output(settings.github_output, "json_path", str(collected.files.json_path))
            write_output(settings.github_output, "csv_path", str(collected.files.csv_path))
            write_output(settings.github_output, "markdown_path", str(collected.files.markdown_path))
            append_step_summary(
                settings.github_step_summary,
                f"Retrieved {len(collected.records)} Copilot seat(s) for `{collected.organization}`.",
            )
            print(
                f"Wrote {len(collected.records)} Copilot seat(s) for {collected.organization} "
                f"to {pipeline.output_dir}"
            )
            return EXIT_OK

        if args.command == "publish":
            github = _github_client(settings, repository)
            try:
                pipeline = _pipeline(github, settings, args.output_dir)
                files = ReportFiles.in_directory(pipeline.output_dir)
                pipeline.publish(
                    issue_number=issue_number, files=files, artifact_url=args.artifact_url
                )
            finally:
                github.close()
            print(f"Posted the user list on issue #{issue_number}")
            return EXIT_OK

        if args.command == "fail":
            github = _github_client(settings, repository)
            try:
                _pipeline(github, settings, None).fail(issue_number=issue_number, error=args.error)
            finally:
                github.close()
            print(f"Issue #{issue_number} marked as failed and closed")
            return EXIT_OK

        logger.error("Unknown command", extra={"command": args.command})
        return EXIT_CONFIG

    except IssueFormError as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return EXIT_ISSUE_FORM

    except SeatsQueryError as e:
        logger.error(
            str(e),
            extra={"status_code": e.status_code, "documentation_url": e.documentation_url},
        )
        print(str(e), file=sys.stderr)
        return EXIT_SEATS_QUERY

    except Exception:
        logger.exception("Command failed")
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
