"""Command line entry point for Foxdie."""

import argparse
import logging
import os
import sys
from datetime import datetime, timezone

from foxdie import __version__
from foxdie.actions.branches import BranchCleanupOptions, clean_remote_branches
from foxdie.actions.push_requests import PushRequestCleanupOptions, clean_push_requests
from foxdie.actions.report import report
from foxdie.detect import DetectorConfig
from foxdie.exceptions import FoxdieError
from foxdie.logging import configure_logging, get_logger

logger = get_logger()

DRY_RUN_WARNING = (
    "Foxdie is being run in dry run mode, which is the default. "
    "If this is undesirable, run again with the `--delete` flag."
)


def parse_since(value: str) -> datetime:
    """
    Parse an RFC 3339 date for ``--since``.

    A trailing ``Z`` means UTC; a date without an offset is read as UTC.
    """
    text = value.strip()
    if text[-1:] in {"Z", "z"}:
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid RFC 3339 date {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _log_level() -> int:
    name = os.environ.get("FOXDIE_LOG", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _add_shared_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-D",
        "--delete",
        action="store_true",
        help="delete or close the stale objects; without it nothing is changed",
    )
    parser.add_argument(
        "-s",
        "--since",
        required=True,
        type=parse_since,
        help="date in RFC 3339 format",
    )
    parser.add_argument(
        "-t",
        "--token",
        default=os.environ.get("TOKEN"),
        help="personal access token for GitHub or GitLab (default: $TOKEN)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="foxdie",
        description="Clean up stale branches and push requests on GitHub and GitLab.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    branches = sub.add_parser(
        "branches",
        help="destroy remote branches from a given Git repository",
        description=(
            "Destroy remote branches from a given Git repository that have not "
            "been updated since the specified date."
        ),
    )
    _add_shared_arguments(branches)
    branches.add_argument("directory", metavar="DIRECTORY", help="Git directory to work from")

    push_requests = sub.add_parser(
        "push-requests",
        help="close push requests filed with a given Git repository URL",
        description=(
            "Close push requests filed with a given Git repository URL that have "
            "not been updated since the specified date."
        ),
    )
    _add_shared_arguments(push_requests)
    push_requests.add_argument("url", metavar="URL", help="URL of a Git repository")

    report_parser = sub.add_parser(
        "report",
        help="generate a JSON report of stale branches from a given Git repository",
    )
    report_parser.add_argument("-o", "--output", help="output path for the report")
    report_parser.add_argument(
        "-t",
        "--token",
        default=os.environ.get("TOKEN"),
        help="personal access token, used to flag branches with open push requests",
    )
    report_parser.add_argument("directory", metavar="DIRECTORY", help="Git directory to work from")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command in {"branches", "push-requests"} and not args.token:
        parser.error("a token is required: pass -t/--token or set TOKEN")

    configure_logging(level=_log_level())

    try:
        config = DetectorConfig.from_env()
        if args.command == "branches":
            if not args.delete:
                logger.warning(DRY_RUN_WARNING)
            clean_remote_branches(
                args.directory,
                BranchCleanupOptions(
                    should_delete=args.delete,
                    since=args.since,
                    token=args.token,
                    config=config,
                ),
            )
        elif args.command == "push-requests":
            if not args.delete:
                logger.warning(DRY_RUN_WARNING)
            clean_push_requests(
                args.url,
                PushRequestCleanupOptions(
                    should_delete=args.delete,
                    since=args.since,
                    token=args.token,
                    config=config,
                ),
            )
        else:
            report(args.directory, output_path=args.output, token=args.token, config=config)
    except FoxdieError as e:
        logger.error(e.message)
        return 1
    except OSError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
