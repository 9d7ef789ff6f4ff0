"""Main entry point for the enricher.

Examples:
    python -m enricher worker --burst
    python -m enricher queue object-tagging --force
    python -m enricher check-config
"""

import argparse
import json
import logging
import sys

from enricher.core.config import settings
from enricher.core.logging import configure_logging

logger = logging.getLogger(__name__)

# CLI backfill names and the trigger job each one submits
BACKFILLS = {
    "object-tagging": "queue-object-tagging",
    "clip-encoding": "queue-clip-encode",
}


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Optional list of arguments for testing

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="enricher",
        description="Object tagging and CLIP encoding jobs for the asset library",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose/debug logging",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    worker = subparsers.add_parser("worker", help="Run an enrichment worker")
    worker.add_argument(
        "--burst",
        action="store_true",
        help="Run in burst mode (process all jobs then exit)",
    )
    worker.add_argument(
        "--max-jobs",
        type=int,
        default=None,
        help="Maximum number of jobs to process",
    )

    queue = subparsers.add_parser("queue", help="Submit a backfill job")
    queue.add_argument("backfill", choices=sorted(BACKFILLS))
    queue.add_argument(
        "--force",
        action="store_true",
        help="Re-process every asset, not only those missing data",
    )

    subparsers.add_parser("check-config", help="Print the effective config and exit")

    return parser.parse_args(args)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Set up logging for the selected verbosity."""
    if quiet:
        level = "error"
    elif verbose:
        level = "debug"
    else:
        level = settings.LOG_LEVEL
    configure_logging(level=level, json_logs=settings.JSON_LOGS)


def run_worker(args: argparse.Namespace) -> int:
    from enricher.queue.worker import EnrichmentWorker

    worker = EnrichmentWorker()
    worker.work(burst=args.burst, max_jobs=args.max_jobs)
    return 0


def submit_backfill(args: argparse.Namespace) -> int:
    from enricher.queue.dispatcher import JobRepository
    from enricher.queue.models import JobItem, JobName

    name = JobName(BACKFILLS[args.backfill])
    JobRepository().submit(JobItem(name=name, data={"force": args.force}))
    logger.info(f"Submitted {name.value} (force={args.force})")
    return 0


def check_configuration(args: argparse.Namespace) -> int:
    """Print the effective system config and queue health as JSON."""
    from enricher.core.db import get_db_session
    from enricher.database.repositories import SystemConfigRepository
    from enricher.queue.queues import check_queue_health
    from enricher.system_config.core import SystemConfigCore

    with get_db_session() as session:
        config = SystemConfigCore(SystemConfigRepository(session)).get_config()

    report = {
        "config": config.model_dump(mode="json", by_alias=True),
        "queues": check_queue_health(),
    }
    print(json.dumps(report, indent=2))
    return 0


COMMANDS = {
    "worker": run_worker,
    "queue": submit_backfill,
    "check-config": check_configuration,
}


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        Process exit code
    """
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        return COMMANDS[args.command](args)
    except Exception as e:
        logger.error(f"{args.command} failed: {e}", exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    sys.exit(main())
