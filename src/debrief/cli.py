"""Command line entrypoint: run once, run on schedule, or serve the API."""

import argparse
import asyncio
import logging
import sys
from datetime import date

from debrief.core.config import settings
from debrief.core.deps import get_orchestrator
from debrief.core.errors import ConfigurationMissing
from debrief.core.logging import configure_logging
from debrief.models.task import ISO_DATE_PATTERN

logger = logging.getLogger(__name__)

EXIT_CONFIG = 2


def _iso_date(raw: str) -> date:
    if not ISO_DATE_PATTERN.fullmatch(raw):
        raise argparse.ArgumentTypeError("use YYYY-MM-DD")
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise argparse.ArgumentTypeError("use YYYY-MM-DD") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="daily-debrief", description="Daily task debrief")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run the debrief once for all users")
    run.add_argument("--date", type=_iso_date, default=None, help="Date to debrief (default: today)")
    run.add_argument("--dry-run", action="store_true", help="Summarize but do not send")

    sub.add_parser("schedule", help="Run daily at DEBRIEF_TIME in DEBRIEF_TIMEZONE")

    serve = sub.add_parser("serve", help="Start the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.log_level)

    try:
        orchestrator = get_orchestrator()
    except ConfigurationMissing as e:
        logger.error("%s", e)
        return EXIT_CONFIG

    if args.command == "serve":
        import uvicorn

        uvicorn.run("debrief.main:app", host=args.host, port=args.port)
        return 0

    if args.command == "schedule":
        from debrief.scheduler import DebriefScheduler

        DebriefScheduler(orchestrator, settings).serve_forever()
        return 0

    report = asyncio.run(orchestrator.run(args.date, dry_run=args.dry_run))
    print(report.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
