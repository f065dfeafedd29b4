"""
Command line entrypoint for orgstats

Positional arguments only:

    orgstats fetch <org> [since] [until]
    orgstats results <org> <since> <until>
    orgstats changelog <org> <since> <until>
    orgstats summary <org> <since> <until>
    orgstats serve [port]

Dates are YYYY-MM-DD and both ends of a range are included.
"""

import asyncio
import logging
import sys
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from orgstats.config.database import SessionLocal
from orgstats.config.settings import settings
from orgstats.exceptions import OrgStatsError, UsageError
from orgstats.main import serve
from orgstats.orchestrator import IngestionOrchestrator
from orgstats.reports import ReportOrchestrator
from orgstats.services.date_range import DateRange

logger = logging.getLogger(__name__)

USAGE = """Usage: orgstats <command> [args]

Commands:
  fetch <org> [since] [until]       pull members, pull requests and commits from GitHub
  results <org> <since> <until>     write contributor and pull request JSON results
  changelog <org> <since> <until>   write Markdown changelogs
  summary <org> <since> <until>     print summary statistics and post ideas
  serve [port]                      serve the output directory (default port 8080)"""


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one command. Returns 0 on success and 1 on any failure."""
    args: List[str] = list(sys.argv[1:] if argv is None else argv)
    configure_logging()

    if not args:
        print("Please provide a command")
        print(USAGE)
        return 1

    command, params = args[0], args[1:]

    try:
        if command == "fetch":
            _require(params, 1, "fetch <org> [since] [until]")
            orchestrator = IngestionOrchestrator(session_factory=SessionLocal)
            stats = asyncio.run(orchestrator.ingest(params[0], *params[1:3]))
            logger.info(f"Fetch completed: {stats}")

        elif command == "results":
            org, date_range = _org_and_range(params, "results")
            logger.info(f"Writing results for {org}")
            ReportOrchestrator(session_factory=SessionLocal).write_results(date_range)

        elif command == "changelog":
            org, date_range = _org_and_range(params, "changelog")
            ReportOrchestrator(session_factory=SessionLocal).write_changelog(org, date_range)

        elif command == "summary":
            org, date_range = _org_and_range(params, "summary")
            asyncio.run(ReportOrchestrator(session_factory=SessionLocal).summarize(org, date_range))

        elif command == "serve":
            serve(_parse_port(params))

        else:
            raise UsageError(f"Invalid command: {command}")

    except UsageError as e:
        print(e)
        print(USAGE)
        return 1
    except (OrgStatsError, SQLAlchemyError, OSError) as e:
        logger.error(f"Command {command} failed: {e}", exc_info=settings.DEBUG)
        return 1

    return 0


def _require(params: Sequence[str], count: int, usage: str) -> None:
    if len(params) < count:
        raise UsageError(f"Missing arguments, expected: {usage}")


def _org_and_range(params: Sequence[str], command: str):
    _require(params, 3, f"{command} <org> <since> <until>")
    return params[0], DateRange.from_args(params[1], params[2])


def _parse_port(params: Sequence[str]) -> int:
    """First argument as a TCP port, falling back to the configured default"""
    if params:
        try:
            port = int(params[0])
        except ValueError:
            port = 0
        if 0 < port < 65536:
            return port
    return settings.SERVE_PORT


if __name__ == "__main__":
    sys.exit(main())
