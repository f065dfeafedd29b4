"""Ingestion pipeline: GitHub organization data into the local store."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
import logging
from typing import Any, Callable, Optional, Sequence

from orgstats.config.database import SessionLocal, init_db
from orgstats.config.settings import settings
from orgstats.crawlers.client import GitHubClient, sanitize_log_extra
from orgstats.crawlers.commits_stage import CommitsStage
from orgstats.crawlers.members_stage import MembersStage
from orgstats.crawlers.pull_requests_stage import PullRequestsStage
from orgstats.exceptions import ConfigurationError, InvalidDateError
from orgstats.services.date_range import parse_date

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestionStats:
    """Row counts for one ingestion run (seen vs. newly inserted)."""

    members_seen: int = 0
    members_inserted: int = 0
    repositories: int = 0
    pull_requests_seen: int = 0
    pull_requests_inserted: int = 0
    commits_seen: int = 0
    commits_inserted: int = 0


class IngestionOrchestrator:
    """Runs the commits, members and pull requests stages for an organization.

    Any failure aborts the whole run: rows already committed stay, nothing
    is retried and there is no resume point.
    """

    def __init__(
        self,
        *,
        session_factory: Callable[[], Any] = SessionLocal,
        github_client_factory: Callable[..., Any] = GitHubClient,
        token: Optional[str] = None,
        commit_repos: Optional[Sequence[str]] = None,
    ) -> None:
        self._session_factory = session_factory
        self._github_client_factory = github_client_factory
        self._token = token
        self._commit_repos = list(commit_repos if commit_repos is not None else settings.COMMIT_REPOS)

    async def ingest(self, org: str, since: Optional[str] = None, until: Optional[str] = None) -> IngestionStats:
        token = self._resolve_token()
        window = self._resolve_commit_window(since, until)

        stats = IngestionStats()
        db = self._session_factory()
        logger.info(
            "Ingestion run started",
            extra=sanitize_log_extra(org=org, since=since, until=until, commit_repos=self._commit_repos),
        )
        try:
            init_db(db.get_bind())

            async with self._github_client_factory(token=token) as client:
                if window is not None:
                    commits_stage = CommitsStage(client)
                    for repo in self._commit_repos:
                        result = await commits_stage.ingest_repository(
                            db, org, repo, since=window[0], until=window[1]
                        )
                        stats.commits_seen += result["input"]
                        stats.commits_inserted += result["created"]

                members = await MembersStage(client).ingest_organization(db, org)
                stats.members_seen = members["input"]
                stats.members_inserted = members["created"]

                pulls = await PullRequestsStage(client).ingest_organization(db, org)
                stats.repositories = pulls["repositories"]
                stats.pull_requests_seen = pulls["input"]
                stats.pull_requests_inserted = pulls["created"]
        except Exception:
            db.rollback()
            logger.error("Ingestion run aborted", extra=sanitize_log_extra(org=org, stats=asdict(stats)))
            raise
        finally:
            db.close()

        logger.info("Ingestion run completed", extra=sanitize_log_extra(org=org, stats=asdict(stats)))
        return stats

    def _resolve_token(self) -> str:
        token = self._token or settings.GITHUB_TOKEN
        if not token:
            raise ConfigurationError("GITHUB_TOKEN environment variable not set")
        return token

    @staticmethod
    def _resolve_commit_window(
        since: Optional[str],
        until: Optional[str],
    ) -> Optional[tuple[datetime, datetime]]:
        """Commit history is only fetched when a start date is given.

        A missing end date means "through today" (UTC).
        """
        if not since:
            if until:
                raise InvalidDateError("An end date requires a start date")
            return None

        start = parse_date(since)
        if until:
            end = parse_date(until, end_of_day=True)
        else:
            end = parse_date(datetime.now(timezone.utc).date().isoformat(), end_of_day=True)

        if start > end:
            raise InvalidDateError(f"Start date {since} is after end date {until}")
        return start, end
