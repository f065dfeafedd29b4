"""Commit history ingestion stage for a date window."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from orgstats.crawlers.base import BaseStage
from orgstats.models.commit import Commit
from orgstats.services.record_mapper import map_commit_row


class CommitsStage(BaseStage):
    """Ingests the default-branch commits of one repository between two instants."""

    async def ingest_repository(
        self,
        db: Any,
        org: str,
        repo: str,
        *,
        since: datetime,
        until: datetime,
    ) -> dict[str, int]:
        target = f"{org}/{repo}"
        self.log_start(target)
        stats = self.empty_stats()

        async for page in self._github_client.list_commits(org, repo, since=since, until=until):
            rows = [map_commit_row(payload, repo=repo) for payload in page]
            stats["created"] += self.insert_if_absent(db, Commit, rows, ["sha"])
            db.commit()
            stats["input"] += len(rows)
            stats["pages"] += 1

        self.log_end(target, stats)
        return stats
