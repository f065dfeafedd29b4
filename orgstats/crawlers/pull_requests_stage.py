"""Pull requests ingestion stage across every organization repository."""

from __future__ import annotations

from typing import Any

from orgstats.crawlers.base import BaseStage
from orgstats.models.pull_request import PullRequest
from orgstats.services.record_mapper import map_pull_request_row


class PullRequestsStage(BaseStage):
    """Ingests all pull requests (any state) of all organization repositories.

    Repositories are processed one after the other and each repository's
    pull requests are fully paged through before the next one starts.
    A pull request already stored keeps its first-seen title and merge state.
    """

    async def ingest_organization(self, db: Any, org: str) -> dict[str, int]:
        self.log_start(org)
        stats = {**self.empty_stats(), "repositories": 0}

        async for repos_page in self._github_client.list_org_repos(org):
            for repo_payload in repos_page:
                repo_name = repo_payload.get("name")
                if not repo_name:
                    self.logger.warning(f"Skipping repository without a name in {org}")
                    continue

                repo_stats = await self.ingest_repository(db, org, repo_name)
                stats["repositories"] += 1
                stats["input"] += repo_stats["input"]
                stats["created"] += repo_stats["created"]
                stats["pages"] += repo_stats["pages"]

        self.log_end(org, stats)
        return stats

    async def ingest_repository(self, db: Any, org: str, repo: str) -> dict[str, int]:
        self.logger.info(f"Getting pull requests for: {repo}")
        stats = self.empty_stats()

        async for page in self._github_client.list_pulls(org, repo):
            rows = [map_pull_request_row(payload, repo=repo) for payload in page]
            stats["created"] += self.insert_if_absent(db, PullRequest, rows, ["repo", "pr_num"])
            db.commit()
            stats["input"] += len(rows)
            stats["pages"] += 1
            self.logger.info(f"... {stats['input']}")

        return stats
