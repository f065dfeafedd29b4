"""Organization members ingestion stage."""

from __future__ import annotations

from typing import Any

from orgstats.crawlers.base import BaseStage
from orgstats.models.member import Member
from orgstats.services.record_mapper import map_member_row


class MembersStage(BaseStage):
    """Snapshots current organization membership into `members`."""

    async def ingest_organization(self, db: Any, org: str) -> dict[str, int]:
        self.log_start(org)
        stats = self.empty_stats()

        async for page in self._github_client.list_org_members(org):
            rows = [map_member_row(payload) for payload in page]
            stats["created"] += self.insert_if_absent(db, Member, rows, ["username"])
            db.commit()
            stats["input"] += len(rows)
            stats["pages"] += 1

        self.log_end(org, stats)
        return stats
