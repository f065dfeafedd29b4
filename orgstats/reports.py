"""Report commands: JSON results, Markdown changelogs and the summary."""

from __future__ import annotations

from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from orgstats.config.database import SessionLocal, init_db
from orgstats.config.settings import settings
from orgstats.services import aggregations, renderer
from orgstats.services.aggregations import MONTH_BUCKET_LENGTH, YEAR_BUCKET_LENGTH
from orgstats.services.date_range import DateRange
from orgstats.services.summarizer import NarrativeService

logger = logging.getLogger(__name__)

PULL_REQUESTS_RESULTS_FILE = "results_pull_requests.json"
MEMBERS_CHANGELOG_FILE = "changelog_members.md"
NON_MEMBERS_CHANGELOG_FILE = "changelog_non_members.md"
COMMITS_CHANGELOG_FILE = "changelog_commits.md"


def first_time_contributions_file(length: int) -> str:
    return f"results_first_time_contributions_{length}.json"


class ReportOrchestrator:
    """Reads the store and writes artifacts into the output directory.

    Each method opens its own session and closes it when done. Artifacts are
    overwritten on every run.
    """

    def __init__(
        self,
        *,
        session_factory: Callable[[], Any] = SessionLocal,
        output_dir: Optional[str] = None,
        narrative_service: Optional[NarrativeService] = None,
    ) -> None:
        self._session_factory = session_factory
        self._output_dir = Path(output_dir or settings.OUTPUT_DIR)
        self._narrative_service = narrative_service

    def write_results(self, date_range: DateRange) -> list[Path]:
        """Yearly and monthly first-time contributors plus monthly PR volume."""
        logger.info(f"Aggregating merged pull requests for {date_range}")
        written: list[Path] = []
        with self._session() as db:
            for length in (YEAR_BUCKET_LENGTH, MONTH_BUCKET_LENGTH):
                records = aggregations.first_time_contributors(db, date_range, length)
                written.append(
                    renderer.write_artifact(
                        self._output_dir / first_time_contributions_file(length),
                        renderer.render_json(records),
                    )
                )

            monthly = aggregations.monthly_pull_requests(db, date_range)
            written.append(
                renderer.write_artifact(
                    self._output_dir / PULL_REQUESTS_RESULTS_FILE,
                    renderer.render_json(monthly),
                )
            )
        return written

    def write_changelog(self, org: str, date_range: DateRange) -> list[Path]:
        """Direct-commit digest plus member and community pull request changelogs."""
        logger.info(f"Building changelogs for {org} from {date_range}")
        written: list[Path] = []
        with self._session() as db:
            commits = aggregations.curated_commits(
                db,
                authors=settings.CURATED_COMMIT_AUTHORS,
                excluded_phrases=settings.EXCLUDED_COMMIT_PHRASES,
            )
            written.append(
                renderer.write_artifact(
                    self._output_dir / COMMITS_CHANGELOG_FILE,
                    renderer.render_commit_digest(commits),
                )
            )

            for by_members, filename in ((True, MEMBERS_CHANGELOG_FILE), (False, NON_MEMBERS_CHANGELOG_FILE)):
                pull_requests = aggregations.merged_pull_requests(db, date_range, by_members=by_members)
                written.append(
                    renderer.write_artifact(
                        self._output_dir / filename,
                        renderer.render_pull_request_changelog(
                            pull_requests,
                            org=org,
                            core_repos=settings.CORE_REPOS,
                            prefix_overrides=settings.REPO_PREFIX_OVERRIDES,
                        ),
                    )
                )
        return written

    async def summarize(self, org: str, date_range: DateRange) -> str:
        """Print the summary block followed by the narrative drafts."""
        with self._session() as db:
            stats = aggregations.summary_statistics(db, date_range)

        summary = renderer.render_summary(org, date_range, stats)
        print(summary)

        narrative_service = self._narrative_service or NarrativeService()
        await narrative_service.print_narratives(summary)
        return summary

    @contextmanager
    def _session(self) -> Iterator[Any]:
        db = self._session_factory()
        try:
            init_db(db.get_bind())
            yield db
        finally:
            db.close()
