from __future__ import annotations

from typing import Any

import pytest

from orgstats.config.database import build_engine, build_session_factory, init_db
from orgstats.models import Commit, Member, PullRequest


@pytest.fixture
def engine(tmp_path):
    sqlite_engine = build_engine(f"sqlite:///{tmp_path / 'orgstats.sqlite'}")
    init_db(sqlite_engine)
    yield sqlite_engine
    sqlite_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def add_rows(db):
    """Insert members, pull requests and commits from plain tuples."""

    def _add(
        *,
        members: list[str] | None = None,
        pull_requests: list[dict[str, Any]] | None = None,
        commits: list[dict[str, Any]] | None = None,
    ) -> None:
        for username in members or []:
            db.add(Member(username=username))
        for number, row in enumerate(pull_requests or [], start=1):
            db.add(
                PullRequest(
                    repo=row.get("repo", "lila"),
                    pr_num=row.get("pr_num", number),
                    username=row["username"],
                    title=row.get("title", f"change {number}"),
                    created_at=row.get("created_at", "2020-01-01T00:00:00+00:00"),
                    merged_at=row.get("merged_at"),
                )
            )
        for number, row in enumerate(commits or [], start=1):
            db.add(
                Commit(
                    repo=row.get("repo", "lila"),
                    sha=row.get("sha", f"{number:040x}"),
                    username=row.get("username"),
                    committed_at=row["committed_at"],
                    message=row.get("message", f"commit {number}"),
                    url=row.get("url", f"https://github.com/acme/lila/commit/{number:040x}"),
                )
            )
        db.commit()

    return _add
