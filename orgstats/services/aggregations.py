"""Aggregate queries over merged pull requests and commits.

Buckets are prefixes of the stored RFC-3339 strings. SQLite's
`substr(x, 0, n)` starts before the first character and so returns n - 1
characters: length 5 gives the year (`2024`) and length 8 the month
(`2024-03`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from sqlalchemy import case, func, select

from orgstats.models.commit import Commit
from orgstats.models.member import Member
from orgstats.models.pull_request import PullRequest
from orgstats.services.date_range import DateRange

YEAR_BUCKET_LENGTH = 5
MONTH_BUCKET_LENGTH = 8


@dataclass(slots=True)
class PeriodCount:
    month: str
    count: int


@dataclass(slots=True)
class MonthlyPullRequests:
    month: str
    by_members: int
    by_non_members: int
    total: int


@dataclass(slots=True)
class SummaryStats:
    merged_by_members: int
    merged_by_non_members: int
    merged_total: int
    contributors: int
    repos: int
    first_time_contributors: int


def _merged_within(date_range: DateRange) -> tuple[Any, Any]:
    return (
        PullRequest.merged_at >= date_range.lower,
        PullRequest.merged_at < date_range.upper,
    )


def first_time_contributors(db: Any, date_range: DateRange, length: int) -> list[PeriodCount]:
    """Count authors by the bucket of their earliest merge inside the range."""
    first_merge = (
        db.query(
            PullRequest.username.label("username"),
            func.substr(func.min(PullRequest.merged_at), 0, length).label("first_date"),
        )
        .filter(*_merged_within(date_range))
        .group_by(PullRequest.username)
        .subquery()
    )

    rows = (
        db.query(first_merge.c.first_date, func.count(first_merge.c.username))
        .group_by(first_merge.c.first_date)
        .order_by(first_merge.c.first_date.asc())
        .all()
    )
    return [PeriodCount(month=bucket, count=int(count)) for bucket, count in rows]


def monthly_pull_requests(db: Any, date_range: DateRange) -> list[MonthlyPullRequests]:
    """Merged pull requests per month, split by organization membership."""
    month = func.substr(PullRequest.merged_at, 0, MONTH_BUCKET_LENGTH).label("month")

    rows = (
        db.query(
            month,
            func.count(case((Member.username.is_not(None), 1))),
            func.count(case((Member.username.is_(None), 1))),
            func.count(),
        )
        .select_from(PullRequest)
        .outerjoin(Member, PullRequest.username == Member.username)
        .filter(*_merged_within(date_range))
        .group_by(month)
        .order_by(month.asc())
        .all()
    )
    return [
        MonthlyPullRequests(
            month=bucket,
            by_members=int(by_members),
            by_non_members=int(by_non_members),
            total=int(total),
        )
        for bucket, by_members, by_non_members, total in rows
    ]


def merged_pull_requests(db: Any, date_range: DateRange, *, by_members: bool) -> list[PullRequest]:
    member_usernames = select(Member.username)
    if by_members:
        membership = PullRequest.username.in_(member_usernames)
    else:
        membership = PullRequest.username.not_in(member_usernames)

    return (
        db.query(PullRequest)
        .filter(*_merged_within(date_range), membership)
        .order_by(PullRequest.id.asc())
        .all()
    )


def curated_commits(
    db: Any,
    *,
    authors: Sequence[str],
    excluded_phrases: Sequence[str],
) -> list[Commit]:
    """Direct commits by allow-listed authors, minus merge/translation/chore noise.

    Phrase matching is SQLite `LIKE`, so it ignores ASCII case. There is no
    date filter: the stored commits are already bounded by the fetch window.
    """
    query = db.query(Commit).filter(Commit.username.in_(list(authors)))
    for phrase in excluded_phrases:
        query = query.filter(~Commit.message.like(f"%{phrase}%"))
    return query.order_by(Commit.id.asc()).all()


def summary_statistics(db: Any, date_range: DateRange) -> SummaryStats:
    merged_within = _merged_within(date_range)

    by_members, by_non_members = (
        db.query(
            func.count(case((Member.username.is_not(None), 1))),
            func.count(case((Member.username.is_(None), 1))),
        )
        .select_from(PullRequest)
        .outerjoin(Member, PullRequest.username == Member.username)
        .filter(*merged_within)
        .one()
    )

    merged_total, contributors, repos = (
        db.query(
            func.count(PullRequest.id),
            func.count(PullRequest.username.distinct()),
            func.count(PullRequest.repo.distinct()),
        )
        .filter(*merged_within)
        .one()
    )

    earlier_authors = (
        select(PullRequest.username)
        .where(PullRequest.merged_at < date_range.lower)
        .distinct()
    )
    (first_timers,) = (
        db.query(func.count(PullRequest.username.distinct()))
        .filter(*merged_within, PullRequest.username.not_in(earlier_authors))
        .one()
    )

    return SummaryStats(
        merged_by_members=int(by_members),
        merged_by_non_members=int(by_non_members),
        merged_total=int(merged_total),
        contributors=int(contributors),
        repos=int(repos),
        first_time_contributors=int(first_timers),
    )
