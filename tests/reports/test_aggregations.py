from __future__ import annotations

import pytest

from orgstats.services.aggregations import (
    MONTH_BUCKET_LENGTH,
    YEAR_BUCKET_LENGTH,
    PeriodCount,
    curated_commits,
    first_time_contributors,
    merged_pull_requests,
    monthly_pull_requests,
    summary_statistics,
)
from orgstats.services.date_range import DateRange

RANGE_2023_2024 = DateRange.from_args("2023-01-01", "2024-12-31")


@pytest.fixture
def seeded(add_rows):
    add_rows(
        members=["alice", "bob"],
        pull_requests=[
            # before the range
            {"username": "carol", "merged_at": "2022-12-31T23:59:59+00:00"},
            # 2023
            {"username": "alice", "merged_at": "2023-01-01T00:00:00+00:00"},
            {"username": "alice", "merged_at": "2023-01-15T10:00:00+00:00", "repo": "api"},
            {"username": "carol", "merged_at": "2023-02-28T23:59:59+00:00", "repo": "mobile"},
            {"username": "dave", "merged_at": "2023-12-31T23:59:59+00:00"},
            # 2024, leap day and month ends
            {"username": "bob", "merged_at": "2024-02-29T12:00:00+00:00"},
            {"username": "erin", "merged_at": "2024-02-29T23:59:59+00:00"},
            {"username": "dave", "merged_at": "2024-03-01T00:00:00+00:00"},
            {"username": "alice", "merged_at": "2024-12-31T23:59:59+00:00"},
            # after the range
            {"username": "frank", "merged_at": "2025-01-01T00:00:00+00:00"},
            # never merged
            {"username": "grace", "merged_at": None},
        ],
    )


def test_first_time_contributors_by_year(db, seeded) -> None:
    rows = first_time_contributors(db, RANGE_2023_2024, YEAR_BUCKET_LENGTH)

    assert rows == [PeriodCount(month="2023", count=3), PeriodCount(month="2024", count=2)]


def test_first_time_contributors_by_month(db, seeded) -> None:
    rows = first_time_contributors(db, RANGE_2023_2024, MONTH_BUCKET_LENGTH)

    assert rows == [
        PeriodCount(month="2023-01", count=1),
        PeriodCount(month="2023-02", count=1),
        PeriodCount(month="2023-12", count=1),
        PeriodCount(month="2024-02", count=2),
    ]


@pytest.mark.parametrize("length", [YEAR_BUCKET_LENGTH, MONTH_BUCKET_LENGTH])
def test_first_time_buckets_are_complete_and_strictly_ascending(db, seeded, length) -> None:
    rows = first_time_contributors(db, RANGE_2023_2024, length)
    buckets = [row.month for row in rows]

    assert buckets == sorted(set(buckets))
    assert all(len(bucket) == length - 1 for bucket in buckets)
    assert sum(row.count for row in rows) == 5  # alice, carol, dave, bob, erin


def test_until_day_is_inclusive_and_next_day_is_not(db, seeded) -> None:
    leap_day = DateRange.from_args("2024-02-29", "2024-02-29")

    rows = first_time_contributors(db, leap_day, MONTH_BUCKET_LENGTH)

    assert rows == [PeriodCount(month="2024-02", count=2)]


def test_monthly_pull_requests_split_by_membership(db, seeded) -> None:
    rows = monthly_pull_requests(db, RANGE_2023_2024)

    assert [(row.month, row.by_members, row.by_non_members, row.total) for row in rows] == [
        ("2023-01", 2, 0, 2),
        ("2023-02", 0, 1, 1),
        ("2023-12", 0, 1, 1),
        ("2024-02", 1, 1, 2),
        ("2024-03", 0, 1, 1),
        ("2024-12", 1, 0, 1),
    ]
    for row in rows:
        assert row.by_members + row.by_non_members == row.total


def test_empty_range_yields_no_buckets(db, seeded) -> None:
    quiet = DateRange.from_args("2021-01-01", "2021-12-31")

    assert first_time_contributors(db, quiet, YEAR_BUCKET_LENGTH) == []
    assert monthly_pull_requests(db, quiet) == []


def test_merged_pull_requests_by_membership(db, seeded) -> None:
    members = merged_pull_requests(db, RANGE_2023_2024, by_members=True)
    community = merged_pull_requests(db, RANGE_2023_2024, by_members=False)

    assert [pr.username for pr in members] == ["alice", "alice", "bob", "alice"]
    assert [pr.username for pr in community] == ["carol", "dave", "erin", "dave"]


def test_summary_statistics(db, seeded) -> None:
    stats = summary_statistics(db, DateRange.from_args("2024-01-01", "2024-12-31"))

    assert stats.merged_total == 4
    assert stats.merged_by_members == 2
    assert stats.merged_by_non_members == 2
    assert stats.merged_by_members + stats.merged_by_non_members == stats.merged_total
    assert stats.contributors == 4
    assert stats.repos == 1
    # bob and erin had nothing merged before 2024; alice and dave did
    assert stats.first_time_contributors == 2


def test_curated_commits_filter_ignores_dates(db, add_rows) -> None:
    add_rows(
        commits=[
            {"username": "ornicar", "committed_at": "2024-01-02T00:00:00+00:00", "message": "Add puzzle streak"},
            {"username": "ornicar", "committed_at": "2024-01-03T00:00:00+00:00", "message": "Merge branch 'master'"},
            {"username": "ornicar", "committed_at": "2024-01-03T00:00:00+00:00", "message": "merge pull request #1"},
            {"username": "niklasf", "committed_at": "2024-01-04T00:00:00+00:00", "message": "New translations x.xml"},
            {"username": "niklasf", "committed_at": "2024-01-05T00:00:00+00:00", "message": "small Tweak"},
            {"username": "outsider", "committed_at": "2024-01-05T00:00:00+00:00", "message": "Add feature"},
            {"username": None, "committed_at": "2024-01-05T00:00:00+00:00", "message": "Add feature"},
            {"username": "niklasf", "committed_at": "2024-01-31T23:59:59+00:00", "message": "Fix clock"},
            {"username": "niklasf", "committed_at": "2024-02-01T00:00:00+00:00", "message": "Fix later"},
        ],
    )

    commits = curated_commits(
        db,
        authors=["ornicar", "niklasf"],
        excluded_phrases=["Merge", "New translations", "tweak"],
    )

    assert [commit.message for commit in commits] == ["Add puzzle streak", "Fix clock", "Fix later"]
