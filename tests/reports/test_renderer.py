from __future__ import annotations

import json
from types import SimpleNamespace

from orgstats.services.aggregations import MonthlyPullRequests, PeriodCount, SummaryStats
from orgstats.services.date_range import DateRange
from orgstats.services.renderer import (
    capitalize_first_letter,
    render_commit_digest,
    render_json,
    render_pull_request_changelog,
    render_summary,
    write_artifact,
)

CORE_REPOS = ["lila", "lila-ws", "lifat"]
OVERRIDES = {"api": "API Docs"}


def _pr(repo: str, number: int, title: str, username: str) -> SimpleNamespace:
    return SimpleNamespace(repo=repo, pr_num=number, title=title, username=username)


def test_capitalize_first_letter_leaves_the_rest_alone() -> None:
    assert capitalize_first_letter("fix iOS crash") == "Fix iOS crash"
    assert capitalize_first_letter("") == ""


def test_pull_request_changelog_prefixes() -> None:
    text = render_pull_request_changelog(
        [
            _pr("api", 12, "fix thing", "octo"),
            _pr("lila", 34, "Add study chapters", "alice"),
            _pr("mobile", 56, "dark mode", "bob"),
        ],
        org="lichess-org",
        core_repos=CORE_REPOS,
        prefix_overrides=OVERRIDES,
    )

    assert text.splitlines() == [
        "-   API Docs: Fix thing [#12](https://github.com/lichess-org/api/pull/12) "
        "(thanks [octo](https://github.com/octo))",
        "-   Add study chapters [#34](https://github.com/lichess-org/lila/pull/34) "
        "(thanks [alice](https://github.com/alice))",
        "-   Mobile: Dark mode [#56](https://github.com/lichess-org/mobile/pull/56) "
        "(thanks [bob](https://github.com/bob))",
    ]
    assert text.endswith("\n")


def test_empty_changelog_is_empty() -> None:
    assert render_pull_request_changelog([], org="acme", core_repos=CORE_REPOS, prefix_overrides=OVERRIDES) == ""


def test_commit_digest_line_format() -> None:
    commits = [
        SimpleNamespace(
            repo="lila",
            sha="0123456789abcdef0123456789abcdef01234567",
            username=None,
            committed_at="2024-01-05T08:09:10+00:00",
            message="Fix crash\nwhen resigning",
            url="https://github.com/lichess-org/lila/commit/0123456",
        ),
        SimpleNamespace(
            repo="mobile",
            sha="fedcba9876543210fedcba9876543210fedcba98",
            username="veloce",
            committed_at="2024-01-06T00:00:00+00:00",
            message="Bump version",
            url="https://github.com/lichess-org/mobile/commit/fedcba9",
        ),
    ]

    assert render_commit_digest(commits) == (
        "-   2024-01-05 - lila n/a - Fix crash when resigning "
        "[0123456](https://github.com/lichess-org/lila/commit/0123456)\n"
        "-   2024-01-06 - mobile veloce - Bump version "
        "[fedcba9](https://github.com/lichess-org/mobile/commit/fedcba9)\n"
    )


def test_render_json_keeps_field_order_and_is_repeatable() -> None:
    records = [PeriodCount(month="2024-01", count=3), PeriodCount(month="2024-02", count=1)]

    first = render_json(records)

    assert first == render_json(records)
    assert json.loads(first) == [{"month": "2024-01", "count": 3}, {"month": "2024-02", "count": 1}]
    assert first.index('"month"') < first.index('"count"')
    assert render_json([]) == "[]"


def test_render_json_monthly_field_order() -> None:
    text = render_json([MonthlyPullRequests(month="2024-03", by_members=1, by_non_members=2, total=3)])

    keys = list(json.loads(text)[0])

    assert keys == ["month", "by_members", "by_non_members", "total"]


def test_write_artifact_overwrites_and_creates_directories(tmp_path) -> None:
    target = tmp_path / "web" / "results.json"

    write_artifact(target, "first version that is longer")
    write_artifact(target, "second")

    assert target.read_text(encoding="utf-8") == "second"


def test_render_summary_block() -> None:
    stats = SummaryStats(
        merged_by_members=7,
        merged_by_non_members=5,
        merged_total=12,
        contributors=9,
        repos=3,
        first_time_contributors=2,
    )

    text = render_summary("lichess-org", DateRange.from_args("2024-01-01", "2024-01-31"), stats)

    assert text == (
        "```\n"
        "lichess-org Github Summary for 2024-01-01 to 2024-01-31\n"
        "---------------------------------------------------\n"
        "\n"
        "Total merged pull requests: 12\n"
        "Total repos with pull requests: 3\n"
        "Total contributors: 9\n"
        "First time contributors: 2\n"
        "\n"
        "Merged pull requests (from team members): 7\n"
        "Merged pull requests (from community members): 5\n"
        "```"
    )
