"""JSON and Markdown rendering of aggregation results"""

from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence, Union
import json
import logging

logger = logging.getLogger(__name__)

GITHUB_URL = "https://github.com"
UNKNOWN_AUTHOR = "n/a"
SHORT_SHA_LENGTH = 7


def capitalize_first_letter(text: str) -> str:
    """Upper-case the first character only, leaving the rest untouched"""
    return text[:1].upper() + text[1:]


def render_json(records: Iterable[Any]) -> str:
    """
    Pretty-print records as a JSON array

    Dataclass records keep their field declaration order, so the output is
    stable for a given input.
    """
    payload = [asdict(record) if is_dataclass(record) else dict(record) for record in records]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def repo_prefix(repo: str, *, core_repos: Sequence[str], prefix_overrides: Mapping[str, str]) -> str:
    """Display prefix for a changelog entry: nothing for core repos"""
    if repo in core_repos:
        return ""
    if repo in prefix_overrides:
        return f"{prefix_overrides[repo]}: "
    return f"{capitalize_first_letter(repo)}: "


def render_pull_request_changelog(
    pull_requests: Iterable[Any],
    *,
    org: str,
    core_repos: Sequence[str],
    prefix_overrides: Mapping[str, str],
) -> str:
    lines = []
    for pr in pull_requests:
        prefix = repo_prefix(pr.repo, core_repos=core_repos, prefix_overrides=prefix_overrides)
        lines.append(
            f"-   {prefix}{capitalize_first_letter(pr.title)} "
            f"[#{pr.pr_num}]({GITHUB_URL}/{org}/{pr.repo}/pull/{pr.pr_num}) "
            f"(thanks [{pr.username}]({GITHUB_URL}/{pr.username}))\n"
        )
    return "".join(lines)


def render_commit_digest(commits: Iterable[Any]) -> str:
    lines = []
    for commit in commits:
        message = commit.message.replace("\n", " ")
        lines.append(
            f"-   {commit.committed_at[:10]} - {commit.repo} {commit.username or UNKNOWN_AUTHOR} - "
            f"{message} [{commit.sha[:SHORT_SHA_LENGTH]}]({commit.url})\n"
        )
    return "".join(lines)


def render_summary(org: str, date_range: Any, stats: Any) -> str:
    """Plain-text summary block, fenced so it pastes as-is into Markdown"""
    return (
        "```\n"
        f"{org} Github Summary for {date_range.since.isoformat()} to {date_range.until.isoformat()}\n"
        "---------------------------------------------------\n"
        "\n"
        f"Total merged pull requests: {stats.merged_total}\n"
        f"Total repos with pull requests: {stats.repos}\n"
        f"Total contributors: {stats.contributors}\n"
        f"First time contributors: {stats.first_time_contributors}\n"
        "\n"
        f"Merged pull requests (from team members): {stats.merged_by_members}\n"
        f"Merged pull requests (from community members): {stats.merged_by_non_members}\n"
        "```"
    )


def write_artifact(path: Union[str, Path], content: str) -> Path:
    """Overwrite `path` with `content`, creating the output directory if needed"""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    logger.info(f"Results written to {target}")
    return target
