"""Mapping helpers from GitHub payloads to store rows."""

from __future__ import annotations

from typing import Any, Optional

from orgstats.exceptions import MalformedRecordError
from orgstats.services.date_range import normalize_timestamp


def map_member_row(payload: dict[str, Any]) -> dict[str, Any]:
    return {"username": _require_text(payload.get("login"), "login", "organization member")}


def map_pull_request_row(payload: dict[str, Any], *, repo: Optional[str] = None) -> dict[str, Any]:
    """Map a pull request payload into the `pull_requests` contract.

    The repository name comes from the base repository of the pull request,
    falling back to the repository being listed. Author, title and creation
    time are required; GitHub always sets them for real pull requests.
    """

    number = payload.get("number")
    if not isinstance(number, int):
        raise MalformedRecordError(f"Pull request without a number in {repo or 'unknown repo'}")

    context = f"{repo or 'unknown repo'}#{number}"
    base_repo = ((payload.get("base") or {}).get("repo") or {}).get("name")
    user = payload.get("user") or {}
    merged_at = payload.get("merged_at")

    return {
        "repo": _require_text(base_repo or repo, "repository name", context),
        "pr_num": number,
        "username": _require_text(user.get("login"), "author", context),
        "title": _require_text(payload.get("title"), "title", context),
        "created_at": _require_timestamp(payload.get("created_at"), "created_at", context),
        "merged_at": _require_timestamp(merged_at, "merged_at", context) if merged_at else None,
    }


def map_commit_row(payload: dict[str, Any], *, repo: str) -> dict[str, Any]:
    """Map a commit payload into the `commits` contract.

    Commits whose author has no linked GitHub account keep `username` NULL.
    """

    sha = _require_text(payload.get("sha"), "sha", repo)
    context = f"{repo}@{sha[:7]}"
    git_commit = payload.get("commit") or {}
    committer = git_commit.get("committer") or {}
    author = payload.get("author") or {}

    return {
        "repo": repo,
        "sha": sha,
        "username": author.get("login") or None,
        "committed_at": _require_timestamp(committer.get("date"), "committer date", context),
        "message": git_commit.get("message") or "",
        "url": _require_text(payload.get("html_url"), "html_url", context),
    }


def _require_text(value: Any, field: str, context: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value
    raise MalformedRecordError(f"Missing {field} for {context}")


def _require_timestamp(value: Any, field: str, context: Any) -> str:
    raw = _require_text(value, field, context)
    try:
        return normalize_timestamp(raw)
    except ValueError as exc:
        raise MalformedRecordError(f"Invalid {field} for {context}: {raw!r}") from exc
