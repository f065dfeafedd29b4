"""Async GitHub client with Link-header pagination for org ingestion."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, AsyncIterator, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from orgstats.config.settings import settings
from orgstats.crawlers.contracts import FetchResult, FetchState
from orgstats.exceptions import RemoteAPIError

logger = logging.getLogger(__name__)

GITHUB_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_REDACTED_VALUE = "***REDACTED***"
_SENSITIVE_KEYS = (
    "authorization",
    "token",
    "api_key",
    "apikey",
    "secret",
    "password",
    "cookie",
)
_TOKEN_PATTERNS = (
    re.compile(r"(?i)(bearer\s+)[^\s,;]+"),
    re.compile(r"(?i)(token\s*[=:]\s*)[^\s,;]+"),
    re.compile(r"(?i)(access_token=)[^&\s]+"),
    re.compile(r"(?i)(api[_-]?key\s*[=:]\s*)[^\s,;]+"),
)


def sanitize_for_log(value: Any, *, key: Optional[str] = None) -> Any:
    """Return a recursively sanitized copy of log payloads."""

    if isinstance(value, dict):
        sanitized: dict[str, Any] = {}
        for raw_key, raw_value in value.items():
            field = str(raw_key)
            if _contains_keyword(field, _SENSITIVE_KEYS):
                sanitized[field] = _REDACTED_VALUE
                continue
            sanitized[field] = sanitize_for_log(raw_value, key=field)
        return sanitized

    if isinstance(value, (list, tuple, set)):
        return [sanitize_for_log(item, key=key) for item in value]

    if isinstance(value, str):
        return _redact_text(value)

    return value


def sanitize_log_extra(**kwargs: Any) -> dict[str, Any]:
    """Helper for `extra=` payloads in structured logging."""

    return {key: sanitize_for_log(value, key=key) for key, value in kwargs.items()}


def _contains_keyword(field_name: str, keywords: tuple[str, ...]) -> bool:
    lowered = field_name.lower()
    return any(keyword in lowered for keyword in keywords)


def _redact_text(raw: str) -> str:
    redacted = raw
    for pattern in _TOKEN_PATTERNS:
        redacted = pattern.sub(rf"\1{_REDACTED_VALUE}", redacted)
    return redacted


class _RateLimitRetryableError(Exception):
    """Retryable rate-limit signal for tenacity."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """GitHub REST client that walks paginated list endpoints page by page."""

    BASE_URL = "https://api.github.com"
    API_VERSION = "2022-11-28"
    ACCEPT_JSON = "application/vnd.github+json"

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        per_page: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        max_attempts: Optional[int] = None,
        backoff_base_seconds: Optional[float] = None,
        backoff_max_seconds: Optional[float] = None,
        transport: Optional[Any] = None,
    ) -> None:
        self._token = token or settings.GITHUB_TOKEN
        self._base_url = base_url or settings.GITHUB_API_URL or self.BASE_URL
        self._per_page = per_page or settings.GITHUB_PER_PAGE
        self._timeout_seconds = timeout_seconds or settings.GITHUB_TIMEOUT_SECONDS
        self._max_attempts = max(max_attempts or settings.GITHUB_MAX_ATTEMPTS, 1)
        self._backoff_base_seconds = backoff_base_seconds or settings.GITHUB_BACKOFF_BASE_SECONDS
        self._backoff_max_seconds = backoff_max_seconds or settings.GITHUB_BACKOFF_MAX_SECONDS
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GitHubClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def list_org_members(self, org: str) -> AsyncIterator[list[dict[str, Any]]]:
        return self.iter_pages(f"/orgs/{org}/members", params={"per_page": self._per_page})

    def list_org_repos(self, org: str) -> AsyncIterator[list[dict[str, Any]]]:
        return self.iter_pages(f"/orgs/{org}/repos", params={"per_page": self._per_page})

    def list_pulls(self, org: str, repo: str) -> AsyncIterator[list[dict[str, Any]]]:
        """All pull requests of a repository, newest first."""
        return self.iter_pages(
            f"/repos/{org}/{repo}/pulls",
            params={
                "state": "all",
                "sort": "created",
                "direction": "desc",
                "per_page": self._per_page,
            },
        )

    def list_commits(
        self,
        org: str,
        repo: str,
        *,
        since: datetime,
        until: datetime,
    ) -> AsyncIterator[list[dict[str, Any]]]:
        return self.iter_pages(
            f"/repos/{org}/{repo}/commits",
            params={
                "since": since.strftime(GITHUB_TIMESTAMP_FORMAT),
                "until": until.strftime(GITHUB_TIMESTAMP_FORMAT),
                "per_page": self._per_page,
            },
        )

    async def iter_pages(
        self,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield every page of a list endpoint, following `Link: rel="next"`.

        The next page is only requested once the caller has consumed the
        current one. A failed page raises `RemoteAPIError`.
        """

        response = await self.fetch_page(path, params=params)
        while True:
            if response.is_failed:
                raise RemoteAPIError(
                    f"GitHub request failed for {path}: {response.error or 'unknown error'}",
                    path=path,
                    status_code=response.status_code,
                )

            yield response.data or []

            if not response.has_next:
                return

            # The next link already carries the query string
            path = response.next_url
            response = await self.fetch_page(path)

    async def fetch_page(
        self,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
    ) -> FetchResult[list[dict[str, Any]]]:
        client = await self._ensure_client()

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_attempts),
                wait=wait_exponential(multiplier=self._backoff_base_seconds, max=self._backoff_max_seconds),
                retry=retry_if_exception_type(_RateLimitRetryableError),
                reraise=True,
            ):
                with attempt:
                    response = await client.get(path, params=params)

                    if response.status_code in (403, 429):
                        logger.warning(
                            "GitHub API rate limit encountered",
                            extra=sanitize_log_extra(
                                path=path,
                                params=params,
                                status_code=response.status_code,
                                ratelimit_reset=response.headers.get("x-ratelimit-reset"),
                            ),
                        )
                        raise _RateLimitRetryableError(
                            f"GitHub rate limit encountered ({response.status_code})",
                            status_code=response.status_code,
                        )

                    response.raise_for_status()
                    return self._to_page_result(response)
        except _RateLimitRetryableError as exc:
            return FetchResult(state=FetchState.FAILED, error=str(exc), status_code=exc.status_code)
        except httpx.HTTPError as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            logger.warning(
                "GitHub request failed",
                extra=sanitize_log_extra(path=path, params=params, error=str(exc), status_code=status_code),
            )
            return FetchResult(state=FetchState.FAILED, error=str(exc), status_code=status_code)

        return FetchResult(state=FetchState.FAILED, error="Unknown GitHub request failure")

    @staticmethod
    def _to_page_result(response: httpx.Response) -> FetchResult[list[dict[str, Any]]]:
        next_url = response.links.get("next", {}).get("url")
        try:
            payload = response.json()
        except ValueError as exc:
            return FetchResult(
                state=FetchState.FAILED,
                error=f"Malformed JSON response: {exc}",
                status_code=response.status_code,
            )

        if not isinstance(payload, list):
            return FetchResult(
                state=FetchState.FAILED,
                error=f"Expected a JSON array, received {type(payload).__name__}",
                status_code=response.status_code,
            )

        return FetchResult(
            state=FetchState.OK if payload else FetchState.EMPTY,
            data=payload,
            status_code=response.status_code,
            next_url=next_url,
        )

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client:
            return self._client

        headers = {
            "Accept": self.ACCEPT_JSON,
            "User-Agent": settings.USER_AGENT,
            "X-GitHub-Api-Version": self.API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout_seconds,
            transport=self._transport,
        )
        return self._client
