"""GitHub REST client that gathers the activity behind a verification."""

from __future__ import annotations

import asyncio
import dataclasses
import datetime as dt
import os
import typing as typ

import httpx
import msgspec

from activity_verifier.common.time import Clock, utcnow
from activity_verifier.logging import get_logger, log_debug, log_info, log_warning
from activity_verifier.verification.engine import TRAILING_WINDOW
from activity_verifier.verification.models import VerificationType
from activity_verifier.verification.validation import validate_username

from .errors import (
    GitHubAPIError,
    GitHubNetworkError,
    GitHubResponseShapeError,
    RateLimitedError,
    UserNotFoundError,
)
from .models import ActivitySnapshot, GitHubEvent, GitHubRepository, GitHubUser
from .retry import RetryPolicy, Sleep, TransientFailure, retry_async

logger = get_logger(__name__)

T = typ.TypeVar("T")

_DEFAULT_API_URL = "https://api.github.com"

_HTTP_NOT_FOUND = 404
_HTTP_FORBIDDEN = 403
_HTTP_RATE_LIMITED = 429
_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_SERVER_ERROR_THRESHOLD = 500
_ERROR_DETAIL_LIMIT = 200


class GitHubActivityClient(typ.Protocol):
    """Interface for fetching the activity snapshot of one GitHub user."""

    async def fetch_activity(
        self,
        username: str,
        *,
        verification_type: VerificationType | None = None,
    ) -> ActivitySnapshot:
        """Return a fresh snapshot for ``username``.

        When ``verification_type`` is given only the endpoints that metric
        needs are called; otherwise every endpoint is fetched.
        """
        ...

    async def aclose(self) -> None:
        """Release any HTTP resources held by the client."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubClientConfig:
    """Configuration for the GitHub REST client.

    Attributes
    ----------
    token
        Optional bearer token; raises the rate-limit ceiling when present.
    api_url
        Base URL of the REST API.
    timeout_s
        Per-request timeout in seconds.
    user_agent
        ``User-Agent`` header value; GitHub rejects requests without one.
    per_page
        Page size for the events feed and repository listing.
    max_event_pages
        Page cap for the events feed. GitHub serves at most 300 events.
    max_repo_pages
        Page cap for the repository listing.

    """

    token: str | None = None
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = 30.0
    user_agent: str = "GitHub-Activity-Verifier/1.0"
    per_page: int = 100
    max_event_pages: int = 3
    max_repo_pages: int = 10

    @classmethod
    def from_env(cls) -> GitHubClientConfig:
        """Build configuration from ``GITHUB_TOKEN`` and ``GITHUB_API_URL``.

        A missing or blank token is not an error; requests are then made
        anonymously.
        """
        token = os.environ.get("GITHUB_TOKEN", "").strip() or None
        api_url = os.environ.get("GITHUB_API_URL", "").strip() or _DEFAULT_API_URL
        return cls(token=token, api_url=api_url.rstrip("/"))


def _retry_after_seconds(response: httpx.Response) -> float | None:
    raw = response.headers.get("Retry-After")
    if raw and raw.isdigit():
        return float(raw)
    return None


def _rate_limit_reset(response: httpx.Response) -> dt.datetime | None:
    raw = response.headers.get("X-RateLimit-Reset")
    if raw and raw.isdigit():
        return dt.datetime.fromtimestamp(int(raw), dt.UTC)
    return None


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == _HTTP_RATE_LIMITED:
        return True
    if response.status_code != _HTTP_FORBIDDEN:
        return False
    # Primary limits zero the remaining quota; secondary limits send Retry-After.
    return (
        response.headers.get("X-RateLimit-Remaining") == "0"
        or "Retry-After" in response.headers
    )


class GitHubRESTClient:
    """GitHub REST implementation of :class:`GitHubActivityClient`.

    Parameters
    ----------
    config
        API configuration.
    http_client
        Optional ``httpx.AsyncClient``; tests inject one backed by
        ``httpx.MockTransport``. When omitted the instance owns its client.
    retry_policy
        Backoff policy for rate limits and transient failures.
    sleep
        Coroutine used between attempts.
    clock
        Source of the current UTC time for windows and reset computations.

    """

    def __init__(
        self,
        config: GitHubClientConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Sleep | None = None,
        clock: Clock = utcnow,
    ) -> None:
        """Initialise the client with configuration and collaborators."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep or asyncio.sleep
        self._clock = clock
        self._headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": config.user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if config.token:
            self._headers["Authorization"] = f"Bearer {config.token}"

    @property
    def config(self) -> GitHubClientConfig:
        """Read-only access to the client configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch_activity(
        self,
        username: str,
        *,
        verification_type: VerificationType | None = None,
    ) -> ActivitySnapshot:
        """Fetch the data needed to evaluate ``verification_type`` for a user.

        Raises
        ------
        ValidationError
            If ``username`` is not a valid GitHub handle; no request is made.
        UserNotFoundError
            If GitHub reports the user does not exist.
        RateLimitedError
            If rate limiting outlasts the retry budget.
        GitHubNetworkError
            If GitHub is unreachable within the retry budget.
        GitHubAPIError
            For other error responses.
        GitHubResponseShapeError
            If a response body cannot be decoded.

        """
        validate_username(username)
        started_at = self._clock()

        wants_all = verification_type is None
        needs_events = wants_all or verification_type.uses_events
        needs_profile = wants_all or verification_type is VerificationType.PUBLIC_REPOS
        needs_repos = wants_all or not verification_type.uses_events

        profile = await self.fetch_user(username) if needs_profile else None
        repositories: tuple[GitHubRepository, ...] = ()
        truncated = False
        if needs_repos:
            repositories, truncated = await self.fetch_repositories(username)
        events: tuple[GitHubEvent, ...] = ()
        if needs_events:
            events = await self.fetch_events(
                username, since=started_at - TRAILING_WINDOW
            )

        log_info(
            logger,
            "Fetched activity for %s: events=%d repositories=%d profile=%s",
            username,
            len(events),
            len(repositories),
            profile is not None,
        )
        return ActivitySnapshot(
            username=username,
            fetched_at=self._clock(),
            events=events,
            repositories=repositories,
            profile=profile,
            repositories_truncated=truncated,
        )

    async def fetch_user(self, username: str) -> GitHubUser:
        """Return the public profile for ``username``."""
        return await self._get_json(
            f"/users/{username}", username=username, params=None, type_=GitHubUser
        )

    async def fetch_repositories(
        self, username: str
    ) -> tuple[tuple[GitHubRepository, ...], bool]:
        """Return repositories owned by ``username`` and a truncation flag."""
        per_page = self._config.per_page
        collected: list[GitHubRepository] = []
        for page in range(1, self._config.max_repo_pages + 1):
            repos = await self._get_json(
                f"/users/{username}/repos",
                username=username,
                params={"type": "owner", "per_page": per_page, "page": page},
                type_=list[GitHubRepository],
            )
            log_debug(logger, "Fetched %d repositories from page %d", len(repos), page)
            collected.extend(repos)
            if len(repos) < per_page:
                return tuple(collected), False

        log_warning(
            logger,
            "User %s has more than %d repositories; listing truncated",
            username,
            len(collected),
        )
        return tuple(collected), True

    async def fetch_events(
        self, username: str, *, since: dt.datetime
    ) -> tuple[GitHubEvent, ...]:
        """Return public events for ``username`` newer than ``since``.

        Pagination stops at the page cap, a short page, or the first page
        whose oldest event predates ``since``.
        """
        per_page = self._config.per_page
        collected: list[GitHubEvent] = []
        for page in range(1, self._config.max_event_pages + 1):
            events = await self._get_json(
                f"/users/{username}/events/public",
                username=username,
                params={"per_page": per_page, "page": page},
                type_=list[GitHubEvent],
            )
            log_debug(logger, "Fetched %d events from page %d", len(events), page)
            collected.extend(event for event in events if event.created_at >= since)
            if len(events) < per_page or any(e.created_at < since for e in events):
                break
        return tuple(collected)

    async def _get_json(
        self,
        path: str,
        *,
        username: str,
        params: dict[str, typ.Any] | None,
        type_: type[T],
    ) -> T:
        """GET ``path`` with retries and decode the body as ``type_``."""
        url = f"{self._config.api_url}{path}"

        async def _attempt() -> httpx.Response:
            return await self._send(url, username=username, params=params)

        response = await retry_async(
            _attempt,
            policy=self._retry_policy,
            sleep=self._sleep,
            on_retry=self._log_retry,
        )
        try:
            return msgspec.json.decode(response.content, type=type_)
        except msgspec.DecodeError as exc:
            raise GitHubResponseShapeError.invalid(url, str(exc)) from exc

    async def _send(
        self,
        url: str,
        *,
        username: str,
        params: dict[str, typ.Any] | None,
    ) -> httpx.Response:
        """Perform one GET and classify the response for the retry loop."""
        try:
            response = await self._client.get(
                url,
                params=params,
                headers=self._headers,
                timeout=self._config.timeout_s,
            )
        except httpx.TimeoutException as exc:
            raise TransientFailure(GitHubNetworkError.timeout(url)) from exc
        except httpx.RequestError as exc:
            raise TransientFailure(GitHubNetworkError.transport(url, str(exc))) from exc

        status = response.status_code
        if status < _HTTP_ERROR_STATUS_THRESHOLD:
            return response
        if status == _HTTP_NOT_FOUND:
            raise UserNotFoundError(username)
        if _is_rate_limited(response):
            raise self._rate_limit_failure(response)
        if status == _HTTP_FORBIDDEN:
            raise GitHubAPIError.forbidden()
        if status >= _HTTP_SERVER_ERROR_THRESHOLD:
            raise TransientFailure(GitHubAPIError.http_error(status))
        raise GitHubAPIError.http_error(status, response.text[:_ERROR_DETAIL_LIMIT])

    def _rate_limit_failure(self, response: httpx.Response) -> TransientFailure:
        reset_at = _rate_limit_reset(response)
        wait_hint = _retry_after_seconds(response)
        if wait_hint is None and reset_at is not None:
            wait_hint = max(0.0, (reset_at - self._clock()).total_seconds())
        exhausted = RateLimitedError.exhausted(
            self._retry_policy.max_attempts, reset_at=reset_at
        )
        give_up = (
            RateLimitedError.wait_too_long(wait_hint, reset_at=reset_at)
            if wait_hint is not None
            else exhausted
        )
        return TransientFailure(exhausted, wait_hint_s=wait_hint, give_up=give_up)

    @staticmethod
    def _log_retry(attempt: int, delay_s: float, error: Exception) -> None:
        log_warning(
            logger,
            "GitHub request failed (attempt %d): %s; retrying in %.1fs",
            attempt + 1,
            error,
            delay_s,
        )
