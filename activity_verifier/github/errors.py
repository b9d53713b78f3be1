"""GitHub client errors."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import datetime as dt


class GitHubError(RuntimeError):
    """Base class for failures while fetching GitHub activity."""


class UserNotFoundError(GitHubError):
    """Raised when GitHub answers 404 for the requested user."""

    def __init__(self, username: str) -> None:
        """Initialise with the missing username."""
        self.username = username
        super().__init__(f"GitHub user '{username}' not found")


class RateLimitedError(GitHubError):
    """Raised when GitHub rate limiting outlasts the retry budget."""

    def __init__(self, message: str, *, reset_at: dt.datetime | None = None) -> None:
        """Initialise with a message and the advertised reset instant."""
        self.reset_at = reset_at
        super().__init__(message)

    @classmethod
    def exhausted(
        cls, attempts: int, *, reset_at: dt.datetime | None = None
    ) -> RateLimitedError:
        """Return an error for a retry budget spent on rate-limited responses."""
        return cls(
            f"GitHub API rate limit exceeded after {attempts} attempts",
            reset_at=reset_at,
        )

    @classmethod
    def wait_too_long(
        cls, wait_s: float, *, reset_at: dt.datetime | None = None
    ) -> RateLimitedError:
        """Return an error when the advertised wait exceeds the backoff cap."""
        return cls(
            f"GitHub API rate limit exceeded; reset in {wait_s:.0f}s",
            reset_at=reset_at,
        )


class GitHubNetworkError(GitHubError):
    """Raised when GitHub cannot be reached within the retry budget."""

    @classmethod
    def timeout(cls, url: str) -> GitHubNetworkError:
        """Return an error for a request that timed out."""
        return cls(f"GitHub API request timed out: {url}")

    @classmethod
    def transport(cls, url: str, detail: str) -> GitHubNetworkError:
        """Return an error for connection-level failures."""
        return cls(f"GitHub API network error for {url}: {detail}")


class GitHubAPIError(GitHubError):
    """Raised when GitHub returns a non-retryable error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, detail: str = "") -> GitHubAPIError:
        """Return an error for a non-2xx HTTP response."""
        message = f"GitHub API HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        return cls(message, status_code=status_code)

    @classmethod
    def forbidden(cls) -> GitHubAPIError:
        """Return an error for a 403 that is not rate limiting."""
        return cls(
            "GitHub API HTTP 403: Forbidden - check API token permissions",
            status_code=403,
        )


class GitHubResponseShapeError(GitHubError):
    """Raised when a GitHub response body cannot be decoded."""

    @classmethod
    def invalid(cls, url: str, detail: str) -> GitHubResponseShapeError:
        """Return an error for a body that does not match the expected shape."""
        return cls(f"GitHub API returned an unexpected payload for {url}: {detail}")
