"""GitHub REST client for activity verification."""

from __future__ import annotations

from .client import (
    GitHubActivityClient,
    GitHubClientConfig,
    GitHubRESTClient,
)
from .errors import (
    GitHubAPIError,
    GitHubError,
    GitHubNetworkError,
    GitHubResponseShapeError,
    RateLimitedError,
    UserNotFoundError,
)
from .models import ActivitySnapshot, GitHubEvent, GitHubRepository, GitHubUser
from .retry import RetryPolicy, TransientFailure, retry_async

__all__ = [
    "ActivitySnapshot",
    "GitHubAPIError",
    "GitHubActivityClient",
    "GitHubClientConfig",
    "GitHubError",
    "GitHubEvent",
    "GitHubNetworkError",
    "GitHubRESTClient",
    "GitHubRepository",
    "GitHubResponseShapeError",
    "GitHubUser",
    "RateLimitedError",
    "RetryPolicy",
    "TransientFailure",
    "UserNotFoundError",
    "retry_async",
]
