"""Unit tests for activity_verifier.api.errors handlers.

Run with:
    pytest tests/unit/test_api_errors.py
"""

from __future__ import annotations

import falcon.asgi
import falcon.testing
import pytest

from activity_verifier.api.errors import (
    InvalidInputError,
    error_body,
    register_error_handlers,
)
from activity_verifier.github.errors import (
    GitHubAPIError,
    GitHubError,
    GitHubNetworkError,
    GitHubResponseShapeError,
    RateLimitedError,
    UserNotFoundError,
)
from activity_verifier.proofs.errors import ProofNotFoundError
from activity_verifier.verification.errors import ValidationError


class _RaisingResource:
    """Resource raising whichever exception the test installs."""

    def __init__(self) -> None:
        self.error: Exception = RuntimeError("unset")

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        raise self.error


@pytest.fixture
def resource() -> _RaisingResource:
    """Return the raising resource."""
    return _RaisingResource()


@pytest.fixture
def client(resource: _RaisingResource) -> falcon.testing.TestClient:
    """Build a test client with the domain handlers registered."""
    app = falcon.asgi.App()
    app.add_route("/boom", resource)
    register_error_handlers(app)
    return falcon.testing.TestClient(app)


@pytest.mark.parametrize(
    ("error", "status", "code"),
    [
        (ValidationError.username_length(), falcon.HTTP_400, "VALIDATION_ERROR"),
        (
            InvalidInputError("Request body is required"),
            falcon.HTTP_400,
            "VALIDATION_ERROR",
        ),
        (UserNotFoundError("octocat"), falcon.HTTP_404, "USER_NOT_FOUND"),
        (RateLimitedError.exhausted(4), falcon.HTTP_429, "RATE_LIMIT_EXCEEDED"),
        (
            GitHubNetworkError.timeout("https://api.github.com/users/octocat"),
            falcon.HTTP_502,
            "NETWORK_ERROR",
        ),
        (
            GitHubResponseShapeError.invalid("https://api.github.com", "bad"),
            falcon.HTTP_502,
            "JSON_PARSE_ERROR",
        ),
        (GitHubAPIError.forbidden(), falcon.HTTP_502, "GITHUB_API_ERROR"),
        (GitHubError("unexpected"), falcon.HTTP_502, "GITHUB_API_ERROR"),
        (ProofNotFoundError("0" * 64), falcon.HTTP_404, "PROOF_NOT_FOUND"),
        (
            ProofNotFoundError("zz", malformed=True),
            falcon.HTTP_400,
            "INVALID_PROOF_HASH",
        ),
    ],
)
def test_error_mapping(
    client: falcon.testing.TestClient,
    resource: _RaisingResource,
    error: Exception,
    status: str,
    code: str,
) -> None:
    """Each domain error maps to its status and error code."""
    resource.error = error

    result = client.simulate_get("/boom")

    assert result.status == status, f"expected {status} for {type(error).__name__}"
    assert result.json["error_code"] == code, f"expected {code}"
    assert result.json["error"], "error message should not be empty"


def test_validation_error_names_field(
    client: falcon.testing.TestClient, resource: _RaisingResource
) -> None:
    """Validation responses carry the rejected field as details."""
    resource.error = ValidationError.threshold_range(1, 10_000)

    body = client.simulate_get("/boom").json

    assert body == {
        "error": "Threshold must be between 1 and 10000",
        "error_code": "VALIDATION_ERROR",
        "details": "threshold",
    }


def test_error_body_omits_missing_details() -> None:
    """details is only present when supplied."""
    assert error_body("nope", "CODE") == {"error": "nope", "error_code": "CODE"}
