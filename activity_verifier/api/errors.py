"""Falcon error handlers translating domain errors into JSON responses.

Every error body has the same shape::

    {"error": "<message>", "error_code": "<CODE>", "details": "<optional>"}

Usage
-----
Register the handlers on the Falcon app::

    from activity_verifier.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

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

if typ.TYPE_CHECKING:
    import falcon.asgi
    from falcon.asgi import Request, Response

__all__ = [
    "InvalidInputError",
    "error_body",
    "handle_github_error",
    "handle_invalid_input",
    "handle_proof_not_found",
    "handle_validation_error",
    "register_error_handlers",
]


class InvalidInputError(Exception):
    """Raised when a request body cannot be decoded into a verify request.

    Attributes
    ----------
    reason
        Human-readable description of the problem.
    field
        Optional name of the offending field.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialise with a reason and optional field name."""
        self.reason = reason
        self.field = field
        super().__init__(f"{field}: {reason}" if field is not None else reason)


# Checked in order; subclasses precede GitHubError's catch-all entry.
_GITHUB_ERROR_MAP: tuple[tuple[type[GitHubError], str, str], ...] = (
    (UserNotFoundError, falcon.HTTP_404, "USER_NOT_FOUND"),
    (RateLimitedError, falcon.HTTP_429, "RATE_LIMIT_EXCEEDED"),
    (GitHubNetworkError, falcon.HTTP_502, "NETWORK_ERROR"),
    (GitHubResponseShapeError, falcon.HTTP_502, "JSON_PARSE_ERROR"),
    (GitHubAPIError, falcon.HTTP_502, "GITHUB_API_ERROR"),
    (GitHubError, falcon.HTTP_502, "GITHUB_API_ERROR"),
)


def error_body(
    message: str, error_code: str, details: str | None = None
) -> dict[str, str]:
    """Return the JSON error payload shared by every handler."""
    body = {"error": message, "error_code": error_code}
    if details is not None:
        body["details"] = details
    return body


async def handle_validation_error(
    _req: Request,
    resp: Response,
    ex: ValidationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``ValidationError`` to HTTP 400 ``VALIDATION_ERROR``."""
    resp.status = falcon.HTTP_400
    resp.media = error_body(ex.reason, "VALIDATION_ERROR", details=ex.field)


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to HTTP 400 ``VALIDATION_ERROR``."""
    resp.status = falcon.HTTP_400
    resp.media = error_body(ex.reason, "VALIDATION_ERROR", details=ex.field)


async def handle_github_error(
    _req: Request,
    resp: Response,
    ex: GitHubError,
    _params: dict[str, typ.Any],
) -> None:
    """Map GitHub failures to 404, 429 or 502 responses."""
    for error_type, status, code in _GITHUB_ERROR_MAP:
        if isinstance(ex, error_type):
            resp.status = status
            resp.media = error_body(str(ex), code)
            break
    if isinstance(ex, RateLimitedError) and ex.reset_at is not None:
        resp.set_header("X-RateLimit-Reset", str(int(ex.reset_at.timestamp())))


async def handle_proof_not_found(
    _req: Request,
    resp: Response,
    ex: ProofNotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Map lookups to 400 ``INVALID_PROOF_HASH`` or 404 ``PROOF_NOT_FOUND``."""
    if ex.malformed:
        resp.status = falcon.HTTP_400
        resp.media = error_body(str(ex), "INVALID_PROOF_HASH")
        return
    resp.status = falcon.HTTP_404
    resp.media = error_body(
        "Proof not found",
        "PROOF_NOT_FOUND",
        details="The proof may have expired or never existed",
    )


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Install every domain error handler on ``app``."""
    app.add_error_handler(ValidationError, handle_validation_error)
    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(GitHubError, handle_github_error)
    app.add_error_handler(ProofNotFoundError, handle_proof_not_found)
