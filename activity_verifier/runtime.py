"""Runtime entrypoint serving the verifier over HTTP with Granian.

``activity_verifier.runtime:create_app`` is the Granian factory target. It
builds one :class:`VerificationService` per worker process, so proofs issued
by a worker are retrievable from that worker for their lifetime.

Configuration is driven by environment variables:

- ``HOST``: Bind address (default ``0.0.0.0``)
- ``PORT``: Listen port (default ``9000``)
- ``LOG_LEVEL``: Log level (default ``INFO``)
- ``GITHUB_TOKEN``, ``GITHUB_API_URL``: GitHub client settings
- ``MAA_ENDPOINT``, ``SKR_PORT``: attestation sidecar settings

Run the service directly with ``python -m activity_verifier.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from activity_verifier.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main", "parse_port"]

logger = get_logger(__name__)

_DEFAULT_PORT = "9000"
_MIN_PORT = 1
_MAX_PORT = 65535


def parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If ``port_str`` is not an integer in range 1-65535.

    """
    try:
        port = int(port_str)
    except ValueError as exc:
        log_error(logger, "Invalid PORT value: %r (not an integer)", port_str)
        raise SystemExit(1) from exc
    if not _MIN_PORT <= port <= _MAX_PORT:
        log_error(
            logger,
            "Invalid PORT value: %r (must be %d-%d)",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
        )
        raise SystemExit(1)
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon application with verification routes mounted."""
    from activity_verifier.api.app import AppDependencies
    from activity_verifier.api.app import create_app as _create_api_app
    from activity_verifier.api.factory import build_verification_service

    service = build_verification_service()
    return _create_api_app(AppDependencies(verification_service=service))


def main() -> None:
    """Start the verifier HTTP server using Granian.

    Reads ``HOST``, ``PORT`` and ``LOG_LEVEL`` from the environment.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = parse_port(os.environ.get("PORT", _DEFAULT_PORT))
    log_level_str = os.environ.get("LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting activity verifier on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "activity_verifier.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
