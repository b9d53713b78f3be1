"""Application factory for the verifier's Falcon ASGI application.

``create_app()`` always mounts the liveness and readiness probes. When a
:class:`VerificationService` is supplied it also mounts the verification
and proof lookup routes, and closes the service's HTTP clients on
lifespan shutdown.

Usage
-----
Create a probe-only app::

    app = create_app()

Create the full app::

    from activity_verifier.api.app import AppDependencies, create_app

    app = create_app(AppDependencies(verification_service=service))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from activity_verifier.api.errors import register_error_handlers
from activity_verifier.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    from activity_verifier.verification.service import VerificationService

__all__ = ["AppDependencies", "create_app"]


class _ServiceLifespan:
    """Close the verification service when the ASGI server shuts down."""

    def __init__(self, service: VerificationService) -> None:
        self._service = service

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Release the service's outbound HTTP clients."""
        await self._service.aclose()


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    verification_service
        Service backing ``POST /api/verify`` and ``GET /proof/{proof_hash}``.
        When ``None`` only the probes are registered.

    """

    verification_service: VerificationService | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    service = dependencies.verification_service if dependencies else None

    middleware = [_ServiceLifespan(service)] if service is not None else []
    app = falcon.asgi.App(  # type: ignore[no-matching-overload]  # Falcon stubs
        middleware=middleware
    )

    app.add_route("/health", HealthResource())
    app.add_route(
        "/ready", ReadyResource(verification_enabled=service is not None)
    )

    if service is not None:
        from activity_verifier.api.verify.resources import (
            ProofResource,
            VerifyResource,
        )

        app.add_route("/api/verify", VerifyResource(service))
        app.add_route("/proof/{proof_hash}", ProofResource(service))

    register_error_handlers(app)
    return app
