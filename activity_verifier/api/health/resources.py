"""Probe resources for process liveness and traffic readiness.

Neither probe touches GitHub or the attestation sidecar, so both stay green
while those upstreams are degraded. Verification failures surface through the
verify endpoint's error responses instead.

Usage
-----
Register both probes on the Falcon app::

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe answering ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Report that the process is alive."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe answering ``{"status": "ready"}``.

    Parameters
    ----------
    verification_enabled
        Whether the verify and proof routes are mounted. Reported in the
        body so operators can tell a probe-only deployment apart.

    """

    def __init__(self, *, verification_enabled: bool = False) -> None:
        """Record whether verification routes are available."""
        self._verification_enabled = verification_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Report that the service accepts traffic."""
        resp.media = {
            "status": "ready",
            "verification": self._verification_enabled,
        }
        resp.status = HTTPStatus.OK
