"""Build a ``VerificationService`` from environment configuration.

Usage
-----
Build the service backing the HTTP API::

    from activity_verifier.api.factory import build_verification_service

    service = build_verification_service()

Share one ``httpx.AsyncClient`` whose lifetime the caller manages::

    async with httpx.AsyncClient() as http_client:
        service = build_verification_service(http_client=http_client)

"""

from __future__ import annotations

import typing as typ

from activity_verifier.attestation.client import SidecarAttestationClient
from activity_verifier.attestation.config import AttestationConfig
from activity_verifier.github.client import GitHubClientConfig, GitHubRESTClient
from activity_verifier.proofs.store import InMemoryProofStore
from activity_verifier.verification.observability import VerificationEventLogger
from activity_verifier.verification.service import (
    VerificationService,
    VerificationServiceDependencies,
)

if typ.TYPE_CHECKING:
    import httpx

__all__ = ["build_verification_service"]


def build_verification_service(
    *, http_client: httpx.AsyncClient | None = None
) -> VerificationService:
    """Build a ``VerificationService`` from environment configuration.

    Reads ``GITHUB_TOKEN``, ``GITHUB_API_URL``, ``MAA_ENDPOINT`` and
    ``SKR_PORT``. The service gets a fresh in-memory proof store; callers
    share one service per process so certificates stay retrievable.

    Parameters
    ----------
    http_client
        Optional client shared by the GitHub and sidecar clients. When
        omitted each client owns its own.

    Raises
    ------
    AttestationConfigError
        If ``SKR_PORT`` is not a valid port number.

    """
    attestation_config = AttestationConfig.from_env()
    github_client = GitHubRESTClient(
        GitHubClientConfig.from_env(), http_client=http_client
    )
    attestation_client = SidecarAttestationClient(
        attestation_config, http_client=http_client
    )
    dependencies = VerificationServiceDependencies(
        github_client=github_client,
        attestation_client=attestation_client,
        proof_store=InMemoryProofStore(),
    )
    return VerificationService(dependencies, event_logger=VerificationEventLogger())
