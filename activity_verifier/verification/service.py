"""Verification pipeline orchestration.

``VerificationService.verify`` runs one request through four strictly
sequential stages:

1. fetch the user's activity from GitHub,
2. evaluate the metric,
3. attest the result through the SKR sidecar,
4. issue and store the proof certificate.

Validation and GitHub failures abort the run before any certificate exists.
Attestation never aborts: an unavailable sidecar yields a certificate that
records the ``MAA_UNAVAILABLE`` sentinel.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from activity_verifier.common.time import Clock, utcnow
from activity_verifier.github.errors import GitHubError
from activity_verifier.proofs.models import CERTIFICATE_TTL, ProofCertificate

from .engine import evaluate
from .errors import ValidationError
from .observability import VerificationEventLogger
from .validation import validate_request

if typ.TYPE_CHECKING:
    import datetime as dt

    from activity_verifier.attestation.client import AttestationClient
    from activity_verifier.github.client import GitHubActivityClient
    from activity_verifier.proofs.store import ProofStore

    from .models import VerificationRequest


@dc.dataclass(frozen=True, slots=True)
class VerificationServiceDependencies:
    """Collaborators required by :class:`VerificationService`.

    Attributes
    ----------
    github_client
        Source of activity snapshots.
    attestation_client
        Produces attestation outcomes for results.
    proof_store
        Process-wide certificate store shared by all requests.

    """

    github_client: GitHubActivityClient
    attestation_client: AttestationClient
    proof_store: ProofStore


class VerificationService:
    """Run verification requests and serve certificate lookups.

    Parameters
    ----------
    dependencies
        Grouped collaborators.
    clock
        Source of certificate creation times.
    certificate_ttl
        Lifetime of issued certificates.
    event_logger
        Lifecycle event emitter.

    """

    def __init__(
        self,
        dependencies: VerificationServiceDependencies,
        *,
        clock: Clock = utcnow,
        certificate_ttl: dt.timedelta = CERTIFICATE_TTL,
        event_logger: VerificationEventLogger | None = None,
    ) -> None:
        """Configure the service with its collaborators."""
        self._github = dependencies.github_client
        self._attestation = dependencies.attestation_client
        self._store = dependencies.proof_store
        self._clock = clock
        self._certificate_ttl = certificate_ttl
        self._event_logger = event_logger or VerificationEventLogger()

    async def aclose(self) -> None:
        """Close the GitHub and attestation clients."""
        await self._github.aclose()
        await self._attestation.aclose()

    async def verify(self, request: VerificationRequest) -> ProofCertificate:
        """Verify ``request`` and return the stored certificate.

        Raises
        ------
        ValidationError
            If the username or threshold is invalid. No I/O is performed.
        GitHubError
            If fetching activity fails; no attestation is attempted and no
            certificate is stored.

        """
        try:
            threshold = validate_request(request)
        except ValidationError as exc:
            self._event_logger.log_run_failed(request, exc)
            raise

        self._event_logger.log_run_started(request, threshold)
        try:
            snapshot = await self._github.fetch_activity(
                request.username, verification_type=request.verification_type
            )
        except GitHubError as exc:
            self._event_logger.log_run_failed(request, exc)
            raise

        result = evaluate(snapshot, request.verification_type, threshold)

        outcome = await self._attestation.attest(result)
        if not outcome.is_attested:
            self._event_logger.log_attestation_degraded(request, outcome)

        certificate = ProofCertificate.issue(
            result,
            outcome,
            created_at=self._clock(),
            ttl=self._certificate_ttl,
        )
        self._store.put(certificate)
        self._event_logger.log_run_completed(certificate)
        return certificate

    def get_proof(self, proof_hash: str) -> ProofCertificate:
        """Return the live certificate for ``proof_hash``.

        Raises
        ------
        ProofNotFoundError
            If the hash is malformed, unknown, or expired.

        """
        return self._store.get(proof_hash)
