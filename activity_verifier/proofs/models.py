"""Proof certificate structure."""

from __future__ import annotations

import datetime as dt
import typing as typ

import msgspec

from activity_verifier.attestation.models import (
    AttestationOutcome,
    AttestationStatus,
    ClaimsSummary,
)
from activity_verifier.verification.models import VerificationResult, VerificationType

from .hashing import compute_proof_hash

CERTIFICATE_TTL = dt.timedelta(hours=24)


class ProofCertificate(msgspec.Struct, kw_only=True, frozen=True):
    """A completed verification bound to its attestation outcome.

    Certificates are immutable once issued and expire ``CERTIFICATE_TTL``
    after ``created_at``.
    """

    proof_hash: str
    username: str
    verification_type: VerificationType
    threshold: int
    measured_value: int
    meets_criteria: bool
    computed_at: dt.datetime
    attestation_status: AttestationStatus
    attestation_token: str
    attestation_claims: dict[str, typ.Any] | None = None
    attestation_summary: ClaimsSummary | None = None
    created_at: dt.datetime
    expires_at: dt.datetime

    @classmethod
    def issue(
        cls,
        result: VerificationResult,
        attestation: AttestationOutcome,
        *,
        created_at: dt.datetime,
        ttl: dt.timedelta = CERTIFICATE_TTL,
    ) -> ProofCertificate:
        """Build a certificate for ``result`` and derive its proof hash."""
        return cls(
            proof_hash=compute_proof_hash(result),
            username=result.username,
            verification_type=result.verification_type,
            threshold=result.threshold,
            measured_value=result.measured_value,
            meets_criteria=result.meets_criteria,
            computed_at=result.computed_at,
            attestation_status=attestation.status,
            attestation_token=attestation.token,
            attestation_claims=attestation.claims,
            attestation_summary=attestation.summary,
            created_at=created_at,
            expires_at=created_at + ttl,
        )

    @property
    def result(self) -> VerificationResult:
        """Return the verification result the certificate was issued for."""
        return VerificationResult(
            username=self.username,
            verification_type=self.verification_type,
            threshold=self.threshold,
            measured_value=self.measured_value,
            meets_criteria=self.meets_criteria,
            computed_at=self.computed_at,
        )

    def is_expired(self, now: dt.datetime) -> bool:
        """Return True once ``now`` is past ``expires_at``."""
        return now > self.expires_at
