"""Tagged attestation outcomes embedded into proof certificates."""

from __future__ import annotations

import enum
import typing as typ

import msgspec

MAA_NOT_CONFIGURED = "MAA_NOT_CONFIGURED"
MAA_UNAVAILABLE = "MAA_UNAVAILABLE"


class AttestationStatus(enum.StrEnum):
    """How the attestation step ended."""

    ATTESTED = "attested"
    NOT_CONFIGURED = "not_configured"
    UNAVAILABLE = "unavailable"


class ClaimsSummary(msgspec.Struct, kw_only=True, frozen=True, omit_defaults=True):
    """Display-oriented subset of MAA token claims.

    Attributes
    ----------
    issuer
        ``iss``: the MAA instance that signed the token.
    attestation_type
        ``x-ms-attestation-type``, e.g. ``sevsnpvm``.
    compliance_status
        ``x-ms-compliance-status``.
    issued_at
        ``iat`` as seconds since the epoch.
    expires_at
        ``exp`` as seconds since the epoch.
    jwks_url
        ``jku``: where the issuer's public signing keys are published.
    key_id
        ``kid``: signing key identifier.
    policy_hash
        ``x-ms-policy-hash``.
    runtime_data
        ``x-ms-runtime``: runtime claims bound into the report.

    """

    issuer: str | None = None
    attestation_type: str | None = None
    compliance_status: str | None = None
    issued_at: int | None = None
    expires_at: int | None = None
    jwks_url: str | None = None
    key_id: str | None = None
    policy_hash: str | None = None
    runtime_data: dict[str, typ.Any] | None = None


class AttestationOutcome(msgspec.Struct, kw_only=True, frozen=True):
    """Result of the attestation step.

    Unavailable or unconfigured attestation is a normal outcome, not an
    error: the verification still completes and records the sentinel token.

    Attributes
    ----------
    status
        Tag describing how attestation ended.
    token
        Signed token, or one of the sentinel strings.
    claims
        Decoded token claims, when a token was obtained and decodable.
    summary
        Display subset of ``claims``.

    """

    status: AttestationStatus
    token: str
    claims: dict[str, typ.Any] | None = None
    summary: ClaimsSummary | None = None

    @classmethod
    def not_configured(cls) -> AttestationOutcome:
        """Return the outcome used when no MAA endpoint is configured."""
        return cls(status=AttestationStatus.NOT_CONFIGURED, token=MAA_NOT_CONFIGURED)

    @classmethod
    def unavailable(cls) -> AttestationOutcome:
        """Return the outcome used when the sidecar could not attest."""
        return cls(status=AttestationStatus.UNAVAILABLE, token=MAA_UNAVAILABLE)

    @classmethod
    def attested(
        cls,
        token: str,
        claims: dict[str, typ.Any] | None,
        summary: ClaimsSummary | None,
    ) -> AttestationOutcome:
        """Return the outcome for a token obtained from the sidecar."""
        return cls(
            status=AttestationStatus.ATTESTED,
            token=token,
            claims=claims,
            summary=summary,
        )

    @property
    def is_attested(self) -> bool:
        """Return True when a signed token was obtained."""
        return self.status is AttestationStatus.ATTESTED
