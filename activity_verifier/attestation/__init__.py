"""Attestation of verification results via the SKR sidecar and MAA."""

from __future__ import annotations

from .claims import decode_claims, decode_header, extract_token, summarize_claims
from .client import AttestationClient, SidecarAttestationClient, encode_runtime_data
from .config import AttestationConfig
from .errors import (
    AttestationConfigError,
    AttestationError,
    AttestationUnavailableError,
    InvalidTokenError,
)
from .models import (
    MAA_NOT_CONFIGURED,
    MAA_UNAVAILABLE,
    AttestationOutcome,
    AttestationStatus,
    ClaimsSummary,
)

__all__ = [
    "MAA_NOT_CONFIGURED",
    "MAA_UNAVAILABLE",
    "AttestationClient",
    "AttestationConfig",
    "AttestationConfigError",
    "AttestationError",
    "AttestationOutcome",
    "AttestationStatus",
    "AttestationUnavailableError",
    "ClaimsSummary",
    "InvalidTokenError",
    "SidecarAttestationClient",
    "decode_claims",
    "decode_header",
    "encode_runtime_data",
    "extract_token",
    "summarize_claims",
]
