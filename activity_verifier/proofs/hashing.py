"""Content-derived identities for proof certificates.

A proof hash is the SHA-256 digest of a canonical JSON document holding the
verification result fields. Keys are sorted and timestamps are rendered as
UTC ISO-8601 strings, so the same result always hashes to the same value
while two runs at different instants never collide.
"""

from __future__ import annotations

import datetime as dt
import hashlib
import re
import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    from activity_verifier.verification.models import VerificationResult

PROOF_HASH_LENGTH = 64

_PROOF_HASH_PATTERN = re.compile(r"[0-9a-f]{64}")


def canonical_result_bytes(result: VerificationResult) -> bytes:
    """Return the canonical serialization hashed into a proof identity."""
    document = {
        "username": result.username,
        "verification_type": result.verification_type.value,
        "threshold": result.threshold,
        "measured_value": result.measured_value,
        "meets_criteria": result.meets_criteria,
        "computed_at": result.computed_at.astimezone(dt.UTC).isoformat(),
    }
    return msgspec.json.encode(document, order="sorted")


def compute_proof_hash(result: VerificationResult) -> str:
    """Return the 64-character lowercase hex identity of ``result``."""
    return hashlib.sha256(canonical_result_bytes(result)).hexdigest()


def is_valid_proof_hash(value: str) -> bool:
    """Return True when ``value`` is 64 lowercase hexadecimal characters."""
    return _PROOF_HASH_PATTERN.fullmatch(value) is not None
