"""Proof certificates: identity, structure and in-memory storage."""

from __future__ import annotations

from .errors import ProofNotFoundError
from .hashing import (
    PROOF_HASH_LENGTH,
    canonical_result_bytes,
    compute_proof_hash,
    is_valid_proof_hash,
)
from .models import CERTIFICATE_TTL, ProofCertificate
from .store import InMemoryProofStore, ProofStore, ProofStoreStats

__all__ = [
    "CERTIFICATE_TTL",
    "PROOF_HASH_LENGTH",
    "InMemoryProofStore",
    "ProofCertificate",
    "ProofNotFoundError",
    "ProofStore",
    "ProofStoreStats",
    "canonical_result_bytes",
    "compute_proof_hash",
    "is_valid_proof_hash",
]
