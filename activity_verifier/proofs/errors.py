"""Proof store errors."""

from __future__ import annotations


class ProofNotFoundError(LookupError):
    """Raised when a proof hash is malformed, unknown, or expired.

    Attributes
    ----------
    proof_hash
        The hash that was looked up.
    malformed
        True when the hash was rejected before consulting the store.

    """

    def __init__(self, proof_hash: str, *, malformed: bool = False) -> None:
        """Initialise with the hash that could not be resolved."""
        self.proof_hash = proof_hash
        self.malformed = malformed
        if malformed:
            message = "Invalid proof hash format"
        else:
            message = "Proof not found; it may have expired or never existed"
        super().__init__(message)
