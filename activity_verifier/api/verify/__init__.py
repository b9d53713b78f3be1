"""Verification and proof lookup resources."""

from activity_verifier.api.verify.resources import (
    ProofResource,
    VerifyRequestBody,
    VerifyResource,
)

__all__ = ["ProofResource", "VerifyRequestBody", "VerifyResource"]
