"""Unit tests for proof hash derivation."""

from __future__ import annotations

import datetime as dt

import msgspec
import pytest

from activity_verifier.proofs.hashing import (
    PROOF_HASH_LENGTH,
    canonical_result_bytes,
    compute_proof_hash,
    is_valid_proof_hash,
)
from activity_verifier.verification.models import VerificationType
from tests.helpers.builders import NOW, result


class TestComputeProofHash:
    """Tests for compute_proof_hash."""

    def test_is_lowercase_hex_of_fixed_length(self) -> None:
        """Hashes are 64 lowercase hexadecimal characters."""
        proof_hash = compute_proof_hash(result())
        assert len(proof_hash) == PROOF_HASH_LENGTH
        assert is_valid_proof_hash(proof_hash)

    def test_same_result_same_hash(self) -> None:
        """Hashing is deterministic."""
        assert compute_proof_hash(result()) == compute_proof_hash(result())

    @pytest.mark.parametrize(
        "change",
        [
            {"username": "hubot"},
            {"verification_type": VerificationType.TOTAL_STARS},
            {"threshold": 11},
            {"measured_value": 13},
            {"meets_criteria": False},
            {"computed_at": NOW + dt.timedelta(seconds=1)},
        ],
    )
    def test_every_field_is_bound(self, change: dict[str, object]) -> None:
        """Changing any result field changes the hash."""
        assert compute_proof_hash(result(**change)) != compute_proof_hash(result())

    def test_equivalent_instants_hash_equally(self) -> None:
        """The same instant expressed in another zone hashes identically."""
        shifted = NOW.astimezone(dt.timezone(dt.timedelta(hours=5)))
        assert compute_proof_hash(result(computed_at=shifted)) == compute_proof_hash(
            result()
        )


def test_canonical_document_has_sorted_keys() -> None:
    """The canonical encoding lists keys alphabetically."""
    document = msgspec.json.decode(canonical_result_bytes(result()))
    assert list(document) == sorted(document)
    assert document["computed_at"] == "2024-06-15T12:00:00+00:00"
    assert document["verification_type"] == "public_repos"


@pytest.mark.parametrize(
    "value",
    ["", "a" * 63, "a" * 65, "A" * 64, "g" * 64, "../" + "a" * 61],
)
def test_rejects_malformed_hashes(value: str) -> None:
    """Only 64 lowercase hex characters are valid."""
    assert not is_valid_proof_hash(value)
