"""Behavioural coverage for proof lookup and expiry.

Usage
-----
Run with pytest::

    pytest tests/features/steps/test_proof_lookup_steps.py

"""

from __future__ import annotations

import datetime as dt
import typing as typ
from http import HTTPStatus

import falcon.testing
import pytest
from pytest_bdd import given, parsers, scenario, then, when

from activity_verifier.api.app import AppDependencies, create_app
from tests.helpers.builders import repo_payload
from tests.helpers.github_stub import GitHubStub
from tests.helpers.services import build_service

if typ.TYPE_CHECKING:
    from falcon.testing.client import Result

    from tests.helpers.builders import FrozenClock

FEATURE = "../proof_lookup.feature"


class ProofContext(typ.TypedDict, total=False):
    """Mutable context shared between steps."""

    clock: FrozenClock
    client: falcon.testing.TestClient
    proof_hash: str
    lookup: Result


@pytest.fixture
def proof_context(clock: FrozenClock) -> ProofContext:
    """Start each scenario with the frozen clock."""
    return {"clock": clock}


@scenario(FEATURE, "Proof is live before expiry")
def test_proof_live_before_expiry() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario(FEATURE, "Proof expires after 24 hours")
def test_proof_expires() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario(FEATURE, "Malformed hashes are rejected")
def test_malformed_hash() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario(FEATURE, "Unknown hashes are not found")
def test_unknown_hash() -> None:
    """Wrapper for pytest-bdd scenario."""


@given(parsers.parse('a proof issued for "{username}"'))
def given_issued_proof(proof_context: ProofContext, username: str) -> None:
    """Run a verification and keep the returned proof hash."""
    github = GitHubStub(username, repos=[repo_payload("widget", owner=username)])
    service = build_service(github, proof_context["clock"])
    client = falcon.testing.TestClient(
        create_app(AppDependencies(verification_service=service))
    )
    response = client.simulate_post(
        "/api/verify",
        json={"github_username": username, "verification_type": "public_repos"},
    )
    assert response.status_code == HTTPStatus.OK, response.text
    proof_context["client"] = client
    proof_context["proof_hash"] = response.json["proof_hash"]


@when(parsers.parse("{hours:d} hours pass"))
def when_hours_pass(proof_context: ProofContext, hours: int) -> None:
    """Advance the shared clock."""
    proof_context["clock"].advance(dt.timedelta(hours=hours))


@when(parsers.parse('the proof "{value}" is requested'))
def when_proof_requested(proof_context: ProofContext, value: str) -> None:
    """Look up an arbitrary hash."""
    proof_context["lookup"] = proof_context["client"].simulate_get(f"/proof/{value}")


def _lookup_issued(proof_context: ProofContext) -> Result:
    return proof_context["client"].simulate_get(
        f"/proof/{proof_context['proof_hash']}"
    )


@then("the proof is returned")
def then_proof_returned(proof_context: ProofContext) -> None:
    """Assert the issued proof is still served."""
    result = _lookup_issued(proof_context)
    assert result.status_code == HTTPStatus.OK
    assert result.json["proof_hash"] == proof_context["proof_hash"]


@then(
    parsers.parse(
        'looking up the proof fails with status {status:d} and code "{code}"'
    )
)
def then_issued_lookup_fails(
    proof_context: ProofContext, status: int, code: str
) -> None:
    """Assert the issued proof is no longer served."""
    result = _lookup_issued(proof_context)
    assert result.status_code == status
    assert result.json["error_code"] == code


@then(parsers.parse('the lookup fails with status {status:d} and code "{code}"'))
def then_lookup_fails(proof_context: ProofContext, status: int, code: str) -> None:
    """Assert the arbitrary lookup failed as expected."""
    assert proof_context["lookup"].status_code == status
    assert proof_context["lookup"].json["error_code"] == code
