"""Unit tests for the SKR sidecar attestation client."""

from __future__ import annotations

import base64

import httpx
import msgspec
import pytest

from activity_verifier.attestation.client import (
    AttestationClient,
    SidecarAttestationClient,
    encode_runtime_data,
)
from activity_verifier.attestation.config import AttestationConfig
from activity_verifier.attestation.errors import AttestationConfigError
from activity_verifier.attestation.models import (
    MAA_NOT_CONFIGURED,
    MAA_UNAVAILABLE,
    AttestationStatus,
)
from activity_verifier.proofs.hashing import compute_proof_hash
from tests.helpers.builders import make_jwt, result
from tests.helpers.github_stub import SidecarStub

MAA_ENDPOINT = "https://sharedeus.eus.attest.azure.net"
CONFIGURED = AttestationConfig(maa_endpoint=MAA_ENDPOINT)


def _client(
    stub: SidecarStub, config: AttestationConfig = CONFIGURED
) -> SidecarAttestationClient:
    return SidecarAttestationClient(config, http_client=stub.client())


def test_sidecar_client_satisfies_protocol() -> None:
    """The sidecar client implements AttestationClient."""
    assert isinstance(SidecarAttestationClient(AttestationConfig()), AttestationClient)


def test_runtime_data_binds_proof_hash() -> None:
    """Runtime data is base64 JSON carrying the proof hash."""
    decoded = msgspec.json.decode(base64.b64decode(encode_runtime_data("ab" * 32)))
    assert decoded == {"proof_data_hash": "ab" * 32}


class TestAttest:
    """Tests for SidecarAttestationClient.attest."""

    @pytest.mark.asyncio
    async def test_unconfigured_endpoint_skips_sidecar(self) -> None:
        """Without MAA_ENDPOINT no request is made."""
        stub = SidecarStub(httpx.Response(200, text="unused"))

        outcome = await _client(stub, AttestationConfig()).attest(result())

        assert outcome.status is AttestationStatus.NOT_CONFIGURED
        assert outcome.token == MAA_NOT_CONFIGURED
        assert stub.requests == []

    @pytest.mark.asyncio
    async def test_success_decodes_claims(self) -> None:
        """A JSON token response yields an attested outcome with claims."""
        token = make_jwt(
            {"iss": MAA_ENDPOINT, "x-ms-attestation-type": "sevsnpvm"},
            {"alg": "RS256", "jku": f"{MAA_ENDPOINT}/certs", "kid": "k1"},
        )
        stub = SidecarStub(httpx.Response(200, json={"token": token}))
        verification = result()

        outcome = await _client(stub).attest(verification)

        assert outcome.is_attested
        assert outcome.token == token
        assert outcome.claims is not None
        assert outcome.claims["iss"] == MAA_ENDPOINT
        assert outcome.summary is not None
        assert outcome.summary.key_id == "k1"

        request = stub.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://localhost:8080/attest/maa"
        body = msgspec.json.decode(request.content)
        assert body["maa_endpoint"] == MAA_ENDPOINT
        assert body["runtime_data"] == encode_runtime_data(
            compute_proof_hash(verification)
        )

    @pytest.mark.asyncio
    async def test_raw_token_response(self) -> None:
        """Bare JWT bodies are accepted."""
        token = make_jwt({"iss": MAA_ENDPOINT})
        stub = SidecarStub(httpx.Response(200, text=token))

        outcome = await _client(stub).attest(result())

        assert outcome.token == token

    @pytest.mark.asyncio
    async def test_undecodable_claims_still_attested(self) -> None:
        """A token whose segments do not decode keeps the token, drops claims."""
        stub = SidecarStub(httpx.Response(200, json={"token": "a.b.c"}))

        outcome = await _client(stub).attest(result())

        assert outcome.status is AttestationStatus.ATTESTED
        assert outcome.token == "a.b.c"
        assert outcome.claims is None

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, text="internal error"),
            httpx.Response(200, json={"status": "pending"}),
            httpx.Response(200, text=""),
        ],
    )
    @pytest.mark.asyncio
    async def test_sidecar_failures_degrade(self, response: httpx.Response) -> None:
        """Errors and unusable bodies yield MAA_UNAVAILABLE without raising."""
        outcome = await _client(SidecarStub(response)).attest(result())

        assert outcome.status is AttestationStatus.UNAVAILABLE
        assert outcome.token == MAA_UNAVAILABLE
        assert outcome.claims is None

    @pytest.mark.parametrize(
        "error_type",
        [
            httpx.ConnectError,
            httpx.ReadTimeout,
            httpx.DecodingError,
            httpx.TooManyRedirects,
        ],
    )
    @pytest.mark.asyncio
    async def test_request_errors_degrade(
        self, error_type: type[httpx.RequestError]
    ) -> None:
        """Any request-level failure yields MAA_UNAVAILABLE."""

        def _fail(request: httpx.Request) -> httpx.Response:
            msg = "sidecar request failed"
            raise error_type(msg, request=request)

        client = SidecarAttestationClient(
            CONFIGURED,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(_fail)),
        )

        outcome = await client.attest(result())

        assert outcome.status is AttestationStatus.UNAVAILABLE
        assert outcome.token == MAA_UNAVAILABLE


class TestAttestationConfig:
    """Tests for attestation environment configuration."""

    def test_defaults_disable_attestation(self) -> None:
        """No MAA_ENDPOINT means attestation is not configured."""
        config = AttestationConfig.from_env()
        assert not config.is_configured
        assert config.sidecar_url == "http://localhost:8080/attest/maa"

    def test_reads_endpoint_and_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """MAA_ENDPOINT and SKR_PORT are honoured."""
        monkeypatch.setenv("MAA_ENDPOINT", MAA_ENDPOINT)
        monkeypatch.setenv("SKR_PORT", "9443")
        config = AttestationConfig.from_env()
        assert config.maa_endpoint == MAA_ENDPOINT
        assert config.sidecar_url == "http://localhost:9443/attest/maa"

    @pytest.mark.parametrize("raw", ["0", "65536", "eighty", "-1"])
    def test_rejects_invalid_port(
        self, monkeypatch: pytest.MonkeyPatch, raw: str
    ) -> None:
        """SKR_PORT must be an integer in 1-65535."""
        monkeypatch.setenv("SKR_PORT", raw)
        with pytest.raises(AttestationConfigError, match="SKR_PORT"):
            AttestationConfig.from_env()
