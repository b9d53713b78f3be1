"""Request MAA attestation tokens through the local SKR sidecar.

The sidecar brokers with Microsoft Azure Attestation on behalf of this
process: it gathers the hardware evidence, embeds the runtime data supplied
here, and returns the signed token. Runtime data binds the token to one
verification by carrying the result's proof hash.
"""

from __future__ import annotations

import base64
import typing as typ

import httpx
import msgspec

from activity_verifier.logging import (
    get_logger,
    log_debug,
    log_error,
    log_info,
    log_warning,
)
from activity_verifier.proofs.hashing import compute_proof_hash

from .claims import decode_claims, decode_header, extract_token, summarize_claims
from .errors import AttestationUnavailableError, InvalidTokenError
from .models import AttestationOutcome

if typ.TYPE_CHECKING:
    from activity_verifier.verification.models import VerificationResult

    from .config import AttestationConfig

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
_BODY_PREVIEW_LIMIT = 200


@typ.runtime_checkable
class AttestationClient(typ.Protocol):
    """Interface for attesting a verification result."""

    async def attest(self, result: VerificationResult) -> AttestationOutcome:
        """Return the attestation outcome for ``result``.

        Implementations never raise for sidecar or service failures; those
        are reported as an unavailable outcome.
        """
        ...

    async def aclose(self) -> None:
        """Release any HTTP resources held by the client."""
        ...


def encode_runtime_data(proof_hash: str) -> str:
    """Return the base64 runtime data document binding ``proof_hash``."""
    document = msgspec.json.encode({"proof_data_hash": proof_hash})
    return base64.standard_b64encode(document).decode("ascii")


class SidecarAttestationClient:
    """SKR sidecar implementation of :class:`AttestationClient`.

    A single request is made per verification. Sidecar failures point at a
    deployment problem rather than a transient one, so they are not retried.

    Parameters
    ----------
    config
        Attestation configuration.
    http_client
        Optional ``httpx.AsyncClient`` for testing. When omitted the instance
        creates and owns its client.

    """

    def __init__(
        self,
        config: AttestationConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with configuration."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    @property
    def config(self) -> AttestationConfig:
        """Read-only access to the client configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def attest(self, result: VerificationResult) -> AttestationOutcome:
        """Attest ``result``, folding every failure into the outcome."""
        if not self._config.is_configured:
            log_debug(logger, "MAA endpoint not configured; skipping attestation")
            return AttestationOutcome.not_configured()

        proof_hash = compute_proof_hash(result)
        try:
            token = await self.request_token(proof_hash)
        except (AttestationUnavailableError, InvalidTokenError) as exc:
            log_error(logger, "MAA attestation failed: %s", exc)
            return AttestationOutcome.unavailable()

        try:
            claims = decode_claims(token)
            header = decode_header(token)
        except InvalidTokenError as exc:
            log_warning(logger, "Failed to parse JWT claims: %s", exc)
            return AttestationOutcome.attested(token, None, None)

        log_info(logger, "Obtained MAA attestation token for proof %s", proof_hash)
        return AttestationOutcome.attested(
            token, claims, summarize_claims(claims, header)
        )

    async def request_token(self, proof_hash: str) -> str:
        """Ask the sidecar for a token bound to ``proof_hash``.

        Raises
        ------
        AttestationUnavailableError
            If the sidecar cannot be reached or answers with an error.
        InvalidTokenError
            If the response holds no usable token.

        """
        url = self._config.sidecar_url
        payload = {
            "maa_endpoint": self._config.maa_endpoint,
            "runtime_data": encode_runtime_data(proof_hash),
        }
        log_debug(logger, "Calling SKR sidecar at %s", url)
        try:
            response = await self._client.post(
                url, json=payload, timeout=self._config.timeout_s
            )
        except httpx.TimeoutException as exc:
            raise AttestationUnavailableError.timeout(url) from exc
        except httpx.RequestError as exc:
            raise AttestationUnavailableError.connection_failed(url, str(exc)) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise AttestationUnavailableError.http_error(
                response.status_code, response.text[:_BODY_PREVIEW_LIMIT]
            )
        return extract_token(response.text)
