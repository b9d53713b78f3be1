"""Falcon resources for running verifications and retrieving proofs.

``POST /api/verify`` runs one verification and answers with the summary a
client needs to present the proof. ``GET /proof/{proof_hash}`` returns the
stored certificate while it is live.

Usage
-----
Register the resources on the Falcon app::

    app.add_route("/api/verify", VerifyResource(service))
    app.add_route("/proof/{proof_hash}", ProofResource(service))

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

from activity_verifier.api.errors import InvalidInputError
from activity_verifier.verification.models import (
    VerificationRequest,
    VerificationType,
)

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from activity_verifier.proofs.models import ProofCertificate
    from activity_verifier.verification.service import VerificationService

__all__ = [
    "ProofResource",
    "VerifyRequestBody",
    "VerifyResource",
    "serialize_certificate",
    "serialize_verification",
]


class VerifyRequestBody(msgspec.Struct, kw_only=True, frozen=True):
    """JSON body accepted by ``POST /api/verify``."""

    github_username: str
    verification_type: VerificationType
    threshold: int | None = None

    def to_request(self) -> VerificationRequest:
        """Return the domain request carried by this body."""
        return VerificationRequest(
            username=self.github_username,
            verification_type=self.verification_type,
            threshold=self.threshold,
        )


def _decode_body(media: object) -> VerifyRequestBody:
    """Convert decoded JSON media into a :class:`VerifyRequestBody`.

    Raises
    ------
    InvalidInputError
        If the body is missing, not an object, or has fields of the wrong
        type.

    """
    if media is None:
        msg = "Request body is required"
        raise InvalidInputError(msg)
    try:
        return msgspec.convert(media, type=VerifyRequestBody)
    except msgspec.ValidationError as exc:
        raise InvalidInputError(str(exc)) from exc


def serialize_verification(certificate: ProofCertificate) -> dict[str, typ.Any]:
    """Serialize a certificate to the verify endpoint's response shape.

    ``verified_at`` is the instant the metric was computed, which is also
    the instant bound into the proof hash.
    """
    body: dict[str, typ.Any] = {
        "username": certificate.username,
        "verification_type": certificate.verification_type.value,
        "threshold": certificate.threshold,
        "measured_value": certificate.measured_value,
        "meets_criteria": certificate.meets_criteria,
        "attestation_token": certificate.attestation_token,
        "verified_at": certificate.computed_at.isoformat(),
        "proof_hash": certificate.proof_hash,
    }
    if certificate.attestation_claims is not None:
        body["attestation_claims"] = certificate.attestation_claims
    return body


def serialize_certificate(certificate: ProofCertificate) -> dict[str, typ.Any]:
    """Serialize the full certificate to JSON-compatible builtins."""
    return msgspec.to_builtins(certificate)


class VerifyResource:
    """Resource for ``POST /api/verify``."""

    def __init__(self, service: VerificationService) -> None:
        """Configure the resource with the verification service."""
        self._service = service

    async def on_post(self, req: Request, resp: Response) -> None:
        """Run a verification described by the JSON request body.

        Parameters
        ----------
        req
            Falcon request whose body holds ``github_username``,
            ``verification_type`` and an optional ``threshold``.
        resp
            Falcon response populated with the verification summary.

        """
        try:
            media = await req.get_media(default_when_empty=None)
        except falcon.MediaMalformedError as exc:
            msg = "Request body is not valid JSON"
            raise InvalidInputError(msg) from exc
        body = _decode_body(media)
        certificate = await self._service.verify(body.to_request())
        resp.media = serialize_verification(certificate)
        resp.status = falcon.HTTP_200


class ProofResource:
    """Resource for ``GET /proof/{proof_hash}``."""

    def __init__(self, service: VerificationService) -> None:
        """Configure the resource with the verification service."""
        self._service = service

    async def on_get(self, _req: Request, resp: Response, *, proof_hash: str) -> None:
        """Return the live certificate stored under ``proof_hash``."""
        certificate = self._service.get_proof(proof_hash)
        resp.media = serialize_certificate(certificate)
        resp.status = falcon.HTTP_200
