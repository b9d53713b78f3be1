"""Decode MAA token claims for display.

Tokens are compact JWTs (``header.payload.signature``). Signatures are not
verified here: consumers holding the issuer's keys (published at the ``jku``
URL) verify authenticity. This module only extracts what the token says.

Examples
--------
>>> token = "eyJhbGciOiJub25lIn0.eyJpc3MiOiJodHRwczovL21hYS5leGFtcGxlIn0.sig"
>>> decode_claims(token)
{'iss': 'https://maa.example'}

"""

from __future__ import annotations

import base64
import binascii
import typing as typ

import msgspec

from .errors import InvalidTokenError
from .models import ClaimsSummary

_JWT_SEGMENTS = 3


def split_token(token: str) -> tuple[str, str, str]:
    """Split a compact JWT into its three segments."""
    parts = token.split(".")
    if len(parts) != _JWT_SEGMENTS:
        raise InvalidTokenError.wrong_segment_count(len(parts))
    header, payload, signature = parts
    return header, payload, signature


def _decode_segment(segment: str) -> dict[str, typ.Any]:
    padded = segment + "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise InvalidTokenError.undecodable(str(exc)) from exc
    try:
        decoded = msgspec.json.decode(raw)
    except msgspec.DecodeError as exc:
        raise InvalidTokenError.undecodable(str(exc)) from exc
    if not isinstance(decoded, dict):
        raise InvalidTokenError.undecodable("segment is not a JSON object")
    return decoded


def decode_header(token: str) -> dict[str, typ.Any]:
    """Return the decoded JOSE header of ``token``."""
    header, _, _ = split_token(token)
    return _decode_segment(header)


def decode_claims(token: str) -> dict[str, typ.Any]:
    """Return the decoded claim set of ``token`` without verifying it."""
    _, payload, _ = split_token(token)
    return _decode_segment(payload)


def _str_or_none(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _int_or_none(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


def summarize_claims(
    claims: dict[str, typ.Any],
    header: dict[str, typ.Any] | None = None,
) -> ClaimsSummary:
    """Extract the display subset of ``claims``.

    Key references (``jku``, ``kid``) live in the JOSE header for MAA tokens;
    ``header`` is consulted first and the claim set second.
    """
    key_source = {**claims, **(header or {})}
    runtime = claims.get("x-ms-runtime")
    return ClaimsSummary(
        issuer=_str_or_none(claims.get("iss")),
        attestation_type=_str_or_none(claims.get("x-ms-attestation-type")),
        compliance_status=_str_or_none(claims.get("x-ms-compliance-status")),
        issued_at=_int_or_none(claims.get("iat")),
        expires_at=_int_or_none(claims.get("exp")),
        jwks_url=_str_or_none(key_source.get("jku")),
        key_id=_str_or_none(key_source.get("kid")),
        policy_hash=_str_or_none(claims.get("x-ms-policy-hash")),
        runtime_data=runtime if isinstance(runtime, dict) else None,
    )


def extract_token(body: str) -> str:
    """Return the token carried by a sidecar response body.

    The sidecar answers either with JSON holding ``token`` or
    ``attestation_token``, or with the bare compact JWT.

    Raises
    ------
    InvalidTokenError
        If no token can be found or the bare body is not a three-part JWT.

    """
    text = body.strip()
    if not text:
        raise InvalidTokenError.empty()

    try:
        parsed = msgspec.json.decode(text)
    except msgspec.DecodeError:
        parsed = None

    if isinstance(parsed, dict):
        for field in ("token", "attestation_token"):
            candidate = parsed.get(field)
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
        raise InvalidTokenError.missing_field()

    split_token(text)
    return text
