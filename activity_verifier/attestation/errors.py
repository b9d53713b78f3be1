"""Attestation errors.

These never escape :meth:`SidecarAttestationClient.attest`; they are logged
and folded into an ``AttestationOutcome``. Lower-level helpers raise them so
callers and tests can tell failure modes apart.
"""

from __future__ import annotations


class AttestationError(Exception):
    """Base class for attestation failures."""


class AttestationUnavailableError(AttestationError):
    """Raised when the SKR sidecar cannot produce a token."""

    @classmethod
    def connection_failed(cls, url: str, detail: str) -> AttestationUnavailableError:
        """Return an error for a sidecar that could not be reached."""
        return cls(f"Failed to connect to SKR sidecar at {url}: {detail}")

    @classmethod
    def timeout(cls, url: str) -> AttestationUnavailableError:
        """Return an error for a sidecar request that timed out."""
        return cls(f"SKR sidecar request timed out: {url}")

    @classmethod
    def http_error(cls, status_code: int, body: str) -> AttestationUnavailableError:
        """Return an error for a non-2xx sidecar response."""
        return cls(f"SKR sidecar returned error {status_code}: {body}")


class InvalidTokenError(AttestationError):
    """Raised when a sidecar response does not hold a usable token."""

    @classmethod
    def empty(cls) -> InvalidTokenError:
        """Return an error for an empty token."""
        return cls("Empty token received from SKR sidecar")

    @classmethod
    def missing_field(cls) -> InvalidTokenError:
        """Return an error for JSON bodies without a token field."""
        return cls("SKR response contains JSON but no recognizable token field")

    @classmethod
    def wrong_segment_count(cls, count: int) -> InvalidTokenError:
        """Return an error for tokens that are not three-part compact JWTs."""
        return cls(f"Invalid JWT format: expected 3 parts, got {count}")

    @classmethod
    def undecodable(cls, detail: str) -> InvalidTokenError:
        """Return an error for a segment that is not base64url JSON."""
        return cls(f"JWT segment could not be decoded: {detail}")


class AttestationConfigError(AttestationError):
    """Raised when attestation environment configuration is invalid."""

    @classmethod
    def invalid_port(cls, raw: str) -> AttestationConfigError:
        """Return an error for an unusable ``SKR_PORT`` value."""
        return cls(f"SKR_PORT must be an integer between 1 and 65535, got {raw!r}")
