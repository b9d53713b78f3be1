"""Environment configuration for the attestation client."""

from __future__ import annotations

import dataclasses
import os

from .errors import AttestationConfigError

_DEFAULT_SKR_HOST = "localhost"
_DEFAULT_SKR_PORT = 8080
_DEFAULT_TIMEOUT_S = 30.0
_MIN_PORT = 1
_MAX_PORT = 65535


@dataclasses.dataclass(frozen=True, slots=True)
class AttestationConfig:
    """Configuration for requesting MAA tokens through the SKR sidecar.

    Attributes
    ----------
    maa_endpoint
        Microsoft Azure Attestation endpoint forwarded to the sidecar. When
        ``None`` attestation is disabled and outcomes are
        ``MAA_NOT_CONFIGURED``.
    skr_host
        Host the sidecar listens on.
    skr_port
        Port the sidecar listens on.
    timeout_s
        Timeout for the single sidecar request.

    """

    maa_endpoint: str | None = None
    skr_host: str = _DEFAULT_SKR_HOST
    skr_port: int = _DEFAULT_SKR_PORT
    timeout_s: float = _DEFAULT_TIMEOUT_S

    @property
    def is_configured(self) -> bool:
        """Return True when an MAA endpoint is set."""
        return bool(self.maa_endpoint)

    @property
    def sidecar_url(self) -> str:
        """Return the sidecar's MAA attestation URL."""
        return f"http://{self.skr_host}:{self.skr_port}/attest/maa"

    @staticmethod
    def _parse_port_from_env() -> int:
        raw = os.environ.get("SKR_PORT")
        if raw is None or not raw.strip():
            return _DEFAULT_SKR_PORT
        try:
            port = int(raw)
        except ValueError as exc:
            raise AttestationConfigError.invalid_port(raw) from exc
        if not _MIN_PORT <= port <= _MAX_PORT:
            raise AttestationConfigError.invalid_port(raw)
        return port

    @classmethod
    def from_env(cls) -> AttestationConfig:
        """Build configuration from ``MAA_ENDPOINT`` and ``SKR_PORT``.

        Raises
        ------
        AttestationConfigError
            If ``SKR_PORT`` is set but not a valid port number.

        """
        endpoint = os.environ.get("MAA_ENDPOINT", "").strip() or None
        return cls(maa_endpoint=endpoint, skr_port=cls._parse_port_from_env())
