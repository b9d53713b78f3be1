"""In-memory proof certificate store with a fixed time-to-live.

The store is created once per process and injected into the verification
service. Expiry is lazy: reads treat expired entries as absent and remove
them, and writes opportunistically sweep the whole mapping.

Usage
-----
>>> store = InMemoryProofStore()
>>> store.put(certificate)
>>> store.get(certificate.proof_hash) == certificate
True

"""

from __future__ import annotations

import dataclasses
import threading
import typing as typ

from activity_verifier.common.time import Clock, utcnow
from activity_verifier.logging import get_logger, log_debug

from .errors import ProofNotFoundError
from .hashing import is_valid_proof_hash

if typ.TYPE_CHECKING:
    import datetime as dt

    from .models import ProofCertificate

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class ProofStoreStats:
    """Point-in-time counts of stored certificates."""

    total: int
    valid: int
    expired: int


@typ.runtime_checkable
class ProofStore(typ.Protocol):
    """Storage interface used by the verification service."""

    def put(self, certificate: ProofCertificate) -> None:
        """Store ``certificate`` under its proof hash."""
        ...

    def get(self, proof_hash: str) -> ProofCertificate:
        """Return the live certificate for ``proof_hash``.

        Raises
        ------
        ProofNotFoundError
            If the hash is malformed, unknown, or expired.

        """
        ...


class InMemoryProofStore:
    """Thread-safe dictionary-backed :class:`ProofStore`.

    Parameters
    ----------
    clock
        Source of the current UTC time; tests inject a controllable clock.

    """

    def __init__(self, *, clock: Clock = utcnow) -> None:
        """Create an empty store."""
        self._clock = clock
        self._lock = threading.Lock()
        self._proofs: dict[str, ProofCertificate] = {}

    def __len__(self) -> int:
        """Return the number of stored entries, expired ones included."""
        with self._lock:
            return len(self._proofs)

    def put(self, certificate: ProofCertificate) -> None:
        """Store ``certificate``, replacing any entry with the same hash."""
        with self._lock:
            self._proofs[certificate.proof_hash] = certificate
            purged = self._purge_locked(self._clock())
        if purged:
            log_debug(logger, "Purged %d expired proofs", purged)
        log_debug(
            logger,
            "Stored proof %s (expires at %s)",
            certificate.proof_hash,
            certificate.expires_at.isoformat(),
        )

    def get(self, proof_hash: str) -> ProofCertificate:
        """Return the live certificate for ``proof_hash``.

        Raises
        ------
        ProofNotFoundError
            If the hash is malformed, unknown, or expired.

        """
        if not is_valid_proof_hash(proof_hash):
            raise ProofNotFoundError(proof_hash, malformed=True)

        with self._lock:
            certificate = self._proofs.get(proof_hash)
            if certificate is None:
                raise ProofNotFoundError(proof_hash)
            if certificate.is_expired(self._clock()):
                del self._proofs[proof_hash]
                log_debug(logger, "Proof %s expired; removed", proof_hash)
                raise ProofNotFoundError(proof_hash)
            return certificate

    def purge_expired(self) -> int:
        """Remove every expired entry and return how many were removed."""
        with self._lock:
            return self._purge_locked(self._clock())

    def stats(self) -> ProofStoreStats:
        """Return total, valid and expired entry counts."""
        now = self._clock()
        with self._lock:
            expired = sum(1 for cert in self._proofs.values() if cert.is_expired(now))
            total = len(self._proofs)
        return ProofStoreStats(total=total, valid=total - expired, expired=expired)

    def _purge_locked(self, now: dt.datetime) -> int:
        expired = [key for key, cert in self._proofs.items() if cert.is_expired(now)]
        for key in expired:
            del self._proofs[key]
        return len(expired)
