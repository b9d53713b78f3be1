"""Structured lifecycle events for verification runs.

Events are emitted as ``[event-type] key=value`` lines through femtologging
so log aggregators can parse them without a schema registry.
"""

from __future__ import annotations

import enum
import typing as typ

from activity_verifier.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    from activity_verifier.attestation.models import AttestationOutcome
    from activity_verifier.proofs.models import ProofCertificate

    from .models import VerificationRequest

logger = get_logger(__name__)


class VerificationEventType(enum.StrEnum):
    """Structured log event types for verification runs."""

    RUN_STARTED = "verification.run.started"
    RUN_COMPLETED = "verification.run.completed"
    RUN_FAILED = "verification.run.failed"
    ATTESTATION_DEGRADED = "verification.attestation.degraded"


class VerificationEventLogger:
    """Emit verification lifecycle events via femtologging."""

    def log_run_started(self, request: VerificationRequest, threshold: int) -> None:
        """Log the start of a validated verification run."""
        log_info(
            logger,
            "[%s] username=%s verification_type=%s threshold=%d",
            VerificationEventType.RUN_STARTED,
            request.username,
            request.verification_type,
            threshold,
        )

    def log_run_completed(self, certificate: ProofCertificate) -> None:
        """Log a stored certificate with its measured value."""
        log_info(
            logger,
            "[%s] username=%s verification_type=%s measured_value=%d "
            "meets_criteria=%s attestation=%s proof_hash=%s",
            VerificationEventType.RUN_COMPLETED,
            certificate.username,
            certificate.verification_type,
            certificate.measured_value,
            certificate.meets_criteria,
            certificate.attestation_status,
            certificate.proof_hash,
        )

    def log_run_failed(self, request: VerificationRequest, error: Exception) -> None:
        """Log a run aborted before a certificate was issued."""
        log_error(
            logger,
            "[%s] username=%s verification_type=%s error_type=%s error=%s",
            VerificationEventType.RUN_FAILED,
            request.username,
            request.verification_type,
            type(error).__name__,
            error,
        )

    def log_attestation_degraded(
        self, request: VerificationRequest, outcome: AttestationOutcome
    ) -> None:
        """Log a run that completed without a signed attestation token."""
        log_warning(
            logger,
            "[%s] username=%s attestation=%s token=%s",
            VerificationEventType.ATTESTATION_DEGRADED,
            request.username,
            outcome.status,
            outcome.token,
        )
