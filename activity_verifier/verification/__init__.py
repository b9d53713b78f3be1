"""Verification requests, validation and metric evaluation."""

from __future__ import annotations

from .engine import (
    TRAILING_WINDOW,
    count_consecutive_days,
    count_public_repos,
    count_total_stars,
    count_yearly_commits,
    evaluate,
    longest_streak,
    measure,
)
from .errors import ValidationError
from .models import VerificationRequest, VerificationResult, VerificationType
from .validation import (
    MAX_THRESHOLD,
    MAX_USERNAME_LENGTH,
    MIN_THRESHOLD,
    resolve_threshold,
    validate_request,
    validate_threshold,
    validate_username,
)

__all__ = [
    "MAX_THRESHOLD",
    "MAX_USERNAME_LENGTH",
    "MIN_THRESHOLD",
    "TRAILING_WINDOW",
    "ValidationError",
    "VerificationRequest",
    "VerificationResult",
    "VerificationType",
    "count_consecutive_days",
    "count_public_repos",
    "count_total_stars",
    "count_yearly_commits",
    "evaluate",
    "longest_streak",
    "measure",
    "resolve_threshold",
    "validate_request",
    "validate_threshold",
    "validate_username",
]
