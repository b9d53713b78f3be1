"""Request and result structures for activity verification."""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import enum

import msgspec


class VerificationType(enum.StrEnum):
    """Activity metric a verification request is evaluated against."""

    YEARLY_COMMITS = "yearly_commits"
    CONSECUTIVE_DAYS = "consecutive_days"
    TOTAL_STARS = "total_stars"
    PUBLIC_REPOS = "public_repos"

    @property
    def default_threshold(self) -> int:
        """Return the threshold applied when a request does not supply one."""
        return _DEFAULT_THRESHOLDS[self]

    @property
    def uses_events(self) -> bool:
        """Return True when the metric is computed from the events feed."""
        return self in {
            VerificationType.YEARLY_COMMITS,
            VerificationType.CONSECUTIVE_DAYS,
        }


_DEFAULT_THRESHOLDS: dict[VerificationType, int] = {
    VerificationType.YEARLY_COMMITS: 365,
    VerificationType.CONSECUTIVE_DAYS: 100,
    VerificationType.TOTAL_STARS: 1000,
    VerificationType.PUBLIC_REPOS: 10,
}


class VerificationRequest(msgspec.Struct, kw_only=True, frozen=True):
    """A single verification request as accepted by the service.

    Attributes
    ----------
    username
        GitHub handle to verify.
    verification_type
        Metric to evaluate.
    threshold
        Optional explicit threshold; the type default applies when omitted.

    """

    username: str
    verification_type: VerificationType
    threshold: int | None = None


class VerificationResult(msgspec.Struct, kw_only=True, frozen=True):
    """Outcome of evaluating one activity snapshot.

    Attributes
    ----------
    username
        GitHub handle that was verified.
    verification_type
        Metric that was evaluated.
    threshold
        Effective threshold used for the comparison.
    measured_value
        Metric value measured from the snapshot.
    meets_criteria
        ``measured_value >= threshold``.
    computed_at
        UTC instant the metric was computed for.

    """

    username: str
    verification_type: VerificationType
    threshold: int
    measured_value: int
    meets_criteria: bool
    computed_at: dt.datetime
