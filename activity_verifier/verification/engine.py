"""Pure metric computation over an activity snapshot.

Every metric is measured over the trailing 365-day window ending at ``now``
(inclusive start, exclusive end) and compared with ``>=`` against the
threshold. Nothing here performs I/O, so identical inputs always produce
identical results.
"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import typing as typ

from activity_verifier.common.time import ensure_utc

from .models import VerificationResult, VerificationType

if typ.TYPE_CHECKING:
    from activity_verifier.github.models import ActivitySnapshot

TRAILING_WINDOW = dt.timedelta(days=365)

_ONE_DAY = dt.timedelta(days=1)


def window_bounds(now: dt.datetime) -> tuple[dt.datetime, dt.datetime]:
    """Return ``(start, end)`` of the trailing window ending at ``now``."""
    return (now - TRAILING_WINDOW, now)


def count_yearly_commits(snapshot: ActivitySnapshot, now: dt.datetime) -> int:
    """Return the number of commits pushed within the trailing window."""
    start, end = window_bounds(now)
    return sum(event.commit_count for event in snapshot.events_between(start, end))


def longest_streak(dates: cabc.Iterable[dt.date]) -> int:
    """Return the length of the longest run of consecutive calendar dates.

    Examples
    --------
    >>> longest_streak(
    ...     [dt.date(2024, 1, 1), dt.date(2024, 1, 2), dt.date(2024, 1, 3),
    ...      dt.date(2024, 1, 5)]
    ... )
    3
    >>> longest_streak([])
    0

    """
    ordered = sorted(set(dates))
    if not ordered:
        return 0

    best = current = 1
    for previous, day in zip(ordered, ordered[1:], strict=False):
        current = current + 1 if day - previous == _ONE_DAY else 1
        best = max(best, current)
    return best


def count_consecutive_days(snapshot: ActivitySnapshot, now: dt.datetime) -> int:
    """Return the longest daily activity streak within the trailing window."""
    start, end = window_bounds(now)
    return longest_streak(snapshot.activity_dates(start, end))


def count_total_stars(snapshot: ActivitySnapshot) -> int:
    """Return stars summed over public repositories owned by the user."""
    return sum(repo.stargazers_count for repo in snapshot.public_owned_repositories())


def count_public_repos(snapshot: ActivitySnapshot) -> int:
    """Return the number of public repositories owned by the user.

    A listing cut short by the page cap undercounts, so the profile's
    ``public_repos`` figure wins when it is larger.
    """
    listed = len(snapshot.public_owned_repositories())
    if snapshot.repositories_truncated and snapshot.profile is not None:
        return max(listed, snapshot.profile.public_repos)
    return listed


def measure(
    snapshot: ActivitySnapshot,
    verification_type: VerificationType,
    now: dt.datetime,
) -> int:
    """Return the metric value of ``verification_type`` for ``snapshot``."""
    match verification_type:
        case VerificationType.YEARLY_COMMITS:
            return count_yearly_commits(snapshot, now)
        case VerificationType.CONSECUTIVE_DAYS:
            return count_consecutive_days(snapshot, now)
        case VerificationType.TOTAL_STARS:
            return count_total_stars(snapshot)
        case VerificationType.PUBLIC_REPOS:
            return count_public_repos(snapshot)
    msg = f"unsupported verification type: {verification_type!r}"
    raise ValueError(msg)


def evaluate(
    snapshot: ActivitySnapshot,
    verification_type: VerificationType,
    threshold: int,
    *,
    now: dt.datetime | None = None,
) -> VerificationResult:
    """Evaluate ``snapshot`` against ``threshold`` for one metric.

    Parameters
    ----------
    snapshot
        Activity fetched for the user.
    verification_type
        Metric to measure.
    threshold
        Effective threshold; the result meets the criteria when the measured
        value is greater than or equal to it.
    now
        End of the trailing window and the result's ``computed_at``.
        Defaults to ``snapshot.fetched_at``.

    Returns
    -------
    VerificationResult
        Immutable result carrying the measured value.

    """
    instant = ensure_utc(now if now is not None else snapshot.fetched_at, field="now")
    measured_value = measure(snapshot, verification_type, instant)
    return VerificationResult(
        username=snapshot.username,
        verification_type=verification_type,
        threshold=threshold,
        measured_value=measured_value,
        meets_criteria=measured_value >= threshold,
        computed_at=instant,
    )
