"""Input validation for verification requests.

GitHub handles are 1-39 characters of ASCII letters, digits and single
hyphens, and may not begin or end with a hyphen. Thresholds are bounded so a
request can never ask for an unbounded amount of evidence.

Examples
--------
>>> validate_username("octo-cat")
'octo-cat'
>>> resolve_threshold(VerificationType.TOTAL_STARS, None)
1000

"""

from __future__ import annotations

import re

from .errors import ValidationError
from .models import VerificationRequest, VerificationType

MAX_USERNAME_LENGTH = 39
MIN_THRESHOLD = 1
MAX_THRESHOLD = 10_000

_USERNAME_PATTERN = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,37}[A-Za-z0-9])?")


def validate_username(username: str) -> str:
    """Return ``username`` unchanged when it is a valid GitHub handle.

    Raises
    ------
    ValidationError
        If the handle is empty, too long, or malformed.

    """
    if not username or len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError.username_length()
    if _USERNAME_PATTERN.fullmatch(username) is None:
        raise ValidationError.username_format()
    if "--" in username:
        raise ValidationError.username_double_hyphen()
    return username


def validate_threshold(threshold: int) -> int:
    """Return ``threshold`` when it lies within the accepted range."""
    # bool is an int subclass; True must not pass as threshold 1
    if (
        isinstance(threshold, bool)
        or not isinstance(threshold, int)
        or not MIN_THRESHOLD <= threshold <= MAX_THRESHOLD
    ):
        raise ValidationError.threshold_range(MIN_THRESHOLD, MAX_THRESHOLD)
    return threshold


def resolve_threshold(
    verification_type: VerificationType, threshold: int | None
) -> int:
    """Return the effective, validated threshold for a request."""
    if threshold is None:
        return verification_type.default_threshold
    return validate_threshold(threshold)


def validate_request(request: VerificationRequest) -> int:
    """Validate a request and return its effective threshold.

    Parameters
    ----------
    request
        Request to validate.

    Returns
    -------
    int
        Threshold to evaluate against.

    Raises
    ------
    ValidationError
        If the username or threshold is invalid.

    """
    validate_username(request.username)
    return resolve_threshold(request.verification_type, request.threshold)
