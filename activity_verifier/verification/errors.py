"""Errors raised while validating verification requests."""

from __future__ import annotations


class ValidationError(ValueError):
    """Raised when a verification request fails local validation.

    Attributes
    ----------
    field
        Name of the request field that was rejected.
    reason
        Human-readable description of the problem.

    """

    def __init__(self, reason: str, *, field: str) -> None:
        """Initialise with the rejected field and the reason."""
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")

    @classmethod
    def username_length(cls) -> ValidationError:
        """Return an error for usernames outside 1-39 characters."""
        return cls(
            "GitHub username must be between 1 and 39 characters",
            field="username",
        )

    @classmethod
    def username_format(cls) -> ValidationError:
        """Return an error for usernames with invalid characters or hyphens."""
        return cls(
            "GitHub username must contain only alphanumeric characters and "
            "hyphens, and cannot start or end with a hyphen",
            field="username",
        )

    @classmethod
    def username_double_hyphen(cls) -> ValidationError:
        """Return an error for usernames containing ``--``."""
        return cls(
            "GitHub username cannot contain consecutive hyphens",
            field="username",
        )

    @classmethod
    def threshold_range(cls, minimum: int, maximum: int) -> ValidationError:
        """Return an error for thresholds outside the accepted range."""
        return cls(
            f"Threshold must be between {minimum} and {maximum}",
            field="threshold",
        )
