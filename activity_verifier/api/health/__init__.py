"""Liveness and readiness probe resources."""

from activity_verifier.api.health.resources import HealthResource, ReadyResource

__all__ = ["HealthResource", "ReadyResource"]
