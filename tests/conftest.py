"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from tests.helpers.builders import NOW, FrozenClock

_ENV_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "MAA_ENDPOINT",
    "SKR_PORT",
    "HOST",
    "PORT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host environment from leaking into configuration."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> FrozenClock:
    """Return a clock frozen at the shared test instant."""
    return FrozenClock(NOW)
