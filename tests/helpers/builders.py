"""Builders for activity payloads, results and certificates used in tests."""

from __future__ import annotations

import base64
import datetime as dt
import itertools
import typing as typ

import msgspec

from activity_verifier.attestation.models import AttestationOutcome
from activity_verifier.github.models import (
    ActivitySnapshot,
    GitHubEvent,
    GitHubRepository,
    RepositoryOwner,
)
from activity_verifier.proofs.models import CERTIFICATE_TTL, ProofCertificate
from activity_verifier.verification.models import VerificationResult, VerificationType

NOW = dt.datetime(2024, 6, 15, 12, 0, tzinfo=dt.UTC)

_ids = itertools.count(1)


class FrozenClock:
    """Controllable clock returning a fixed instant until advanced."""

    def __init__(self, now: dt.datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, delta: dt.timedelta) -> None:
        self.now += delta


def isoformat_z(value: dt.datetime) -> str:
    """Render ``value`` the way GitHub does (``2024-01-01T00:00:00Z``)."""
    return value.astimezone(dt.UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def event_payload(
    created_at: dt.datetime,
    *,
    event_type: str = "PushEvent",
    size: int | None = 1,
    commits: int | None = None,
) -> dict[str, typ.Any]:
    """Return an events-feed entry as GitHub serializes it."""
    payload: dict[str, typ.Any] = {}
    if size is not None:
        payload["size"] = size
    if commits is not None:
        payload["commits"] = [{"sha": f"{n:040x}"} for n in range(commits)]
    return {
        "id": str(next(_ids)),
        "type": event_type,
        "created_at": isoformat_z(created_at),
        "payload": payload,
    }


def push_event(created_at: dt.datetime, *, size: int = 1) -> GitHubEvent:
    """Return a decoded push event carrying ``size`` commits."""
    return GitHubEvent(
        id=str(next(_ids)),
        event_type="PushEvent",
        created_at=created_at,
        payload={"size": size},
    )


def repo_payload(
    name: str,
    *,
    owner: str = "octocat",
    stars: int = 0,
    fork: bool = False,
    private: bool = False,
) -> dict[str, typ.Any]:
    """Return a repository listing entry as GitHub serializes it."""
    return {
        "id": next(_ids),
        "name": name,
        "owner": {"login": owner},
        "stargazers_count": stars,
        "fork": fork,
        "private": private,
        "visibility": "private" if private else "public",
    }


def repository(
    name: str,
    *,
    owner: str = "octocat",
    stars: int = 0,
    fork: bool = False,
    private: bool = False,
) -> GitHubRepository:
    """Return a decoded repository."""
    return GitHubRepository(
        id=next(_ids),
        name=name,
        owner=RepositoryOwner(login=owner),
        stargazers_count=stars,
        fork=fork,
        private=private,
        visibility="private" if private else "public",
    )


def snapshot(
    *,
    username: str = "octocat",
    fetched_at: dt.datetime = NOW,
    events: typ.Iterable[GitHubEvent] = (),
    repositories: typ.Iterable[GitHubRepository] = (),
) -> ActivitySnapshot:
    """Return an activity snapshot for the engine."""
    return ActivitySnapshot(
        username=username,
        fetched_at=fetched_at,
        events=tuple(events),
        repositories=tuple(repositories),
    )


def result(**overrides: typ.Any) -> VerificationResult:
    """Return a verification result, overriding any field."""
    fields: dict[str, typ.Any] = {
        "username": "octocat",
        "verification_type": VerificationType.PUBLIC_REPOS,
        "threshold": 10,
        "measured_value": 12,
        "meets_criteria": True,
        "computed_at": NOW,
    }
    fields.update(overrides)
    return VerificationResult(**fields)


def certificate(
    *,
    created_at: dt.datetime = NOW,
    attestation: AttestationOutcome | None = None,
    **overrides: typ.Any,
) -> ProofCertificate:
    """Issue a certificate for a result built from ``overrides``."""
    return ProofCertificate.issue(
        result(**overrides),
        attestation or AttestationOutcome.not_configured(),
        created_at=created_at,
        ttl=CERTIFICATE_TTL,
    )


def _b64url(document: dict[str, typ.Any]) -> str:
    raw = base64.urlsafe_b64encode(msgspec.json.encode(document))
    return raw.decode("ascii").rstrip("=")


def make_jwt(
    claims: dict[str, typ.Any],
    header: dict[str, typ.Any] | None = None,
) -> str:
    """Return an unsigned compact JWT carrying ``claims``."""
    jose = header if header is not None else {"alg": "RS256", "typ": "JWT"}
    return f"{_b64url(jose)}.{_b64url(claims)}.c2lnbmF0dXJl"
