"""Typed GitHub REST payloads and the per-request activity snapshot."""

from __future__ import annotations

import dataclasses
import datetime as dt
import typing as typ

import msgspec

PUSH_EVENT = "PushEvent"


class GitHubUser(msgspec.Struct, kw_only=True, frozen=True):
    """Subset of ``GET /users/{username}`` used for repository counts."""

    login: str
    id: int
    public_repos: int = 0
    created_at: dt.datetime | None = None


class RepositoryOwner(msgspec.Struct, kw_only=True, frozen=True):
    """Owner reference embedded in repository payloads."""

    login: str


class GitHubRepository(msgspec.Struct, kw_only=True, frozen=True):
    """Subset of a repository listing entry."""

    id: int
    name: str
    owner: RepositoryOwner
    stargazers_count: int = 0
    fork: bool = False
    private: bool = False
    visibility: str = "public"

    @property
    def is_public(self) -> bool:
        """Return True when the repository is publicly visible."""
        return not self.private and self.visibility == "public"

    def is_owned_by(self, username: str) -> bool:
        """Return True when ``username`` owns the repository (case-insensitive)."""
        return self.owner.login.casefold() == username.casefold()


class GitHubEvent(msgspec.Struct, kw_only=True, frozen=True):
    """Entry from the public events feed."""

    id: str
    event_type: str = msgspec.field(name="type")
    created_at: dt.datetime
    payload: dict[str, typ.Any] = msgspec.field(default_factory=dict)

    @property
    def commit_count(self) -> int:
        """Return the number of commits carried by a push event.

        ``size`` is authoritative because the ``commits`` array is truncated
        to 20 entries. Pushes that report neither count as one commit.
        Non-push events carry no commits.
        """
        if self.event_type != PUSH_EVENT:
            return 0
        size = self.payload.get("size")
        if isinstance(size, int) and not isinstance(size, bool) and size >= 0:
            return size
        commits = self.payload.get("commits")
        if isinstance(commits, list):
            return len(commits)
        return 1


@dataclasses.dataclass(frozen=True, slots=True)
class ActivitySnapshot:
    """Raw GitHub data fetched for one verification request.

    Snapshots are built fresh per request and never cached.

    Attributes
    ----------
    username
        GitHub handle the data belongs to.
    fetched_at
        UTC instant the fetch completed; the trailing window ends here.
    events
        Public events, newest first as returned by GitHub.
    repositories
        Repositories returned by the owner listing.
    profile
        User profile, when it was requested.
    repositories_truncated
        True when the listing stopped at the page cap.

    """

    username: str
    fetched_at: dt.datetime
    events: tuple[GitHubEvent, ...] = ()
    repositories: tuple[GitHubRepository, ...] = ()
    profile: GitHubUser | None = None
    repositories_truncated: bool = False

    def events_between(
        self, start: dt.datetime, end: dt.datetime
    ) -> tuple[GitHubEvent, ...]:
        """Return events with ``start <= created_at < end``."""
        return tuple(event for event in self.events if start <= event.created_at < end)

    def activity_dates(
        self, start: dt.datetime, end: dt.datetime
    ) -> frozenset[dt.date]:
        """Return the distinct UTC dates with at least one event in the window."""
        return frozenset(
            event.created_at.astimezone(dt.UTC).date()
            for event in self.events_between(start, end)
        )

    def public_owned_repositories(self) -> tuple[GitHubRepository, ...]:
        """Return public repositories owned by the snapshot user, forks included."""
        return tuple(
            repo
            for repo in self.repositories
            if repo.is_public and repo.is_owned_by(self.username)
        )
