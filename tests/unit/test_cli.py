"""Unit tests for the activity-verifier command line."""

from __future__ import annotations

import msgspec
import pytest

from activity_verifier.cli import (
    EXIT_GITHUB_FAILURE,
    EXIT_INVALID_INPUT,
    EXIT_OK,
    main,
)
from tests.helpers.builders import repo_payload
from tests.helpers.github_stub import GitHubStub


@pytest.fixture
def github() -> GitHubStub:
    """GitHub double with two public repositories."""
    return GitHubStub(
        repos=[repo_payload("alpha", stars=30), repo_payload("beta", stars=12)]
    )


def test_verify_prints_certificate(
    github: GitHubStub, capsys: pytest.CaptureFixture[str]
) -> None:
    """A successful run prints the certificate as JSON and exits 0."""
    code = main(
        ["verify", "octocat", "total_stars", "--threshold", "40"],
        http_client=github.client(),
    )

    assert code == EXIT_OK
    certificate = msgspec.json.decode(capsys.readouterr().out)
    assert certificate["measured_value"] == 42
    assert certificate["meets_criteria"] is True
    assert certificate["attestation_token"] == "MAA_NOT_CONFIGURED"
    assert len(certificate["proof_hash"]) == 64


def test_invalid_username_exits_2(
    github: GitHubStub, capsys: pytest.CaptureFixture[str]
) -> None:
    """Validation failures exit 2 without contacting GitHub."""
    code = main(["verify", "bad--name", "public_repos"], http_client=github.client())

    assert code == EXIT_INVALID_INPUT
    assert "consecutive hyphens" in capsys.readouterr().err
    assert github.requests == []


def test_invalid_skr_port_exits_2(
    github: GitHubStub, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Broken attestation configuration is reported as invalid input."""
    monkeypatch.setenv("SKR_PORT", "not-a-port")

    code = main(["verify", "octocat", "public_repos"], http_client=github.client())

    assert code == EXIT_INVALID_INPUT


def test_unknown_user_exits_1(capsys: pytest.CaptureFixture[str]) -> None:
    """GitHub failures exit 1."""
    stub = GitHubStub(username="someone-else")

    code = main(["verify", "octocat", "total_stars"], http_client=stub.client())

    assert code == EXIT_GITHUB_FAILURE
    assert "not found" in capsys.readouterr().err


def test_unknown_verification_type_is_rejected_by_parser() -> None:
    """argparse refuses types outside the supported set."""
    with pytest.raises(SystemExit) as excinfo:
        main(["verify", "octocat", "lines_of_code"])
    assert excinfo.value.code == 2
