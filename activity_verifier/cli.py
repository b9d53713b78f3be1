"""Command-line entrypoint running a single verification in-process."""

from __future__ import annotations

import argparse
import asyncio
import sys

import httpx
import msgspec

from activity_verifier.api.factory import build_verification_service
from activity_verifier.attestation.errors import AttestationConfigError
from activity_verifier.github.errors import GitHubError
from activity_verifier.logging import configure_logging
from activity_verifier.verification.errors import ValidationError
from activity_verifier.verification.models import (
    VerificationRequest,
    VerificationType,
)

EXIT_OK = 0
EXIT_GITHUB_FAILURE = 1
EXIT_INVALID_INPUT = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="activity-verifier",
        description="Verify public GitHub activity and print a proof certificate.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="femtologging level (default: no logging configured)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    verify = commands.add_parser("verify", help="Run one verification")
    verify.add_argument("username", help="GitHub username to verify")
    verify.add_argument(
        "verification_type",
        choices=[member.value for member in VerificationType],
        help="Metric to measure",
    )
    verify.add_argument(
        "--threshold",
        type=int,
        default=None,
        help="Threshold to meet (defaults to the metric's standard threshold)",
    )
    return parser


async def _verify(
    request: VerificationRequest, http_client: httpx.AsyncClient | None
) -> bytes:
    if http_client is not None:
        service = build_verification_service(http_client=http_client)
        certificate = await service.verify(request)
    else:
        async with httpx.AsyncClient() as owned_client:
            service = build_verification_service(http_client=owned_client)
            certificate = await service.verify(request)
    return msgspec.json.format(msgspec.json.encode(certificate), indent=2)


def main(
    argv: list[str] | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> int:
    """Run ``activity-verifier verify`` and print the certificate as JSON.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.
    http_client : httpx.AsyncClient | None, optional
        Client used for GitHub and sidecar requests. When omitted a client
        is created for the run and closed afterwards.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when GitHub fails, 2 for invalid input
        or configuration.

    """
    args = _build_parser().parse_args(argv)
    if args.log_level is not None:
        configure_logging(args.log_level, force=True)

    request = VerificationRequest(
        username=args.username,
        verification_type=VerificationType(args.verification_type),
        threshold=args.threshold,
    )
    try:
        output = asyncio.run(_verify(request, http_client))
    except (ValidationError, AttestationConfigError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except GitHubError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_GITHUB_FAILURE

    print(output.decode("utf-8"))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
