# src/groupfinder/scripts/admin.py
"""
Command-line admin console for reviewing submissions.

Examples:
    groupfinder-admin list --status pending
    groupfinder-admin approve 42 --notes "Active, well moderated"
    groupfinder-admin reject 43 --notes duplicate
    groupfinder-admin delist 42
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from typing import Any

from groupfinder.core.logging import configure_logging
from groupfinder.core.settings import settings
from groupfinder.models.submission import SubmissionStatus
from groupfinder.schemas.results import ActionFailure, ActionResult
from groupfinder.services.admin_actions import failure_for
from groupfinder.services.authz import Caller
from groupfinder.services.container import ServiceContainer, build_container
from groupfinder.services.errors import SubmissionError

CLI_CALLER = Caller(user_id="cli", role="admin")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="groupfinder-admin", description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List submissions by status")
    list_cmd.add_argument(
        "--status",
        choices=[s.value for s in SubmissionStatus],
        default=SubmissionStatus.PENDING.value,
    )

    for name in ("approve", "reject"):
        cmd = commands.add_parser(name, help=f"{name.capitalize()} a pending submission")
        cmd.add_argument("submission_id", type=int)
        cmd.add_argument("--notes", default=None)

    for name in ("delist", "delete"):
        cmd = commands.add_parser(name, help=f"{name.capitalize()} a submission")
        cmd.add_argument("submission_id", type=int)

    return parser


async def run_command(
    args: argparse.Namespace, container: ServiceContainer
) -> ActionResult | list[dict[str, Any]]:
    """Execute one parsed command against ``container``."""
    if args.command == "list":
        try:
            submissions = await container.repository.list_by_status(args.status)
        except SubmissionError as err:
            return failure_for(err)
        return [s.model_dump(mode="json") for s in submissions]

    admin = container.admin
    if args.command == "approve":
        return await admin.approve(CLI_CALLER, args.submission_id, args.notes)
    if args.command == "reject":
        return await admin.reject(CLI_CALLER, args.submission_id, args.notes)
    if args.command == "delist":
        return await admin.delist(CLI_CALLER, args.submission_id)
    return await admin.delete(CLI_CALLER, args.submission_id)


async def _main(args: argparse.Namespace) -> int:
    container = build_container(settings)
    try:
        outcome = await run_command(args, container)
    finally:
        await container.stop()

    if isinstance(outcome, list):
        print(json.dumps(outcome, indent=2))
        return 0
    print(json.dumps(outcome.model_dump(mode="json"), indent=2))
    return 1 if isinstance(outcome, ActionFailure) else 0


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging(settings.log_level)
    args = build_parser().parse_args(argv)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
