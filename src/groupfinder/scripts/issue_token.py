# src/groupfinder/scripts/issue_token.py
"""Mint a bearer token for local development and manual testing."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from groupfinder.core.security import ADMIN_ROLE, create_access_token


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("user_id", help="Subject to embed in the token")
    parser.add_argument("--admin", action="store_true", help="Grant the admin role")
    parser.add_argument("--minutes", type=int, default=None, help="Token lifetime")
    args = parser.parse_args(argv)

    token = create_access_token(
        args.user_id,
        role=ADMIN_ROLE if args.admin else None,
        expires_minutes=args.minutes,
    )
    print(token)


if __name__ == "__main__":
    main()
