#!/usr/bin/env python3
"""
Snapshot CLI -- Liquidity Position Snapshot Reporter
=====================================================

Console reports over the Upheaval Finance exchange subgraph (HyperEVM).
Every report looks back over a rolling 7-day window.

Usage:
  python run.py pool                                   Pool info + positions + snapshots (default pool)
  python run.py pool   --pool <0x…>                    Same, for another pool
  python run.py token                                  Snapshots for all K-HYPE pools
  python run.py token  --token <0x…>                   Snapshots for all pools holding a token
  python run.py users                                  K-HYPE snapshots for the configured users
  python run.py users  --user <0x…> --user <0x…>       Same, for an explicit allow-list
  python run.py info                                   Endpoints + default targets

Sources:
  Upheaval subgraph : https://api.upheaval.fi/subgraphs/name/upheaval/exchange-v3
  Uniswap V3 schema : https://github.com/Uniswap/v3-subgraph/blob/main/schema.graphql
"""

import sys
import asyncio
import argparse
from pathlib import Path

# ── Imports ───────────────────────────────────────────────────────────────

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from snapshot_cli.central_config import PROJECT_VERSION
from snapshot_cli.commands import (
    cmd_info,
    cmd_pool,
    cmd_token,
    cmd_users,
)


# ── CLI Parser ────────────────────────────────────────────────────────────


def positive_int(value: str) -> int:
    """argparse type for window lengths: whole number of days, at least 1."""
    try:
        days = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid day count: {value!r}")
    if days < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1 day, got {days}")
    return days


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snapshot-cli",
        description=f"Snapshot CLI v{PROJECT_VERSION} — Liquidity Position Snapshot Reporter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py pool                                   Default pool, last 7 days
  python run.py pool  --pool 0xc06e…                   Another pool
  python run.py pool  --days 3                         Shorter window
  python run.py token                                  All K-HYPE pools
  python run.py users --user 0x0625…                   One user across K-HYPE pools
  python run.py info                                   Endpoints + default targets

Every subcommand runs with no flags using the configured targets
(see snapshot_cli/central_config.py).
""",
    )
    parser.add_argument(
        "--version", action="version", version=f"Snapshot CLI v{PROJECT_VERSION}"
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    pool_p = sub.add_parser(
        "pool", help="Pool info, current positions and recent snapshots"
    )
    pool_p.add_argument(
        "--pool", type=str, default=None, help="Pool id (0x…) (default: configured pool)"
    )

    token_p = sub.add_parser(
        "token", help="Snapshots for every pool holding a token"
    )
    token_p.add_argument(
        "--token", type=str, default=None, help="Token id (0x…) (default: K-HYPE)"
    )

    users_p = sub.add_parser(
        "users", help="Token snapshots restricted to an owner allow-list"
    )
    users_p.add_argument(
        "--token", type=str, default=None, help="Token id (0x…) (default: K-HYPE)"
    )
    users_p.add_argument(
        "--user",
        type=str,
        action="append",
        default=None,
        help="Owner address to keep; repeatable (default: configured users)",
    )

    for p in (pool_p, token_p, users_p):
        p.add_argument(
            "--days",
            type=positive_int,
            default=None,
            help="Lookback window in days, at least 1 (default: 7)",
        )

    sub.add_parser("info", help="Endpoints, default targets and settings")

    return parser


# ── Main ──────────────────────────────────────────────────────────────────


def main() -> int:
    try:
        return _dispatch()
    except KeyboardInterrupt:
        print("\n❌ Cancelled.")
        return 130


def _dispatch() -> int:
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "info":
        cmd_info()
        return 0

    # Fetch failures are reported on the console; the exit status stays 0
    if args.command == "pool":
        asyncio.run(cmd_pool(pool_id=args.pool, days=args.days))
        return 0
    if args.command == "token":
        asyncio.run(cmd_token(token_id=args.token, days=args.days))
        return 0
    if args.command == "users":
        asyncio.run(cmd_users(token_id=args.token, users=args.user, days=args.days))
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
