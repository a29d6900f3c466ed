"""
Snapshot CLI — Command Implementations
=======================================

All CLI command handlers live here, keeping run.py as a thin
argparse dispatcher. Each public function corresponds to a
subcommand (pool, token, users, info).

Every report runs the same pipeline: fetch → group → aggregate → print.
A fetch failure is reported and the report stops; it is never salvaged
from partial results.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Sequence

from snapshot_cli.central_config import PROJECT_VERSION, PROJECT_NAME, config
from snapshot_cli.subgraph_client import SubgraphClient, seven_days_ago


# ── Commands ─────────────────────────────────────────────────────────────


def cmd_info() -> None:
    """Display endpoints, report targets and display settings."""
    print(f"\n📊 {PROJECT_NAME} v{PROJECT_VERSION}")
    print("=" * 55)
    print("🔗 Protocol   : Upheaval Finance (Uniswap V3 fork) on HyperEVM")
    print(f"📡 Subgraph   : {config.api.exchange_url()}")
    print(f"📡 Filtered   : {config.api.fixed_url()}")
    print()
    print("🎯 Default targets:")
    print(f"   pool  → {config.targets.POOL_ID}")
    print(f"   token → {config.targets.KHYPE_TOKEN_ID} (K-HYPE)")
    print(f"   users → {', '.join(config.targets.FILTER_USERS)}")
    print()
    print("⚙️  Settings:")
    print(f"   Window        : last {config.display.LOOKBACK_DAYS} days")
    print(f"   Page size     : {config.api.PAGE_SIZE} entities per query")
    print(f"   Timeline      : {config.display.TIMELINE_EVENTS} events per position")
    print(f"   Recent shots  : {config.display.RECENT_SNAPSHOTS} per position (pool report)")
    print()
    print("🔗 Quick Start:")
    print("   python run.py pool")
    print("   python run.py token --token 0x…")
    print("   python run.py users --user 0x… --user 0x…")


async def cmd_pool(pool_id: str | None = None, days: int | None = None) -> Dict[str, Any] | None:
    """Pool info, current positions and recent snapshots for one pool."""
    from snapshot_report import (
        display_current_positions,
        display_pool_info,
        display_position_snapshots,
    )

    pool_id = pool_id or config.targets.POOL_ID
    days = days if days is not None else config.display.LOOKBACK_DAYS
    client = SubgraphClient()

    try:
        print(f"\n🔍 FETCHING DATA FOR POOL: {pool_id}\n")

        # Independent queries: fan out, wait for all three
        pool, positions, snapshots = await asyncio.gather(
            client.fetch_pool_info(pool_id),
            client.fetch_current_positions(pool_id),
            client.fetch_position_snapshots([pool_id], seven_days_ago(days=days)),
        )
    except Exception as e:
        print(f"❌ Failed to fetch pool position data: {e}")
        return None

    display_pool_info(pool)
    display_current_positions(positions, pool)
    display_position_snapshots(snapshots, pool, days=days)

    print("\n✅ Data fetch complete!\n")
    return {"pool": pool, "positions": positions, "snapshots": snapshots}


async def cmd_token(
    token_id: str | None = None,
    users: Sequence[str] = (),
    days: int | None = None,
    url: str | None = None,
) -> List[Any] | None:
    """
    Snapshots for every pool holding ``token_id``, optionally restricted to
    an owner allow-list. Grouped by pool → user, then by position.
    """
    from snapshot_activity import filter_by_owners
    from snapshot_report import (
        display_position_transactions,
        display_snapshots_by_pool_and_user,
    )

    token_id = token_id or config.targets.KHYPE_TOKEN_ID
    days = days if days is not None else config.display.LOOKBACK_DAYS
    client = SubgraphClient(url=url)

    try:
        snapshots = await client.fetch_token_snapshots(token_id, seven_days_ago(days=days))
    except Exception as e:
        print(f"❌ Failed to fetch position snapshots for token {token_id}: {e}")
        return None

    filtered = filter_by_owners(snapshots, users)
    if users:
        print(f"\n👥 Filtering for specific users: {', '.join(users)}")
        print(f"   Filtered to {len(filtered)} snapshots from {len(snapshots)} total")
        if not filtered:
            print("No position snapshots found for the filtered users")
            return filtered
        title = "POSITION SNAPSHOTS (Filtered Users)"
    else:
        title = "POSITION SNAPSHOTS"

    display_snapshots_by_pool_and_user(filtered, title, days=days)
    if filtered:
        display_position_transactions(filtered)
    return filtered


async def cmd_users(
    token_id: str | None = None,
    users: Sequence[str] | None = None,
    days: int | None = None,
) -> List[Any] | None:
    """Token report restricted to the configured high-activity users."""
    users = list(users) if users else list(config.targets.FILTER_USERS)
    return await cmd_token(
        token_id=token_id,
        users=users,
        days=days,
        url=config.api.fixed_url(),
    )
