#!/usr/bin/env python3
"""
Console Report Renderer
=======================

Prints pool, position and snapshot reports to stdout.

Sections:
  - Pool information          (pool report)
  - Current positions         (pool report, grouped by owner)
  - Position snapshots        (pool report, grouped by position, 3 most recent each)
  - Snapshots by pool & user  (token reports)
  - Transactions by position  (token reports, totals + activity timeline)

Token amounts from the subgraph are already decimal-scaled; they are
rendered with format_token_amount().
"""

from typing import Any, Sequence

from snapshot_cli.central_config import config
from snapshot_cli.models import Pool, Position, PositionSnapshot
from snapshot_activity import (
    current_positions_stats,
    group_by_owner,
    group_by_pool,
    group_by_position,
    has_deposit,
    has_fees,
    has_withdrawal,
    position_activity_stats,
    significant_events,
    snapshot_stats,
    summarize_position,
    to_float,
    truncate,
)


# ── Formatting Helpers ───────────────────────────────────────────────────


def format_token_amount(amount: Any) -> str:
    """
    Render a token amount with fixed precision.

    >>> format_token_amount("2")
    '2.000000'
    >>> format_token_amount("0.0000000001")
    '0.000000000100'
    >>> format_token_amount("")
    '0'
    """
    value = to_float(amount)
    if value == 0:
        return "0"
    if abs(value) >= 1:
        return f"{value:.6f}"
    return f"{value:.12f}"


def _safe_usd(val: Any, decimals: int = 2) -> str:
    """Format a USD value with thousands separator ($1,234.56)."""
    return f"${to_float(val):,.{decimals}f}"


def _iso(snapshot: PositionSnapshot) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and ``Z`` suffix."""
    return snapshot.observed_at.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _tick_range(lower: Any, upper: Any) -> str:
    return f"{lower} to {upper}"


# ── Pool Report ──────────────────────────────────────────────────────────


def display_pool_info(pool: Pool) -> None:
    print("\n=== POOL INFORMATION ===")
    print(f"Pool ID: {pool.id}")
    print(f"Token0: {pool.token0.name} ({pool.token0.symbol}) - {pool.token0.id}")
    print(f"Token1: {pool.token1.name} ({pool.token1.symbol}) - {pool.token1.id}")
    print(f"Fee Tier: {pool.fee_tier}")
    print(f"Current Liquidity: {pool.liquidity}")
    print(f"Current Tick: {pool.tick}")
    print(f"Total Value Locked USD: {_safe_usd(pool.total_value_locked_usd)}")
    print(f"Volume USD: {_safe_usd(pool.volume_usd)}")
    print(f"Transaction Count: {pool.tx_count}")


def display_current_positions(positions: Sequence[Position], pool: Pool) -> None:
    """Active positions grouped by owner, then summary statistics."""
    print("\n=== CURRENT POSITIONS (Active Liquidity) ===")

    if not positions:
        print("No active positions found in this pool")
        return

    sym0, sym1 = pool.token0.symbol, pool.token1.symbol
    for owner, owner_positions in group_by_owner(positions).items():
        print(f"\n👤 Owner: {owner} ({len(owner_positions)} positions)")

        for i, p in enumerate(owner_positions, 1):
            print(f"\n  📍 Position {i}:")
            print(f"     Position ID: {p.id}")
            print(f"     Liquidity: {p.liquidity}")
            print(f"     Tick Range: {_tick_range(p.tick_lower, p.tick_upper)}")
            print(f"     Deposited {sym0}: {format_token_amount(p.deposited_token0)}")
            print(f"     Deposited {sym1}: {format_token_amount(p.deposited_token1)}")
            print(f"     Withdrawn {sym0}: {format_token_amount(p.withdrawn_token0)}")
            print(f"     Withdrawn {sym1}: {format_token_amount(p.withdrawn_token1)}")
            print(f"     Collected Fees {sym0}: {format_token_amount(p.collected_fees_token0)}")
            print(f"     Collected Fees {sym1}: {format_token_amount(p.collected_fees_token1)}")

    stats = current_positions_stats(positions)
    print("\n📊 CURRENT POSITIONS SUMMARY:")
    print(f"   Total Active Positions: {stats['active_positions']}")
    print(f"   Unique Owners: {stats['unique_owners']}")
    print(f"   Total Liquidity: {stats['total_liquidity']}")
    print(f"   Average Liquidity per Position: {stats['average_liquidity']}")


def display_position_snapshots(
    snapshots: Sequence[PositionSnapshot], pool: Pool, days: int = None
) -> None:
    """Snapshots grouped by position (most active first), recent few per position."""
    days = days if days is not None else config.display.LOOKBACK_DAYS
    print(f"\n=== POSITION SNAPSHOTS (Last {days} Days) ===")

    if not snapshots:
        print(f"No position snapshots found in the last {days} days")
        return

    sym0, sym1 = pool.token0.symbol, pool.token1.symbol
    for position_id, position_snapshots in group_by_position(snapshots):
        first = position_snapshots[0]
        print(f"\n🎯 Position ID: {position_id}")
        print(f"   Owner: {first.owner}")
        print(f"   Snapshots: {len(position_snapshots)}")
        if first.tick_lower is not None and first.tick_upper is not None:
            print(f"   Tick Range: {_tick_range(first.tick_lower, first.tick_upper)}")

        recent, remaining = truncate(position_snapshots, config.display.RECENT_SNAPSHOTS)
        for i, s in enumerate(recent, 1):
            print(f"\n   📸 Snapshot {i} - {_iso(s)}")
            print(f"      Block: {s.block_number}")
            print(f"      Liquidity: {s.liquidity}")
            print(f"      Deposited {sym0}: {format_token_amount(s.deposited_token0)}")
            print(f"      Deposited {sym1}: {format_token_amount(s.deposited_token1)}")
            print(f"      Withdrawn {sym0}: {format_token_amount(s.withdrawn_token0)}")
            print(f"      Withdrawn {sym1}: {format_token_amount(s.withdrawn_token1)}")
            print(f"      Fees {sym0}: {format_token_amount(s.collected_fees_token0)}")
            print(f"      Fees {sym1}: {format_token_amount(s.collected_fees_token1)}")
        if remaining:
            print(f"   ... and {remaining} more snapshots")

    stats = snapshot_stats(snapshots)
    activity = position_activity_stats(snapshots)
    print("\n📊 SNAPSHOTS SUMMARY:")
    print(f"   Total Snapshots: {stats['total_snapshots']}")
    print(f"   Unique Positions: {stats['unique_positions']}")
    print(f"   Unique Owners: {stats['unique_owners']}")
    if activity:
        print(
            f"   Most Active Position: {activity['most_active_id']} "
            f"({activity['most_active_count']} snapshots)"
        )


# ── Token Reports ────────────────────────────────────────────────────────


def display_snapshots_by_pool_and_user(
    snapshots: Sequence[PositionSnapshot], title: str, days: int = None
) -> None:
    """Every snapshot, grouped pool → user, then the summary block."""
    days = days if days is not None else config.display.LOOKBACK_DAYS
    print(f"\n=== {title} (Last {days} Days) ===")

    if not snapshots:
        print("No position snapshots found")
        return

    for pool_id, pool_snapshots in group_by_pool(snapshots).items():
        pool = pool_snapshots[0].pool
        name0, name1 = pool.token0.name, pool.token1.name
        print(f"\n🏊 Pool: {pool.name} ({pool_id})")
        print(f"   Token0: {name0} ({pool.token0.id})")
        print(f"   Token1: {name1} ({pool.token1.id})")
        print(f"   Snapshots: {len(pool_snapshots)}")

        for owner, user_snapshots in group_by_owner(pool_snapshots).items():
            print(f"\n  👤 User: {owner} ({len(user_snapshots)} snapshots)")

            for i, s in enumerate(user_snapshots, 1):
                print(f"\n    📸 Snapshot {i} - {_iso(s)}")
                print(f"       Position ID: {s.position_id or 'N/A'}")
                print(f"       Block: {s.block_number}")
                print(f"       Liquidity: {s.liquidity}")
                print(f"       Deposited Token0: {format_token_amount(s.deposited_token0)} {name0}")
                print(f"       Deposited Token1: {format_token_amount(s.deposited_token1)} {name1}")
                print(f"       Withdrawn Token0: {format_token_amount(s.withdrawn_token0)} {name0}")
                print(f"       Withdrawn Token1: {format_token_amount(s.withdrawn_token1)} {name1}")
                print(f"       Collected Fees Token0: {format_token_amount(s.collected_fees_token0)} {name0}")
                print(f"       Collected Fees Token1: {format_token_amount(s.collected_fees_token1)} {name1}")

    stats = snapshot_stats(snapshots)
    print("\n📊 SUMMARY:")
    print(f"   Total Snapshots: {stats['total_snapshots']}")
    print(f"   Unique Users: {stats['unique_owners']}")
    print(f"   Unique Positions: {stats['unique_positions']}")
    print(f"   Pools Covered: {stats['pools_covered']}")


def _print_timeline_event(index: int, s: PositionSnapshot, pool: Pool) -> None:
    name0, name1 = pool.token0.name, pool.token1.name
    print(f"      {index}. {_iso(s)} (Block {s.block_number})")
    if has_deposit(s):
        print(
            f"         💵 Deposited: {format_token_amount(s.deposited_token0)} {name0}, "
            f"{format_token_amount(s.deposited_token1)} {name1}"
        )
    if has_withdrawal(s):
        print(
            f"         💸 Withdrawn: {format_token_amount(s.withdrawn_token0)} {name0}, "
            f"{format_token_amount(s.withdrawn_token1)} {name1}"
        )
    if has_fees(s):
        print(
            f"         💰 Fees: {format_token_amount(s.collected_fees_token0)} {name0}, "
            f"{format_token_amount(s.collected_fees_token1)} {name1}"
        )


def display_position_transactions(snapshots: Sequence[PositionSnapshot]) -> None:
    """Per-position totals, net position and a truncated activity timeline."""
    print("\n\n🏷️  === TRANSACTIONS BY POSITION ID ===")

    positions = group_by_position(snapshots)
    if not positions:
        print("No positions found with valid position IDs")
        return

    for position_id, position_snapshots in positions:
        summary = summarize_position(position_id, position_snapshots)
        pool = summary.pool
        name0, name1 = pool.token0.name, pool.token1.name

        print(f"\n🎯 Position ID: {position_id}")
        print(f"   Owner: {summary.owner}")
        print(f"   Pool: {pool.name} ({pool.id})")
        print(f"   Activity: {summary.snapshot_count} snapshots")
        print(f"   Current Liquidity: {summary.current_liquidity}")
        print(f"   Peak Liquidity: {summary.peak_liquidity}")

        print("\n   📈 TOTALS ACROSS ALL ACTIVITY:")
        print(f"      Total Deposited Token0: {format_token_amount(summary.total_deposited0)} {name0}")
        print(f"      Total Deposited Token1: {format_token_amount(summary.total_deposited1)} {name1}")
        print(f"      Total Withdrawn Token0: {format_token_amount(summary.total_withdrawn0)} {name0}")
        print(f"      Total Withdrawn Token1: {format_token_amount(summary.total_withdrawn1)} {name1}")
        print(f"      Total Fees Token0: {format_token_amount(summary.total_fees0)} {name0}")
        print(f"      Total Fees Token1: {format_token_amount(summary.total_fees1)} {name1}")

        print("\n   💰 NET POSITION:")
        print(f"      Net Token0: {format_token_amount(summary.net_token0)} {name0}")
        print(f"      Net Token1: {format_token_amount(summary.net_token1)} {name1}")

        events = significant_events(position_snapshots)
        if events:
            print(f"\n   📅 ACTIVITY TIMELINE ({len(events)} significant events):")
            shown, remaining = truncate(events, config.display.TIMELINE_EVENTS)
            for i, s in enumerate(shown, 1):
                _print_timeline_event(i, s, pool)
            if remaining:
                print(f"      ... and {remaining} more events")

    activity = position_activity_stats(snapshots)
    print("\n📊 POSITION SUMMARY:")
    print(f"   Total Unique Positions: {activity['unique_positions']}")
    print(
        f"   Most Active Position: {activity['most_active_id']} "
        f"({activity['most_active_count']} snapshots)"
    )
    print(f"   Average Activity per Position: {activity['average_activity']:.1f} snapshots")
