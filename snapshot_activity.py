#!/usr/bin/env python3
"""
Position Activity Engine
========================

Groups and aggregates position snapshots fetched from the exchange subgraph.

Input is a flat list of PositionSnapshot ordered by timestamp descending
(the subgraph's ``orderBy: timestamp, orderDirection: desc``). Every
grouping below preserves that order inside each group, so the first
element of any group is always its most recent observation.

Aggregates:
  • Per-position totals — deposits, withdrawals, fees per token
  • Net position       — total deposited − total withdrawn, per token
  • Peak liquidity     — running maximum across the position's snapshots
  • Current liquidity  — liquidity of the most recent snapshot
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from snapshot_cli.models import Pool, Position, PositionSnapshot


def to_float(value: Any) -> float:
    """Parse a subgraph decimal string; empty/absent/unparseable/non-finite → 0.0."""
    try:
        result = float(value or 0)
    except (ValueError, TypeError):
        return 0.0
    return result if math.isfinite(result) else 0.0


# ── Filtering ────────────────────────────────────────────────────────────


def filter_by_owners(
    snapshots: Sequence[PositionSnapshot], owners: Iterable[str]
) -> List[PositionSnapshot]:
    """Keep snapshots whose owner is in ``owners`` (case-insensitive).

    An empty allow-list disables filtering and returns the input unchanged.
    """
    allowed = {o.lower() for o in owners}
    if not allowed:
        return list(snapshots)
    return [s for s in snapshots if s.owner.lower() in allowed]


# ── Grouping ─────────────────────────────────────────────────────────────


def group_by_pool(snapshots: Iterable[PositionSnapshot]) -> Dict[str, List[PositionSnapshot]]:
    groups: Dict[str, List[PositionSnapshot]] = {}
    for snapshot in snapshots:
        groups.setdefault(snapshot.pool.id, []).append(snapshot)
    return groups


def group_by_owner(snapshots: Iterable[Any]) -> Dict[str, List[Any]]:
    """Group snapshots (or positions) by ``owner``, first-seen order."""
    groups: Dict[str, List[Any]] = {}
    for item in snapshots:
        groups.setdefault(item.owner, []).append(item)
    return groups


def group_by_pool_and_owner(
    snapshots: Iterable[PositionSnapshot],
) -> Dict[str, Dict[str, List[PositionSnapshot]]]:
    """pool id → owner → snapshots. Partitions the input exactly."""
    return {
        pool_id: group_by_owner(pool_snapshots)
        for pool_id, pool_snapshots in group_by_pool(snapshots).items()
    }


def group_by_position(
    snapshots: Iterable[PositionSnapshot],
) -> List[Tuple[str, List[PositionSnapshot]]]:
    """
    Group snapshots by position id, most active position first.

    Snapshots without a position reference are dropped. The sort is stable,
    so positions with equal snapshot counts keep first-seen order.
    """
    groups: Dict[str, List[PositionSnapshot]] = {}
    for snapshot in snapshots:
        if snapshot.position_id:
            groups.setdefault(snapshot.position_id, []).append(snapshot)
    return sorted(groups.items(), key=lambda item: len(item[1]), reverse=True)


# ── Per-Position Aggregation ─────────────────────────────────────────────


@dataclass
class PositionSummary:
    """Totals across every snapshot of one position."""

    position_id: str
    owner: str
    pool: Pool
    snapshot_count: int = 0
    total_deposited0: float = 0.0
    total_deposited1: float = 0.0
    total_withdrawn0: float = 0.0
    total_withdrawn1: float = 0.0
    total_fees0: float = 0.0
    total_fees1: float = 0.0
    current_liquidity: int = 0
    peak_liquidity: int = 0

    @property
    def net_token0(self) -> float:
        return self.total_deposited0 - self.total_withdrawn0

    @property
    def net_token1(self) -> float:
        return self.total_deposited1 - self.total_withdrawn1


def summarize_position(
    position_id: str, snapshots: Sequence[PositionSnapshot]
) -> PositionSummary:
    """Aggregate a position's snapshots (newest first)."""
    if not snapshots:
        raise ValueError(f"No snapshots for position {position_id}")

    latest = snapshots[0]
    summary = PositionSummary(
        position_id=position_id,
        owner=latest.owner,
        pool=latest.pool,
        snapshot_count=len(snapshots),
        current_liquidity=latest.liquidity,
    )
    for s in snapshots:
        summary.total_deposited0 += to_float(s.deposited_token0)
        summary.total_deposited1 += to_float(s.deposited_token1)
        summary.total_withdrawn0 += to_float(s.withdrawn_token0)
        summary.total_withdrawn1 += to_float(s.withdrawn_token1)
        summary.total_fees0 += to_float(s.collected_fees_token0)
        summary.total_fees1 += to_float(s.collected_fees_token1)
        summary.peak_liquidity = max(summary.peak_liquidity, s.liquidity)
    return summary


# ── Significant Events ───────────────────────────────────────────────────


def has_deposit(s: PositionSnapshot) -> bool:
    return to_float(s.deposited_token0) != 0 or to_float(s.deposited_token1) != 0


def has_withdrawal(s: PositionSnapshot) -> bool:
    return to_float(s.withdrawn_token0) != 0 or to_float(s.withdrawn_token1) != 0


def has_fees(s: PositionSnapshot) -> bool:
    return to_float(s.collected_fees_token0) != 0 or to_float(s.collected_fees_token1) != 0


def is_significant(s: PositionSnapshot) -> bool:
    """A snapshot that moved tokens: any non-zero deposit, withdrawal or fee."""
    return has_deposit(s) or has_withdrawal(s) or has_fees(s)


def significant_events(snapshots: Iterable[PositionSnapshot]) -> List[PositionSnapshot]:
    return [s for s in snapshots if is_significant(s)]


def truncate(items: Sequence[Any], limit: int) -> Tuple[List[Any], int]:
    """First ``limit`` items and how many were left out."""
    shown = list(items[:limit])
    return shown, max(len(items) - limit, 0)


# ── Summary Statistics ───────────────────────────────────────────────────


def snapshot_stats(snapshots: Sequence[PositionSnapshot]) -> Dict[str, int]:
    """Counts for the snapshot summary block."""
    return {
        "total_snapshots": len(snapshots),
        "unique_owners": len({s.owner for s in snapshots}),
        "unique_positions": len({s.position_id for s in snapshots if s.position_id}),
        "pools_covered": len({s.pool.id for s in snapshots}),
    }


def position_activity_stats(snapshots: Sequence[PositionSnapshot]) -> Optional[Dict[str, Any]]:
    """
    Position summary: unique positions, most active position, average
    activity. Returns None when no snapshot references a position.
    """
    groups = group_by_position(snapshots)
    if not groups:
        return None
    linked = sum(1 for s in snapshots if s.position_id)
    most_active_id, most_active = groups[0]
    return {
        "unique_positions": len(groups),
        "most_active_id": most_active_id,
        "most_active_count": len(most_active),
        "average_activity": round(linked / len(groups), 1),
    }


def current_positions_stats(positions: Sequence[Position]) -> Dict[str, Any]:
    total_liquidity = sum(p.liquidity for p in positions)
    return {
        "active_positions": len(positions),
        "unique_owners": len({p.owner for p in positions}),
        "total_liquidity": total_liquidity,
        "average_liquidity": total_liquidity // len(positions) if positions else 0,
    }
