"""
Subgraph Entities — Pool, Position, PositionSnapshot
=====================================================

Read-only views over the entities returned by the exchange subgraph.
Each class has a ``from_subgraph`` factory that accepts the raw JSON
dict and tolerates absent optional fields.

Token amounts stay as the subgraph's decimal strings (already scaled by
token decimals); liquidity, block numbers and timestamps are BigInts and
are parsed to ``int``.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _to_int(value: Any, default: int = 0) -> int:
    """Parse a subgraph BigInt (string or number) to int."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return int(float(value))


def _tick_idx(tick: Optional[Dict]) -> Optional[int]:
    """Extract tickIdx from a ``{tickIdx: ...}`` selection."""
    if not tick or tick.get("tickIdx") is None:
        return None
    return _to_int(tick["tickIdx"])


# ── Token / Pool ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Token:
    id: str
    name: str = "Unknown"
    symbol: str = "UNK"
    decimals: Optional[int] = None

    @classmethod
    def from_subgraph(cls, data: Optional[Dict]) -> "Token":
        data = data or {}
        decimals = data.get("decimals")
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "Unknown",
            symbol=data.get("symbol") or "UNK",
            decimals=_to_int(decimals) if decimals is not None else None,
        )

    def matches(self, token_id: str) -> bool:
        """Case-insensitive address comparison."""
        return self.id.lower() == token_id.lower()


@dataclass(frozen=True)
class Pool:
    """
    Pool snapshot as returned by ``pool(id:)`` or nested selections.

    Nested selections only carry id and tokens; the remaining fields keep
    their defaults in that case.
    """

    id: str
    token0: Token
    token1: Token
    fee_tier: Optional[int] = None
    liquidity: int = 0
    sqrt_price: int = 0
    tick: Optional[int] = None
    observation_index: int = 0
    volume_usd: float = 0.0
    tx_count: int = 0
    total_value_locked_usd: float = 0.0

    @classmethod
    def from_subgraph(cls, data: Dict) -> "Pool":
        tick = data.get("tick")
        fee_tier = data.get("feeTier")
        return cls(
            id=data.get("id", ""),
            token0=Token.from_subgraph(data.get("token0")),
            token1=Token.from_subgraph(data.get("token1")),
            fee_tier=_to_int(fee_tier) if fee_tier is not None else None,
            liquidity=_to_int(data.get("liquidity")),
            sqrt_price=_to_int(data.get("sqrtPrice")),
            tick=_to_int(tick) if tick is not None else None,
            observation_index=_to_int(data.get("observationIndex")),
            volume_usd=float(data.get("volumeUSD") or 0),
            tx_count=_to_int(data.get("txCount")),
            total_value_locked_usd=float(data.get("totalValueLockedUSD") or 0),
        )

    @property
    def name(self) -> str:
        """Pair label built from token names, e.g. ``Kinetiq Staked HYPE/Wrapped HYPE``."""
        return f"{self.token0.name}/{self.token1.name}"

    def contains_token(self, token_id: str) -> bool:
        return self.token0.matches(token_id) or self.token1.matches(token_id)


# ── Positions ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Position:
    """Current state of an LP position (``positions`` entity)."""

    id: str
    owner: str
    liquidity: int = 0
    deposited_token0: str = "0"
    deposited_token1: str = "0"
    withdrawn_token0: str = "0"
    withdrawn_token1: str = "0"
    collected_fees_token0: str = "0"
    collected_fees_token1: str = "0"
    tick_lower: Optional[int] = None
    tick_upper: Optional[int] = None
    pool: Optional[Pool] = None

    @classmethod
    def from_subgraph(cls, data: Dict) -> "Position":
        pool = data.get("pool")
        return cls(
            id=data.get("id", ""),
            owner=data.get("owner", ""),
            liquidity=_to_int(data.get("liquidity")),
            deposited_token0=data.get("depositedToken0") or "0",
            deposited_token1=data.get("depositedToken1") or "0",
            withdrawn_token0=data.get("withdrawnToken0") or "0",
            withdrawn_token1=data.get("withdrawnToken1") or "0",
            collected_fees_token0=data.get("collectedFeesToken0") or "0",
            collected_fees_token1=data.get("collectedFeesToken1") or "0",
            tick_lower=_tick_idx(data.get("tickLower")),
            tick_upper=_tick_idx(data.get("tickUpper")),
            pool=Pool.from_subgraph(pool) if pool else None,
        )


@dataclass(frozen=True)
class PositionSnapshot:
    """
    Point-in-time observation of a position.

    ``deposited_*`` / ``withdrawn_*`` / ``collected_fees_*`` are the deltas
    recorded by the snapshot's transaction. ``position_id`` is None when the
    subgraph did not link the snapshot to a position.
    """

    id: str
    owner: str
    pool: Pool
    position_id: Optional[str] = None
    block_number: int = 0
    timestamp: int = 0
    liquidity: int = 0
    deposited_token0: str = "0"
    deposited_token1: str = "0"
    withdrawn_token0: str = "0"
    withdrawn_token1: str = "0"
    collected_fees_token0: str = "0"
    collected_fees_token1: str = "0"
    transaction_id: Optional[str] = None
    tick_lower: Optional[int] = None
    tick_upper: Optional[int] = None

    @classmethod
    def from_subgraph(cls, data: Dict) -> "PositionSnapshot":
        position = data.get("position") or {}
        transaction = data.get("transaction") or {}
        return cls(
            id=data.get("id", ""),
            owner=data.get("owner", ""),
            pool=Pool.from_subgraph(data.get("pool") or {}),
            position_id=position.get("id") or None,
            block_number=_to_int(data.get("blockNumber")),
            timestamp=_to_int(data.get("timestamp")),
            liquidity=_to_int(data.get("liquidity")),
            deposited_token0=data.get("depositedToken0") or "0",
            deposited_token1=data.get("depositedToken1") or "0",
            withdrawn_token0=data.get("withdrawnToken0") or "0",
            withdrawn_token1=data.get("withdrawnToken1") or "0",
            collected_fees_token0=data.get("collectedFeesToken0") or "0",
            collected_fees_token1=data.get("collectedFeesToken1") or "0",
            transaction_id=transaction.get("id"),
            tick_lower=_tick_idx(position.get("tickLower")),
            tick_upper=_tick_idx(position.get("tickUpper")),
        )

    @property
    def observed_at(self) -> datetime:
        """Snapshot timestamp as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)
