#!/usr/bin/env python3
"""
Subgraph Client — GraphQL over HTTP for the Upheaval exchange subgraph
=======================================================================

One POST per query: JSON body ``{query, variables}`` with
``Accept: application/graphql-response+json, application/json``.
A response carries either ``data`` or ``errors``.

Every fetch is a single attempt — no retry, no backoff. Failures are
reported with context and re-raised to the caller:

  • Transport failure      → httpx.HTTPError
  • GraphQL error payload  → SubgraphError
  • Missing required pool  → SubgraphError
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

import httpx

from snapshot_cli.central_config import config
from snapshot_cli.models import Pool, Position, PositionSnapshot
from snapshot_cli.queries import (
    ALL_POOLS_QUERY,
    CURRENT_POSITIONS_QUERY,
    MULTI_POOL_SNAPSHOTS_QUERY,
    POOL_INFO_QUERY,
    POOL_SNAPSHOTS_QUERY,
)


class SubgraphError(RuntimeError):
    """The subgraph answered with an error payload or without a required entity."""


def seven_days_ago(now: Optional[datetime] = None, days: int = 7) -> int:
    """Unix timestamp (seconds) of ``now`` minus ``days`` days.

    >>> seven_days_ago(datetime(2025, 9, 10, tzinfo=timezone.utc))
    1756857600
    """
    now = now or datetime.now(timezone.utc)
    return int((now - timedelta(days=days)).timestamp())


async def graphql_request(
    url: str,
    query: str,
    variables: Optional[Dict[str, Any]] = None,
    timeout: int = 20,
) -> Dict[str, Any]:
    """
    POST a GraphQL document and return the ``data`` object.

    Args:
        url: Subgraph endpoint.
        query: GraphQL document.
        variables: Query variables (omitted from the body when None).
        timeout: HTTP timeout in seconds.

    Raises:
        httpx.HTTPError: On transport failure or non-2xx status.
        SubgraphError: If the response carries ``errors`` or no ``data``.
    """
    payload: Dict[str, Any] = {"query": query}
    if variables is not None:
        payload["variables"] = variables

    async with httpx.AsyncClient(timeout=timeout) as client:
        resp = await client.post(url, json=payload, headers=dict(config.api.HEADERS))
        resp.raise_for_status()
        result = resp.json()

    if result.get("errors"):
        raise SubgraphError("GraphQL errors: " + json.dumps(result["errors"]))
    data = result.get("data")
    if data is None:
        raise SubgraphError("Empty response — no data returned by subgraph")
    return data


class SubgraphClient:
    """Fetchers for pools, positions and position snapshots."""

    def __init__(self, url: str = None, timeout: int = None, page_size: int = None):
        self.url = url or config.api.exchange_url()
        self.timeout = timeout or config.api.TIMEOUT_SECONDS
        self.page_size = page_size or config.api.PAGE_SIZE

    async def _query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict:
        return await graphql_request(self.url, query, variables, timeout=self.timeout)

    async def fetch_pool_info(self, pool_id: str) -> Pool:
        """Fetch a single pool; raises SubgraphError when it does not exist."""
        try:
            print(f"🔍 Fetching pool information for {pool_id}...")
            data = await self._query(POOL_INFO_QUERY, {"poolId": pool_id})
            if not data.get("pool"):
                raise SubgraphError(f"Pool {pool_id} not found")
            return Pool.from_subgraph(data["pool"])
        except Exception as e:
            print(f"❌ Error fetching pool info: {e}")
            raise

    async def fetch_current_positions(self, pool_id: str) -> List[Position]:
        """Positions in ``pool_id`` with liquidity > 0, largest first."""
        try:
            print(f"🔍 Fetching current positions for pool {pool_id}...")
            data = await self._query(
                CURRENT_POSITIONS_QUERY, {"poolId": pool_id, "first": self.page_size}
            )
            positions = [Position.from_subgraph(p) for p in data.get("positions") or []]
            print(f"✅ Found {len(positions)} current positions with liquidity > 0")
            return positions
        except Exception as e:
            print(f"❌ Error fetching current positions: {e}")
            raise

    async def fetch_all_pools(self) -> List[Pool]:
        try:
            data = await self._query(ALL_POOLS_QUERY, {"first": self.page_size})
            return [Pool.from_subgraph(p) for p in data.get("pools") or []]
        except Exception as e:
            print(f"❌ Error fetching pools: {e}")
            raise

    async def fetch_token_pools(self, token_id: str) -> List[Pool]:
        """Discover pools holding ``token_id`` on either side (client-side filter)."""
        print(f"🔍 Fetching pools containing token {token_id}...")
        all_pools = await self.fetch_all_pools()
        pools = [p for p in all_pools if p.contains_token(token_id)]
        print(f"✅ Found {len(pools)} pools with token out of {len(all_pools)} total pools")
        return pools

    async def fetch_position_snapshots(
        self, pool_ids: Sequence[str], since: int
    ) -> List[PositionSnapshot]:
        """
        Snapshots for ``pool_ids`` with ``timestamp >= since``, newest first.

        A single pool uses the ``pool:`` filter, several use ``pool_in:``.
        """
        try:
            pool_ids = list(pool_ids)
            since_iso = datetime.fromtimestamp(since, tz=timezone.utc).isoformat()
            print(f"🔍 Fetching position snapshots for {len(pool_ids)} pool(s)...")
            print(f"   Time range: since {since_iso}")

            if len(pool_ids) == 1:
                query = POOL_SNAPSHOTS_QUERY
                variables = {"poolId": pool_ids[0]}
            else:
                query = MULTI_POOL_SNAPSHOTS_QUERY
                variables = {"poolIds": pool_ids}
            variables["timestamp"] = str(since)
            variables["first"] = self.page_size

            data = await self._query(query, variables)
            snapshots = [
                PositionSnapshot.from_subgraph(s)
                for s in data.get("positionSnapshots") or []
            ]
            print(f"✅ Found {len(snapshots)} position snapshots")
            return snapshots
        except Exception as e:
            print(f"❌ Error fetching position snapshots: {e}")
            raise

    async def fetch_token_snapshots(self, token_id: str, since: int) -> List[PositionSnapshot]:
        """Discover the token's pools, then fetch their snapshots since ``since``."""
        pools = await self.fetch_token_pools(token_id)
        if not pools:
            print("⚠️  No pools found for token — skipping snapshot query")
            return []
        return await self.fetch_position_snapshots([p.id for p in pools], since)
