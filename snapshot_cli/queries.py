"""
GraphQL Queries — Upheaval Finance exchange subgraph
=====================================================

Query documents sent by snapshot_cli.subgraph_client.
Entity and field names follow the Uniswap V3 subgraph schema.
"""

# Token descriptor shared by pool selections
_TOKEN_FIELDS = """
        id
        name
        symbol
"""

POOL_INFO_QUERY = """
  query GetPoolInfo($poolId: String!) {
    pool(id: $poolId) {
      id
      token0 {
        id
        name
        symbol
        decimals
      }
      token1 {
        id
        name
        symbol
        decimals
      }
      feeTier
      liquidity
      sqrtPrice
      tick
      observationIndex
      volumeUSD
      txCount
      totalValueLockedUSD
    }
  }
"""

ALL_POOLS_QUERY = """
  query GetAllPools($first: Int!) {
    pools(first: $first) {
      id
      token0 {%s      }
      token1 {%s      }
    }
  }
""" % (_TOKEN_FIELDS, _TOKEN_FIELDS)

CURRENT_POSITIONS_QUERY = """
  query GetCurrentPositions($poolId: String!, $first: Int!) {
    positions(
      where: {
        pool: $poolId,
        liquidity_gt: "0"
      }
      orderBy: liquidity
      orderDirection: desc
      first: $first
    ) {
      id
      owner
      liquidity
      depositedToken0
      depositedToken1
      withdrawnToken0
      withdrawnToken1
      collectedFeesToken0
      collectedFeesToken1
      tickLower {
        tickIdx
      }
      tickUpper {
        tickIdx
      }
      pool {
        id
        token0 {%s        }
        token1 {%s        }
      }
    }
  }
""" % (_TOKEN_FIELDS, _TOKEN_FIELDS)

# Shared selection for positionSnapshots; the where-clause differs between
# the single-pool and multi-pool variants.
_SNAPSHOT_FIELDS = """
      id
      owner
      pool {
        id
        token0 {%s        }
        token1 {%s        }
      }
      position {
        id
        tickLower {
          tickIdx
        }
        tickUpper {
          tickIdx
        }
      }
      blockNumber
      timestamp
      liquidity
      depositedToken0
      depositedToken1
      withdrawnToken0
      withdrawnToken1
      collectedFeesToken0
      collectedFeesToken1
      transaction {
        id
      }
""" % (_TOKEN_FIELDS, _TOKEN_FIELDS)

POOL_SNAPSHOTS_QUERY = """
  query GetPositionSnapshots($poolId: String!, $timestamp: BigInt!, $first: Int!) {
    positionSnapshots(
      where: {
        pool: $poolId,
        timestamp_gte: $timestamp
      }
      orderBy: timestamp
      orderDirection: desc
      first: $first
    ) {%s    }
  }
""" % _SNAPSHOT_FIELDS

MULTI_POOL_SNAPSHOTS_QUERY = """
  query GetPositionSnapshots($poolIds: [String!]!, $timestamp: BigInt!, $first: Int!) {
    positionSnapshots(
      where: {
        pool_in: $poolIds,
        timestamp_gte: $timestamp
      }
      orderBy: timestamp
      orderDirection: desc
      first: $first
    ) {%s    }
  }
""" % _SNAPSHOT_FIELDS
