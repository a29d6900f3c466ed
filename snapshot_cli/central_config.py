"""
Project Configuration — subgraph endpoints, version, report targets
====================================================================

Contains the Upheaval Finance subgraph configuration, the default
report targets and project metadata.
Source: https://api.upheaval.fi/subgraphs/name/upheaval/exchange-v3
"""

import re
from dataclasses import dataclass
from importlib.metadata import version, PackageNotFoundError
from pathlib import Path
from types import MappingProxyType

# Version: single source of truth is pyproject.toml
try:
    PROJECT_VERSION = version("snapshot-cli")
except PackageNotFoundError:
    # Dev / CI: package not installed, read pyproject.toml directly
    _toml = Path(__file__).resolve().parent.parent / "pyproject.toml"
    _m = (
        re.search(r'version\s*=\s*"([^"]+)"', _toml.read_text())
        if _toml.exists()
        else None
    )
    PROJECT_VERSION = _m.group(1) if _m else "0.0.0-dev"
PROJECT_NAME = "Snapshot CLI"


@dataclass(frozen=True)
class SubgraphAPI:
    """Upheaval Finance exchange subgraph configuration."""

    BASE_URL: str = "https://api.upheaval.fi/subgraphs/name/upheaval"

    # Deployments
    EXCHANGE_SUBGRAPH: str = "exchange-v3"
    FIXED_SUBGRAPH: str = "exchange-v3-fixed"  # used by the user-filtered report

    TIMEOUT_SECONDS: int = 20

    # The subgraph caps a single page at 1000 entities
    PAGE_SIZE: int = 1000

    HEADERS = MappingProxyType(
        {
            "Content-Type": "application/json",
            "Accept": "application/graphql-response+json, application/json",
        }
    )

    @classmethod
    def get_subgraph_url(cls, name: str) -> str:
        """URL of a named subgraph deployment."""
        return f"{cls.BASE_URL}/{name}"

    @classmethod
    def exchange_url(cls) -> str:
        return cls.get_subgraph_url(cls.EXCHANGE_SUBGRAPH)

    @classmethod
    def fixed_url(cls) -> str:
        return cls.get_subgraph_url(cls.FIXED_SUBGRAPH)


@dataclass(frozen=True)
class ReportTargets:
    """Default identifiers each report runs against when no flag is given."""

    # thBILL pool on HyperEVM
    POOL_ID: str = "0xc06e0fea115e54c54125dfe2f0509d5be55e4005"

    # K-HYPE (Kinetiq Staked HYPE), liquid staking token for HYPE
    KHYPE_TOKEN_ID: str = "0xfd739d4e423301ce9385c1fb8850539d657c296d"

    # High-activity K-HYPE liquidity providers
    FILTER_USERS: tuple = (
        "0x06253f963c242f3ac57201ff8298d7e5df3e8c4c",
        "0x43395c11f8f81db0cee08dedd2d45c377a955387",
    )


@dataclass(frozen=True)
class DisplayLimits:
    """Window and truncation settings for console reports."""

    LOOKBACK_DAYS: int = 7
    TIMELINE_EVENTS: int = 5  # significant events per position
    RECENT_SNAPSHOTS: int = 3  # snapshots per position in the pool report


# Unified configuration
class SnapshotConfig:
    """Unified configuration for all reports."""

    api = SubgraphAPI()
    targets = ReportTargets()
    display = DisplayLimits()


# Global instance
config = SnapshotConfig()
