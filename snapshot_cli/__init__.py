"""Snapshot CLI — liquidity position reports from the Upheaval Finance subgraph."""
