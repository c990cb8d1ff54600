"""Define the names of the available search strategies."""

from __future__ import annotations

from enum import StrEnum


class StrategyName(StrEnum):
    """Enumeration of the interchangeable state-space search strategies."""

    BFS = "bfs"
    DFS = "dfs"
    ASTAR = "astar"
    WEIGHTED_ASTAR = "wastar"
    GBFS = "gbfs"
    HILL_CLIMBING = "hc"
    ENFORCED_HILL_CLIMBING = "ehc"
