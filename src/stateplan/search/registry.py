"""Select search strategies by name."""

from __future__ import annotations

from typing import Any

from stateplan.heuristics.heuristic_type import HeuristicType
from stateplan.search.best_first import AStarSearch, GreedyBestFirstSearch, WeightedAStarSearch
from stateplan.search.budget import SearchBudget
from stateplan.search.local_search import EnforcedHillClimbing, HillClimbing
from stateplan.search.strategy import SearchStrategy
from stateplan.search.strategy_name import StrategyName
from stateplan.search.uninformed import BreadthFirstSearch, DepthFirstSearch

STRATEGY_CLASSES: dict[StrategyName, type[SearchStrategy]] = {
    StrategyName.BFS: BreadthFirstSearch,
    StrategyName.DFS: DepthFirstSearch,
    StrategyName.ASTAR: AStarSearch,
    StrategyName.WEIGHTED_ASTAR: WeightedAStarSearch,
    StrategyName.GBFS: GreedyBestFirstSearch,
    StrategyName.HILL_CLIMBING: HillClimbing,
    StrategyName.ENFORCED_HILL_CLIMBING: EnforcedHillClimbing,
}

STRATEGY_DESCRIPTIONS: dict[StrategyName, str] = {
    StrategyName.BFS: "Breadth-first search; shortest plans by action count",
    StrategyName.DFS: "Depth-first graph search; no optimality guarantee",
    StrategyName.ASTAR: "A* search; cost-optimal with an admissible heuristic",
    StrategyName.WEIGHTED_ASTAR: "Weighted A* search; bounded suboptimal",
    StrategyName.GBFS: "Greedy best-first search ordered by heuristic estimates",
    StrategyName.HILL_CLIMBING: "Hill climbing with bounded sideways moves; incomplete",
    StrategyName.ENFORCED_HILL_CLIMBING: "Enforced hill climbing with breadth-first plateau escapes; incomplete",
}


def create_strategy(
    name: StrategyName | str,
    budget: SearchBudget | None = None,
    heuristic_type: HeuristicType | str | None = None,
    **options: Any,
) -> SearchStrategy:
    """Create a search strategy by name.

    :param name: Name of the strategy (e.g., "astar")
    :param budget: Default budget for the strategy's searches (optional)
    :param heuristic_type: Heuristic used when searches are given none (optional; defaults per strategy)
    :param options: Strategy-specific options (e.g., `weight`, `max_sideways_moves`)
    :return: Constructed search strategy
    :raises ValueError: If the name is unknown or an option is invalid
    """
    strategy_class = STRATEGY_CLASSES[StrategyName(name)]
    heuristic = None if heuristic_type is None else HeuristicType(heuristic_type)
    return strategy_class(budget, heuristic, **options)
