"""Define heuristic best-first search strategies (A*, weighted A*, and greedy best-first).

Reference: Section 3.5 (pg. 84-93) of AIMA (4th Ed.) by Russell and Norvig.
"""

from __future__ import annotations

import heapq
import itertools
import math

from stateplan.encoding.bit_state import BitState
from stateplan.heuristics.heuristic_type import HeuristicType
from stateplan.search.budget import SearchBudget
from stateplan.search.search_node import SearchNode
from stateplan.search.strategy import SearchContext, SearchStrategy
from stateplan.search.strategy_name import StrategyName


class AStarSearch(SearchStrategy):
    """A* search ordered by f = g + w * h, breaking ties in insertion (FIFO) order.

    With weight 1 and an admissible heuristic (the default, h_max), the returned plan is cost-optimal.
    """

    name = StrategyName.ASTAR
    default_heuristic = HeuristicType.MAX
    default_weight = 1.0

    def __init__(
        self,
        budget: SearchBudget | None = None,
        heuristic_type: HeuristicType | None = None,
        weight: float | None = None,
    ) -> None:
        """Initialize the strategy.

        :param budget: Default budget for each search
        :param heuristic_type: Heuristic created when `search` is given none
        :param weight: Weight applied to heuristic estimates (defaults per strategy)
        :raises ValueError: If the weight is less than 1
        """
        super().__init__(budget, heuristic_type)
        self.weight = self.default_weight if weight is None else weight
        if self.weight < 1.0:
            raise ValueError(f"Heuristic weight must be at least 1, got {self.weight}.")

    def run(self, context: SearchContext) -> SearchNode | None:
        """Search with a priority frontier, skipping states already closed with an equal or lower g."""
        counter = itertools.count()  # Insertion order breaks ties between equal f-values
        root = context.root()
        root_h = context.evaluate(root.state)
        if root_h == math.inf:
            return None

        h_values: dict[BitState, float] = {root.state: root_h}
        frontier: list[tuple[float, int, SearchNode]] = [(self.weight * root_h, next(counter), root)]
        best_g: dict[BitState, float] = {root.state: 0.0}
        closed: dict[BitState, float] = {}

        while frontier:
            context.observe_frontier(len(frontier))
            _, _, node = heapq.heappop(frontier)

            if node.state in closed and closed[node.state] <= node.g:
                continue
            if node.g > best_g[node.state]:  # Skip stale entries (a better path was found since)
                continue
            closed[node.state] = node.g

            if context.is_goal(node):
                return node

            for child in context.expand(node):
                if child.g >= best_g.get(child.state, math.inf):
                    continue

                if child.state not in h_values:
                    h_values[child.state] = context.evaluate(child.state)
                h = h_values[child.state]
                if h == math.inf:
                    continue

                best_g[child.state] = child.g
                heapq.heappush(frontier, (child.g + self.weight * h, next(counter), child))

        return None


class WeightedAStarSearch(AStarSearch):
    """Weighted A* (as in HSP): inflates h by a weight w >= 1 for faster, bounded-suboptimal search.

    Returned plans cost at most w times the optimum when the heuristic is admissible.
    """

    name = StrategyName.WEIGHTED_ASTAR
    default_heuristic = HeuristicType.SUM
    default_weight = 2.0


class GreedyBestFirstSearch(SearchStrategy):
    """Greedy best-first search ordered by h alone (FIFO among equal estimates)."""

    name = StrategyName.GBFS
    default_heuristic = HeuristicType.FAST_FORWARD

    def run(self, context: SearchContext) -> SearchNode | None:
        """Search with a priority frontier ordered by heuristic estimates."""
        counter = itertools.count()
        root = context.root()
        if context.is_goal(root):
            return root

        root_h = context.evaluate(root.state)
        if root_h == math.inf:
            return None

        frontier: list[tuple[float, int, SearchNode]] = [(root_h, next(counter), root)]
        visited = {root.state}
        while frontier:
            context.observe_frontier(len(frontier))
            _, _, node = heapq.heappop(frontier)
            for child in context.expand(node):
                if child.state in visited:
                    continue
                visited.add(child.state)
                if context.is_goal(child):
                    return child

                h = context.evaluate(child.state)
                if h != math.inf:
                    heapq.heappush(frontier, (h, next(counter), child))

        return None
