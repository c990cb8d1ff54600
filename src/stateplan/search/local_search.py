"""Define local search strategies (hill climbing and enforced hill climbing).

Both strategies are incomplete: they may report exhaustion even when a plan exists.

Reference: Hoffmann & Nebel, "The FF planning system: Fast plan generation through heuristic
search" (2001), Section 4.
"""

from __future__ import annotations

import math
from collections import deque

from stateplan.heuristics.heuristic_type import HeuristicType
from stateplan.search.budget import SearchBudget
from stateplan.search.search_node import SearchNode
from stateplan.search.strategy import SearchContext, SearchStrategy
from stateplan.search.strategy_name import StrategyName

DEFAULT_MAX_SIDEWAYS_MOVES = 20
DEFAULT_MAX_PLATEAU_STATES = 100_000


class HillClimbing(SearchStrategy):
    """Hill climbing: repeatedly moves to the best (lowest-h) unvisited successor.

    A move must strictly improve h, except that up to `max_sideways_moves` consecutive moves to
    successors with equal h are allowed to cross plateaus (the count resets on each improvement).
    """

    name = StrategyName.HILL_CLIMBING
    default_heuristic = HeuristicType.FAST_FORWARD
    is_complete = False

    def __init__(
        self,
        budget: SearchBudget | None = None,
        heuristic_type: HeuristicType | None = None,
        max_sideways_moves: int = DEFAULT_MAX_SIDEWAYS_MOVES,
    ) -> None:
        """Initialize the strategy.

        :param budget: Default budget for each search
        :param heuristic_type: Heuristic created when `search` is given none
        :param max_sideways_moves: Consecutive equal-h moves allowed (0 = strict improvement only)
        :raises ValueError: If the number of sideways moves is negative
        """
        super().__init__(budget, heuristic_type)
        if max_sideways_moves < 0:
            raise ValueError(f"Sideways moves must be non-negative, got {max_sideways_moves}.")
        self.max_sideways_moves = max_sideways_moves

    def run(self, context: SearchContext) -> SearchNode | None:
        """Climb from the initial state until reaching the goal or a local optimum."""
        node = context.root()
        h = context.evaluate(node.state)
        if h == math.inf:
            return None

        visited = {node.state}
        sideways_moves = 0
        while not context.is_goal(node):
            best: SearchNode | None = None
            best_h = math.inf
            for child in context.expand(node):
                if child.state in visited:
                    continue
                child_h = context.evaluate(child.state)
                if child_h < best_h:  # Ties keep the first-generated successor
                    best, best_h = child, child_h

            if best is None or best_h > h:
                return None  # Stuck at a local optimum (or dead end)

            if best_h == h:
                if sideways_moves >= self.max_sideways_moves:
                    return None
                sideways_moves += 1
            else:
                sideways_moves = 0

            visited.add(best.state)
            node, h = best, best_h
            context.observe_frontier(1)

        return node


class EnforcedHillClimbing(SearchStrategy):
    """Enforced hill climbing: breadth-first search from each state for a strictly better state.

    The search commits to the path towards each improving state; if a breadth-first search
    exhausts the plateau (or `max_plateau_states`) without improving, the strategy gives up.
    """

    name = StrategyName.ENFORCED_HILL_CLIMBING
    default_heuristic = HeuristicType.FAST_FORWARD
    is_complete = False

    def __init__(
        self,
        budget: SearchBudget | None = None,
        heuristic_type: HeuristicType | None = None,
        max_plateau_states: int = DEFAULT_MAX_PLATEAU_STATES,
    ) -> None:
        """Initialize the strategy.

        :param budget: Default budget for each search
        :param heuristic_type: Heuristic created when `search` is given none
        :param max_plateau_states: Largest number of states visited by one breadth-first escape
        :raises ValueError: If the plateau bound is not positive
        """
        super().__init__(budget, heuristic_type)
        if max_plateau_states < 1:
            raise ValueError(f"Plateau state bound must be positive, got {max_plateau_states}.")
        self.max_plateau_states = max_plateau_states

    def run(self, context: SearchContext) -> SearchNode | None:
        """Alternate breadth-first escapes until reaching the goal."""
        node = context.root()
        h = context.evaluate(node.state)
        if h == math.inf:
            return None

        while not context.is_goal(node):
            improvement = self.find_better_state(context, node, h)
            if improvement is None:
                return None
            node, h = improvement

        return node

    def find_better_state(self, context: SearchContext, start: SearchNode, h: float) -> tuple[SearchNode, float] | None:
        """Breadth-first search from a node for the first state with a strictly lower h (or a goal).

        :return: Pair of (improving node, its h-value), or None if no improving state was found
        """
        frontier = deque([start])
        seen = {start.state}
        while frontier:
            node = frontier.popleft()
            for child in context.expand(node):
                if child.state in seen:
                    continue
                seen.add(child.state)
                if len(seen) > self.max_plateau_states:
                    return None

                child_h = context.evaluate(child.state)
                if child_h == math.inf:
                    continue
                if child_h < h or context.is_goal(child):
                    return child, child_h
                frontier.append(child)
            context.observe_frontier(len(frontier))

        return None
