"""Define uninformed search strategies (breadth-first and depth-first)."""

from __future__ import annotations

from collections import deque

from stateplan.search.search_node import SearchNode
from stateplan.search.strategy import SearchContext, SearchStrategy
from stateplan.search.strategy_name import StrategyName


class BreadthFirstSearch(SearchStrategy):
    """Breadth-first search: expands states in order of increasing plan length.

    Returns a plan with the fewest actions (cost-optimal for unit-cost problems).
    """

    name = StrategyName.BFS

    def run(self, context: SearchContext) -> SearchNode | None:
        """Search with a FIFO frontier, testing for the goal when states are generated."""
        root = context.root()
        if context.is_goal(root):
            return root

        frontier = deque([root])
        visited = {root.state}
        while frontier:
            node = frontier.popleft()
            for child in context.expand(node):
                if child.state in visited:
                    continue
                if context.is_goal(child):
                    return child
                visited.add(child.state)
                frontier.append(child)
            context.observe_frontier(len(frontier))

        return None


class DepthFirstSearch(SearchStrategy):
    """Depth-first graph search: LIFO frontier with a visited set (no optimality guarantee)."""

    name = StrategyName.DFS

    def run(self, context: SearchContext) -> SearchNode | None:
        """Search with a LIFO frontier, expanding the first-generated child first."""
        root = context.root()
        if context.is_goal(root):
            return root

        stack = [root]
        visited = {root.state}
        while stack:
            node = stack.pop()
            children: list[SearchNode] = []
            for child in context.expand(node):
                if child.state in visited:
                    continue
                if context.is_goal(child):
                    return child
                visited.add(child.state)
                children.append(child)
            stack.extend(reversed(children))
            context.observe_frontier(len(stack))

        return None
