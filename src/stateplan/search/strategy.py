"""Define the contract shared by all state-space search strategies."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Iterator

from stateplan.heuristics.heuristics import Heuristic, create_heuristic
from stateplan.search.budget import BudgetExceeded, BudgetMonitor, SearchBudget
from stateplan.search.outcome import SearchOutcome, SearchStatistics, SearchStatus
from stateplan.search.search_node import SearchNode

if TYPE_CHECKING:
    from stateplan.encoding.bit_state import BitState
    from stateplan.encoding.grounded_problem import GroundedProblem
    from stateplan.heuristics.heuristic_type import HeuristicType
    from stateplan.plans.plan import Plan
    from stateplan.search.strategy_name import StrategyName

logger = logging.getLogger(__name__)


class SearchContext:
    """Private bookkeeping for a single search: budget checks, statistics, and evaluation."""

    def __init__(
        self,
        problem: GroundedProblem,
        heuristic: Heuristic | None,
        monitor: BudgetMonitor,
        statistics: SearchStatistics,
    ) -> None:
        """Initialize the context of one search over the given problem."""
        self.problem = problem
        self.heuristic = heuristic
        self.monitor = monitor
        self.statistics = statistics

    def root(self) -> SearchNode:
        """Create the search node for the problem's initial state."""
        return SearchNode(self.problem.initial_state)

    def is_goal(self, node: SearchNode) -> bool:
        """Evaluate whether the node's state satisfies the goal."""
        return self.problem.is_goal(node.state)

    def evaluate(self, state: BitState) -> float:
        """Estimate the cost-to-go from a state (0 without a heuristic), counting dead ends."""
        if self.heuristic is None:
            return 0.0

        self.statistics.evaluated += 1
        h = self.heuristic(state)
        if h == math.inf:
            self.statistics.dead_ends += 1
        return h

    def expand(self, node: SearchNode) -> Iterator[SearchNode]:
        """Generate the children of a node, checking the budget per expansion and per successor.

        :raises BudgetExceeded: If the time or state budget runs out
        """
        self.monitor.check_time()
        self.statistics.expanded += 1
        for action, successor in self.problem.successors(node.state):
            self.monitor.check_time()
            self.statistics.generated += 1
            self.monitor.check_states(self.statistics.generated)
            yield node.child(action, successor)

    def observe_frontier(self, size: int) -> None:
        """Record the size of the frontier."""
        self.statistics.max_frontier = max(self.statistics.max_frontier, size)


class SearchStrategy(ABC):
    """A state-space search strategy: `search(problem, heuristic, budget) -> SearchOutcome`.

    Each call to `search` uses fresh private bookkeeping, so a strategy may be called repeatedly
    and the grounded problem and heuristic are only ever read. The `status` attribute only mirrors
    the latest search, so an instance is not meant for concurrent searches: use one instance per
    thread, or read the status from the returned `SearchOutcome`.
    """

    name: ClassVar[StrategyName]

    default_heuristic: ClassVar[HeuristicType | None] = None
    """Heuristic created when none is given (None for uninformed strategies)."""

    is_complete: ClassVar[bool] = True
    """Whether the strategy finds a plan whenever one exists (given enough budget)."""

    def __init__(self, budget: SearchBudget | None = None, heuristic_type: HeuristicType | None = None) -> None:
        """Initialize the strategy.

        :param budget: Default budget for each search (defaults to `SearchBudget()`)
        :param heuristic_type: Heuristic created when `search` is given none (defaults per strategy)
        """
        self.budget = budget or SearchBudget()
        self.heuristic_type = heuristic_type or self.default_heuristic
        self.status = SearchStatus.IDLE
        """Status of the most recent search (IDLE before the first search)."""

    def __str__(self) -> str:
        """Describe the strategy by its name."""
        return f"{type(self).__name__}({self.name})"

    @property
    def uses_heuristic(self) -> bool:
        """Check whether the strategy consults a heuristic."""
        return self.default_heuristic is not None

    def search(
        self,
        problem: GroundedProblem,
        heuristic: Heuristic | None = None,
        budget: SearchBudget | None = None,
    ) -> SearchOutcome:
        """Search for a plan solving the given grounded problem.

        Budget exhaustion and running out of memory are reported through the outcome's status.

        :param problem: Grounded problem to be solved
        :param heuristic: Heuristic guiding the search (created from `heuristic_type` if None)
        :param budget: Budget overriding the strategy's default budget (optional)
        :return: Outcome holding a plan if and only if the search was solved
        """
        statistics = SearchStatistics()
        self.status = SearchStatus.RUNNING

        if not problem.is_solvable:
            logger.info(f"{self.name}: goal is unreachable in the delete relaxation; no search needed.")
            return self._finish(SearchStatus.CERTIFIED_UNSOLVABLE, None, statistics)

        monitor = BudgetMonitor(budget or self.budget)
        node: SearchNode | None = None
        try:
            if not self.uses_heuristic:
                heuristic = None
            elif heuristic is None and self.heuristic_type is not None:
                heuristic = create_heuristic(self.heuristic_type, problem)
            context = SearchContext(problem, heuristic, monitor, statistics)
            node = self.run(context)
            status = SearchStatus.EXHAUSTED if node is None else SearchStatus.SOLVED
        except BudgetExceeded as e:
            logger.info(f"{self.name}: {e}")
            status = e.status
        except MemoryError:
            logger.warning(f"{self.name}: ran out of memory after expanding {statistics.expanded} states.")
            status = SearchStatus.RESOURCE_EXHAUSTED

        statistics.elapsed_s = monitor.elapsed_s
        plan = node.extract_plan() if node is not None else None
        return self._finish(status, plan, statistics)

    def _finish(self, status: SearchStatus, plan: Plan | None, statistics: SearchStatistics) -> SearchOutcome:
        """Record the terminal status of a search and package its outcome."""
        self.status = status
        logger.debug(f"{self.name} ended with status {status} after expanding {statistics.expanded} states.")
        return SearchOutcome(status=status, plan=plan, statistics=statistics, strategy=str(self.name))

    @abstractmethod
    def run(self, context: SearchContext) -> SearchNode | None:
        """Run the strategy's search loop.

        :param context: Bookkeeping for this search (problem, heuristic, budget, and statistics)
        :return: Node whose state satisfies the goal, or None if the strategy exhausted its options
        :raises BudgetExceeded: If the budget runs out during the search
        """
