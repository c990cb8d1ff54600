"""Define heuristics estimating the cost-to-go from states of a grounded problem.

Reference: Bonet & Geffner, "Planning as heuristic search" (2001); Hoffmann & Nebel,
"The FF planning system: Fast plan generation through heuristic search" (2001).
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import ClassVar

from stateplan.encoding.bit_state import BitState
from stateplan.encoding.grounded_problem import GroundedProblem
from stateplan.heuristics.heuristic_type import Aggregation, HeuristicType
from stateplan.heuristics.relaxed_graph import NO_SUPPORTER, RelaxedExploration, build_relaxed_operators, explore


class Heuristic(ABC):
    """An estimate of the remaining cost from a state to the goal.

    Heuristics only read the grounded problem and may be shared between searches.
    """

    heuristic_type: ClassVar[HeuristicType]

    def __init__(self, problem: GroundedProblem) -> None:
        """Initialize the heuristic for the given grounded problem."""
        self.problem = problem
        self.goal_facts = tuple(BitState(problem.goal).indices())

    def __call__(self, state: BitState) -> float:
        """Estimate the cost-to-go from the given state."""
        return self.estimate(state)

    def __str__(self) -> str:
        """Describe the heuristic by its type."""
        return f"{type(self).__name__}({self.heuristic_type})"

    @property
    def aggregation(self) -> Aggregation:
        """Retrieve how the heuristic combines the costs of individual goal facts."""
        return self.heuristic_type.aggregation

    @property
    def is_admissible(self) -> bool:
        """Check whether the heuristic never overestimates the optimal cost-to-go."""
        return self.heuristic_type.is_admissible

    @abstractmethod
    def estimate(self, state: BitState) -> float:
        """Estimate the cost-to-go from the given state.

        :param state: State to be evaluated
        :return: Non-negative estimate, or infinity if the goal is unreachable even when relaxed
        """


class BlindHeuristic(Heuristic):
    """Estimates zero at goal states and the cheapest action's cost elsewhere."""

    heuristic_type = HeuristicType.BLIND

    def estimate(self, state: BitState) -> float:
        """Estimate the cost-to-go from the given state without any lookahead."""
        return 0.0 if self.problem.is_goal(state) else self.problem.min_action_cost


class RelaxationHeuristic(Heuristic):
    """A heuristic computed by exploring the delete relaxation from each evaluated state."""

    def __init__(self, problem: GroundedProblem) -> None:
        """Precompute the relaxed operators of the given grounded problem."""
        super().__init__(problem)
        self.operators = build_relaxed_operators(problem)

    def explore(self, state: BitState) -> RelaxedExploration:
        """Explore the delete relaxation from the given state using the heuristic's aggregation."""
        return explore(self.operators, self.problem.num_facts, state, self.aggregation)

    def estimate(self, state: BitState) -> float:
        """Aggregate the relaxed costs of the goal facts."""
        if self.problem.is_goal(state):
            return 0.0

        exploration = self.explore(state)
        goal_costs = [exploration.cost[f] for f in self.goal_facts]
        if any(c == math.inf for c in goal_costs):
            return math.inf
        return self.aggregate(goal_costs, exploration)

    @abstractmethod
    def aggregate(self, goal_costs: list[float], exploration: RelaxedExploration) -> float:
        """Combine the (finite) relaxed costs of the goal facts into an estimate."""


class MaxHeuristic(RelaxationHeuristic):
    """The h_max heuristic: the relaxed cost of the costliest goal fact (admissible)."""

    heuristic_type = HeuristicType.MAX

    def aggregate(self, goal_costs: list[float], exploration: RelaxedExploration) -> float:
        """Take the maximum relaxed cost over goal facts."""
        return max(goal_costs, default=0.0)


class AdditiveHeuristic(RelaxationHeuristic):
    """The h_add heuristic: the sum of relaxed goal fact costs (assumes independent subgoals)."""

    heuristic_type = HeuristicType.SUM

    def aggregate(self, goal_costs: list[float], exploration: RelaxedExploration) -> float:
        """Sum the relaxed costs over goal facts."""
        return sum(goal_costs)


class FastForwardHeuristic(RelaxationHeuristic):
    """The FF heuristic: the cost of a relaxed plan extracted from the cheapest h_add supporters."""

    heuristic_type = HeuristicType.FAST_FORWARD

    def aggregate(self, goal_costs: list[float], exploration: RelaxedExploration) -> float:
        """Sum the costs of the distinct actions in a relaxed plan achieving all goal facts."""
        relaxed_plan: set[int] = set()
        marked: set[int] = set()
        agenda = list(self.goal_facts)

        while agenda:
            fact = agenda.pop()
            if fact in marked:
                continue
            marked.add(fact)

            supporter = exploration.supporter[fact]
            if supporter == NO_SUPPORTER:  # Fact holds in the evaluated state
                continue

            operator = self.operators[supporter]
            relaxed_plan.add(operator.action_index)
            agenda.extend(p for p in operator.preconditions if p not in marked)

        return sum(self.problem.actions[i].cost for i in relaxed_plan)


HEURISTIC_CLASSES: dict[HeuristicType, type[Heuristic]] = {
    HeuristicType.BLIND: BlindHeuristic,
    HeuristicType.MAX: MaxHeuristic,
    HeuristicType.SUM: AdditiveHeuristic,
    HeuristicType.FAST_FORWARD: FastForwardHeuristic,
}


def create_heuristic(heuristic_type: HeuristicType | str, problem: GroundedProblem) -> Heuristic:
    """Create a heuristic of the given type for a grounded problem.

    :param heuristic_type: Type (or name) of the heuristic
    :param problem: Grounded problem whose states will be evaluated
    :return: Constructed heuristic
    :raises ValueError: If the heuristic name is unknown
    """
    return HEURISTIC_CLASSES[HeuristicType(heuristic_type)](problem)
