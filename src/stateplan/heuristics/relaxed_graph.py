"""Explore the delete relaxation of a grounded problem from a given state.

Each grounded action contributes one relaxed operator, and each of its conditional effects
contributes another whose preconditions also include the effect's condition. Negative
preconditions and delete effects are ignored.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from stateplan.encoding.bit_state import BitState
from stateplan.encoding.grounded_problem import GroundedProblem
from stateplan.heuristics.heuristic_type import Aggregation

NO_SUPPORTER = -1


@dataclass(frozen=True)
class RelaxedOperator:
    """An operator of the delete relaxation over fact indices."""

    preconditions: tuple[int, ...]
    adds: tuple[int, ...]
    cost: float
    action_index: int
    """Position of the grounded action this operator was derived from."""


@dataclass(frozen=True)
class RelaxedExploration:
    """Per-fact results of exploring the delete relaxation from one state."""

    cost: list[float]
    """Estimated cost of reaching each fact (infinite if unreachable)."""

    level: list[float]
    """First relaxed layer in which each fact becomes true (infinite if unreachable)."""

    supporter: list[int]
    """Index of the cheapest relaxed operator achieving each fact (`NO_SUPPORTER` if none)."""


def build_relaxed_operators(problem: GroundedProblem) -> tuple[RelaxedOperator, ...]:
    """Derive the relaxed operators of a grounded problem (in action order)."""
    operators: list[RelaxedOperator] = []
    for index, action in enumerate(problem.actions):
        preconditions = tuple(BitState(action.positive_preconditions).indices())
        operators.append(
            RelaxedOperator(preconditions, tuple(BitState(action.add).indices()), action.cost, index),
        )
        for effect in action.conditional_effects:
            conditioned = tuple(BitState(action.positive_preconditions | effect.condition).indices())
            operators.append(
                RelaxedOperator(conditioned, tuple(BitState(effect.add).indices()), action.cost, index),
            )
    return tuple(operators)


def explore(
    operators: tuple[RelaxedOperator, ...],
    num_facts: int,
    state: BitState,
    aggregation: Aggregation,
) -> RelaxedExploration:
    """Apply every relaxed operator until no fact's cost or level improves.

    :param operators: Relaxed operators of the problem
    :param num_facts: Number of indexed facts in the problem
    :param state: State from which the relaxation is explored
    :param aggregation: How an operator's precondition costs are combined (max or sum)
    :return: Exploration recording each fact's cost, level, and cheapest supporter
    """
    cost = [math.inf] * num_facts
    level = [math.inf] * num_facts
    supporter = [NO_SUPPORTER] * num_facts
    for index in state.indices():
        cost[index] = 0.0
        level[index] = 0

    use_max = aggregation == Aggregation.MAX
    changed = True
    while changed:
        changed = False
        for k, op in enumerate(operators):
            pre_cost = 0.0
            pre_level = 0.0
            for p in op.preconditions:
                if cost[p] == math.inf:
                    break
                pre_cost = max(pre_cost, cost[p]) if use_max else pre_cost + cost[p]
                pre_level = max(pre_level, level[p])
            else:
                total = pre_cost + op.cost
                for a in op.adds:
                    if total < cost[a]:
                        cost[a] = total
                        supporter[a] = k
                        changed = True
                    if pre_level + 1 < level[a]:
                        level[a] = pre_level + 1
                        changed = True

    return RelaxedExploration(cost, level, supporter)
