"""Unit tests for the delete-relaxation heuristics."""

import dataclasses
import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from stateplan.encoding import BitState, GroundedProblem, RandomWalkSimulator
from stateplan.heuristics import (
    Aggregation,
    FastForwardHeuristic,
    HeuristicType,
    MaxHeuristic,
    create_heuristic,
)
from stateplan.search import BreadthFirstSearch

from ..fixtures.planning_fixtures import encode_benchmark


@pytest.mark.parametrize(
    ("heuristic_type", "expected"),
    [
        (HeuristicType.BLIND, 1.0),
        (HeuristicType.MAX, 2.0),
        (HeuristicType.SUM, 12.0),
        (HeuristicType.FAST_FORWARD, 9.0),
    ],
)
def test_gripper_initial_estimates(
    gripper_problem: GroundedProblem,
    heuristic_type: HeuristicType,
    expected: float,
) -> None:
    """Verify each heuristic's estimate for the initial state of the four-ball gripper problem."""
    # Arrange - Each ball needs a pick (1), the robot's move (1), and a drop (1)
    heuristic = create_heuristic(heuristic_type, gripper_problem)

    # Act
    estimate = heuristic(gripper_problem.initial_state)

    # Assert - h_max = 2 (pick/move, then drop); h_add = 4 * 3; h_FF = 4 picks + 1 move + 4 drops
    assert estimate == expected


@pytest.mark.parametrize("heuristic_type", list(HeuristicType))
def test_goal_states_estimate_zero(solved_gripper_problem: GroundedProblem, heuristic_type: HeuristicType) -> None:
    """Verify that every heuristic estimates zero for a goal state."""
    heuristic = create_heuristic(heuristic_type, solved_gripper_problem)
    assert heuristic(solved_gripper_problem.initial_state) == 0.0


@pytest.mark.parametrize("heuristic_type", [HeuristicType.MAX, HeuristicType.SUM, HeuristicType.FAST_FORWARD])
def test_dead_ends_estimate_infinity(tokens_problem: GroundedProblem, heuristic_type: HeuristicType) -> None:
    """Verify that relaxation heuristics detect states from which the goal is unreachable."""
    # Arrange - Spend the only token on the first reward
    heuristic = create_heuristic(heuristic_type, tokens_problem)
    buy_a = next(a for a in tokens_problem.actions if a.name == "buy-a")
    dead_end = buy_a.apply(tokens_problem.initial_state)

    # Act/Assert - The initial state looks solvable, but the dead end does not
    assert heuristic(tokens_problem.initial_state) < math.inf
    assert heuristic(dead_end) == math.inf


def test_heuristic_properties() -> None:
    """Verify each heuristic type's aggregation and admissibility."""
    assert HeuristicType.MAX.aggregation == Aggregation.MAX
    assert HeuristicType.SUM.aggregation == Aggregation.SUM
    assert HeuristicType.FAST_FORWARD.aggregation == Aggregation.SUM
    assert HeuristicType.MAX.is_admissible
    assert HeuristicType.BLIND.is_admissible
    assert not HeuristicType.SUM.is_admissible
    assert not HeuristicType.FAST_FORWARD.is_admissible


def test_create_heuristic_by_name(gripper_problem: GroundedProblem) -> None:
    """Verify that heuristics can be created from their names."""
    assert isinstance(create_heuristic("max", gripper_problem), MaxHeuristic)
    assert isinstance(create_heuristic("fast_forward", gripper_problem), FastForwardHeuristic)
    with pytest.raises(ValueError):
        create_heuristic("landmark-cut", gripper_problem)


def test_conditional_effects_are_relaxed(briefcase_problem: GroundedProblem) -> None:
    """Verify that facts achieved only through conditional effects are reachable in the relaxation."""
    # Arrange - `(at d office)` can only be achieved by carrying `d` in the briefcase
    heuristic = create_heuristic(HeuristicType.MAX, briefcase_problem)

    # Act
    estimate = heuristic(briefcase_problem.initial_state)

    # Assert - Putting `d` in the briefcase and moving it takes two steps in the relaxation
    assert estimate == 2.0


BLOCKSWORLD = encode_benchmark("blocksworld")
BLOCKSWORLD_STATES = RandomWalkSimulator(BLOCKSWORLD).sample_reachable_states(num_walks=20, walk_length=8, seed=7)


@settings(max_examples=25, deadline=None)
@given(st.sampled_from(BLOCKSWORLD_STATES))
def test_admissible_heuristics_never_overestimate(state: BitState) -> None:
    """Verify that h_max and the blind heuristic never exceed the optimal cost from random-walk states."""
    # Arrange - Compute the optimal (unit) cost from the state using breadth-first search
    problem = dataclasses.replace(BLOCKSWORLD, initial_state=state)
    outcome = BreadthFirstSearch().search(problem)
    assert outcome.plan is not None
    optimal_cost = outcome.plan.cost

    # Act/Assert
    for heuristic_type in (HeuristicType.MAX, HeuristicType.BLIND):
        assert create_heuristic(heuristic_type, problem)(state) <= optimal_cost


def test_gripper_goal_levels(gripper_problem: GroundedProblem) -> None:
    """Verify that the goal facts of the gripper problem first appear in the second relaxed layer."""
    # Arrange
    heuristic = MaxHeuristic(gripper_problem)

    # Act
    exploration = heuristic.explore(gripper_problem.initial_state)

    # Assert - Carrying a ball needs a pick (layer 1) before its drop (layer 2)
    assert [exploration.level[g] for g in heuristic.goal_facts] == [2, 2, 2, 2]


@settings(max_examples=25, deadline=None)
@given(st.sampled_from(BLOCKSWORLD_STATES))
def test_unit_cost_max_equals_goal_level(state: BitState) -> None:
    """Verify that with unit action costs, h_max is the deepest relaxed layer reached by a goal fact."""
    # Arrange
    heuristic = MaxHeuristic(BLOCKSWORLD)

    # Act
    exploration = heuristic.explore(state)

    # Assert - Every fact's cost equals its layer when each action costs 1
    assert exploration.cost == exploration.level
    assert heuristic(state) == max(exploration.level[g] for g in heuristic.goal_facts)
