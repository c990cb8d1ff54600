"""Unit tests for the sequential plan model."""

import pytest

from stateplan.encoding import GroundedProblem
from stateplan.plans import Plan, PlanExecutionError, PlanStep
from stateplan.search import AStarSearch, BreadthFirstSearch


def test_plan_from_actions_assigns_positions(travel_problem: GroundedProblem) -> None:
    """Verify that plans built from actions number their steps 0, 1, 2, ..."""
    # Arrange
    drives = [a for a in travel_problem.actions if a.name == "drive"]

    # Act
    plan = Plan.from_actions(drives)

    # Assert
    assert [step.position for step in plan] == list(range(len(drives)))
    assert plan.actions == tuple(drives)
    assert plan.makespan == len(drives)


def test_plan_rejects_out_of_order_positions(travel_problem: GroundedProblem) -> None:
    """Verify that step positions must be consecutive and begin at zero."""
    action = travel_problem.actions[0]
    with pytest.raises(ValueError):
        Plan((PlanStep(action, 1),))
    with pytest.raises(ValueError):
        Plan((PlanStep(action, 0), PlanStep(action, 0)))


def test_empty_plan() -> None:
    """Verify the properties of the empty plan."""
    plan = Plan()
    assert plan.is_empty
    assert len(plan) == 0
    assert plan.cost == 0


def test_empty_plan_validity(gripper_problem: GroundedProblem, solved_gripper_problem: GroundedProblem) -> None:
    """Verify that the empty plan is valid only when the initial state satisfies the goal."""
    assert Plan().is_valid_for(solved_gripper_problem)
    assert not Plan().is_valid_for(gripper_problem)


def test_found_plan_simulates_to_goal(blocksworld_problem: GroundedProblem) -> None:
    """Verify that simulating a found plan visits one state per step and ends in a goal state."""
    # Arrange
    outcome = BreadthFirstSearch().search(blocksworld_problem)
    assert outcome.plan is not None

    # Act
    states = outcome.plan.simulate(blocksworld_problem.initial_state)

    # Assert
    assert len(states) == len(outcome.plan) + 1
    assert states[0] == blocksworld_problem.initial_state
    assert blocksworld_problem.is_goal(states[-1])
    outcome.plan.validate(blocksworld_problem)


def test_inapplicable_step_fails_validation(blocksworld_problem: GroundedProblem) -> None:
    """Verify that a plan whose steps are reordered no longer executes."""
    # Arrange - Moving the last step to the front makes it inapplicable
    outcome = BreadthFirstSearch().search(blocksworld_problem)
    assert outcome.plan is not None
    actions = list(outcome.plan.actions)
    reordered = Plan.from_actions([actions[-1], *actions[:-1]])

    # Act/Assert
    with pytest.raises(PlanExecutionError, match="not applicable"):
        reordered.validate(blocksworld_problem)
    assert not reordered.is_valid_for(blocksworld_problem)


def test_incomplete_plan_misses_goal(travel_problem: GroundedProblem) -> None:
    """Verify that a plan ending short of the goal reports the missing goal facts."""
    # Arrange
    outcome = AStarSearch().search(travel_problem)
    assert outcome.plan is not None
    prefix = Plan.from_actions(outcome.plan.actions[:1])

    # Act/Assert
    with pytest.raises(PlanExecutionError, match=r"\(at newyork\)"):
        prefix.validate(travel_problem)


def test_plan_cost_sums_action_costs(travel_problem: GroundedProblem) -> None:
    """Verify that a plan's cost is the sum of its actions' costs."""
    outcome = AStarSearch().search(travel_problem)
    assert outcome.plan is not None
    assert outcome.plan.cost == sum(a.cost for a in outcome.plan.actions) == 2.0
