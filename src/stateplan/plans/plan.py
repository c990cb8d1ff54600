"""Define classes to represent sequential plans over grounded actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator

if TYPE_CHECKING:
    from stateplan.encoding.bit_state import BitState
    from stateplan.encoding.grounded_action import GroundedAction
    from stateplan.encoding.grounded_problem import GroundedProblem


class PlanExecutionError(ValueError):
    """Raised when a plan cannot be executed from a problem's initial state."""


@dataclass(frozen=True)
class PlanStep:
    """A grounded action scheduled at a position (0-based) within a plan."""

    action: GroundedAction
    position: int

    def __str__(self) -> str:
        """Format the step as `position: (action args)`."""
        return f"{self.position}: {self.action}"


@dataclass(frozen=True)
class Plan:
    """A sequential plan: grounded actions at strictly ascending positions 0, 1, 2, ...

    An empty plan is a valid solution only when the initial state already satisfies the goal.
    """

    steps: tuple[PlanStep, ...] = ()

    def __post_init__(self) -> None:
        """Verify that step positions are 0, 1, 2, ... in order.

        :raises ValueError: If the positions are not consecutive and 0-based
        """
        for expected, step in enumerate(self.steps):
            if step.position != expected:
                raise ValueError(f"Plan step at index {expected} has position {step.position}.")

    @classmethod
    def from_actions(cls, actions: Iterable[GroundedAction]) -> Plan:
        """Construct a plan executing the given actions in order."""
        return cls(tuple(PlanStep(action, position) for position, action in enumerate(actions)))

    def __len__(self) -> int:
        """Retrieve the number of steps in the plan."""
        return len(self.steps)

    def __iter__(self) -> Iterator[PlanStep]:
        """Iterate over the plan's steps in position order."""
        return iter(self.steps)

    def __str__(self) -> str:
        """Create a readable multi-line representation of the plan."""
        return "\n".join(map(str, self.steps))

    @property
    def is_empty(self) -> bool:
        """Check whether the plan has no steps."""
        return not self.steps

    @property
    def actions(self) -> tuple[GroundedAction, ...]:
        """Retrieve the plan's actions in position order."""
        return tuple(step.action for step in self.steps)

    @property
    def cost(self) -> float:
        """Retrieve the total cost of the plan's actions."""
        return sum(step.action.cost for step in self.steps)

    @property
    def makespan(self) -> int:
        """Retrieve the number of time steps the plan spans (its length, for sequential plans)."""
        return len(self.steps)

    def simulate(self, initial_state: BitState) -> list[BitState]:
        """Execute the plan from the given state.

        :param initial_state: State in which execution begins
        :return: Sequence of visited states, beginning with the initial state
        :raises PlanExecutionError: If some action is not applicable when its step is reached
        """
        states = [initial_state]
        for step in self.steps:
            if not step.action.is_applicable(states[-1]):
                raise PlanExecutionError(f"Action {step.action} at position {step.position} is not applicable.")
            states.append(step.action.apply(states[-1]))
        return states

    def validate(self, problem: GroundedProblem) -> None:
        """Verify that the plan reaches a goal state from the problem's initial state.

        :raises PlanExecutionError: If an action is inapplicable or the final state misses the goal
        """
        final_state = self.simulate(problem.initial_state)[-1]
        if not problem.is_goal(final_state):
            missing = problem.fact_table.atoms_of(problem.goal & ~final_state.bits)
            raise PlanExecutionError(f"Plan ends without reaching goal facts: {' '.join(map(str, missing))}")

    def is_valid_for(self, problem: GroundedProblem) -> bool:
        """Evaluate whether the plan solves the given problem."""
        try:
            self.validate(problem)
        except PlanExecutionError:
            return False
        return True
