"""Define a class to represent a fully grounded, bitset-encoded planning problem."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from stateplan.encoding.bit_state import BitState
from stateplan.encoding.fact_table import FactTable
from stateplan.encoding.grounded_action import GroundedAction
from stateplan.symbols.ground_atom import GroundAtom


@dataclass(frozen=True)
class GroundedProblem:
    """A grounded planning problem, shared read-only by heuristics and search strategies."""

    fact_table: FactTable
    initial_state: BitState
    goal: int
    """Bitmask of facts that must all be true in a goal state."""

    actions: tuple[GroundedAction, ...]

    is_solvable: bool
    """False if relaxed reachability proved that the goal cannot be reached."""

    name: str = ""
    domain_name: str = ""

    def __post_init__(self) -> None:
        """Verify that every bitmask fits within the fact table and that all costs are valid.

        :raises ValueError: If the problem violates an invariant of the encoding
        """
        width = len(self.fact_table)
        if self.initial_state.bits.bit_length() > width:
            raise ValueError(f"Initial state uses facts beyond the {width} indexed facts.")
        if self.goal.bit_length() > width:
            raise ValueError(f"Goal uses facts beyond the {width} indexed facts.")

        for action in self.actions:
            if action.all_facts.bit_length() > width:
                raise ValueError(f"Action {action} uses facts beyond the {width} indexed facts.")
            if action.cost < 0:
                raise ValueError(f"Action {action} has negative cost {action.cost}.")

    @property
    def num_facts(self) -> int:
        """Retrieve the width of the problem's bitset states."""
        return len(self.fact_table)

    @property
    def min_action_cost(self) -> float:
        """Retrieve the cost of the cheapest action (0.0 if there are no actions)."""
        return min((a.cost for a in self.actions), default=0.0)

    @property
    def has_unit_costs(self) -> bool:
        """Check whether every action costs exactly 1."""
        return all(a.cost == 1.0 for a in self.actions)

    def is_goal(self, state: BitState) -> bool:
        """Evaluate whether the given state satisfies the goal."""
        return state.satisfies(self.goal)

    def applicable_actions(self, state: BitState) -> Iterator[GroundedAction]:
        """Iterate over the actions applicable in the given state, in encoding order."""
        return (a for a in self.actions if a.is_applicable(state))

    def successors(self, state: BitState) -> Iterator[tuple[GroundedAction, BitState]]:
        """Iterate over (action, successor state) pairs for the applicable actions."""
        for action in self.actions:
            if action.is_applicable(state):
                yield action, action.apply(state)

    def goal_atoms(self) -> list[GroundAtom]:
        """Retrieve the ground atoms required by the goal."""
        return self.fact_table.atoms_of(self.goal)

    def describe(self, state: BitState) -> str:
        """Describe the true (non-static) facts of a state as a PDDL-style string."""
        return " ".join(map(str, state.to_atoms(self.fact_table)))
