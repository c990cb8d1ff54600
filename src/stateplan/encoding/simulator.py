"""Define a simulator to generate random transitions in grounded problems."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from stateplan.encoding.bit_state import BitState
    from stateplan.encoding.grounded_action import GroundedAction
    from stateplan.encoding.grounded_problem import GroundedProblem


@dataclass(frozen=True)
class Transition:
    """A single transition produced by applying a grounded action."""

    before: BitState
    action: GroundedAction
    after: BitState


class RandomWalkSimulator:
    """A simulator for generating random walks through the state space of a grounded problem."""

    def __init__(self, problem: GroundedProblem) -> None:
        """Initialize the simulator for the given grounded problem."""
        self.problem = problem

    def generate_random_transition(
        self,
        state: BitState,
        rng: np.random.Generator | None = None,
    ) -> Transition | None:
        """Generate a single random transition from the given state.

        :param state: Current state
        :param rng: Optional random number generator, defaults to None
        :return: Transition via a uniformly chosen applicable action (None if no action applies)
        """
        if rng is None:
            rng = np.random.default_rng()

        applicable = list(self.problem.applicable_actions(state))
        if not applicable:
            return None

        selected_action = applicable[int(rng.integers(len(applicable)))]
        return Transition(before=state, action=selected_action, after=selected_action.apply(state))

    def generate_random_walk(
        self,
        n: int,
        start_state: BitState | None = None,
        rng: np.random.Generator | None = None,
    ) -> list[Transition]:
        """Generate a random walk of (at most) N transitions starting from the given state.

        :param n: Number of transitions to generate
        :param start_state: Initial state (if None, defaults to the problem's initial state)
        :param rng: Optional random number generator, defaults to None
        :return: List of generated transitions (shorter than N if the walk reaches a dead end)
        """
        if start_state is None:
            start_state = self.problem.initial_state

        if rng is None:
            rng = np.random.default_rng()

        transitions: list[Transition] = []
        curr_state = start_state

        for _ in range(n):
            next_transition = self.generate_random_transition(curr_state, rng)
            if next_transition is None:  # Stop once no action applies
                break

            curr_state = next_transition.after
            transitions.append(next_transition)

        return transitions

    def sample_reachable_states(self, num_walks: int, walk_length: int, seed: int | None = None) -> list[BitState]:
        """Sample distinct reachable states by running several random walks from the initial state.

        :param num_walks: Number of independent walks
        :param walk_length: Maximum number of transitions per walk
        :param seed: Optional seed for reproducible sampling
        :return: Distinct visited states (including the initial state), in first-visited order
        """
        rng = np.random.default_rng(seed)
        states: dict[BitState, None] = {self.problem.initial_state: None}
        for _ in range(num_walks):
            for transition in self.generate_random_walk(walk_length, rng=rng):
                states.setdefault(transition.after, None)
        return list(states)
