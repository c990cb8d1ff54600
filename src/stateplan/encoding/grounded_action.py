"""Define classes to represent fully instantiated actions over bitset states."""

from __future__ import annotations

from dataclasses import dataclass

from stateplan.encoding.bit_state import BitState


@dataclass(frozen=True)
class ConditionalEffect:
    """An effect that takes place only if its condition holds in the predecessor state."""

    condition: int = 0
    """Bitmask of facts that must be true for the effect to fire."""

    negative_condition: int = 0
    """Bitmask of facts that must be false for the effect to fire."""

    add: int = 0
    delete: int = 0

    def fires_in(self, state: BitState) -> bool:
        """Evaluate whether the effect's condition holds in the given state."""
        return state.satisfies(self.condition) and state.is_disjoint(self.negative_condition)


@dataclass(frozen=True)
class GroundedAction:
    """A ground action whose preconditions and effects are bitmasks over fact indices."""

    name: str
    """Name of the lifted operator the action instantiates."""

    parameters: tuple[str, ...] = ()
    """Names of the objects bound to the operator's parameters (in parameter order)."""

    positive_preconditions: int = 0
    """Bitmask of facts required to be true."""

    negative_preconditions: int = 0
    """Bitmask of facts required to be false."""

    add: int = 0
    delete: int = 0
    conditional_effects: tuple[ConditionalEffect, ...] = ()

    cost: float = 1.0

    def __str__(self) -> str:
        """Create the PDDL-style signature of the action, e.g. `(pick ball1 rooma left)`."""
        return f"({' '.join((self.name, *self.parameters))})"

    def is_applicable(self, state: BitState) -> bool:
        """Evaluate whether the action's preconditions hold in the given state."""
        return state.satisfies(self.positive_preconditions) and state.is_disjoint(self.negative_preconditions)

    def apply(self, state: BitState) -> BitState:
        """Compute the successor of a state in which the action is applicable.

        Unconditional deletes are removed and unconditional adds set; then every conditional effect
        whose condition holds in the given (predecessor) state applies its deletes, then its adds,
        in declaration order.
        """
        bits = (state.bits & ~self.delete) | self.add
        for effect in self.conditional_effects:
            if effect.fires_in(state):
                bits = (bits & ~effect.delete) | effect.add
        return BitState(bits)

    @property
    def all_facts(self) -> int:
        """Retrieve a bitmask of every fact mentioned by the action."""
        mask = self.positive_preconditions | self.negative_preconditions | self.add | self.delete
        for effect in self.conditional_effects:
            mask |= effect.condition | effect.negative_condition | effect.add | effect.delete
        return mask
