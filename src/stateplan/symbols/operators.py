"""Define a class to represent lifted planning operators (PDDL actions)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from stateplan.symbols.formulas import TRUE, Formula, iter_atoms

if TYPE_CHECKING:
    from stateplan.symbols.discrete_parameter import DiscreteParameter
    from stateplan.symbols.effects import Effect


@dataclass(frozen=True)
class Operator:
    """A lifted abstract action defining a symbolic transition model.

    Equivalent to a PDDL `:action` definition, possibly using ADL constructs.
    """

    name: str
    parameters: tuple[DiscreteParameter, ...]

    effect: Effect
    """Effects of applying the operator (may nest conditional and universal effects)."""

    precondition: Formula = field(default=TRUE)
    """Goal description that must hold to apply the operator (defaults to true)."""

    def __str__(self) -> str:
        """Create a readable string representation of the operator's signature."""
        return f"{self.name}({', '.join(p.name for p in self.parameters)})"

    @property
    def precondition_predicates(self) -> set[str]:
        """Retrieve the names of all predicates mentioned in the operator's precondition."""
        return {atom.predicate for atom in iter_atoms(self.precondition)}

    def to_pddl(self) -> str:
        """Return a PDDL string representation of the operator."""
        params = " ".join(map(str, self.parameters))
        return (
            f"(:action {self.name}\n"
            f"  :parameters ({params})\n"
            f"  :precondition {self.precondition.to_pddl()}\n"
            f"  :effect {self.effect.to_pddl()})"
        )
