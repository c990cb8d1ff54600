"""Define a class to represent symbolic predicates representing abstract relations."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stateplan.symbols.discrete_parameter import DiscreteParameter


@dataclass(frozen=True)
class Predicate:
    """A symbol representing an abstract relationship between objects."""

    name: str
    parameters: tuple[DiscreteParameter, ...]
    """Parameters specifying type constraints on expected arguments of the predicate."""

    def __str__(self) -> str:
        """Return a human-readable string representation of the predicate."""
        params = ", ".join(f"{p.name}: {p.type_}" for p in self.parameters)
        return f"{self.name}({params})"

    @property
    def arity(self) -> int:
        """Retrieve the number of arguments expected by the predicate."""
        return len(self.parameters)

    def to_pddl(self) -> str:
        """Return a PDDL string representation of the predicate."""
        params_per_type: dict[str, list[str]] = defaultdict(list)
        for p in self.parameters:
            params_per_type[p.type_].append(p.name)

        typed_variables = [f"{' '.join(params)} - {t}" for t, params in params_per_type.items()]
        variables_str = (" " + " ".join(typed_variables)) if typed_variables else ""
        return f"({self.name}{variables_str})"
