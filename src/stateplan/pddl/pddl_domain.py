"""Define a class to represent PDDL planning domains."""

from __future__ import annotations

from dataclasses import dataclass, field

from stateplan.pddl.type_hierarchy import TypeHierarchy
from stateplan.symbols.objects import ObjectSymbol
from stateplan.symbols.operators import Operator
from stateplan.symbols.predicate import Predicate


@dataclass(frozen=True)
class PDDLDomain:
    """A lifted PDDL planning domain."""

    name: str
    requirements: frozenset[str]
    """PDDL requirement flags declared by the domain (e.g., `:strips`, `:typing`)."""

    types: TypeHierarchy
    constants: tuple[ObjectSymbol, ...]
    predicates: dict[str, Predicate]
    """Declared predicates, indexed by name in declaration order."""

    operators: tuple[Operator, ...]
    """Lifted actions in declaration order (which fixes the order of grounded actions)."""

    functions: tuple[str, ...] = ()
    """Names of declared numeric functions (only `total-cost` is understood)."""

    unsupported_constructs: tuple[str, ...] = field(default=())
    """Descriptions of constructs that were recognized but skipped (e.g., durative actions)."""

    def get_operator(self, name: str) -> Operator:
        """Retrieve the named operator.

        :raises KeyError: If the domain defines no operator with the given name
        """
        for operator in self.operators:
            if operator.name == name:
                return operator
        raise KeyError(f"Domain '{self.name}' has no operator named '{name}'.")

    def to_pddl(self) -> str:
        """Return a PDDL string representation of the domain."""
        lines = [f"(define (domain {self.name})"]
        if self.requirements:
            lines.append(f"  (:requirements {' '.join(sorted(self.requirements))})")

        typed = [f"{t} - {self.types.parent_of(t)}" for t in self.types if self.types.parent_of(t) is not None]
        if typed:
            lines.append(f"  (:types {' '.join(typed)})")

        if self.constants:
            lines.append(f"  (:constants {' '.join(f'{c.name} - {c.type_}' for c in self.constants)})")

        predicates = " ".join(p.to_pddl() for p in self.predicates.values())
        lines.append(f"  (:predicates {predicates})")
        if self.functions:
            lines.append(f"  (:functions {' '.join(f'({f}) - number' for f in self.functions)})")

        lines.extend(op.to_pddl() for op in self.operators)
        return "\n".join(lines) + ")"
