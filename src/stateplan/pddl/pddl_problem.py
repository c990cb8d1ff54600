"""Define a class to represent PDDL planning problems."""

from __future__ import annotations

from dataclasses import dataclass

from stateplan.symbols.formulas import Formula
from stateplan.symbols.ground_atom import GroundAtom
from stateplan.symbols.objects import ObjectSymbol


@dataclass(frozen=True)
class PDDLProblem:
    """A PDDL planning problem instance for some domain."""

    name: str
    domain_name: str
    requirements: frozenset[str]
    objects: tuple[ObjectSymbol, ...]
    """Objects declared by the problem, in declaration order."""

    initial_state: frozenset[GroundAtom]
    """Atoms true in the initial state (every other atom is false)."""

    goal: Formula
    metric: str | None = None
    """Optimization metric, e.g. `minimize (total-cost)` (None if the problem declares none)."""

    def to_pddl(self) -> str:
        """Return a PDDL string representation of the problem."""
        objects = " ".join(f"{o.name} - {o.type_}" for o in self.objects)
        init = " ".join(map(str, sorted(self.initial_state)))
        lines = [
            f"(define (problem {self.name})",
            f"  (:domain {self.domain_name})",
            f"  (:objects {objects})",
            f"  (:init {init})",
            f"  (:goal {self.goal.to_pddl()})",
        ]
        if self.metric is not None:
            lines.append(f"  (:metric {self.metric})")
        return "\n".join(lines) + ")"
