"""Define classes to represent lifted first-order formulas in PDDL goal descriptions.

Terms are strings: names beginning with `?` are variables, all other names are objects.

Reference: Section 6 ("Goal descriptions") (pg. 8-9) of Ghallab et al., 1998.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Union

if TYPE_CHECKING:
    from stateplan.symbols.discrete_parameter import DiscreteParameter


def is_variable(term: str) -> bool:
    """Evaluate whether the given term is a variable (rather than an object name)."""
    return term.startswith("?")


@dataclass(frozen=True)
class AtomFormula:
    """An atomic formula formed by a predicate symbol applied to terms."""

    predicate: str
    terms: tuple[str, ...] = ()

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the atom."""
        return f"({' '.join((self.predicate, *self.terms))})"


@dataclass(frozen=True)
class Equality:
    """The built-in equality predicate `(= t1 t2)` (requires `:equality`)."""

    left: str
    right: str

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the equality."""
        return f"(= {self.left} {self.right})"


@dataclass(frozen=True)
class Negation:
    """A negation has the opposite truth value of the formula it negates."""

    operand: Formula

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the negation."""
        return f"(not {self.operand.to_pddl()})"


@dataclass(frozen=True)
class Conjunction:
    """A conjunction (i.e., AND) is only true if all formulas in the conjunction are true.

    The empty conjunction is the constant true.
    """

    operands: tuple[Formula, ...] = ()

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the conjunction."""
        return f"(and {' '.join(op.to_pddl() for op in self.operands)})".replace(" )", ")")


@dataclass(frozen=True)
class Disjunction:
    """A disjunction (i.e., OR) is true if any formula in the disjunction is true.

    The empty disjunction is the constant false.
    """

    operands: tuple[Formula, ...] = ()

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the disjunction."""
        return f"(or {' '.join(op.to_pddl() for op in self.operands)})".replace(" )", ")")


@dataclass(frozen=True)
class Implication:
    """An implication is true unless its premise is true but its conclusion is not."""

    premise: Formula
    conclusion: Formula

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the implication."""
        return f"(imply {self.premise.to_pddl()} {self.conclusion.to_pddl()})"


@dataclass(frozen=True)
class Existential:
    """An existentially quantified formula over typed variables."""

    variables: tuple[DiscreteParameter, ...]
    body: Formula

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the quantified formula."""
        return f"(exists ({' '.join(map(str, self.variables))}) {self.body.to_pddl()})"


@dataclass(frozen=True)
class Universal:
    """A universally quantified formula over typed variables."""

    variables: tuple[DiscreteParameter, ...]
    body: Formula

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the quantified formula."""
        return f"(forall ({' '.join(map(str, self.variables))}) {self.body.to_pddl()})"


Formula = Union[AtomFormula, Equality, Negation, Conjunction, Disjunction, Implication, Existential, Universal]
"""Any lifted goal description."""

TRUE = Conjunction(())
FALSE = Disjunction(())


def iter_atoms(formula: Formula) -> Iterator[AtomFormula]:
    """Iterate over every predicate atom occurring anywhere in the given formula."""
    stack: list[Formula] = [formula]
    while stack:
        match stack.pop():
            case AtomFormula() as atom:
                yield atom
            case Negation(operand=operand):
                stack.append(operand)
            case Conjunction(operands=operands) | Disjunction(operands=operands):
                stack.extend(reversed(operands))
            case Implication(premise=premise, conclusion=conclusion):
                stack.extend((conclusion, premise))
            case Existential(body=body) | Universal(body=body):
                stack.append(body)
            case Equality():
                pass
