"""Ground lifted goal descriptions into disjunctive normal form over ground atoms.

Atoms of static predicates (those no action effect mentions) and equalities are evaluated
against the initial state while grounding, so they never reach the encoded problem.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator

from stateplan.encoding.errors import EncodingError
from stateplan.symbols.formulas import (
    AtomFormula,
    Conjunction,
    Disjunction,
    Equality,
    Existential,
    Formula,
    Implication,
    Negation,
    Universal,
    is_variable,
)
from stateplan.symbols.ground_atom import GroundAtom

if TYPE_CHECKING:
    from stateplan.symbols.discrete_parameter import DiscreteParameter
    from stateplan.symbols.objects import ObjectSymbols

MAX_DNF_CLAUSES = 1024
"""Largest number of disjuncts a grounded formula may expand into."""

GroundBindings = dict[str, str]
"""A mapping from variable names to the names of the objects bound to them."""


@dataclass(frozen=True)
class GroundClause:
    """A conjunction of ground literals (one disjunct of a formula in DNF)."""

    positive: tuple[GroundAtom, ...] = ()
    negative: tuple[GroundAtom, ...] = ()

    def conjoin(self, other: GroundClause) -> GroundClause | None:
        """Compute the conjunction of two clauses (None if it is contradictory)."""
        positive = tuple(dict.fromkeys(self.positive + other.positive))
        negative = tuple(dict.fromkeys(self.negative + other.negative))
        if not set(positive).isdisjoint(negative):
            return None
        return GroundClause(positive, negative)

    def simplify(self, changeable: set[GroundAtom], initial_state: frozenset[GroundAtom]) -> GroundClause | None:
        """Remove literals over atoms that no action can change, evaluating them in the initial state.

        :param changeable: Atoms added or deleted by some action
        :param initial_state: Atoms true in the initial state
        :return: Simplified clause, or None if some constant literal is false
        """
        positive: list[GroundAtom] = []
        for atom in self.positive:
            if atom in changeable:
                positive.append(atom)
            elif atom not in initial_state:
                return None

        negative: list[GroundAtom] = []
        for atom in self.negative:
            if atom in changeable:
                negative.append(atom)
            elif atom in initial_state:
                return None

        return GroundClause(tuple(positive), tuple(negative))


DNF_TRUE: list[GroundClause] = [GroundClause()]
DNF_FALSE: list[GroundClause] = []


class FormulaGrounder:
    """Converts lifted formulas under variable bindings into ground DNF."""

    def __init__(
        self,
        objects: ObjectSymbols,
        fluents: frozenset[str],
        initial_state: frozenset[GroundAtom],
        max_clauses: int = MAX_DNF_CLAUSES,
    ) -> None:
        """Initialize the grounder.

        :param objects: Typed objects over which quantifiers range
        :param fluents: Names of predicates changed by some action effect
        :param initial_state: Atoms true in the initial state (decides static atoms)
        :param max_clauses: Largest number of disjuncts permitted in a grounded formula
        """
        self.objects = objects
        self.fluents = fluents
        self.initial_state = initial_state
        self.max_clauses = max_clauses

    def ground_term(self, term: str, bindings: GroundBindings) -> str:
        """Substitute the bound object for a variable (object names are returned unchanged).

        :raises EncodingError: If the term is an unbound variable
        """
        if not is_variable(term):
            return term
        if term not in bindings:
            raise EncodingError(f"Variable {term} is not bound by any parameter or quantifier.")
        return bindings[term]

    def ground_atom(self, atom: AtomFormula, bindings: GroundBindings) -> GroundAtom:
        """Substitute bound objects for the variables of a lifted atom."""
        return GroundAtom(atom.predicate, tuple(self.ground_term(t, bindings) for t in atom.terms))

    def quantified_bindings(
        self,
        variables: tuple[DiscreteParameter, ...],
        bindings: GroundBindings,
    ) -> Iterator[GroundBindings]:
        """Iterate over extensions of the bindings to the given typed variables (declaration order)."""
        domains = [self.objects.get_objects_of_type(v.type_) for v in variables]
        for combination in itertools.product(*domains):
            extended = dict(bindings)
            extended.update({v.name: obj.name for v, obj in zip(variables, combination)})
            yield extended

    def holds_statically(self, formula: Formula, bindings: GroundBindings) -> bool:
        """Evaluate whether a formula over static atoms may hold (False iff it is constantly false)."""
        return bool(self.to_dnf(formula, bindings))

    def to_dnf(self, formula: Formula, bindings: GroundBindings, positive: bool = True) -> list[GroundClause]:
        """Ground a formula into disjunctive normal form.

        Negations are pushed down to atoms; static atoms and equalities are evaluated.

        :param formula: Lifted formula to be grounded
        :param bindings: Objects bound to the formula's free variables
        :param positive: Whether to ground the formula (True) or its negation (False)
        :return: List of clauses (empty list = false; a single empty clause = true)
        :raises EncodingError: If the DNF exceeds the maximum number of clauses
        """
        match formula:
            case AtomFormula():
                atom = self.ground_atom(formula, bindings)
                if atom.name not in self.fluents:
                    return DNF_TRUE if (atom in self.initial_state) == positive else DNF_FALSE
                if positive:
                    return [GroundClause(positive=(atom,))]
                return [GroundClause(negative=(atom,))]

            case Equality(left=left, right=right):
                equal = self.ground_term(left, bindings) == self.ground_term(right, bindings)
                return DNF_TRUE if equal == positive else DNF_FALSE

            case Negation(operand=operand):
                return self.to_dnf(operand, bindings, not positive)

            case Conjunction(operands=operands):
                parts = (self.to_dnf(op, bindings, positive) for op in operands)
                return self.product(parts) if positive else self.union(parts)

            case Disjunction(operands=operands):
                parts = (self.to_dnf(op, bindings, positive) for op in operands)
                return self.union(parts) if positive else self.product(parts)

            case Implication(premise=premise, conclusion=conclusion):
                return self.to_dnf(Disjunction((Negation(premise), conclusion)), bindings, positive)

            case Existential(variables=variables, body=body):
                parts = (self.to_dnf(body, b, positive) for b in self.quantified_bindings(variables, bindings))
                return self.union(parts) if positive else self.product(parts)

            case Universal(variables=variables, body=body):
                parts = (self.to_dnf(body, b, positive) for b in self.quantified_bindings(variables, bindings))
                return self.product(parts) if positive else self.union(parts)

        raise EncodingError(f"Cannot ground formula of type {type(formula).__name__}.")

    def product(self, parts: Iterable[list[GroundClause]]) -> list[GroundClause]:
        """Conjoin formulas in DNF by distributing the conjunction over their disjuncts."""
        result = DNF_TRUE
        for part in parts:
            if not part:
                return DNF_FALSE
            combined: dict[GroundClause, None] = {}
            for left in result:
                for right in part:
                    clause = left.conjoin(right)
                    if clause is not None:
                        combined[clause] = None
            result = self._checked(list(combined))
            if not result:
                return DNF_FALSE
        return result

    def union(self, parts: Iterable[list[GroundClause]]) -> list[GroundClause]:
        """Disjoin formulas in DNF, short-circuiting once any disjunct is trivially true."""
        combined: dict[GroundClause, None] = {}
        for part in parts:
            for clause in part:
                if clause == GroundClause():
                    return DNF_TRUE
                combined[clause] = None
            self._checked(list(combined))
        return list(combined)

    def _checked(self, clauses: list[GroundClause]) -> list[GroundClause]:
        """Verify that a DNF stays within the permitted number of clauses."""
        if len(clauses) > self.max_clauses:
            raise EncodingError(f"Formula expands into more than {self.max_clauses} disjunctive clauses.")
        return clauses
