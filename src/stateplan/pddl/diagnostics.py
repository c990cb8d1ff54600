"""Collect errors and warnings found while reading a PDDL planning task.

The planner never encodes a task whose diagnostics report an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator

from stateplan.pddl.pddl_domain import PDDLDomain
from stateplan.pddl.pddl_problem import PDDLProblem
from stateplan.symbols.effects import ConjunctiveEffect, CostEffect, Effect, LiteralEffect, UniversalEffect, WhenEffect
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
from stateplan.symbols.objects import ObjectSymbol


class Severity(StrEnum):
    """Severity of a diagnostic message."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single message reported while reading a planning task."""

    severity: Severity
    message: str
    line: int = -1
    """Line of the PDDL source the message refers to (-1 if unknown)."""

    def __str__(self) -> str:
        """Format the diagnostic as a single line."""
        location = f" (line {self.line})" if self.line >= 0 else ""
        return f"{self.severity.upper()}: {self.message}{location}"


class Diagnostics:
    """An ordered collector of diagnostic messages."""

    def __init__(self) -> None:
        """Initialize an empty collection of diagnostics."""
        self._messages: list[Diagnostic] = []

    def __iter__(self) -> Iterator[Diagnostic]:
        """Iterate over the collected diagnostics in the order they were reported."""
        return iter(self._messages)

    def __len__(self) -> int:
        """Retrieve the number of collected diagnostics."""
        return len(self._messages)

    def error(self, message: str, line: int = -1) -> None:
        """Report an error, which prevents the task from being encoded."""
        self._messages.append(Diagnostic(Severity.ERROR, message, line))

    def warning(self, message: str, line: int = -1) -> None:
        """Report a warning, which does not prevent encoding."""
        self._messages.append(Diagnostic(Severity.WARNING, message, line))

    @property
    def errors(self) -> list[Diagnostic]:
        """Retrieve all reported errors."""
        return [d for d in self._messages if d.severity == Severity.ERROR]

    @property
    def has_errors(self) -> bool:
        """Check whether any error has been reported."""
        return any(d.severity == Severity.ERROR for d in self._messages)

    def summary(self) -> str:
        """Summarize all diagnostics as multi-line text."""
        return "\n".join(map(str, self._messages))


class TaskChecker:
    """Semantic checks on a parsed domain and problem (names, arities, types, and scoping)."""

    def __init__(self, domain: PDDLDomain, diagnostics: Diagnostics) -> None:
        """Initialize the checker for the given domain, reporting into the given diagnostics."""
        self.domain = domain
        self.diagnostics = diagnostics
        self.known_objects: dict[str, ObjectSymbol] = {c.name: c for c in domain.constants}

    def check_domain(self) -> None:
        """Check the domain's declarations and operators."""
        for constant in self.domain.constants:
            self.check_type(constant.type_, f"constant '{constant.name}'")

        for predicate in self.domain.predicates.values():
            for param in predicate.parameters:
                self.check_type(param.type_, f"predicate '{predicate.name}'")

        seen_operators: set[str] = set()
        for operator in self.domain.operators:
            context = f"action '{operator.name}'"
            if operator.name in seen_operators:
                self.diagnostics.error(f"Duplicate definition of {context}.")
            seen_operators.add(operator.name)

            names = [p.name for p in operator.parameters]
            if len(names) != len(set(names)):
                self.diagnostics.error(f"Duplicate parameter names in {context}: {names}.")
            for param in operator.parameters:
                self.check_type(param.type_, context)

            bound = frozenset(names)
            self.check_formula(operator.precondition, bound, context)
            self.check_effect(operator.effect, bound, context)

        for construct in self.domain.unsupported_constructs:
            self.diagnostics.warning(f"Domain uses an unsupported construct: {construct}.")

    def check_problem(self, problem: PDDLProblem) -> None:
        """Check the problem against the domain."""
        if problem.domain_name != self.domain.name:
            self.diagnostics.error(
                f"Problem '{problem.name}' is defined for domain '{problem.domain_name}', "
                f"but the given domain is '{self.domain.name}'.",
            )

        for obj in problem.objects:
            if obj.name in self.known_objects and self.known_objects[obj.name] != obj:
                self.diagnostics.error(f"Object '{obj.name}' is declared more than once.")
            self.check_type(obj.type_, f"object '{obj.name}'")
            self.known_objects.setdefault(obj.name, obj)

        for atom in sorted(problem.initial_state):
            self.check_atom(AtomFormula(atom.name, atom.arguments), frozenset(), "the initial state")

        self.check_formula(problem.goal, frozenset(), "the goal")

    def check_type(self, type_name: str, context: str) -> None:
        """Report an error if the named type is not declared."""
        if type_name not in self.domain.types:
            self.diagnostics.error(f"Unknown type '{type_name}' used by {context}.")

    def check_atom(self, atom: AtomFormula, bound: frozenset[str], context: str) -> None:
        """Check that an atom uses a declared predicate with bound, correctly typed terms."""
        predicate = self.domain.predicates.get(atom.predicate)
        if predicate is None:
            self.diagnostics.error(f"Unknown predicate '{atom.predicate}' used in {context}.")
            return

        if predicate.arity != len(atom.terms):
            self.diagnostics.error(
                f"Predicate '{atom.predicate}' expects {predicate.arity} arguments "
                f"but {atom.to_pddl()} in {context} has {len(atom.terms)}.",
            )
            return

        for term, param in zip(atom.terms, predicate.parameters):
            self.check_term(term, bound, context)
            obj = self.known_objects.get(term)
            if obj is None or obj.type_ not in self.domain.types or param.type_ not in self.domain.types:
                continue
            if not self.domain.types.is_subtype(obj.type_, param.type_):
                self.diagnostics.error(
                    f"Object '{term}' of type '{obj.type_}' cannot be an argument of type "
                    f"'{param.type_}' in {atom.to_pddl()} ({context}).",
                )

    def check_term(self, term: str, bound: frozenset[str], context: str) -> None:
        """Check that a variable is in scope or an object name is declared."""
        if is_variable(term):
            if term not in bound:
                self.diagnostics.error(f"Free variable '{term}' in {context}.")
        elif term not in self.known_objects:
            self.diagnostics.error(f"Unknown object or constant '{term}' in {context}.")

    def check_formula(self, formula: Formula, bound: frozenset[str], context: str) -> None:
        """Check every atom and term in a goal description."""
        match formula:
            case AtomFormula():
                self.check_atom(formula, bound, context)
            case Equality(left=left, right=right):
                self.check_term(left, bound, context)
                self.check_term(right, bound, context)
            case Negation(operand=operand):
                self.check_formula(operand, bound, context)
            case Conjunction(operands=operands) | Disjunction(operands=operands):
                for operand in operands:
                    self.check_formula(operand, bound, context)
            case Implication(premise=premise, conclusion=conclusion):
                self.check_formula(premise, bound, context)
                self.check_formula(conclusion, bound, context)
            case Existential(variables=variables, body=body) | Universal(variables=variables, body=body):
                for var in variables:
                    self.check_type(var.type_, context)
                self.check_formula(body, bound | {v.name for v in variables}, context)

    def check_effect(self, effect: Effect, bound: frozenset[str], context: str) -> None:
        """Check every atom and term in an action effect."""
        match effect:
            case LiteralEffect(atom=atom):
                self.check_atom(atom, bound, context)
            case ConjunctiveEffect(effects=effects):
                for inner in effects:
                    self.check_effect(inner, bound, context)
            case WhenEffect(condition=condition, effect=inner):
                self.check_formula(condition, bound, context)
                self.check_effect(inner, bound, context)
            case UniversalEffect(variables=variables, effect=inner):
                for var in variables:
                    self.check_type(var.type_, context)
                self.check_effect(inner, bound | {v.name for v in variables}, context)
            case CostEffect(amount=amount):
                if amount < 0:
                    self.diagnostics.error(f"Negative action cost {amount:g} in {context}.")


def check_task(domain: PDDLDomain, problem: PDDLProblem | None, diagnostics: Diagnostics) -> None:
    """Run all semantic checks on a domain (and, if given, a problem) into the given diagnostics."""
    checker = TaskChecker(domain, diagnostics)
    checker.check_domain()
    if problem is not None:
        checker.check_problem(problem)
