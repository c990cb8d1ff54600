"""Encode a lifted PDDL task into a grounded problem over bitset states.

Encoding proceeds in fixed stages:
    1. Reject tasks whose requirements lie outside the supported fragment.
    2. Instantiate each operator over typed objects, pruning bindings that violate static constraints.
    3. Ground preconditions and effects (one action per disjunct of the precondition's DNF).
    4. Simplify away atoms that no action can change (recorded as static facts if initially true).
    5. Prune actions that are unreachable in the delete relaxation and decide solvability.
    6. Assign fact indices in first-seen order and materialize bitmasks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from stateplan.encoding.bit_state import BitState
from stateplan.encoding.errors import NOT_ADL_MESSAGE, EncodingError
from stateplan.encoding.fact_table import FactTable
from stateplan.encoding.formulas_ground import MAX_DNF_CLAUSES, FormulaGrounder, GroundBindings, GroundClause
from stateplan.encoding.grounded_action import ConditionalEffect, GroundedAction
from stateplan.encoding.grounded_problem import GroundedProblem
from stateplan.encoding.reachability import RelaxedStep, relaxed_reachability
from stateplan.pddl.pddl_domain import PDDLDomain
from stateplan.pddl.pddl_parser import TOTAL_COST
from stateplan.pddl.pddl_problem import PDDLProblem
from stateplan.pddl.pddl_scanner import SUPPORTED_REQUIREMENTS
from stateplan.symbols.effects import (
    ConjunctiveEffect,
    CostEffect,
    Effect,
    LiteralEffect,
    UniversalEffect,
    WhenEffect,
    iter_literal_effects,
)
from stateplan.symbols.formulas import AtomFormula, Conjunction, Equality, Formula, Negation, is_variable
from stateplan.symbols.ground_atom import GroundAtom
from stateplan.symbols.objects import ObjectSymbols
from stateplan.symbols.operators import Operator

logger = logging.getLogger(__name__)

UNREACHABLE_GOAL = GroundAtom("unreachable-goal")
"""Placeholder goal fact (never added by any action) for goals that simplify to false."""


@dataclass
class EffectSink:
    """Collects the ground add and delete atoms of one (possibly conditional) effect."""

    condition: list[GroundClause] | None = None
    """Condition in DNF (None for the unconditional effect)."""

    add: dict[GroundAtom, None] = field(default_factory=dict)
    delete: dict[GroundAtom, None] = field(default_factory=dict)


@dataclass(frozen=True)
class ConditionalInstance:
    """A ground conditional effect, before fact indices are assigned."""

    condition: GroundClause
    add: tuple[GroundAtom, ...]
    delete: tuple[GroundAtom, ...]


@dataclass(frozen=True)
class ActionInstance:
    """A ground action, before fact indices are assigned."""

    name: str
    parameters: tuple[str, ...]
    precondition: GroundClause
    add: tuple[GroundAtom, ...]
    delete: tuple[GroundAtom, ...]
    conditional: tuple[ConditionalInstance, ...]
    cost: float

    def changed_atoms(self) -> set[GroundAtom]:
        """Collect every atom the instance may add or delete."""
        atoms = set(self.add) | set(self.delete)
        for effect in self.conditional:
            atoms.update(effect.add)
            atoms.update(effect.delete)
        return atoms


class Grounder:
    """Grounds a lifted domain and problem into a bitset-encoded planning problem."""

    def __init__(self, domain: PDDLDomain, problem: PDDLProblem, max_dnf_clauses: int = MAX_DNF_CLAUSES) -> None:
        """Initialize the grounder for the given domain and problem.

        :param domain: Lifted PDDL domain
        :param problem: PDDL problem instance of the domain
        :param max_dnf_clauses: Largest number of disjuncts permitted in any grounded formula
        """
        self.domain = domain
        self.problem = problem
        self.objects = ObjectSymbols(domain.constants + problem.objects, domain.types)
        self.fluents = frozenset(
            literal.atom.predicate for op in domain.operators for literal in iter_literal_effects(op.effect)
        )
        self.formulas = FormulaGrounder(self.objects, self.fluents, problem.initial_state, max_dnf_clauses)
        self.uses_action_costs = ":action-costs" in domain.requirements | problem.requirements

    def check_supported(self) -> None:
        """Verify that the task stays within the supported fragment of PDDL.

        :raises EncodingError: If the task requires unsupported features
        """
        requirements = self.domain.requirements | self.problem.requirements
        unsupported = sorted(requirements - SUPPORTED_REQUIREMENTS.keys())
        if unsupported:
            raise EncodingError(f"{NOT_ADL_MESSAGE}: unsupported requirements {', '.join(unsupported)}")

        if self.domain.unsupported_constructs:
            raise EncodingError(f"{NOT_ADL_MESSAGE}: {'; '.join(self.domain.unsupported_constructs)}")

        numeric = [f for f in self.domain.functions if f != TOTAL_COST]
        if numeric:
            raise EncodingError(f"{NOT_ADL_MESSAGE}: numeric functions {', '.join(numeric)}")

    def encode(self) -> GroundedProblem:
        """Encode the lifted task into a grounded problem.

        :return: Grounded problem with its fact table, bitmasks, actions, and solvability flag
        :raises EncodingError: If the task uses constructs outside the supported fragment
        """
        self.check_supported()

        instances = [inst for op in self.domain.operators for inst in self.instantiate(op)]
        logger.debug(f"Instantiated {len(instances)} ground actions from {len(self.domain.operators)} operators.")

        changeable: set[GroundAtom] = set()
        for instance in instances:
            changeable |= instance.changed_atoms()
        initial_state = self.problem.initial_state

        instances = [s for s in (self.simplify(inst, changeable) for inst in instances) if s is not None]
        goal = self.ground_goal(changeable)

        # Prune actions and conditional effects that never become applicable in the delete relaxation
        steps: list[RelaxedStep[GroundAtom]] = []
        for instance in instances:
            steps.append(RelaxedStep(instance.precondition.positive, instance.add))
            for effect in instance.conditional:
                preconditions = instance.precondition.positive + effect.condition.positive
                steps.append(RelaxedStep(preconditions, effect.add))
        reachability = relaxed_reachability(initial_state, steps)

        reachable: list[ActionInstance] = []
        step_index = 0
        for instance in instances:
            instance_fired = reachability.fired[step_index]
            effects_fired = reachability.fired[step_index + 1 : step_index + 1 + len(instance.conditional)]
            step_index += 1 + len(instance.conditional)
            if instance_fired:
                kept = tuple(e for e, fired in zip(instance.conditional, effects_fired) if fired)
                reachable.append(self.drop_unreachable_negations(instance, kept, reachability.reached))

        is_solvable = reachability.reaches_all(goal)

        fact_table = FactTable(static_facts=(a for a in initial_state if a not in changeable))
        for instance in reachable:
            for atom in self.first_seen_atoms(instance):
                fact_table.add(atom)
        for atom in goal:
            fact_table.add(atom)
        fact_table.freeze()

        actions = tuple(self.to_grounded_action(inst, fact_table) for inst in reachable)
        initial_bits = fact_table.to_mask(a for a in initial_state if a in fact_table)

        logger.info(
            f"Encoded problem '{self.problem.name}': {len(fact_table)} facts, {len(actions)} actions, "
            f"{len(fact_table.static_facts)} static facts (solvable in relaxation: {is_solvable}).",
        )

        return GroundedProblem(
            fact_table=fact_table,
            initial_state=BitState(initial_bits),
            goal=fact_table.to_mask(goal),
            actions=actions,
            is_solvable=is_solvable,
            name=self.problem.name,
            domain_name=self.domain.name,
        )

    def static_constraints(self, operator: Operator) -> list[list[Formula]]:
        """Collect top-level static literals and equalities of a precondition by binding depth.

        A constraint is listed under the position of the last parameter it mentions, so it can be
        checked as soon as that parameter is bound.
        """
        positions = {p.name: i for i, p in enumerate(operator.parameters)}
        by_depth: list[list[Formula]] = [[] for _ in operator.parameters]

        stack: list[Formula] = [operator.precondition]
        while stack:
            formula = stack.pop()
            match formula:
                case Conjunction(operands=operands):
                    stack.extend(operands)
                    continue
                case Negation(operand=literal):
                    pass
                case _:
                    literal = formula

            if isinstance(literal, AtomFormula) and literal.predicate not in self.fluents:
                terms = literal.terms
            elif isinstance(literal, Equality):
                terms = (literal.left, literal.right)
            else:
                continue

            variables = [t for t in terms if is_variable(t)]
            if variables and all(v in positions for v in variables):
                by_depth[max(positions[v] for v in variables)].append(formula)

        return by_depth

    def bindings(self, operator: Operator) -> list[GroundBindings]:
        """Enumerate the operator's parameter bindings consistent with typing and static constraints.

        Bindings are produced in lexicographic declaration order of the objects, using an explicit stack.
        """
        names = [p.name for p in operator.parameters]
        candidates = [self.objects.get_objects_of_type(p.type_) for p in operator.parameters]
        constraints = self.static_constraints(operator)

        results: list[GroundBindings] = []
        stack: list[tuple[str, ...]] = [()]
        while stack:
            partial = stack.pop()
            depth = len(partial)
            if depth == len(names):
                results.append(dict(zip(names, partial)))
                continue

            for obj in reversed(candidates[depth]):
                extended = (*partial, obj.name)
                bindings = dict(zip(names, extended))
                if all(self.formulas.holds_statically(c, bindings) for c in constraints[depth]):
                    stack.append(extended)

        return results

    def instantiate(self, operator: Operator) -> list[ActionInstance]:
        """Ground an operator into action instances (one per binding and precondition disjunct)."""
        instances: list[ActionInstance] = []
        for bindings in self.bindings(operator):
            precondition = self.formulas.to_dnf(operator.precondition, bindings)
            if not precondition:
                continue

            unconditional, conditional, cost = self.ground_effect(operator.effect, bindings)
            arguments = tuple(bindings[p.name] for p in operator.parameters)
            for clause in precondition:
                instances.append(
                    ActionInstance(
                        name=operator.name,
                        parameters=arguments,
                        precondition=clause,
                        add=tuple(unconditional.add),
                        delete=tuple(unconditional.delete),
                        conditional=conditional,
                        cost=cost,
                    ),
                )
        return instances

    def ground_effect(
        self,
        effect: Effect,
        bindings: GroundBindings,
    ) -> tuple[EffectSink, tuple[ConditionalInstance, ...], float]:
        """Ground an operator's effect under the given bindings.

        :return: Tuple of (unconditional effect, conditional effects in declaration order, action cost)
        :raises EncodingError: If a cost is increased conditionally
        """
        unconditional = EffectSink()
        sinks: list[EffectSink] = []
        cost = 0.0

        stack: list[tuple[Effect, GroundBindings, EffectSink]] = [(effect, bindings, unconditional)]
        while stack:
            current, current_bindings, sink = stack.pop()
            match current:
                case LiteralEffect(atom=atom, negated=negated):
                    ground = self.formulas.ground_atom(atom, current_bindings)
                    (sink.delete if negated else sink.add)[ground] = None

                case ConjunctiveEffect(effects=effects):
                    stack.extend((e, current_bindings, sink) for e in reversed(effects))

                case UniversalEffect(variables=variables, effect=inner):
                    extensions = list(self.formulas.quantified_bindings(variables, current_bindings))
                    stack.extend((inner, b, sink) for b in reversed(extensions))

                case WhenEffect(condition=condition, effect=inner):
                    dnf = self.formulas.to_dnf(condition, current_bindings)
                    if sink.condition is not None:  # Nested conditions conjoin
                        dnf = self.formulas.product([sink.condition, dnf])
                    if dnf:
                        nested = EffectSink(condition=dnf)
                        sinks.append(nested)
                        stack.append((inner, current_bindings, nested))

                case CostEffect(amount=amount):
                    if sink is not unconditional:
                        raise EncodingError(f"{NOT_ADL_MESSAGE}: conditional action costs")
                    cost += amount

        if not self.uses_action_costs:
            cost = 1.0

        conditional: list[ConditionalInstance] = []
        for sink in sinks:
            if not sink.add and not sink.delete:
                continue
            assert sink.condition is not None
            for clause in sink.condition:
                conditional.append(ConditionalInstance(clause, tuple(sink.add), tuple(sink.delete)))

        return unconditional, tuple(conditional), cost

    def simplify(self, instance: ActionInstance, changeable: set[GroundAtom]) -> ActionInstance | None:
        """Simplify away atoms no action can change, folding trivially true conditional effects.

        :return: Simplified instance, or None if its precondition can never hold
        """
        initial_state = self.problem.initial_state
        precondition = instance.precondition.simplify(changeable, initial_state)
        if precondition is None:
            return None

        add = dict.fromkeys(instance.add)
        delete = dict.fromkeys(instance.delete)
        conditional: list[ConditionalInstance] = []
        for effect in instance.conditional:
            condition = effect.condition.simplify(changeable, initial_state)
            if condition is not None:
                conditional.append(ConditionalInstance(condition, effect.add, effect.delete))

        # Fold unconditional "conditional" effects whose atoms no other effect of the action touches
        folded: list[ConditionalInstance] = []
        for i, effect in enumerate(conditional):
            if effect.condition == GroundClause():
                others = set(add) | set(delete)
                for j, other in enumerate(conditional):
                    if j != i:
                        others.update(other.add)
                        others.update(other.delete)
                if others.isdisjoint(effect.add) and others.isdisjoint(effect.delete):
                    add.update(dict.fromkeys(effect.add))
                    delete.update(dict.fromkeys(effect.delete))
                    continue
            folded.append(effect)

        return ActionInstance(
            name=instance.name,
            parameters=instance.parameters,
            precondition=precondition,
            add=tuple(add),
            delete=tuple(delete),
            conditional=tuple(folded),
            cost=instance.cost,
        )

    def ground_goal(self, changeable: set[GroundAtom]) -> tuple[GroundAtom, ...]:
        """Ground the problem's goal into a conjunction of required-true atoms.

        A goal that simplifies to false is replaced by an unreachable placeholder fact.

        :raises EncodingError: If the goal requires false fluents or remains disjunctive
        """
        clauses: dict[GroundClause, None] = {}
        for clause in self.formulas.to_dnf(self.problem.goal, {}):
            simplified = clause.simplify(changeable, self.problem.initial_state)
            if simplified is not None:
                clauses[simplified] = None

        if not clauses:
            logger.info(f"Goal of problem '{self.problem.name}' simplifies to false.")
            return (UNREACHABLE_GOAL,)

        if GroundClause() in clauses:
            return ()

        if len(clauses) > 1:
            raise EncodingError(f"{NOT_ADL_MESSAGE}: disjunctive goal with {len(clauses)} alternatives")

        (goal,) = clauses
        if goal.negative:
            negated = ", ".join(map(str, goal.negative))
            raise EncodingError(f"{NOT_ADL_MESSAGE}: goal requires negated fluents {negated}")
        return goal.positive

    @staticmethod
    def drop_unreachable_negations(
        instance: ActionInstance,
        conditional: tuple[ConditionalInstance, ...],
        reached: frozenset[GroundAtom],
    ) -> ActionInstance:
        """Remove negative literals over atoms that can never become true."""

        def prune(clause: GroundClause) -> GroundClause:
            return GroundClause(clause.positive, tuple(a for a in clause.negative if a in reached))

        return ActionInstance(
            name=instance.name,
            parameters=instance.parameters,
            precondition=prune(instance.precondition),
            add=instance.add,
            delete=instance.delete,
            conditional=tuple(ConditionalInstance(prune(e.condition), e.add, e.delete) for e in conditional),
            cost=instance.cost,
        )

    @staticmethod
    def first_seen_atoms(instance: ActionInstance) -> list[GroundAtom]:
        """List the atoms of an instance in the order that fixes their fact indices."""
        atoms = [*instance.precondition.positive, *instance.precondition.negative, *instance.add, *instance.delete]
        for effect in instance.conditional:
            atoms.extend(effect.condition.positive)
            atoms.extend(effect.condition.negative)
            atoms.extend(effect.add)
            atoms.extend(effect.delete)
        return atoms

    @staticmethod
    def to_grounded_action(instance: ActionInstance, fact_table: FactTable) -> GroundedAction:
        """Convert an instance into a grounded action over the fact table's indices."""
        return GroundedAction(
            name=instance.name,
            parameters=instance.parameters,
            positive_preconditions=fact_table.to_mask(instance.precondition.positive),
            negative_preconditions=fact_table.to_mask(instance.precondition.negative),
            add=fact_table.to_mask(instance.add),
            delete=fact_table.to_mask(instance.delete),
            conditional_effects=tuple(
                ConditionalEffect(
                    condition=fact_table.to_mask(e.condition.positive),
                    negative_condition=fact_table.to_mask(e.condition.negative),
                    add=fact_table.to_mask(e.add),
                    delete=fact_table.to_mask(e.delete),
                )
                for e in instance.conditional
            ),
            cost=instance.cost,
        )


def encode(domain: PDDLDomain, problem: PDDLProblem, max_dnf_clauses: int = MAX_DNF_CLAUSES) -> GroundedProblem:
    """Encode a lifted PDDL task into a grounded problem over bitset states.

    :param domain: Lifted PDDL domain
    :param problem: PDDL problem instance of the domain
    :param max_dnf_clauses: Largest number of disjuncts permitted in any grounded formula
    :return: Grounded problem (deterministic given the same inputs)
    :raises EncodingError: If the task uses constructs outside the supported fragment
    """
    return Grounder(domain, problem, max_dnf_clauses).encode()
