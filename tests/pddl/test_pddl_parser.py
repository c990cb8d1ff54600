"""Unit tests for the PDDLParser class."""

import pytest

from stateplan.pddl import PDDLParser, PDDLSyntaxError, parse_domain, parse_problem
from stateplan.pddl.pddl_scanner import PDDLTokenType
from stateplan.symbols import (
    AtomFormula,
    Conjunction,
    CostEffect,
    Equality,
    LiteralEffect,
    Negation,
    UniversalEffect,
    WhenEffect,
)
from stateplan.symbols.ground_atom import GroundAtom

from ..common_strategies import benchmark_path


def test_parse_typed_list_of_names(typed_list_of_names: str) -> None:
    """Verify that the PDDLParser class can parse an example typed list."""
    # Arrange - The PDDL example is provided by the test fixture
    parser = PDDLParser(typed_list_of_names)

    # Act - Match a typed list of names
    result = parser.typed_list(token_type=PDDLTokenType.NAME)

    # Assert - Verify that the types were parsed correctly
    result_token_names = [t.value for t in result.tokens]

    assert result_token_names == ["integer", "float", "physob"]
    assert result.pddl_types == ["number", "number", "object"]


def test_parse_partial_domain(briefcase_world_domain_partial: str) -> None:
    """Verify that a domain without actions is parsed with its types, constants, and predicates."""
    # Arrange/Act - Parse the partial `briefcase-world` domain
    domain = parse_domain(briefcase_world_domain_partial)

    # Assert - Expect the declarations to be parsed as written (lowercased)
    assert domain.name == "briefcase-world"
    assert ":conditional-effects" in domain.requirements
    assert "location" in domain.types and "physob" in domain.types
    assert [c.name for c in domain.constants] == ["b"]
    assert domain.predicates["in"].arity == 2
    assert domain.operators == ()


def test_parse_mov_b_action(mov_b_action: str) -> None:
    """Verify that an action with a universal conditional effect is parsed into nested effects."""
    # Arrange - Match the action's open parenthesis, as the domain parser would
    parser = PDDLParser(mov_b_action)
    parser.match(PDDLTokenType.OPEN_PAREN)

    # Act - Parse the action
    operator = parser.action()

    # Assert - Expect the precondition's equality and the effect's `forall`/`when` structure
    assert operator.name == "mov-b"
    assert [p.name for p in operator.parameters] == ["?m", "?l"]
    assert operator.precondition == Conjunction(
        (AtomFormula("at", ("b", "?m")), Negation(Equality("?m", "?l"))),
    )
    universal = operator.effect.effects[2]
    assert isinstance(universal, UniversalEffect)
    assert isinstance(universal.effect, WhenEffect)
    assert universal.variables[0].type_ == "object"


def test_parse_put_in_action(put_in_action: str) -> None:
    """Verify that an action whose whole effect is conditional is parsed."""
    # Arrange
    parser = PDDLParser(put_in_action)
    parser.match(PDDLTokenType.OPEN_PAREN)

    # Act
    operator = parser.action()

    # Assert - Expect a single `when` effect adding `(in ?x)`
    assert isinstance(operator.effect, WhenEffect)
    assert operator.effect.effect == LiteralEffect(AtomFormula("in", ("?x",)))


def test_parse_cost_effect(drive_with_cost_action: str) -> None:
    """Verify that `(increase (total-cost) n)` is parsed into a cost effect."""
    # Arrange
    parser = PDDLParser(drive_with_cost_action)
    parser.match(PDDLTokenType.OPEN_PAREN)

    # Act
    operator = parser.action()

    # Assert - Expect the cost effect to follow the two literal effects
    assert operator.effect.effects[2] == CostEffect(3.0)
    assert operator.effect.effects[0] == LiteralEffect(AtomFormula("at", ("?from",)), negated=True)


def test_parse_gripper_problem() -> None:
    """Verify that a benchmark problem is parsed with its objects, initial state, and goal."""
    # Arrange - Read the gripper problem from the test data
    _, problem_path = benchmark_path("gripper")

    # Act
    problem = parse_problem(problem_path.read_text())

    # Assert
    assert problem.domain_name == "gripper-strips"
    assert len(problem.objects) == 8
    assert GroundAtom("at-robby", ("rooma",)) in problem.initial_state
    assert len(problem.initial_state) == 15
    assert isinstance(problem.goal, Conjunction)
    assert len(problem.goal.operands) == 4


def test_parse_problem_skips_numeric_initialization() -> None:
    """Verify that `(= (total-cost) 0)` is skipped and the metric is kept as text."""
    # Arrange
    _, problem_path = benchmark_path("travel")

    # Act
    problem = parse_problem(problem_path.read_text())

    # Assert
    assert all(atom.name != "total-cost" for atom in problem.initial_state)
    assert problem.metric == "minimize (total-cost)"


def test_parse_durative_action_is_recorded_as_unsupported() -> None:
    """Verify that durative actions are skipped but recorded as unsupported constructs."""
    # Arrange
    domain_path, _ = benchmark_path("durative")

    # Act
    domain = parse_domain(domain_path.read_text())

    # Assert
    assert domain.operators == ()
    assert domain.unsupported_constructs == (":durative-action navigate",)
    assert ":durative-actions" in domain.requirements


@pytest.mark.parametrize("domain_name", ["gripper", "blocksworld", "briefcase", "travel", "tokens"])
def test_domain_to_pddl_round_trip(domain_name: str) -> None:
    """Verify that a parsed domain, written back to PDDL, parses into the same domain."""
    # Arrange - Parse a benchmark domain
    domain_path, _ = benchmark_path(domain_name)
    domain = parse_domain(domain_path.read_text())

    # Act - Write the domain to PDDL and parse it again
    reparsed = parse_domain(domain.to_pddl())

    # Assert - Expect identical declarations and operators
    assert reparsed.name == domain.name
    assert reparsed.requirements == domain.requirements
    assert list(reparsed.types) == list(domain.types)
    assert reparsed.constants == domain.constants
    assert reparsed.predicates == domain.predicates
    assert reparsed.operators == domain.operators


def test_parse_malformed_problem_raises(malformed_problem: str) -> None:
    """Verify that a problem missing its closing parenthesis raises a syntax error."""
    with pytest.raises(PDDLSyntaxError):
        parse_problem(malformed_problem)


def test_parse_problem_without_goal_raises() -> None:
    """Verify that a problem must define a goal."""
    # Arrange
    pddl = "(define (problem p) (:domain d) (:init (on a b)))"

    # Act/Assert
    with pytest.raises(PDDLSyntaxError, match="does not define a :goal"):
        parse_problem(pddl)


def test_parse_initial_state_rejects_variables() -> None:
    """Verify that initial-state atoms must be ground."""
    with pytest.raises(PDDLSyntaxError, match="contains a variable"):
        parse_problem("(define (problem p) (:domain d) (:init (on ?x b)) (:goal (on a b)))")


def test_parse_trailing_input_raises() -> None:
    """Verify that text following a complete domain definition is rejected."""
    with pytest.raises(PDDLSyntaxError, match="trailing input"):
        parse_domain("(define (domain d) (:predicates (p))) (extra)")


def test_parse_union_types(union_type_domain: str) -> None:
    """Verify that parameters typed with `either` keep every member of the union."""
    # Arrange/Act
    domain = parse_domain(union_type_domain)

    # Assert
    stored = domain.predicates["stored"]
    assert stored.parameters[0].type_ == "(either crate hoist)"
    assert domain.operators[0].parameters[0].type_ == "(either crate hoist)"
    assert domain.operators[0].parameters[1].type_ == "depot"


def test_parse_union_type_declaration_raises() -> None:
    """Verify that a declared type cannot have a union type as its parent."""
    with pytest.raises(PDDLSyntaxError, match="union type"):
        parse_domain("(define (domain d) (:types a b c - object van - (either a b)) (:predicates (p)))")


def test_parse_empty_union_type_raises() -> None:
    """Verify that an `either` union must list at least one type."""
    with pytest.raises(PDDLSyntaxError, match="at least one type"):
        parse_domain("(define (domain d) (:predicates (p ?x - (either))))")
