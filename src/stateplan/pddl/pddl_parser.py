"""Implement a parser for the Planning Domain Definition Language (PDDL).

Reference: PDDL - The Planning Domain Definition Language (Version 1.2) (Ghallab et al., 1998)
"""

from __future__ import annotations

from dataclasses import dataclass

from stateplan.pddl.pddl_domain import PDDLDomain
from stateplan.pddl.pddl_problem import PDDLProblem
from stateplan.pddl.pddl_scanner import PDDLScanner, PDDLSyntaxError, PDDLToken, PDDLTokenType
from stateplan.pddl.type_hierarchy import EITHER, ROOT_TYPE, TypeHierarchy, either_type
from stateplan.symbols.discrete_parameter import DiscreteParameter
from stateplan.symbols.effects import (
    ConjunctiveEffect,
    CostEffect,
    Effect,
    LiteralEffect,
    UniversalEffect,
    WhenEffect,
)
from stateplan.symbols.formulas import (
    TRUE,
    AtomFormula,
    Conjunction,
    Disjunction,
    Equality,
    Existential,
    Formula,
    Implication,
    Negation,
    Universal,
)
from stateplan.symbols.ground_atom import GroundAtom
from stateplan.symbols.objects import ObjectSymbol
from stateplan.symbols.operators import Operator
from stateplan.symbols.predicate import Predicate

TOTAL_COST = "total-cost"
"""The only numeric function understood by the parser (from the `:action-costs` requirement)."""

NUMERIC_EFFECTS = {"assign", "scale-up", "scale-down", "decrease"}


@dataclass(frozen=True)
class TypedTokens:
    """A list of parsed PDDL tokens corresponding to typed PDDL entities."""

    tokens: list[PDDLToken]
    pddl_types: list[str]

    def __post_init__(self) -> None:
        """Verify that there are an equal number of tokens and PDDL types."""
        if len(self.tokens) != len(self.pddl_types):
            raise PDDLSyntaxError(f"Found {len(self.tokens)} tokens but {len(self.pddl_types)} PDDL types.")

    def as_parameters(self) -> tuple[DiscreteParameter, ...]:
        """Convert typed variable tokens into discrete parameters."""
        return tuple(DiscreteParameter(t.value, pddl_type) for t, pddl_type in zip(self.tokens, self.pddl_types))

    def as_objects(self) -> tuple[ObjectSymbol, ...]:
        """Convert typed name tokens into object symbols."""
        return tuple(ObjectSymbol(t.value, pddl_type) for t, pddl_type in zip(self.tokens, self.pddl_types))


class PDDLParser:
    """A recursive-descent parser for the subset of PDDL supported by the encoder."""

    def __init__(self, string: str) -> None:
        """Initialize the PDDL parser for the given string."""
        self.scanner = PDDLScanner()
        self.remaining_tokens = self.scanner.tokenize(string)
        self.input_token: PDDLToken | None = next(self.remaining_tokens, None)
        """Once the input token is None, all tokens have been consumed."""

        self.unsupported: list[str] = []
        """Constructs that were recognized but skipped because the encoder cannot handle them."""

    @property
    def lookahead(self) -> str:
        """Retrieve the value of the next input token (empty once input is exhausted)."""
        return "" if self.input_token is None else self.input_token.value

    @property
    def exhausted(self) -> bool:
        """Check whether all input tokens have been consumed."""
        return self.input_token is None

    def lookahead_is(self, token_type: PDDLTokenType, value: str | None = None) -> bool:
        """Evaluate whether the next input token has the given type (and value, if given)."""
        if self.input_token is None or self.input_token.type_ != token_type:
            return False
        return value is None or self.input_token.value == value

    def error(self, message: str) -> PDDLSyntaxError:
        """Create a syntax error located at the current input token."""
        if self.input_token is None:
            return PDDLSyntaxError(f"{message} (reached end of input)")
        return PDDLSyntaxError(f"{message}: found {self.input_token}", self.input_token.line, self.input_token.column)

    def match(self, token_type: PDDLTokenType, value: str | None = None) -> PDDLToken:
        """Consume a token of the given type from the scanner.

        :param token_type: Expected type of the next PDDL token
        :param value: Expected string value of the next token (optional; defaults to None)
        :return: PDDL token consumed from the scanner
        :raises PDDLSyntaxError: If the next token does not have the expected type or value
        """
        if self.input_token is None:
            raise self.error(f"Expected {token_type.name}")

        if self.input_token.type_ != token_type:
            raise self.error(f"Expected PDDL token type {token_type.name}")

        if value is not None and value != self.input_token.value:
            raise self.error(f"Expected '{value}' as next token")

        matched_token = self.input_token
        self.input_token = next(self.remaining_tokens, None)
        return matched_token

    def skip_balanced(self) -> str:
        """Consume the remainder of a parenthesized expression whose open paren was matched.

        :return: PDDL text of the consumed tokens (excluding the final closing parenthesis)
        """
        depth = 1
        values: list[str] = []
        while depth:
            if self.input_token is None:
                raise self.error("Unbalanced parentheses")
            if self.input_token.type_ == PDDLTokenType.OPEN_PAREN:
                depth += 1
            elif self.input_token.type_ == PDDLTokenType.CLOSE_PAREN:
                depth -= 1
            token = self.match(self.input_token.type_)
            if depth:
                values.append(token.value)
        return " ".join(values).replace("( ", "(").replace(" )", ")")

    def term(self) -> str:
        """Parse a term (an object name or a variable)."""
        if self.lookahead_is(PDDLTokenType.VARIABLE):
            return self.match(PDDLTokenType.VARIABLE).value
        return self.match(PDDLTokenType.NAME).value

    def atomic_formula(self, match_open_paren: bool = False) -> AtomFormula:
        """Parse a PDDL atomic formula from the input stream of tokens.

        Default behavior: Parse the formula's predicate name through its closing parenthesis.

        :param match_open_paren: Whether to match the formula's open parenthesis (default: False)
        :return: Parsed PDDL atomic formula
        """
        if match_open_paren:
            self.match(PDDLTokenType.OPEN_PAREN)

        name = self.match(PDDLTokenType.NAME).value

        terms: list[str] = []
        while not self.exhausted and not self.lookahead_is(PDDLTokenType.CLOSE_PAREN):
            terms.append(self.term())

        self.match(PDDLTokenType.CLOSE_PAREN)
        return AtomFormula(name, tuple(terms))

    def typed_list(self, token_type: PDDLTokenType) -> TypedTokens:
        """Parse a PDDL-typed list of the given token type.

        This method does not match a following closing parenthesis, if present.

        :param token_type: Type of PDDL token (e.g., `VARIABLE`) being assigned PDDL types
        :return: Collection of parsed tokens and their corresponding PDDL types
        """
        tokens: list[PDDLToken] = []
        types: list[str] = []
        tokens_awaiting_types = 0

        while not self.exhausted and not self.lookahead_is(PDDLTokenType.CLOSE_PAREN):
            if self.lookahead_is(token_type):
                tokens.append(self.match(token_type))
                tokens_awaiting_types += 1
                continue

            if self.lookahead_is(PDDLTokenType.MINUS):  # Match "-" and the following type
                if not tokens_awaiting_types:
                    raise self.error("Unexpected minus in a typed list")

                self.match(PDDLTokenType.MINUS)
                if self.lookahead_is(PDDLTokenType.OPEN_PAREN):
                    parent_type = self.union_type()
                else:
                    parent_type = self.match(PDDLTokenType.NAME).value
                types.extend([parent_type] * tokens_awaiting_types)
                tokens_awaiting_types = 0
                continue

            raise self.error("Unexpected token in a typed list")

        types.extend([ROOT_TYPE] * tokens_awaiting_types)  # Default parent type in PDDL
        return TypedTokens(tokens, types)

    def union_type(self) -> str:
        """Parse a union type `(either t1 t2 ...)`, naming it as written in PDDL."""
        self.match(PDDLTokenType.OPEN_PAREN)
        self.match(PDDLTokenType.NAME, value=EITHER)

        members: list[str] = []
        while self.lookahead_is(PDDLTokenType.NAME):
            members.append(self.match(PDDLTokenType.NAME).value)
        if not members:
            raise self.error("Expected at least one type in an `either` union")

        self.match(PDDLTokenType.CLOSE_PAREN)
        return either_type(members)

    def parameter_list(self) -> tuple[DiscreteParameter, ...]:
        """Parse a parenthesized list of typed variables."""
        self.match(PDDLTokenType.OPEN_PAREN)
        parameters = self.typed_list(PDDLTokenType.VARIABLE).as_parameters()
        self.match(PDDLTokenType.CLOSE_PAREN)
        return parameters

    def atomic_formula_skeleton(self) -> Predicate:
        """Parse a PDDL atomic formula skeleton (i.e., a predicate declaration)."""
        self.match(PDDLTokenType.OPEN_PAREN)
        predicate_name = self.match(PDDLTokenType.NAME).value
        parameters = self.typed_list(PDDLTokenType.VARIABLE).as_parameters()
        self.match(PDDLTokenType.CLOSE_PAREN)
        return Predicate(predicate_name, parameters)

    def goal_description(self) -> Formula:
        """Parse a PDDL goal description from the input stream of tokens.

        Reference: Section 6 (pg. 8-9) of Ghallab et al., 1998.

        :return: Parsed PDDL goal description
        """
        self.match(PDDLTokenType.OPEN_PAREN)

        if self.lookahead_is(PDDLTokenType.CLOSE_PAREN):  # The empty goal `()` is trivially true
            self.match(PDDLTokenType.CLOSE_PAREN)
            return TRUE

        if self.lookahead_is(PDDLTokenType.EQUALS):  # For the :equality requirement flag
            self.match(PDDLTokenType.EQUALS)
            left = self.term()
            right = self.term()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return Equality(left, right)

        if not self.lookahead_is(PDDLTokenType.NAME):
            raise self.error("Expected a goal description")

        lookahead = self.lookahead

        if lookahead in {"and", "or"}:  # `or` is for the :disjunctive-preconditions flag
            self.match(PDDLTokenType.NAME)
            goals: list[Formula] = []
            while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
                goals.append(self.goal_description())
            self.match(PDDLTokenType.CLOSE_PAREN)
            return Conjunction(tuple(goals)) if lookahead == "and" else Disjunction(tuple(goals))

        if lookahead == "not":
            self.match(PDDLTokenType.NAME, value="not")
            nested_goal = self.goal_description()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return Negation(nested_goal)

        if lookahead == "imply":
            self.match(PDDLTokenType.NAME, value="imply")
            premise = self.goal_description()
            conclusion = self.goal_description()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return Implication(premise, conclusion)

        if lookahead in {"exists", "forall"}:  # For the :quantified-preconditions flag
            self.match(PDDLTokenType.NAME)
            variables = self.parameter_list()
            body = self.goal_description()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return Existential(variables, body) if lookahead == "exists" else Universal(variables, body)

        # Otherwise, match an atomic formula from its predicate name onward
        return self.atomic_formula()

    def effect(self) -> Effect:
        """Parse PDDL action effects from the input stream of tokens.

        :return: Parsed PDDL action effect
        """
        self.match(PDDLTokenType.OPEN_PAREN)

        if self.lookahead_is(PDDLTokenType.CLOSE_PAREN):  # The empty effect `()`
            self.match(PDDLTokenType.CLOSE_PAREN)
            return ConjunctiveEffect(())

        if not self.lookahead_is(PDDLTokenType.NAME):
            raise self.error("Expected an effect")

        lookahead = self.lookahead

        if lookahead == "and":
            self.match(PDDLTokenType.NAME, value="and")
            parsed_effects: list[Effect] = []
            while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
                parsed_effects.append(self.effect())
            self.match(PDDLTokenType.CLOSE_PAREN)
            return ConjunctiveEffect(tuple(parsed_effects))

        if lookahead == "not":
            self.match(PDDLTokenType.NAME, value="not")
            atom = self.atomic_formula(match_open_paren=True)
            self.match(PDDLTokenType.CLOSE_PAREN)
            return LiteralEffect(atom, negated=True)

        if lookahead == "forall":  # For the :conditional-effects requirement flag
            self.match(PDDLTokenType.NAME, value="forall")
            variables = self.parameter_list()
            quantified_effect = self.effect()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return UniversalEffect(variables, quantified_effect)

        if lookahead == "when":  # For the :conditional-effects requirement flag
            self.match(PDDLTokenType.NAME, value="when")
            condition = self.goal_description()
            conditional_effect = self.effect()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return WhenEffect(condition, conditional_effect)

        if lookahead == "increase":  # For the :action-costs requirement flag
            return self.cost_effect()

        if lookahead in NUMERIC_EFFECTS:
            self.unsupported.append(f"numeric effect ({self.skip_balanced()})")
            return ConjunctiveEffect(())

        return LiteralEffect(self.atomic_formula())

    def cost_effect(self) -> Effect:
        """Parse an `(increase (total-cost) n)` effect, having matched its open parenthesis."""
        self.match(PDDLTokenType.NAME, value="increase")
        function = self.atomic_formula(match_open_paren=True)

        if function.predicate == TOTAL_COST and not function.terms and self.lookahead_is(PDDLTokenType.NUMBER):
            amount = float(self.match(PDDLTokenType.NUMBER).value)
            self.match(PDDLTokenType.CLOSE_PAREN)
            return CostEffect(amount)

        self.unsupported.append(f"numeric effect (increase {function.to_pddl()} {self.skip_balanced()})")
        return ConjunctiveEffect(())

    def action(self) -> Operator:
        """Parse a PDDL action definition, having matched its open parenthesis.

        Variables declared with `:vars` are treated as additional parameters of the action.

        :return: Parsed PDDL action
        """
        self.match(PDDLTokenType.KEYWORD, value=":action")
        name = self.match(PDDLTokenType.NAME).value

        parameters: tuple[DiscreteParameter, ...] = ()
        precondition: Formula = TRUE
        effect: Effect = ConjunctiveEffect(())

        while self.lookahead_is(PDDLTokenType.KEYWORD):
            keyword = self.match(PDDLTokenType.KEYWORD).value
            match keyword:
                case ":parameters" | ":vars":
                    parameters += self.parameter_list()
                case ":precondition":
                    precondition = self.goal_description()
                case ":effect":
                    effect = self.effect()
                case _:
                    raise PDDLSyntaxError(f"Unexpected keyword '{keyword}' in action '{name}'")

        self.match(PDDLTokenType.CLOSE_PAREN)
        return Operator(name, parameters, effect, precondition)

    def require_def(self) -> set[str]:
        """Parse PDDL requirements, having matched the opening parenthesis.

        :return: Set of parsed PDDL requirement keys
        """
        self.match(PDDLTokenType.KEYWORD, value=":requirements")

        reqs: set[str] = set()
        while self.lookahead_is(PDDLTokenType.KEYWORD):
            reqs.add(self.match(PDDLTokenType.KEYWORD).value)
        self.match(PDDLTokenType.CLOSE_PAREN)
        return reqs

    def function_list(self) -> tuple[str, ...]:
        """Parse the function declarations of a `:functions` section."""
        functions: list[str] = []
        while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
            functions.append(self.atomic_formula_skeleton().name)
            if self.lookahead_is(PDDLTokenType.MINUS):
                self.match(PDDLTokenType.MINUS)
                self.match(PDDLTokenType.NAME)
        self.match(PDDLTokenType.CLOSE_PAREN)
        return tuple(functions)

    def header(self, kind: str) -> str:
        """Parse the `(define (<kind> <name>)` header of a domain or problem."""
        self.match(PDDLTokenType.OPEN_PAREN)
        self.match(PDDLTokenType.NAME, value="define")
        self.match(PDDLTokenType.OPEN_PAREN)
        self.match(PDDLTokenType.NAME, value=kind)
        name = self.match(PDDLTokenType.NAME).value
        self.match(PDDLTokenType.CLOSE_PAREN)
        return name

    def domain(self) -> PDDLDomain:
        """Parse a PDDL domain from the stream of input tokens."""
        domain_name = self.header("domain")

        reqs: set[str] = set()
        types = TypeHierarchy()
        constants: tuple[ObjectSymbol, ...] = ()
        predicates: dict[str, Predicate] = {}
        functions: tuple[str, ...] = ()
        actions: list[Operator] = []

        # Permit the domain's sections in any order
        while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
            self.match(PDDLTokenType.OPEN_PAREN)
            if not self.lookahead_is(PDDLTokenType.KEYWORD):
                raise self.error("Expected a keyword token")

            match self.lookahead:
                case ":requirements":
                    reqs |= self.require_def()

                case ":types":
                    self.match(PDDLTokenType.KEYWORD)
                    declared = self.typed_list(PDDLTokenType.NAME)
                    for token, parent in zip(declared.tokens, declared.pddl_types):
                        try:
                            types.add_type(token.value, parent)
                        except ValueError as e:
                            raise PDDLSyntaxError(str(e), token.line, token.column) from e
                    self.match(PDDLTokenType.CLOSE_PAREN)

                case ":constants":
                    self.match(PDDLTokenType.KEYWORD)
                    constants += self.typed_list(PDDLTokenType.NAME).as_objects()
                    self.match(PDDLTokenType.CLOSE_PAREN)

                case ":predicates":
                    self.match(PDDLTokenType.KEYWORD)
                    while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
                        predicate = self.atomic_formula_skeleton()
                        predicates[predicate.name] = predicate
                    self.match(PDDLTokenType.CLOSE_PAREN)

                case ":functions":
                    self.match(PDDLTokenType.KEYWORD)
                    functions += self.function_list()

                case ":action":
                    actions.append(self.action())

                case ":durative-action" | ":derived" as keyword:
                    self.match(PDDLTokenType.KEYWORD)
                    definition = self.skip_balanced()
                    self.unsupported.append(f"{keyword} {definition.split(' :')[0]}")

                case _:
                    raise self.error("Unexpected domain section")

        self.match(PDDLTokenType.CLOSE_PAREN)
        return PDDLDomain(
            domain_name,
            frozenset(reqs),
            types,
            constants,
            predicates,
            tuple(actions),
            functions,
            tuple(self.unsupported),
        )

    def initial_state(self) -> frozenset[GroundAtom]:
        """Parse the atoms of an `:init` section, having matched the `:init` keyword.

        Numeric assignments such as `(= (total-cost) 0)` are skipped, as are explicitly negated
        atoms (the initial state follows the closed-world assumption).
        """
        atoms: set[GroundAtom] = set()
        while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
            self.match(PDDLTokenType.OPEN_PAREN)
            if self.lookahead_is(PDDLTokenType.EQUALS) or self.lookahead_is(PDDLTokenType.NAME, "not"):
                self.skip_balanced()
                continue

            atom = self.atomic_formula()
            if any(t.startswith("?") for t in atom.terms):
                raise self.error(f"Initial state atom {atom.to_pddl()} contains a variable")
            atoms.add(GroundAtom(atom.predicate, atom.terms))

        self.match(PDDLTokenType.CLOSE_PAREN)
        return frozenset(atoms)

    def problem(self) -> PDDLProblem:
        """Parse a PDDL problem from the stream of input tokens.

        Reference: Section 13 (pg. 18) of Ghallab et al., 1998.
        """
        problem_name = self.header("problem")

        self.match(PDDLTokenType.OPEN_PAREN)
        self.match(PDDLTokenType.KEYWORD, value=":domain")
        domain_name = self.match(PDDLTokenType.NAME).value
        self.match(PDDLTokenType.CLOSE_PAREN)

        reqs: set[str] = set()  # The :requirements field is optional in a PDDL problem
        objects: tuple[ObjectSymbol, ...] = ()  # The :objects field is optional in a PDDL problem
        initial_state: frozenset[GroundAtom] = frozenset()
        goal: Formula | None = None
        metric: str | None = None

        while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
            self.match(PDDLTokenType.OPEN_PAREN)
            if not self.lookahead_is(PDDLTokenType.KEYWORD):
                raise self.error("Expected a keyword token")

            match self.lookahead:
                case ":requirements":
                    reqs |= self.require_def()

                case ":objects":
                    self.match(PDDLTokenType.KEYWORD)
                    objects += self.typed_list(PDDLTokenType.NAME).as_objects()
                    self.match(PDDLTokenType.CLOSE_PAREN)

                case ":init":
                    self.match(PDDLTokenType.KEYWORD)
                    initial_state = self.initial_state()

                case ":goal":
                    self.match(PDDLTokenType.KEYWORD)
                    goal = self.goal_description()
                    self.match(PDDLTokenType.CLOSE_PAREN)

                case ":metric":
                    self.match(PDDLTokenType.KEYWORD)
                    metric = self.skip_balanced()

                case _:
                    raise self.error("Unexpected problem section")

        self.match(PDDLTokenType.CLOSE_PAREN)

        if goal is None:
            raise PDDLSyntaxError(f"Problem '{problem_name}' does not define a :goal")

        return PDDLProblem(problem_name, domain_name, frozenset(reqs), objects, initial_state, goal, metric)

    def expect_end(self) -> None:
        """Verify that all input has been consumed.

        :raises PDDLSyntaxError: If tokens remain after a complete definition
        """
        if not self.exhausted:
            raise self.error("Unexpected trailing input")


def parse_domain(pddl: str) -> PDDLDomain:
    """Parse a PDDL domain definition from the given string.

    :raises PDDLSyntaxError: If the string is not a well-formed PDDL domain
    """
    parser = PDDLParser(pddl)
    domain = parser.domain()
    parser.expect_end()
    return domain


def parse_problem(pddl: str) -> PDDLProblem:
    """Parse a PDDL problem definition from the given string.

    :raises PDDLSyntaxError: If the string is not a well-formed PDDL problem
    """
    parser = PDDLParser(pddl)
    problem = parser.problem()
    parser.expect_end()
    return problem
