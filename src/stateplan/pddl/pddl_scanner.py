"""Implement a scanner for the Planning Domain Definition Language (PDDL).

Reference: PDDL - The Planning Domain Definition Language (Version 1.2) (Ghallab et al., 1998)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator

PDDL_NAME_REGEX = r"[a-zA-Z][a-zA-Z0-9\-_]*"
"""Names in PDDL begin with a letter and contain only letters, digits, hyphens, and underscores."""


class PDDLTokenType(StrEnum):
    """Enumeration of token types when parsing PDDL."""

    NAME = PDDL_NAME_REGEX
    """Name of a PDDL domain, type, predicate, operator, etc."""

    VARIABLE = r"\?" + PDDL_NAME_REGEX
    """Name of a PDDL variable."""

    KEYWORD = r":" + PDDL_NAME_REGEX
    """A PDDL keyword starts with a colon."""

    NUMBER = r"[0-9]+(?:\.[0-9]+)?"
    """A non-negative numeric literal (used by `:action-costs`)."""

    MINUS = r"-"
    """Separates PDDL entities from their types in typed lists."""

    EQUALS = r"="
    """The built-in equality predicate."""

    OPEN_PAREN = r"\("
    """An open parenthesis."""

    CLOSE_PAREN = r"\)"
    """A close parenthesis."""

    COMMENT = r";[^\n]*"
    """Comments in PDDL begin with a semicolon and end with the next newline."""

    NEWLINE = r"\n"

    SKIP = r"[ \t\r]+"
    """Whitespace to be ignored."""

    MISMATCH = r"."
    """Any other character is a mismatch."""

    @property
    def named_group_regex(self) -> str:
        """Retrieve the named group regular expression for the token type."""
        return f"(?P<{self.name}>{self.value})"


@dataclass(frozen=True)
class PDDLToken:
    """A token scanned from a string of PDDL.

    Reference: https://docs.python.org/3/library/re.html#writing-a-tokenizer
    """

    type_: PDDLTokenType
    value: str
    line: int
    column: int

    def __str__(self) -> str:
        """Describe the token and its location for error messages."""
        return f"'{self.value}' ({self.type_.name}) at line {self.line}, column {self.column}"


class PDDLSyntaxError(RuntimeError):
    """An error raised when PDDL text cannot be scanned or parsed."""

    def __init__(self, message: str, line: int = -1, column: int = -1) -> None:
        """Initialize the error with an optional source location."""
        location = f" (line {line}, column {column})" if line >= 0 else ""
        super().__init__(f"{message}{location}")
        self.line = line
        self.column = column


SUPPORTED_REQUIREMENTS = {
    ":strips": "Basic STRIPS-style adds and deletes",
    ":typing": "Allow type names in declarations of variables",
    ":negative-preconditions": "Allow `not` in preconditions and goals",
    ":disjunctive-preconditions": "Allow `or` in goal descriptions",
    ":equality": "Support `=` as built-in predicate",
    ":existential-preconditions": "Allow `exists` in goal descriptions",
    ":universal-preconditions": "Allow `forall` in goal descriptions",
    ":quantified-preconditions": "Allow existential and universal preconditions",
    ":conditional-effects": "Allow `when` in action effects",
    ":adl": (
        "Support :strips + :typing + :disjunctive-preconditions + "
        ":equality + :quantified-preconditions + :conditional-effects"
    ),
    ":action-costs": "Allow `(increase (total-cost) n)` effects with constant costs",
}
"""Definitions for PDDL requirements flags supported by the encoder.

Reference: Section 15 ("Current Requirement Flags") of Ghallab et al. (1998).
"""

UNSUPPORTED_REQUIREMENTS = {
    ":fluents",
    ":numeric-fluents",
    ":object-fluents",
    ":durative-actions",
    ":duration-inequalities",
    ":continuous-effects",
    ":derived-predicates",
    ":timed-initial-literals",
    ":preferences",
    ":constraints",
    ":expression-evaluation",
    ":domain-axioms",
    ":safety-constraints",
    ":open-world",
    ":true-negation",
    ":ucpop",
}
"""Requirement flags the scanner recognizes so the encoder can reject them explicitly."""

STRUCTURE_KEYWORDS = {
    ":requirements",
    ":types",
    ":constants",
    ":predicates",
    ":functions",
    ":action",
    ":parameters",
    ":vars",
    ":precondition",
    ":effect",
    ":domain",
    ":objects",
    ":init",
    ":goal",
    ":metric",
    ":durative-action",
    ":derived",
    ":duration",
    ":condition",
}


class PDDLScanner:
    """A scanner for a subset of the Planning Domain Definition Language (PDDL)."""

    def __init__(self) -> None:
        """Initialize regular expressions for scanning tokens of PDDL.

        Reference: https://docs.python.org/3/library/re.html#writing-a-tokenizer
        """
        self.token_regex = re.compile("|".join(tt.named_group_regex for tt in PDDLTokenType))
        self.keywords = STRUCTURE_KEYWORDS | SUPPORTED_REQUIREMENTS.keys() | UNSUPPORTED_REQUIREMENTS

    def tokenize(self, string: str) -> Iterator[PDDLToken]:
        """Tokenize a string of PDDL into an iterator over tokens.

        PDDL is case-insensitive, so names and keywords are lowercased.

        :param string: String containing PDDL to be tokenized
        :yield: Iterator over PDDL tokens in the string
        :raises PDDLSyntaxError: On unknown keywords or characters that cannot be tokenized
        """
        line_num = 1
        line_start = 0
        for mo in self.token_regex.finditer(string):
            if mo.lastgroup is None:
                raise PDDLSyntaxError("Failed to tokenize string into PDDL.", line_num)

            token_type: PDDLTokenType = getattr(PDDLTokenType, mo.lastgroup)
            value = mo.group().lower()
            column = mo.start() - line_start

            match token_type:
                case PDDLTokenType.KEYWORD:
                    if value not in self.keywords:
                        raise PDDLSyntaxError(f"Unknown PDDL keyword: '{value}'", line_num, column)

                case PDDLTokenType.MISMATCH:
                    raise PDDLSyntaxError(f"Cannot tokenize '{value}'", line_num, column)

                case PDDLTokenType.COMMENT | PDDLTokenType.SKIP:
                    continue  # Skip comments and whitespace

                case PDDLTokenType.NEWLINE:
                    line_start = mo.end()
                    line_num += 1
                    continue

                case _:
                    pass

            yield PDDLToken(token_type, value, line_num, column)
