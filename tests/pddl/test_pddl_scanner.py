"""Unit tests for the PDDLScanner class."""

import pytest

from stateplan.pddl import PDDLScanner, PDDLSyntaxError
from stateplan.pddl.pddl_scanner import PDDLTokenType

from ..common_strategies import benchmark_path


@pytest.mark.parametrize("domain_name", ["gripper", "blocksworld", "briefcase", "travel", "tokens", "durative"])
def test_scan_benchmark_domains(domain_name: str) -> None:
    """Verify that the PDDLScanner class can scan every benchmark domain and problem."""
    # Arrange - Read the benchmark's PDDL text from the test data
    scanner = PDDLScanner()
    domain_path, problem_path = benchmark_path(domain_name)

    # Act/Assert - Scan the PDDL files and expect that no token is a mismatch
    for path in (domain_path, problem_path):
        for token in scanner.tokenize(path.read_text()):
            assert token.type_ != PDDLTokenType.MISMATCH, f"Mismatched token: {token}."


def test_scan_mov_b_action(mov_b_action: str) -> None:
    """Verify that the PDDLScanner class lowercases names and skips whitespace."""
    # Arrange - PDDL text is provided by the test fixture
    scanner = PDDLScanner()

    # Act - Scan the PDDL action
    tokens = list(scanner.tokenize(mov_b_action))

    # Assert - Expect the action to begin as written, but with the constant `B` lowercased
    assert [t.type_ for t in tokens[:3]] == [PDDLTokenType.OPEN_PAREN, PDDLTokenType.KEYWORD, PDDLTokenType.NAME]
    assert tokens[2].value == "mov-b"
    assert "b" in {t.value for t in tokens if t.type_ == PDDLTokenType.NAME}
    assert all(t.type_ not in {PDDLTokenType.SKIP, PDDLTokenType.NEWLINE} for t in tokens)


def test_scan_tracks_lines_and_skips_comments() -> None:
    """Verify that tokens record their line numbers and that comments are ignored."""
    # Arrange - Define PDDL text containing a comment on its first line
    scanner = PDDLScanner()
    text = "; A comment (with parentheses)\n(on ?x ?y)\n  (clear ?y)"

    # Act - Scan the text
    tokens = list(scanner.tokenize(text))

    # Assert - Expect nine tokens, none from the comment, on the second and third lines
    assert len(tokens) == 9
    assert [t.line for t in tokens] == [2, 2, 2, 2, 2, 3, 3, 3, 3]
    assert tokens[5].column == 2


def test_scan_number_and_equals() -> None:
    """Verify that numeric literals and the equality predicate are scanned as their own tokens."""
    # Arrange/Act - Scan an initial-state numeric assignment
    tokens = list(PDDLScanner().tokenize("(= (total-cost) 12.5)"))

    # Assert - Expect the equals sign and the number to be recognized
    assert tokens[1].type_ == PDDLTokenType.EQUALS
    assert tokens[5].type_ == PDDLTokenType.NUMBER
    assert tokens[5].value == "12.5"


def test_scan_unknown_keyword_raises() -> None:
    """Verify that scanning an unknown keyword raises a syntax error."""
    # Arrange - Define PDDL text using a keyword that PDDL doesn't define
    scanner = PDDLScanner()

    # Act/Assert - Expect that tokenizing the text raises a PDDLSyntaxError
    with pytest.raises(PDDLSyntaxError, match="Unknown PDDL keyword"):
        list(scanner.tokenize("(:requirements :teleportation)"))


def test_scan_invalid_character_raises() -> None:
    """Verify that scanning a character outside PDDL's alphabet raises a syntax error."""
    with pytest.raises(PDDLSyntaxError):
        list(PDDLScanner().tokenize("(at robot #kitchen)"))
