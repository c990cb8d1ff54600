"""Unit tests for relaxed reachability."""

from stateplan.encoding.reachability import RelaxedStep, relaxed_reachability


def test_reachability_chains_steps() -> None:
    """Verify that facts reached by one step enable later steps, regardless of step order."""
    # Arrange - Steps listed in reverse dependency order: a -> b -> c
    steps = [RelaxedStep(("b",), ("c",)), RelaxedStep(("a",), ("b",))]

    # Act
    result = relaxed_reachability(["a"], steps)

    # Assert
    assert result.reached == frozenset({"a", "b", "c"})
    assert result.fired == (True, True)
    assert result.reaches_all(["c", "a"])


def test_reachability_requires_all_preconditions() -> None:
    """Verify that a step fires only once all of its preconditions are reached."""
    # Arrange
    steps = [RelaxedStep(("a", "z"), ("b",)), RelaxedStep((), ("y",))]

    # Act
    result = relaxed_reachability(["a"], steps)

    # Assert - `z` is never reached, so the first step never fires; the second needs nothing
    assert result.fired == (False, True)
    assert not result.reaches_all(["b"])
    assert "y" in result.reached


def test_reachability_counts_repeated_preconditions_once() -> None:
    """Verify that a precondition listed twice does not block its step."""
    result = relaxed_reachability(["a"], [RelaxedStep(("a", "a"), ("b",))])
    assert result.fired == (True,)
