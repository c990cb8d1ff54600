"""Unit tests for the GroundedAction class."""

from hypothesis import given

from stateplan.encoding import BitState, ConditionalEffect, GroundedAction

from ..common_strategies import bit_states, grounded_actions

NUM_FACTS = 12


@given(grounded_actions(NUM_FACTS, max_conditional=0), bit_states(NUM_FACTS))
def test_apply_without_conditional_effects(action: GroundedAction, state: BitState) -> None:
    """Verify that unconditional effects delete, then add, leaving all other facts untouched."""
    # Arrange/Act - Apply the action (applicability is irrelevant to the transition function)
    successor = action.apply(state)

    # Assert - Adds are true, deletes that aren't re-added are false, and other facts are unchanged
    assert successor.satisfies(action.add)
    assert successor.is_disjoint(action.delete & ~action.add)
    untouched = ~(action.add | action.delete)
    assert (successor.bits & untouched) == (state.bits & untouched)


@given(grounded_actions(NUM_FACTS), bit_states(NUM_FACTS))
def test_conditional_effects_use_predecessor_state(action: GroundedAction, state: BitState) -> None:
    """Verify that conditional effects fire based on the state before the action is applied."""
    # Arrange - Compute the expected successor by hand
    expected = (state.bits & ~action.delete) | action.add
    for effect in action.conditional_effects:
        if (state.bits & effect.condition) == effect.condition and not (state.bits & effect.negative_condition):
            expected = (expected & ~effect.delete) | effect.add

    # Act
    successor = action.apply(state)

    # Assert
    assert successor == BitState(expected)


@given(grounded_actions(NUM_FACTS), bit_states(NUM_FACTS))
def test_is_applicable(action: GroundedAction, state: BitState) -> None:
    """Verify that applicability requires all positive and no negative preconditions."""
    expected = all(i in state for i in BitState(action.positive_preconditions).indices()) and not any(
        i in state for i in BitState(action.negative_preconditions).indices()
    )
    assert action.is_applicable(state) == expected


def test_conditional_effect_condition_is_not_affected_by_unconditional_effect() -> None:
    """Verify that an unconditional add does not trigger a conditional effect of the same action."""
    # Arrange - The action adds fact 0, and conditionally (on fact 0) adds fact 1
    action = GroundedAction("toggle", add=0b01, conditional_effects=(ConditionalEffect(condition=0b01, add=0b10),))

    # Act
    successor = action.apply(BitState(0))

    # Assert - The condition was false in the predecessor state, so only fact 0 was added
    assert successor == BitState(0b01)


def test_conditional_delete_then_add() -> None:
    """Verify that a conditional effect deletes before it adds, so an atom both deleted and added is true."""
    # Arrange
    effect = ConditionalEffect(condition=0b1, add=0b10, delete=0b10)
    action = GroundedAction("refresh", conditional_effects=(effect,))

    # Act/Assert
    assert action.apply(BitState(0b01)) == BitState(0b11)


def test_action_string_is_pddl_signature() -> None:
    """Verify that an action prints as its PDDL signature."""
    assert str(GroundedAction("pick", ("ball1", "rooma", "left"))) == "(pick ball1 rooma left)"
    assert str(GroundedAction("noop")) == "(noop)"
