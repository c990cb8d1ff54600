"""Unit tests for the FactTable and BitState classes."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from stateplan.encoding import BitState, FactTable
from stateplan.symbols import GroundAtom

from ..common_strategies import bit_states


@pytest.fixture
def blocks_table() -> FactTable:
    """Define a fact table over three Blocksworld facts, with one static fact."""
    atoms = [GroundAtom.parse("(clear a)"), GroundAtom.parse("(on a b)"), GroundAtom.parse("(handempty)")]
    return FactTable(atoms, static_facts=[GroundAtom.parse("(block a)")])


def test_indices_follow_first_seen_order(blocks_table: FactTable) -> None:
    """Verify that atoms receive dense indices in the order they were first added."""
    # Arrange/Act - Add an existing atom and a new atom
    existing = blocks_table.add(GroundAtom.parse("(on a b)"))
    new = blocks_table.add(GroundAtom.parse("(holding a)"))

    # Assert - Expect the existing index to be reused and the new atom to be appended
    assert existing == 1
    assert new == 3
    assert blocks_table[3] == GroundAtom("holding", ("a",))
    assert len(blocks_table) == 4


def test_masks_convert_between_atoms_and_bits(blocks_table: FactTable) -> None:
    """Verify that masks built from atoms convert back to the same atoms in index order."""
    # Arrange
    atoms = [GroundAtom.parse("(handempty)"), GroundAtom.parse("(clear a)")]

    # Act
    mask = blocks_table.to_mask(atoms)

    # Assert
    assert mask == 0b101
    assert blocks_table.atoms_of(mask) == [GroundAtom("clear", ("a",)), GroundAtom("handempty")]


def test_static_facts_always_hold(blocks_table: FactTable) -> None:
    """Verify that static facts hold in every state while unknown atoms never hold."""
    assert blocks_table.holds(GroundAtom.parse("(block a)"), 0)
    assert not blocks_table.holds(GroundAtom.parse("(block z)"), 0b111)
    assert blocks_table.holds(GroundAtom.parse("(on a b)"), 0b010)
    assert GroundAtom.parse("(block a)") not in blocks_table


def test_static_fact_cannot_be_indexed(blocks_table: FactTable) -> None:
    """Verify that a static fact is never given an index."""
    with pytest.raises(ValueError):
        blocks_table.add(GroundAtom.parse("(block a)"))


def test_frozen_table_rejects_new_atoms(blocks_table: FactTable) -> None:
    """Verify that a frozen table still answers lookups but rejects new atoms."""
    # Arrange
    blocks_table.freeze()

    # Act/Assert
    assert blocks_table.add(GroundAtom.parse("(clear a)")) == 0
    with pytest.raises(RuntimeError):
        blocks_table.add(GroundAtom.parse("(clear b)"))
    with pytest.raises(KeyError):
        blocks_table.index_of(GroundAtom.parse("(clear b)"))


@given(st.sets(st.integers(min_value=0, max_value=200)))
def test_bit_state_from_indices(indices: set[int]) -> None:
    """Verify that a state built from indices contains exactly those indices."""
    # Arrange/Act
    state = BitState.from_indices(indices)

    # Assert
    assert list(state.indices()) == sorted(indices)
    assert len(state) == len(indices)
    assert all(i in state for i in indices)


@given(bit_states(num_facts=64), bit_states(num_facts=64))
def test_bit_state_equality_uses_bits(a: BitState, b: BitState) -> None:
    """Verify that states compare and hash equal exactly when their bits are equal."""
    assert (a == b) == (a.bits == b.bits)
    assert BitState(a.bits) == a
    assert hash(BitState(a.bits)) == hash(a)


@given(bit_states(num_facts=16))
def test_bit_state_satisfies_and_disjoint(state: BitState) -> None:
    """Verify that a state satisfies its own bits and is disjoint from their complement."""
    complement = ~state.bits & 0xFFFF
    assert state.satisfies(state.bits)
    assert state.satisfies(0)
    assert state.is_disjoint(complement)
