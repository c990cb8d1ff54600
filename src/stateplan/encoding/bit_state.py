"""Define a class to represent planning states as fixed-width bitsets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator

if TYPE_CHECKING:
    from stateplan.encoding.fact_table import FactTable
    from stateplan.symbols.ground_atom import GroundAtom


@dataclass(frozen=True, slots=True)
class BitState:
    """An immutable state represented as a bitset over fact indices.

    Bit i is set iff the fact with index i is true. Equality and hashing use the integer directly.
    """

    bits: int = 0

    def __contains__(self, index: int) -> bool:
        """Evaluate whether the fact with the given index is true in the state."""
        return bool((self.bits >> index) & 1)

    def __len__(self) -> int:
        """Retrieve the number of true (non-static) facts in the state."""
        return self.bits.bit_count()

    @classmethod
    def from_indices(cls, indices: Iterable[int]) -> BitState:
        """Construct the state in which exactly the facts with the given indices are true."""
        bits = 0
        for index in indices:
            bits |= 1 << index
        return cls(bits)

    def satisfies(self, mask: int) -> bool:
        """Evaluate whether every fact in the given mask is true in the state."""
        return (self.bits & mask) == mask

    def is_disjoint(self, mask: int) -> bool:
        """Evaluate whether every fact in the given mask is false in the state."""
        return (self.bits & mask) == 0

    def indices(self) -> Iterator[int]:
        """Iterate over the indices of true facts in ascending order."""
        bits = self.bits
        while bits:
            low = bits & -bits
            yield low.bit_length() - 1
            bits ^= low

    def to_atoms(self, fact_table: FactTable) -> list[GroundAtom]:
        """Convert the state into the list of its true (non-static) ground atoms."""
        return fact_table.atoms_of(self.bits)
