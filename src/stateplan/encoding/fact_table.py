"""Define a table assigning each ground atom a stable, dense integer index."""

from __future__ import annotations

from typing import Iterable, Iterator

from stateplan.symbols.ground_atom import GroundAtom


class FactTable:
    """A bijection between ground atoms (facts) and dense non-negative indices.

    Indices are assigned in first-seen order and never renumbered. Static facts (true in every
    reachable state) are recorded separately and receive no index.
    """

    def __init__(self, atoms: Iterable[GroundAtom] = (), static_facts: Iterable[GroundAtom] = ()) -> None:
        """Initialize the table with the given atoms (indexed in iteration order) and static facts."""
        self._atoms: list[GroundAtom] = []
        self._index: dict[GroundAtom, int] = {}
        self._static: frozenset[GroundAtom] = frozenset(static_facts)
        self._frozen = False

        for atom in atoms:
            self.add(atom)

    def __len__(self) -> int:
        """Retrieve the number of indexed (non-static) facts."""
        return len(self._atoms)

    def __contains__(self, atom: GroundAtom) -> bool:
        """Evaluate whether the given atom has an index in the table."""
        return atom in self._index

    def __iter__(self) -> Iterator[GroundAtom]:
        """Iterate over the indexed atoms in index order."""
        return iter(self._atoms)

    def __getitem__(self, index: int) -> GroundAtom:
        """Retrieve the atom with the given index."""
        return self._atoms[index]

    @property
    def static_facts(self) -> frozenset[GroundAtom]:
        """Retrieve the facts that hold in every reachable state (and have no index)."""
        return self._static

    @property
    def frozen(self) -> bool:
        """Check whether the table accepts no further atoms."""
        return self._frozen

    def add(self, atom: GroundAtom) -> int:
        """Retrieve the index of the given atom, assigning the next free index if it is new.

        :raises RuntimeError: If a new atom is added after the table was frozen
        :raises ValueError: If the atom was recorded as a static fact
        """
        index = self._index.get(atom)
        if index is not None:
            return index

        if self._frozen:
            raise RuntimeError(f"Cannot add {atom} to a frozen fact table.")
        if atom in self._static:
            raise ValueError(f"Static fact {atom} cannot be given an index.")

        self._index[atom] = len(self._atoms)
        self._atoms.append(atom)
        return self._index[atom]

    def freeze(self) -> None:
        """Prevent further atoms from being added to the table."""
        self._frozen = True

    def index_of(self, atom: GroundAtom) -> int:
        """Retrieve the index of the given atom.

        :raises KeyError: If the atom has no index
        """
        if atom not in self._index:
            raise KeyError(f"Fact {atom} is not in the fact table.")
        return self._index[atom]

    def to_mask(self, atoms: Iterable[GroundAtom]) -> int:
        """Convert a collection of indexed atoms into a bitmask over fact indices."""
        mask = 0
        for atom in atoms:
            mask |= 1 << self.index_of(atom)
        return mask

    def atoms_of(self, mask: int) -> list[GroundAtom]:
        """Convert a bitmask over fact indices into the corresponding atoms (in index order)."""
        atoms: list[GroundAtom] = []
        index = 0
        while mask:
            if mask & 1:
                atoms.append(self._atoms[index])
            mask >>= 1
            index += 1
        return atoms

    def holds(self, atom: GroundAtom, bits: int) -> bool:
        """Evaluate whether the given atom holds in the state with the given bits.

        Static facts always hold; atoms outside the table never hold.
        """
        if atom in self._static:
            return True
        index = self._index.get(atom)
        return index is not None and bool((bits >> index) & 1)
