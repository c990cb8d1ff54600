"""Define a class to represent ground atoms (AKA grounded predicates)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class GroundAtom:
    """An atomic formula in which all variables have been bound to concrete objects.

    Ground atoms are the propositions (facts) indexed by the encoder's fact table.
    """

    name: str
    """Name of the grounded predicate."""

    arguments: tuple[str, ...] = ()
    """Names of the objects bound to the predicate's parameters (in parameter order)."""

    def __str__(self) -> str:
        """Retrieve the PDDL string representation of the ground atom, e.g. `(at ball1 rooma)`."""
        return f"({' '.join((self.name, *self.arguments))})"

    @classmethod
    def parse(cls, text: str) -> GroundAtom:
        """Construct a ground atom from its PDDL string representation.

        :param text: String such as `(at ball1 rooma)` or `handempty`
        :return: Corresponding ground atom
        """
        tokens = text.strip().removeprefix("(").removesuffix(")").split()
        if not tokens:
            raise ValueError(f"Cannot parse a ground atom from '{text}'.")
        return GroundAtom(tokens[0], tuple(tokens[1:]))
