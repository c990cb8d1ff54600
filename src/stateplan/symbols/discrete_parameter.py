"""Define a class to represent discrete, typed parameters."""

from __future__ import annotations

from dataclasses import dataclass

from stateplan.symbols.objects import ObjectSymbol


@dataclass(frozen=True)
class DiscreteParameter:
    """A discrete parameter specifying a type constraint.

    Equivalent to a typed variable in PDDL (e.g., `?x - block`).
    """

    name: str
    """Name of the lifted parameter, including its leading `?`."""

    type_: str
    """Object type expected by the parameter."""

    def __post_init__(self) -> None:
        """Verify that the parameter is named like a PDDL variable."""
        if not self.name.startswith("?"):
            raise ValueError(f"Parameter names must begin with '?', got '{self.name}'.")

    def __str__(self) -> str:
        """Create a PDDL string representation of the typed parameter."""
        return f"{self.name} - {self.type_}"


Bindings = dict[str, ObjectSymbol]
"""A mapping from parameter names to (symbols representing) bound concrete objects."""
