"""Define a class to represent hierarchies of object types."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Iterator

ROOT_TYPE = "object"
"""Every PDDL type ultimately descends from `object`."""

EITHER = "either"


def either_type(members: Iterable[str]) -> str:
    """Name the union of the given types as it is written in PDDL, e.g. `(either truck plane)`."""
    return f"({EITHER} {' '.join(members)})"


def type_members(type_name: str) -> tuple[str, ...]:
    """Split a type name into the types it unites (a plain type unites only itself)."""
    if type_name.startswith(f"({EITHER} ") and type_name.endswith(")"):
        return tuple(type_name[len(EITHER) + 2 : -1].split())
    return (type_name,)


class TypeHierarchy:
    """A hierarchy of object types, permitting types to have subtypes."""

    def __init__(self) -> None:
        """Initialize a type hierarchy containing only the root type."""
        self._to_children: dict[str, list[str]] = defaultdict(list)
        """A map from the name of each type to the names of the type's direct subtypes."""

        self._to_parent: dict[str, str | None] = {ROOT_TYPE: None}
        """A map from each type to its parent type (None for the root type)."""

    def __contains__(self, type_name: str) -> bool:
        """Evaluate whether the named type (or every member of a union type) is declared in the hierarchy."""
        return all(member in self._to_parent for member in type_members(type_name))

    def __iter__(self) -> Iterator[str]:
        """Iterate over all declared type names in declaration order."""
        return iter(self._to_parent)

    def add_type(self, type_name: str, parent: str = ROOT_TYPE) -> None:
        """Declare a type as a direct subtype of the given parent type.

        Parent types that were not yet declared are added as children of the root type.

        :raises ValueError: If the type was already declared with a different parent, or the parent is a union
        """
        if type_members(parent) != (parent,):
            raise ValueError(f"Type '{type_name}' cannot descend from the union type '{parent}'.")
        if type_name == ROOT_TYPE:
            return

        if parent not in self._to_parent:
            self.add_type(parent)

        existing = self._to_parent.get(type_name)
        if type_name in self._to_parent and existing != parent:
            if existing != ROOT_TYPE:
                raise ValueError(f"Type '{type_name}' declared with parents '{existing}' and '{parent}'.")
            self._to_children[ROOT_TYPE].remove(type_name)  # Promote an implicit declaration
        elif type_name in self._to_parent:
            return

        self._to_parent[type_name] = parent
        self._to_children[parent].append(type_name)
        self._validate()

    def parent_of(self, type_name: str) -> str | None:
        """Retrieve the parent of the named type (None for the root type).

        :raises KeyError: If an unknown type is given
        """
        if type_name not in self._to_parent:
            raise KeyError(f"Unknown object type: '{type_name}'.")
        return self._to_parent[type_name]

    def ancestors_of(self, type_name: str) -> list[str]:
        """Retrieve the named type followed by all of its supertypes, nearest first."""
        chain: list[str] = []
        current: str | None = type_name
        while current is not None:
            chain.append(current)
            current = self.parent_of(current)
        return chain

    def is_subtype(self, type_name: str, super_type: str) -> bool:
        """Evaluate whether `type_name` equals or descends from `super_type`.

        Union types `(either a b)` match when any of their members does, so an object of type `a` fits
        a parameter of type `(either a b)`.
        """
        supers = type_members(super_type)
        return any(s in self.ancestors_of(member) for member in type_members(type_name) for s in supers)

    def _validate(self) -> None:
        """Verify that the type hierarchy, as currently defined, is consistent.

        :raises ValueError: If the hierarchy contains contradictory or cyclic relationships
        """
        error_msgs = [
            str(
                f"The parent of type '{child}' is defined as '{parent}' but the children "
                f"of '{parent}' don't include '{child}': {self._to_children[parent]}.",
            )
            for child, parent in self._to_parent.items()
            if parent is not None and child not in self._to_children[parent]
        ]

        for type_name in self._to_parent:
            seen: set[str] = set()
            current: str | None = type_name
            while current is not None:
                if current in seen:
                    error_msgs.append(f"Type '{type_name}' participates in a cycle of subtypes.")
                    break
                seen.add(current)
                current = self._to_parent[current]

        if error_msgs:
            raise ValueError("Invalid TypeHierarchy:\n\t" + "\n\t".join(error_msgs))
