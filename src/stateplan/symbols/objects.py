"""Define classes to represent symbolic typed objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator

if TYPE_CHECKING:
    from stateplan.pddl.type_hierarchy import TypeHierarchy


@dataclass(frozen=True)
class ObjectSymbol:
    """A symbol representing a typed object (a PDDL constant or problem object)."""

    name: str
    type_: str

    def __str__(self) -> str:
        """Return the object's name, as it appears in ground atoms."""
        return self.name


class ObjectSymbols:
    """An ordered collection of symbols representing typed objects.

    Objects keep their declaration order so that grounding enumerates bindings reproducibly.
    """

    def __init__(self, objects: Iterable[ObjectSymbol], types: TypeHierarchy) -> None:
        """Initialize the collection of object symbols.

        :param objects: Typed objects, in declaration order (duplicates by name are ignored)
        :param types: Type hierarchy used to resolve objects of a type through its subtypes
        """
        self._objects: dict[str, ObjectSymbol] = {}
        for obj in objects:
            self._objects.setdefault(obj.name, obj)

        self.types = types

        self._objects_of_type: dict[str, tuple[ObjectSymbol, ...]] = {}
        """Cache from each type name to the objects of that type (including subtypes)."""

    def __contains__(self, obj_name: str) -> bool:
        """Evaluate whether an object of the given name is in the collection."""
        return obj_name in self._objects

    def __iter__(self) -> Iterator[ObjectSymbol]:
        """Iterate over the object symbols in declaration order."""
        return iter(self._objects.values())

    def __len__(self) -> int:
        """Retrieve the number of objects in the collection."""
        return len(self._objects)

    def get(self, obj_name: str) -> ObjectSymbol | None:
        """Retrieve the named object symbol.

        :param obj_name: Name of an object
        :return: Object symbol with the name, or None if there isn't one
        """
        return self._objects.get(obj_name)

    def get_objects_of_type(self, obj_type: str) -> tuple[ObjectSymbol, ...]:
        """Retrieve all stored object symbols whose type equals or descends from the given type.

        :raises KeyError: If an unknown object type is given
        """
        if obj_type not in self.types:
            raise KeyError(f"Unknown object type: '{obj_type}'.")

        if obj_type not in self._objects_of_type:
            self._objects_of_type[obj_type] = tuple(
                obj for obj in self._objects.values() if self.types.is_subtype(obj.type_, obj_type)
            )
        return self._objects_of_type[obj_type]
