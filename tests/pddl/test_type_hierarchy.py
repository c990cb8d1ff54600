"""Unit tests for the TypeHierarchy class."""

import pytest

from stateplan.pddl import TypeHierarchy
from stateplan.pddl.type_hierarchy import either_type, type_members


@pytest.fixture
def vehicles() -> TypeHierarchy:
    """Define a hierarchy in which trucks and planes are vehicles."""
    hierarchy = TypeHierarchy()
    hierarchy.add_type("vehicle")
    hierarchy.add_type("truck", "vehicle")
    hierarchy.add_type("plane", "vehicle")
    hierarchy.add_type("package")
    return hierarchy


def test_is_subtype(vehicles: TypeHierarchy) -> None:
    """Verify that subtyping follows parents up to the root type."""
    assert vehicles.is_subtype("truck", "vehicle")
    assert vehicles.is_subtype("truck", "object")
    assert vehicles.is_subtype("truck", "truck")
    assert not vehicles.is_subtype("vehicle", "truck")
    assert not vehicles.is_subtype("package", "vehicle")


def test_ancestors_of(vehicles: TypeHierarchy) -> None:
    """Verify that ancestors are listed nearest first."""
    assert vehicles.ancestors_of("plane") == ["plane", "vehicle", "object"]


def test_implicit_parent_is_declared() -> None:
    """Verify that using an undeclared parent type declares it below the root type."""
    # Arrange
    hierarchy = TypeHierarchy()

    # Act - Declare `truck` before its parent `vehicle`, then declare `vehicle` explicitly
    hierarchy.add_type("truck", "vehicle")
    hierarchy.add_type("vehicle", "object")

    # Assert
    assert "vehicle" in hierarchy
    assert hierarchy.parent_of("vehicle") == "object"


def test_conflicting_parents_raise(vehicles: TypeHierarchy) -> None:
    """Verify that redeclaring a type with a different parent is rejected."""
    with pytest.raises(ValueError):
        vehicles.add_type("truck", "package")


def test_unknown_type_raises(vehicles: TypeHierarchy) -> None:
    """Verify that querying an undeclared type raises a KeyError."""
    with pytest.raises(KeyError):
        vehicles.parent_of("boat")


def test_union_types(vehicles: TypeHierarchy) -> None:
    """Verify that a union type matches any of its members and their subtypes."""
    # Arrange
    carrier = either_type(["truck", "plane"])

    # Act/Assert
    assert carrier == "(either truck plane)"
    assert type_members(carrier) == ("truck", "plane")
    assert carrier in vehicles
    assert either_type(["truck", "boat"]) not in vehicles
    assert vehicles.is_subtype("plane", carrier)
    assert vehicles.is_subtype(carrier, "vehicle")
    assert not vehicles.is_subtype("package", carrier)


def test_union_parent_raises(vehicles: TypeHierarchy) -> None:
    """Verify that a declared type cannot descend from a union type."""
    with pytest.raises(ValueError):
        vehicles.add_type("van", either_type(["truck", "package"]))
