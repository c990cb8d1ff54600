"""Define enumerations describing the available heuristics."""

from __future__ import annotations

from enum import StrEnum


class Aggregation(StrEnum):
    """How a heuristic combines the estimated costs of individual goal facts."""

    MAX = "max"
    """Take the costliest goal fact (admissible)."""

    SUM = "sum"
    """Sum over goal facts (informative but inadmissible)."""


class HeuristicType(StrEnum):
    """Enumeration of the heuristics available to search strategies."""

    BLIND = "blind"
    MAX = "max"
    SUM = "sum"
    FAST_FORWARD = "fast_forward"

    @property
    def aggregation(self) -> Aggregation:
        """Retrieve the aggregation used by this type of heuristic."""
        return Aggregation.MAX if self in {HeuristicType.BLIND, HeuristicType.MAX} else Aggregation.SUM

    @property
    def is_admissible(self) -> bool:
        """Check whether this type of heuristic never overestimates the optimal cost-to-go."""
        return self in {HeuristicType.BLIND, HeuristicType.MAX}
