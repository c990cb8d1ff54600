"""Define classes describing the outcome of a search."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from rich.table import Table

from stateplan.io.logging import console

if TYPE_CHECKING:
    from stateplan.plans.plan import Plan


class SearchStatus(StrEnum):
    """States of the state machine shared by all search strategies.

    Each search moves from IDLE to RUNNING and ends in exactly one terminal status.
    """

    IDLE = "idle"
    RUNNING = "running"
    SOLVED = "solved"
    """A plan was found."""

    EXHAUSTED = "exhausted"
    """The strategy ran out of states to explore (incomplete strategies may miss solutions)."""

    TIMED_OUT = "timed_out"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    """Memory ran out or the state limit was reached."""

    CERTIFIED_UNSOLVABLE = "certified_unsolvable"
    """Relaxed reachability proved that no plan exists, so no state was expanded."""

    @property
    def is_terminal(self) -> bool:
        """Check whether the status ends a search."""
        return self not in {SearchStatus.IDLE, SearchStatus.RUNNING}


@dataclass
class SearchStatistics:
    """Counters accumulated while a search runs."""

    expanded: int = 0
    """Number of states whose successors were generated."""

    generated: int = 0
    evaluated: int = 0
    """Number of heuristic evaluations."""

    dead_ends: int = 0
    """Number of states the heuristic proved unable to reach the goal."""

    max_frontier: int = 0
    elapsed_s: float = 0.0

    def to_table(self, title: str = "Search statistics") -> Table:
        """Create a rich table summarizing the statistics."""
        table = Table(title=title)
        table.add_column("Statistic")
        table.add_column("Value", justify="right")
        table.add_row("Expanded states", str(self.expanded))
        table.add_row("Generated states", str(self.generated))
        table.add_row("Heuristic evaluations", str(self.evaluated))
        table.add_row("Dead ends", str(self.dead_ends))
        table.add_row("Largest frontier", str(self.max_frontier))
        table.add_row("Elapsed time (s)", f"{self.elapsed_s:.3f}")
        return table


@dataclass(frozen=True)
class SearchOutcome:
    """The result of one call to a search strategy."""

    status: SearchStatus
    plan: Plan | None = None
    """Plan found by the search (None unless the search was solved)."""

    statistics: SearchStatistics = field(default_factory=SearchStatistics)
    strategy: str = ""

    def __post_init__(self) -> None:
        """Verify that a plan is present exactly when the search was solved."""
        if (self.plan is not None) != (self.status == SearchStatus.SOLVED):
            raise ValueError(f"Search outcome with status {self.status} cannot have plan {self.plan!r}.")

    @property
    def solved(self) -> bool:
        """Check whether the search found a plan."""
        return self.status == SearchStatus.SOLVED

    def print_summary(self) -> None:
        """Print the outcome and its statistics to the console."""
        console.print(f"[bold]{self.strategy}[/bold] finished with status [cyan]{self.status}[/cyan].")
        console.print(self.statistics.to_table())
