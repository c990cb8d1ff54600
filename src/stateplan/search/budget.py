"""Define the budget bounding a search and a monitor enforcing it."""

from __future__ import annotations

import time
from dataclasses import dataclass

from stateplan.search.outcome import SearchStatus

DEFAULT_TIMEOUT_S = 300.0


@dataclass(frozen=True)
class SearchBudget:
    """Limits on the resources one search may consume."""

    timeout_s: float | None = DEFAULT_TIMEOUT_S
    """Wall-clock time limit in seconds (None = unlimited)."""

    max_states: int | None = None
    """Largest number of states the search may generate (None = unlimited)."""

    def __post_init__(self) -> None:
        """Verify that the limits are non-negative."""
        if self.timeout_s is not None and self.timeout_s < 0:
            raise ValueError(f"Search timeout must be non-negative, got {self.timeout_s}.")
        if self.max_states is not None and self.max_states < 1:
            raise ValueError(f"State limit must be positive, got {self.max_states}.")


class BudgetExceeded(Exception):
    """Raised inside a search to unwind it once its budget is exhausted."""

    def __init__(self, status: SearchStatus, message: str) -> None:
        """Initialize the exception with the terminal status it corresponds to."""
        super().__init__(message)
        self.status = status


class BudgetMonitor:
    """Tracks elapsed time and generated states against a search budget."""

    def __init__(self, budget: SearchBudget) -> None:
        """Start monitoring the given budget from the current time."""
        self.budget = budget
        self.start_time = time.monotonic()
        self.deadline = None if budget.timeout_s is None else self.start_time + budget.timeout_s

    @property
    def elapsed_s(self) -> float:
        """Retrieve the number of seconds since monitoring began."""
        return time.monotonic() - self.start_time

    def check_time(self) -> None:
        """Verify that the time budget has not run out.

        :raises BudgetExceeded: If the deadline has passed
        """
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise BudgetExceeded(SearchStatus.TIMED_OUT, f"Search exceeded {self.budget.timeout_s} seconds.")

    def check_states(self, generated: int) -> None:
        """Verify that the number of generated states is within the state limit.

        :raises BudgetExceeded: If more states were generated than permitted
        """
        if self.budget.max_states is not None and generated > self.budget.max_states:
            raise BudgetExceeded(
                SearchStatus.RESOURCE_EXHAUSTED,
                f"Search generated more than {self.budget.max_states} states.",
            )
