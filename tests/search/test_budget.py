"""Unit tests for search budgets and outcomes."""

import pytest

from stateplan.plans import Plan
from stateplan.search import SearchBudget, SearchOutcome, SearchStatistics, SearchStatus
from stateplan.search.budget import BudgetExceeded, BudgetMonitor


def test_default_budget() -> None:
    """Verify that the default budget limits time to 300 seconds but not the number of states."""
    budget = SearchBudget()
    assert budget.timeout_s == 300.0
    assert budget.max_states is None


@pytest.mark.parametrize(("timeout_s", "max_states"), [(-1.0, None), (None, 0)])
def test_invalid_budget_raises(timeout_s: float | None, max_states: int | None) -> None:
    """Verify that negative timeouts and non-positive state limits are rejected."""
    with pytest.raises(ValueError):
        SearchBudget(timeout_s=timeout_s, max_states=max_states)


def test_monitor_checks_states() -> None:
    """Verify that the monitor raises once more states are generated than permitted."""
    # Arrange
    monitor = BudgetMonitor(SearchBudget(timeout_s=None, max_states=3))

    # Act/Assert
    monitor.check_states(3)
    monitor.check_time()
    with pytest.raises(BudgetExceeded) as error:
        monitor.check_states(4)
    assert error.value.status == SearchStatus.RESOURCE_EXHAUSTED


def test_outcome_requires_plan_exactly_when_solved() -> None:
    """Verify that an outcome carries a plan if and only if the search was solved."""
    with pytest.raises(ValueError):
        SearchOutcome(SearchStatus.SOLVED)
    with pytest.raises(ValueError):
        SearchOutcome(SearchStatus.EXHAUSTED, plan=Plan())
    assert SearchOutcome(SearchStatus.SOLVED, plan=Plan()).solved


def test_terminal_statuses() -> None:
    """Verify which statuses end a search."""
    assert not SearchStatus.IDLE.is_terminal
    assert not SearchStatus.RUNNING.is_terminal
    assert all(s.is_terminal for s in SearchStatus if s not in {SearchStatus.IDLE, SearchStatus.RUNNING})


def test_statistics_table_lists_counters() -> None:
    """Verify that search statistics can be summarized as a rich table."""
    table = SearchStatistics(expanded=3, generated=7).to_table()
    assert table.row_count == 6
