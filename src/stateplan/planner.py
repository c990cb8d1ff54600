"""Define a facade running the full pipeline: read PDDL, encode, search, and validate.

Every failure mode of the pipeline is reported as exactly one `PlanningStatus`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from stateplan.encoding.errors import EncodingError
from stateplan.encoding.grounded_problem import GroundedProblem
from stateplan.encoding.grounder import encode
from stateplan.io.planner_config import PlannerConfig
from stateplan.pddl.diagnostics import Diagnostics
from stateplan.pddl.task_loader import PlanningTask, load_planning_task, read_planning_task
from stateplan.plans.plan import Plan
from stateplan.search.outcome import SearchOutcome, SearchStatus
from stateplan.search.registry import create_strategy
from stateplan.search.strategy import SearchStrategy

logger = logging.getLogger(__name__)


class PlanningStatus(StrEnum):
    """Terminal status of one run of the planner."""

    PARSE_ERROR = "parse_error"
    UNSUPPORTED = "unsupported"
    CERTIFIED_UNSOLVABLE = "certified_unsolvable"
    NO_SOLUTION_FOUND = "no_solution_found"
    TIMED_OUT = "timed_out"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    EMPTY_PLAN = "empty_plan"
    """The initial state already satisfies the goal."""

    PLAN_FOUND = "plan_found"

    @property
    def has_plan(self) -> bool:
        """Check whether the status carries a (possibly empty) plan."""
        return self in {PlanningStatus.EMPTY_PLAN, PlanningStatus.PLAN_FOUND}


SEARCH_TO_PLANNING_STATUS = {
    SearchStatus.EXHAUSTED: PlanningStatus.NO_SOLUTION_FOUND,
    SearchStatus.TIMED_OUT: PlanningStatus.TIMED_OUT,
    SearchStatus.RESOURCE_EXHAUSTED: PlanningStatus.RESOURCE_EXHAUSTED,
    SearchStatus.CERTIFIED_UNSOLVABLE: PlanningStatus.CERTIFIED_UNSOLVABLE,
}


@dataclass(frozen=True)
class PlanningResult:
    """Everything produced by one run of the planner."""

    status: PlanningStatus
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    problem: GroundedProblem | None = None
    """Grounded problem (None if reading or encoding failed)."""

    outcome: SearchOutcome | None = None
    """Outcome of the search (None if no search ran)."""

    message: str = ""

    @property
    def plan(self) -> Plan | None:
        """Retrieve the plan found by the search, if any."""
        return None if self.outcome is None else self.outcome.plan


class Planner:
    """Runs the configured search strategy on planning tasks."""

    def __init__(self, config: PlannerConfig | None = None) -> None:
        """Initialize the planner using the given configuration (defaults if None)."""
        self.config = config or PlannerConfig()

    def create_strategy(self) -> SearchStrategy:
        """Construct the search strategy described by the planner's configuration."""
        return create_strategy(
            self.config.strategy,
            budget=self.config.budget,
            heuristic_type=self.config.heuristic,
            **self.config.strategy_options(),
        )

    def solve_task(self, task: PlanningTask) -> PlanningResult:
        """Encode and solve a parsed planning task.

        :param task: Parsed domain and problem with the diagnostics reported while reading them
        :return: Result whose status reports how the run ended
        """
        if not task.is_valid or task.domain is None or task.problem is None:
            logger.info(f"Not encoding a task with {len(task.diagnostics.errors)} error(s).")
            return PlanningResult(PlanningStatus.PARSE_ERROR, task.diagnostics, message=task.diagnostics.summary())

        try:
            problem = encode(task.domain, task.problem, self.config.max_dnf_clauses)
        except EncodingError as e:
            logger.info(f"Encoding failed: {e.message}")
            return PlanningResult(PlanningStatus.UNSUPPORTED, task.diagnostics, message=e.message)

        strategy = self.create_strategy()
        outcome = strategy.search(problem)
        logger.debug(f"Search by {strategy} ended with status {outcome.status}.")

        if outcome.plan is None:
            status = SEARCH_TO_PLANNING_STATUS[outcome.status]
            return PlanningResult(status, task.diagnostics, problem, outcome)

        if self.config.validate_plan:
            outcome.plan.validate(problem)

        status = PlanningStatus.EMPTY_PLAN if outcome.plan.is_empty else PlanningStatus.PLAN_FOUND
        return PlanningResult(status, task.diagnostics, problem, outcome)

    def solve_strings(self, domain_pddl: str, problem_pddl: str) -> PlanningResult:
        """Solve a planning task given as PDDL strings."""
        return self.solve_task(read_planning_task(domain_pddl, problem_pddl))

    def solve_files(self, domain_path: str | Path, problem_path: str | Path) -> PlanningResult:
        """Solve a planning task loaded from PDDL files.

        :raises FileNotFoundError: If either file doesn't exist
        """
        return self.solve_task(load_planning_task(domain_path, problem_path))
