"""Read a PDDL domain and problem into a lifted planning task, collecting diagnostics."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from stateplan.pddl.diagnostics import Diagnostics, check_task
from stateplan.pddl.pddl_domain import PDDLDomain
from stateplan.pddl.pddl_parser import parse_domain, parse_problem
from stateplan.pddl.pddl_problem import PDDLProblem
from stateplan.pddl.pddl_scanner import PDDLSyntaxError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanningTask:
    """A parsed domain and problem, together with the diagnostics reported while reading them.

    The domain or problem is None if it could not be parsed.
    """

    domain: PDDLDomain | None
    problem: PDDLProblem | None
    diagnostics: Diagnostics

    @property
    def is_valid(self) -> bool:
        """Check whether the task was fully parsed without errors (and can be encoded)."""
        return self.domain is not None and self.problem is not None and not self.diagnostics.has_errors


def read_planning_task(domain_pddl: str, problem_pddl: str) -> PlanningTask:
    """Parse and check a planning task from PDDL strings.

    Syntax errors are reported in the task's diagnostics rather than raised.

    :param domain_pddl: PDDL text defining the domain
    :param problem_pddl: PDDL text defining the problem
    :return: Planning task with its diagnostics
    """
    diagnostics = Diagnostics()

    domain: PDDLDomain | None = None
    try:
        domain = parse_domain(domain_pddl)
    except PDDLSyntaxError as e:
        diagnostics.error(f"Domain: {e}", e.line)

    problem: PDDLProblem | None = None
    try:
        problem = parse_problem(problem_pddl)
    except PDDLSyntaxError as e:
        diagnostics.error(f"Problem: {e}", e.line)

    if domain is not None:
        check_task(domain, problem, diagnostics)

    for diagnostic in diagnostics:
        logger.debug(str(diagnostic))

    return PlanningTask(domain, problem, diagnostics)


def load_planning_task(domain_path: str | Path, problem_path: str | Path) -> PlanningTask:
    """Load and check a planning task from PDDL files.

    :param domain_path: Path to the PDDL domain file
    :param problem_path: Path to the PDDL problem file
    :return: Planning task with its diagnostics
    :raises FileNotFoundError: If either file doesn't exist
    """
    domain_path = Path(domain_path)
    problem_path = Path(problem_path)
    for path in (domain_path, problem_path):
        if not path.exists():
            raise FileNotFoundError(f"Cannot load PDDL from nonexistent path: {path}")

    return read_planning_task(domain_path.read_text(encoding="utf-8"), problem_path.read_text(encoding="utf-8"))
