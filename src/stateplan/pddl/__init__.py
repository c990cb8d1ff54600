"""Import definitions for reading PDDL planning tasks."""

from .diagnostics import Diagnostic as Diagnostic
from .diagnostics import Diagnostics as Diagnostics
from .pddl_domain import PDDLDomain as PDDLDomain
from .pddl_parser import PDDLParser as PDDLParser
from .pddl_parser import parse_domain as parse_domain
from .pddl_parser import parse_problem as parse_problem
from .pddl_problem import PDDLProblem as PDDLProblem
from .pddl_scanner import PDDLScanner as PDDLScanner
from .pddl_scanner import PDDLSyntaxError as PDDLSyntaxError
from .task_loader import PlanningTask as PlanningTask
from .task_loader import load_planning_task as load_planning_task
from .task_loader import read_planning_task as read_planning_task
from .type_hierarchy import TypeHierarchy as TypeHierarchy
