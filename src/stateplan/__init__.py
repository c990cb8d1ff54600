"""A classical planner over bitset-encoded grounded PDDL tasks."""

from .planner import Planner as Planner
from .planner import PlanningResult as PlanningResult
from .planner import PlanningStatus as PlanningStatus
