"""Import definitions for delete-relaxation heuristics."""

from .heuristic_type import Aggregation as Aggregation
from .heuristic_type import HeuristicType as HeuristicType
from .heuristics import AdditiveHeuristic as AdditiveHeuristic
from .heuristics import BlindHeuristic as BlindHeuristic
from .heuristics import FastForwardHeuristic as FastForwardHeuristic
from .heuristics import Heuristic as Heuristic
from .heuristics import MaxHeuristic as MaxHeuristic
from .heuristics import create_heuristic as create_heuristic
