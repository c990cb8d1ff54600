"""Import definitions for the state-space search strategies."""

from .best_first import AStarSearch as AStarSearch
from .best_first import GreedyBestFirstSearch as GreedyBestFirstSearch
from .best_first import WeightedAStarSearch as WeightedAStarSearch
from .budget import SearchBudget as SearchBudget
from .local_search import EnforcedHillClimbing as EnforcedHillClimbing
from .local_search import HillClimbing as HillClimbing
from .outcome import SearchOutcome as SearchOutcome
from .outcome import SearchStatistics as SearchStatistics
from .outcome import SearchStatus as SearchStatus
from .registry import create_strategy as create_strategy
from .search_node import SearchNode as SearchNode
from .strategy import SearchStrategy as SearchStrategy
from .strategy_name import StrategyName as StrategyName
from .uninformed import BreadthFirstSearch as BreadthFirstSearch
from .uninformed import DepthFirstSearch as DepthFirstSearch
