"""Import definitions for encoding lifted tasks into grounded bitset problems."""

from .bit_state import BitState as BitState
from .errors import EncodingError as EncodingError
from .errors import EncodingErrorKind as EncodingErrorKind
from .fact_table import FactTable as FactTable
from .grounded_action import ConditionalEffect as ConditionalEffect
from .grounded_action import GroundedAction as GroundedAction
from .grounded_problem import GroundedProblem as GroundedProblem
from .grounder import Grounder as Grounder
from .grounder import encode as encode
from .simulator import RandomWalkSimulator as RandomWalkSimulator
