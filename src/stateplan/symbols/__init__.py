"""Import definitions for the lifted symbolic planning model."""

from .discrete_parameter import Bindings as Bindings
from .discrete_parameter import DiscreteParameter as DiscreteParameter
from .effects import ConjunctiveEffect as ConjunctiveEffect
from .effects import CostEffect as CostEffect
from .effects import Effect as Effect
from .effects import LiteralEffect as LiteralEffect
from .effects import UniversalEffect as UniversalEffect
from .effects import WhenEffect as WhenEffect
from .formulas import FALSE as FALSE
from .formulas import TRUE as TRUE
from .formulas import AtomFormula as AtomFormula
from .formulas import Conjunction as Conjunction
from .formulas import Disjunction as Disjunction
from .formulas import Equality as Equality
from .formulas import Existential as Existential
from .formulas import Formula as Formula
from .formulas import Implication as Implication
from .formulas import Negation as Negation
from .formulas import Universal as Universal
from .ground_atom import GroundAtom as GroundAtom
from .objects import ObjectSymbol as ObjectSymbol
from .objects import ObjectSymbols as ObjectSymbols
from .operators import Operator as Operator
from .predicate import Predicate as Predicate
