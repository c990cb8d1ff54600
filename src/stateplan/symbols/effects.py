"""Define classes to represent lifted PDDL action effects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Union

if TYPE_CHECKING:
    from stateplan.symbols.discrete_parameter import DiscreteParameter
    from stateplan.symbols.formulas import AtomFormula, Formula


@dataclass(frozen=True)
class LiteralEffect:
    """An effect adding (or, if negated, deleting) a single atom."""

    atom: AtomFormula
    negated: bool = False

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the effect."""
        return f"(not {self.atom.to_pddl()})" if self.negated else self.atom.to_pddl()


@dataclass(frozen=True)
class ConjunctiveEffect:
    """A collection of effects that all take place together."""

    effects: tuple[Effect, ...] = ()

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the effect."""
        return f"(and {' '.join(e.to_pddl() for e in self.effects)})".replace(" )", ")")


@dataclass(frozen=True)
class WhenEffect:
    """A conditional effect that only takes place if its condition holds before the action.

    Requires the `:conditional-effects` requirement flag.
    """

    condition: Formula
    effect: Effect

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the effect."""
        return f"(when {self.condition.to_pddl()} {self.effect.to_pddl()})"


@dataclass(frozen=True)
class UniversalEffect:
    """An effect repeated for every binding of the given typed variables."""

    variables: tuple[DiscreteParameter, ...]
    effect: Effect

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the effect."""
        return f"(forall ({' '.join(map(str, self.variables))}) {self.effect.to_pddl()})"


@dataclass(frozen=True)
class CostEffect:
    """An `(increase (total-cost) n)` effect (requires the `:action-costs` flag)."""

    amount: float

    def to_pddl(self) -> str:
        """Return the PDDL string representation of the effect."""
        return f"(increase (total-cost) {self.amount:g})"


Effect = Union[LiteralEffect, ConjunctiveEffect, WhenEffect, UniversalEffect, CostEffect]
"""Any lifted action effect."""


def iter_literal_effects(effect: Effect) -> Iterator[LiteralEffect]:
    """Iterate over every add/delete literal nested anywhere within the given effect."""
    stack: list[Effect] = [effect]
    while stack:
        match stack.pop():
            case LiteralEffect() as literal:
                yield literal
            case ConjunctiveEffect(effects=effects):
                stack.extend(reversed(effects))
            case WhenEffect(effect=inner) | UniversalEffect(effect=inner):
                stack.append(inner)
            case CostEffect():
                pass
