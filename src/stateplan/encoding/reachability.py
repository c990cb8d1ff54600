"""Compute relaxed reachability (ignoring delete effects and negative preconditions).

The fixpoint is computed with an explicit work queue: each relaxed step counts its unsatisfied
preconditions and fires once the count reaches zero.
"""

from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Generic, Hashable, Iterable, Sequence, TypeVar

FactT = TypeVar("FactT", bound=Hashable)


@dataclass(frozen=True)
class RelaxedStep(Generic[FactT]):
    """A relaxed transition: once all preconditions are reached, all effects become reached."""

    preconditions: tuple[FactT, ...]
    effects: tuple[FactT, ...]


@dataclass(frozen=True)
class ReachabilityResult(Generic[FactT]):
    """Facts and steps reachable in the delete relaxation."""

    reached: frozenset[FactT]
    fired: tuple[bool, ...]
    """Whether each step (by position) becomes applicable."""

    def reaches_all(self, facts: Iterable[FactT]) -> bool:
        """Evaluate whether every given fact is relaxed-reachable."""
        return all(f in self.reached for f in facts)


def relaxed_reachability(initial: Iterable[FactT], steps: Sequence[RelaxedStep[FactT]]) -> ReachabilityResult[FactT]:
    """Compute the relaxed-reachable facts and steps from the given initial facts.

    :param initial: Facts true initially
    :param steps: Relaxed transitions to be applied until a fixpoint is reached
    :return: Result recording the reached facts and which steps fired
    """
    remaining = [len(set(step.preconditions)) for step in steps]
    watchers: dict[FactT, list[int]] = defaultdict(list)
    for i, step in enumerate(steps):
        for fact in set(step.preconditions):
            watchers[fact].append(i)

    reached: set[FactT] = set()
    queue: deque[FactT] = deque()
    fired = [False] * len(steps)

    def reach(fact: FactT) -> None:
        if fact not in reached:
            reached.add(fact)
            queue.append(fact)

    def fire(i: int) -> None:
        fired[i] = True
        for effect in steps[i].effects:
            reach(effect)

    for fact in initial:
        reach(fact)
    for i, count in enumerate(remaining):
        if count == 0:
            fire(i)

    while queue:
        fact = queue.popleft()
        for i in watchers.get(fact, ()):
            remaining[i] -= 1
            if remaining[i] == 0:
                fire(i)

    return ReachabilityResult(frozenset(reached), tuple(fired))
