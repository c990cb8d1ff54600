"""Define a class to represent nodes of a search tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from stateplan.plans.plan import Plan

if TYPE_CHECKING:
    from stateplan.encoding.bit_state import BitState
    from stateplan.encoding.grounded_action import GroundedAction


@dataclass(frozen=True, slots=True)
class SearchNode:
    """A node in a search tree (represents a particular path to a state)."""

    state: BitState

    g: float = 0.0
    """Path cost from the initial node to this node."""

    parent: SearchNode | None = None
    action: GroundedAction | None = None
    """Action applied to the parent's state to reach this node (None for the root)."""

    depth: int = 0

    def child(self, action: GroundedAction, state: BitState) -> SearchNode:
        """Create the node reached from this node by applying the given action."""
        return SearchNode(state, self.g + action.cost, self, action, self.depth + 1)

    def extract_plan(self) -> Plan:
        """Reconstruct the plan leading from the root to this node."""
        actions: list[GroundedAction] = []
        current: SearchNode | None = self
        while current is not None and current.action is not None:
            actions.append(current.action)
            current = current.parent
        actions.reverse()
        return Plan.from_actions(actions)
