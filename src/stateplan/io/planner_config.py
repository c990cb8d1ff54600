"""Pydantic models for validating planner configuration files.

Example usage:
    from stateplan.io.planner_config import PlannerConfig

    config = PlannerConfig.from_yaml(Path("planner.yaml"))  # Raises ValidationError on issues
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from stateplan.encoding.formulas_ground import MAX_DNF_CLAUSES
from stateplan.heuristics.heuristic_type import HeuristicType
from stateplan.io.yaml_utils import load_yaml_mapping
from stateplan.search.budget import DEFAULT_TIMEOUT_S, SearchBudget
from stateplan.search.local_search import DEFAULT_MAX_PLATEAU_STATES, DEFAULT_MAX_SIDEWAYS_MOVES
from stateplan.search.strategy_name import StrategyName

WEIGHTED_STRATEGIES = {StrategyName.ASTAR, StrategyName.WEIGHTED_ASTAR}


class PlannerConfig(BaseModel):
    """Settings selecting a search strategy, its heuristic, and its budget."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    strategy: StrategyName = StrategyName.ASTAR
    heuristic: HeuristicType | None = Field(default=None, description="Defaults per strategy if omitted")
    weight: float | None = Field(default=None, ge=1.0, description="Heuristic weight for (weighted) A*")
    timeout_s: float | None = Field(default=DEFAULT_TIMEOUT_S, ge=0.0, description="Time limit in seconds")
    max_states: int | None = Field(default=None, gt=0, description="Limit on generated states")
    max_sideways_moves: int = Field(default=DEFAULT_MAX_SIDEWAYS_MOVES, ge=0)
    max_plateau_states: int = Field(default=DEFAULT_MAX_PLATEAU_STATES, gt=0)
    max_dnf_clauses: int = Field(default=MAX_DNF_CLAUSES, gt=0, description="Limit on grounded DNF disjuncts")
    validate_plan: bool = Field(default=True, description="Re-simulate found plans before returning them")

    @model_validator(mode="after")
    def check_weight_applies(self) -> PlannerConfig:
        """Ensure that a heuristic weight is only given to a strategy that uses one."""
        if self.weight is not None and self.strategy not in WEIGHTED_STRATEGIES:
            msg = f"Strategy '{self.strategy}' does not accept a heuristic weight"
            raise ValueError(msg)
        if self.heuristic is not None and self.strategy in {StrategyName.BFS, StrategyName.DFS}:
            msg = f"Uninformed strategy '{self.strategy}' does not use a heuristic"
            raise ValueError(msg)
        return self

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> PlannerConfig:
        """Load and validate planner settings from a YAML file.

        :param yaml_path: Path to a YAML file holding a mapping of settings
        :return: Validated configuration (settings missing from the file keep their defaults)
        """
        return cls.model_validate(load_yaml_mapping(yaml_path))

    @property
    def budget(self) -> SearchBudget:
        """Retrieve the search budget described by the configuration."""
        return SearchBudget(timeout_s=self.timeout_s, max_states=self.max_states)

    def strategy_options(self) -> dict[str, Any]:
        """Collect the options understood by the configured strategy's constructor."""
        match self.strategy:
            case StrategyName.ASTAR | StrategyName.WEIGHTED_ASTAR:
                return {"weight": self.weight}
            case StrategyName.HILL_CLIMBING:
                return {"max_sideways_moves": self.max_sideways_moves}
            case StrategyName.ENFORCED_HILL_CLIMBING:
                return {"max_plateau_states": self.max_plateau_states}
        return {}
