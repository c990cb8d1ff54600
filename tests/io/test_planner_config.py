"""Unit tests for validating planner configurations."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from stateplan.heuristics import HeuristicType
from stateplan.io.planner_config import PlannerConfig
from stateplan.search import SearchBudget, StrategyName


def test_default_config() -> None:
    """Verify that the default configuration runs A* with a five-minute budget."""
    config = PlannerConfig()
    assert config.strategy == StrategyName.ASTAR
    assert config.heuristic is None
    assert config.budget == SearchBudget(timeout_s=300.0, max_states=None)
    assert config.validate_plan


def test_unknown_setting_is_rejected() -> None:
    """Verify that misspelled settings are reported rather than ignored."""
    with pytest.raises(ValidationError):
        PlannerConfig.model_validate({"strategy": "bfs", "time_limit": 5})


@pytest.mark.parametrize(
    "settings",
    [
        {"strategy": "bfs", "weight": 2.0},
        {"strategy": "gbfs", "weight": 2.0},
        {"strategy": "dfs", "heuristic": "max"},
        {"strategy": "wastar", "weight": 0.5},
        {"timeout_s": -1.0},
        {"max_states": 0},
        {"strategy": "beam"},
    ],
)
def test_invalid_settings_are_rejected(settings: dict) -> None:
    """Verify that inconsistent or out-of-range settings raise a ValidationError."""
    with pytest.raises(ValidationError):
        PlannerConfig.model_validate(settings)


def test_strategy_options() -> None:
    """Verify that each strategy receives only the options its constructor understands."""
    assert PlannerConfig(strategy=StrategyName.WEIGHTED_ASTAR, weight=3.0).strategy_options() == {"weight": 3.0}
    assert PlannerConfig(strategy=StrategyName.HILL_CLIMBING).strategy_options() == {"max_sideways_moves": 20}
    assert PlannerConfig(strategy=StrategyName.ENFORCED_HILL_CLIMBING, max_plateau_states=50).strategy_options() == {
        "max_plateau_states": 50,
    }
    assert PlannerConfig(strategy=StrategyName.BFS).strategy_options() == {}


def test_config_from_yaml(tmp_path: Path) -> None:
    """Verify that settings missing from a YAML file keep their defaults."""
    # Arrange
    yaml_path = tmp_path / "planner.yaml"
    yaml_path.write_text("strategy: gbfs\nheuristic: sum\nmax_states: 1000\n")

    # Act
    config = PlannerConfig.from_yaml(yaml_path)

    # Assert
    assert config.strategy == StrategyName.GBFS
    assert config.heuristic == HeuristicType.SUM
    assert config.budget.max_states == 1000
    assert config.timeout_s == 300.0
