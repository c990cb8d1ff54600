"""Define functions to export plans as VAL-style text, JSON, or YAML."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from stateplan.io.yaml_utils import export_yaml_data

if TYPE_CHECKING:
    from stateplan.encoding.fact_table import FactTable
    from stateplan.encoding.grounded_action import GroundedAction
    from stateplan.encoding.grounded_problem import GroundedProblem
    from stateplan.plans.plan import Plan, PlanStep


def plan_to_text(plan: Plan) -> str:
    """Format a plan as one `NN: (action args) [cost]` line per step.

    Positions are zero-padded to the width of the largest position (at least two digits).
    """
    width = max(2, len(str(len(plan) - 1)))
    lines = [f"{step.position:0{width}d}: {step.action} [{step.action.cost:g}]" for step in plan]
    return "\n".join(lines) + ("\n" if lines else "")


def write_plan_text(plan: Plan, filepath: Path) -> None:
    """Write a plan to a text file, creating parent directories as needed."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(plan_to_text(plan))


def _fact_strings(fact_table: FactTable, mask: int) -> list[str]:
    """Convert a bitmask into the sorted PDDL strings of its facts."""
    return sorted(str(atom) for atom in fact_table.atoms_of(mask))


def step_to_record(step: PlanStep, fact_table: FactTable) -> dict[str, Any]:
    """Describe a plan step as a JSON-compatible record of its action's facts."""
    action: GroundedAction = step.action
    return {
        "name": action.name,
        "parameters": list(action.parameters),
        "position": step.position,
        "cost": action.cost,
        "preconditions": {
            "positive": _fact_strings(fact_table, action.positive_preconditions),
            "negative": _fact_strings(fact_table, action.negative_preconditions),
        },
        "unconditional_effect": {
            "add": _fact_strings(fact_table, action.add),
            "delete": _fact_strings(fact_table, action.delete),
        },
        "conditional_effects": [
            {
                "condition": _fact_strings(fact_table, effect.condition),
                "negative_condition": _fact_strings(fact_table, effect.negative_condition),
                "add": _fact_strings(fact_table, effect.add),
                "delete": _fact_strings(fact_table, effect.delete),
            }
            for effect in action.conditional_effects
        ],
    }


def plan_to_records(plan: Plan, problem: GroundedProblem) -> list[dict[str, Any]]:
    """Describe every step of a plan as a record (see `step_to_record`)."""
    return [step_to_record(step, problem.fact_table) for step in plan]


def plan_to_json(plan: Plan, problem: GroundedProblem, indent: int | None = 2) -> str:
    """Serialize a plan as a JSON object summarizing the plan and holding one record per step.

    The object's keys are `size` (number of steps), `cost`, `makespan`, and `steps`.

    :param plan: Plan to be serialized
    :param problem: Grounded problem whose fact table names the plan's facts
    :param indent: Indentation of the JSON output (None = compact)
    :return: JSON document as a string
    """
    data = {
        "size": len(plan),
        "cost": plan.cost,
        "makespan": plan.makespan,
        "steps": plan_to_records(plan, problem),
    }
    return json.dumps(data, indent=indent)


def write_plan_json(plan: Plan, problem: GroundedProblem, filepath: Path) -> None:
    """Write a plan to a JSON file, creating parent directories as needed."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(plan_to_json(plan, problem) + "\n")


def write_plan_yaml(plan: Plan, problem: GroundedProblem, filepath: Path) -> None:
    """Write a plan to a YAML file holding its cost and one record per step."""
    data = {
        "problem": problem.name,
        "domain": problem.domain_name,
        "cost": plan.cost,
        "steps": plan_to_records(plan, problem),
    }
    export_yaml_data(data, filepath)
