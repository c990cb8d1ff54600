"""Solve, ground, and explore PDDL planning tasks through a command-line interface."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import numpy as np
from rich.console import Console
from rich.table import Table

from stateplan.encoding.errors import EncodingError
from stateplan.encoding.grounder import encode
from stateplan.encoding.simulator import RandomWalkSimulator
from stateplan.heuristics.heuristic_type import HeuristicType
from stateplan.io.logging import configure_logging, console, log_info
from stateplan.io.planner_config import PlannerConfig
from stateplan.io.yaml_utils import load_yaml_mapping
from stateplan.pddl.task_loader import PlanningTask, load_planning_task
from stateplan.planner import Planner, PlanningStatus
from stateplan.plans.plan import Plan
from stateplan.plans.plan_writers import plan_to_text, write_plan_json, write_plan_text, write_plan_yaml
from stateplan.search.registry import STRATEGY_CLASSES, STRATEGY_DESCRIPTIONS
from stateplan.search.strategy_name import StrategyName

pddl_file = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debugging messages.")
@click.pass_context
def stateplan_cli(ctx: click.Context, verbose: bool) -> None:
    """Solve classical planning tasks written in PDDL."""
    ctx.ensure_object(dict)  # Create ctx.obj if it doesn't exist
    ctx.obj["console"] = console
    configure_logging(verbose)


def print_diagnostics(console: Console, task: PlanningTask) -> None:
    """Print the diagnostics reported while reading a task (errors in red, warnings in yellow)."""
    for diagnostic in task.diagnostics:
        color = "red" if diagnostic.severity == "error" else "yellow"
        console.print(f"[{color}]{diagnostic}[/{color}]")


def build_config(config_path: Path | None, overrides: dict[str, Any]) -> PlannerConfig:
    """Combine settings from an optional YAML file with options given on the command line.

    :raises click.BadParameter: If the combined settings are invalid
    """
    settings = load_yaml_mapping(config_path) if config_path is not None else {}
    settings.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return PlannerConfig.model_validate(settings)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@stateplan_cli.command()
@click.argument("domain_path", type=pddl_file)
@click.argument("problem_path", type=pddl_file)
@click.option("--strategy", "-s", type=click.Choice([s.value for s in StrategyName]), help="Search strategy.")
@click.option("--heuristic", type=click.Choice([h.value for h in HeuristicType]), help="Heuristic.")
@click.option("--weight", "-w", type=float, help="Heuristic weight for (weighted) A*.")
@click.option("--timeout", "timeout_s", type=float, help="Time limit in seconds.")
@click.option("--max-states", type=int, help="Limit on the number of generated states.")
@click.option("--config", "config_path", type=click.Path(exists=True, path_type=Path), help="YAML settings file.")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Write the plan as text to this file.")
@click.option("--json", "json_path", type=click.Path(path_type=Path), help="Write the plan as JSON to this file.")
@click.option("--yaml", "yaml_path", type=click.Path(path_type=Path), help="Write the plan as YAML to this file.")
@click.option("--stats", is_flag=True, help="Print search statistics.")
@click.pass_context
def solve(
    ctx: click.Context,
    domain_path: Path,
    problem_path: Path,
    strategy: str | None,
    heuristic: str | None,
    weight: float | None,
    timeout_s: float | None,
    max_states: int | None,
    config_path: Path | None,
    output: Path | None,
    json_path: Path | None,
    yaml_path: Path | None,
    stats: bool,
) -> None:
    """Search for a plan solving a PDDL problem; exits with status 1 if no plan is found.

    :param ctx: Context object providing access to a CLI console
    :param domain_path: Path to the PDDL domain file
    :param problem_path: Path to the PDDL problem file
    """
    console: Console = ctx.obj["console"]
    overrides = {
        "strategy": strategy,
        "heuristic": heuristic,
        "weight": weight,
        "timeout_s": timeout_s,
        "max_states": max_states,
    }
    config = build_config(config_path, overrides)

    console.print(f"[yellow]Solving {problem_path.name} with strategy '{config.strategy}'...[/yellow]")
    task = load_planning_task(domain_path, problem_path)
    print_diagnostics(console, task)
    result = Planner(config).solve_task(task)

    if stats and result.outcome is not None:
        result.outcome.print_summary()

    if result.plan is None or result.problem is None:
        console.print(f"[red]No plan: {result.status}[/red]")
        if result.message:
            console.print(result.message)
        ctx.exit(1)

    report_plan(console, result.status, result.plan)
    if output is not None:
        write_plan_text(result.plan, output)
        log_info(f"Wrote the plan as text to {output}.")
    if json_path is not None:
        write_plan_json(result.plan, result.problem, json_path)
        log_info(f"Wrote the plan as JSON to {json_path}.")
    if yaml_path is not None:
        write_plan_yaml(result.plan, result.problem, yaml_path)
        log_info(f"Wrote the plan as YAML to {yaml_path}.")


def report_plan(console: Console, status: PlanningStatus, plan: Plan) -> None:
    """Print a found plan with its length and cost."""
    console.print(f"[green]{status}: {len(plan)} step(s) with cost {plan.cost:g}[/green]")
    console.print(plan_to_text(plan), end="", markup=False, highlight=False)


@stateplan_cli.command()
@click.argument("domain_path", type=pddl_file)
@click.argument("problem_path", type=pddl_file)
@click.option("--show-facts", is_flag=True, help="List every indexed fact.")
@click.pass_context
def ground(ctx: click.Context, domain_path: Path, problem_path: Path, show_facts: bool) -> None:
    """Encode a PDDL problem and summarize its grounded representation.

    :param ctx: Context object providing access to a CLI console
    :param domain_path: Path to the PDDL domain file
    :param problem_path: Path to the PDDL problem file
    :param show_facts: Whether to list the indexed facts
    """
    console: Console = ctx.obj["console"]
    task = load_planning_task(domain_path, problem_path)
    print_diagnostics(console, task)
    if not task.is_valid or task.domain is None or task.problem is None:
        ctx.exit(1)

    try:
        problem = encode(task.domain, task.problem)
    except EncodingError as e:
        console.print(f"[red]Cannot encode {problem_path.name}: {e.message}[/red]")
        ctx.exit(1)

    table = Table(title=f"Grounded problem '{problem.name}' ({problem.domain_name})")
    table.add_column("Property")
    table.add_column("Value", justify="right")
    table.add_row("Facts", str(problem.num_facts))
    table.add_row("Static facts", str(len(problem.fact_table.static_facts)))
    table.add_row("Actions", str(len(problem.actions)))
    table.add_row("Goal facts", str(len(problem.goal_atoms())))
    table.add_row("Unit costs", str(problem.has_unit_costs))
    table.add_row("Relaxed solvable", str(problem.is_solvable))
    console.print(table)

    if show_facts:
        for index, atom in enumerate(problem.fact_table):
            console.print(f"{index:>5}  {atom}", markup=False, highlight=False)


@stateplan_cli.command()
@click.pass_context
def strategies(ctx: click.Context) -> None:
    """List the available search strategies with their default heuristics."""
    console: Console = ctx.obj["console"]
    table = Table(title="Search strategies")
    table.add_column("Name")
    table.add_column("Default heuristic")
    table.add_column("Complete")
    table.add_column("Description")
    for name, strategy_class in STRATEGY_CLASSES.items():
        heuristic = strategy_class.default_heuristic or "-"
        table.add_row(str(name), str(heuristic), str(strategy_class.is_complete), STRATEGY_DESCRIPTIONS[name])
    console.print(table)


@stateplan_cli.command()
@click.argument("domain_path", type=pddl_file)
@click.argument("problem_path", type=pddl_file)
@click.option("--steps", "-n", type=int, default=10, show_default=True, help="Length of the walk.")
@click.option("--seed", type=int, default=None, help="Seed for reproducible walks.")
@click.pass_context
def walk(ctx: click.Context, domain_path: Path, problem_path: Path, steps: int, seed: int | None) -> None:
    """Print a random walk through the state space of a PDDL problem.

    :param ctx: Context object providing access to a CLI console
    :param steps: Maximum number of transitions in the walk
    :param seed: Seed of the random number generator (optional)
    """
    console: Console = ctx.obj["console"]
    task = load_planning_task(domain_path, problem_path)
    print_diagnostics(console, task)
    if not task.is_valid or task.domain is None or task.problem is None:
        ctx.exit(1)

    try:
        problem = encode(task.domain, task.problem)
    except EncodingError as e:
        console.print(f"[red]Cannot encode {problem_path.name}: {e.message}[/red]")
        ctx.exit(1)

    simulator = RandomWalkSimulator(problem)
    transitions = simulator.generate_random_walk(steps, rng=np.random.default_rng(seed))
    for position, transition in enumerate(transitions):
        goal_marker = " (goal)" if problem.is_goal(transition.after) else ""
        console.print(f"{position:02d}: {transition.action}{goal_marker}", markup=False, highlight=False)
    console.print(f"[yellow]Walk ended after {len(transitions)} transition(s).[/yellow]")


if __name__ == "__main__":
    stateplan_cli()
