"""Define strategies for generating planning representations for property-based testing."""

from __future__ import annotations

from pathlib import Path

import hypothesis.strategies as st

from stateplan.encoding import BitState, ConditionalEffect, GroundedAction


def test_data_path() -> Path:
    """Retrieve the path to the `test_data` folder."""
    path = Path(__file__).parent / "test_data"
    assert path.exists()
    return path


def benchmark_path(domain_name: str, problem_file: str = "p01.pddl") -> tuple[Path, Path]:
    """Retrieve the paths to a benchmark domain and one of its problems."""
    folder = test_data_path() / "benchmarks" / domain_name
    return folder / "domain.pddl", folder / problem_file


@st.composite
def fact_masks(draw: st.DrawFn, num_facts: int) -> int:
    """Generate random bitmasks over the given number of facts."""
    return draw(st.integers(min_value=0, max_value=(1 << num_facts) - 1))


@st.composite
def bit_states(draw: st.DrawFn, num_facts: int) -> BitState:
    """Generate random states over the given number of facts."""
    return BitState(draw(fact_masks(num_facts)))


@st.composite
def conditional_effects(draw: st.DrawFn, num_facts: int) -> ConditionalEffect:
    """Generate random conditional effects whose conditions are consistent."""
    condition = draw(fact_masks(num_facts))
    negative_condition = draw(fact_masks(num_facts)) & ~condition
    return ConditionalEffect(
        condition=condition,
        negative_condition=negative_condition,
        add=draw(fact_masks(num_facts)),
        delete=draw(fact_masks(num_facts)),
    )


@st.composite
def grounded_actions(draw: st.DrawFn, num_facts: int, max_conditional: int = 2) -> GroundedAction:
    """Generate random grounded actions with consistent preconditions."""
    positive = draw(fact_masks(num_facts))
    negative = draw(fact_masks(num_facts)) & ~positive
    return GroundedAction(
        name=draw(st.sampled_from(["move", "pick", "drop"])),
        parameters=tuple(draw(st.lists(st.sampled_from(["a", "b", "c"]), max_size=3))),
        positive_preconditions=positive,
        negative_preconditions=negative,
        add=draw(fact_masks(num_facts)),
        delete=draw(fact_masks(num_facts)),
        conditional_effects=tuple(draw(st.lists(conditional_effects(num_facts), max_size=max_conditional))),
        cost=draw(st.floats(min_value=0.0, max_value=100.0, allow_nan=False)),
    )
