"""Register shared test fixtures."""

pytest_plugins = ["tests.fixtures.pddl_fixtures", "tests.fixtures.planning_fixtures"]
