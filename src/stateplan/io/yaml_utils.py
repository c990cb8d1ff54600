"""Define utility functions for reading and writing planner settings as YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def dump_yaml_string(data: dict[str, Any]) -> str:
    """Render a mapping as a block-style YAML document with keys in insertion order."""
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def export_yaml_data(data: dict[str, Any], filepath: Path) -> None:
    """Write the given mapping to a YAML file, creating parent directories as needed."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(dump_yaml_string(data))


def load_yaml_mapping(yaml_path: Path, required_keys: set[str] | None = None) -> dict[str, Any]:
    """Load a YAML file whose top-level node must be a mapping.

    :param yaml_path: Path to the YAML file to be imported
    :param required_keys: Set of keys required to exist in the loaded data (if None, ignored)
    :return: Dictionary mapping setting names to values (empty for an empty file)
    :raises FileNotFoundError: If the file doesn't exist
    :raises RuntimeError: If the file isn't valid YAML or its top level isn't a mapping
    :raises KeyError: If a required key is missing in the loaded data
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"Cannot load data from nonexistent YAML file: {yaml_path}")

    try:
        with yaml_path.open() as yaml_file:
            yaml_data = yaml.safe_load(yaml_file)
    except yaml.YAMLError as error:
        raise RuntimeError(f"Failed to load from YAML file: {yaml_path}") from error

    if yaml_data is None:
        yaml_data = {}
    if not isinstance(yaml_data, dict):
        raise RuntimeError(f"Expected a mapping at the top level of {yaml_path}.")

    missing = sorted((required_keys or set()) - yaml_data.keys())
    if missing:
        raise KeyError(f"Required keys {missing} were missing in data loaded from {yaml_path}")

    return yaml_data
