"""Unit tests for reading and writing YAML settings files."""

from __future__ import annotations

from pathlib import Path

import pytest

from stateplan.io.yaml_utils import dump_yaml_string, export_yaml_data, load_yaml_mapping


def test_export_then_load_preserves_key_order(tmp_path: Path) -> None:
    """Verify that exported mappings keep their insertion order when loaded again."""
    # Arrange
    data = {"strategy": "gbfs", "heuristic": "ff", "timeout_s": 10.0}
    filepath = tmp_path / "nested" / "planner.yaml"

    # Act
    export_yaml_data(data, filepath)
    loaded = load_yaml_mapping(filepath)

    # Assert
    assert list(loaded) == ["strategy", "heuristic", "timeout_s"]
    assert loaded == data


def test_dump_yaml_string_is_block_style() -> None:
    """Verify that nested values are rendered in block style."""
    assert dump_yaml_string({"steps": ["a", "b"]}) == "steps:\n- a\n- b\n"


def test_load_empty_file_gives_empty_mapping(tmp_path: Path) -> None:
    """Verify that an empty YAML file holds no settings."""
    filepath = tmp_path / "empty.yaml"
    filepath.write_text("")
    assert load_yaml_mapping(filepath) == {}


def test_load_missing_file_raises(tmp_path: Path) -> None:
    """Verify that loading a nonexistent file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_yaml_mapping(tmp_path / "missing.yaml")


@pytest.mark.parametrize("content", ["- just\n- a list\n", "key: [unclosed\n"])
def test_load_invalid_mapping_raises(content: str, tmp_path: Path) -> None:
    """Verify that files which are not valid YAML mappings are rejected."""
    filepath = tmp_path / "invalid.yaml"
    filepath.write_text(content)
    with pytest.raises(RuntimeError):
        load_yaml_mapping(filepath)


def test_load_reports_missing_keys(tmp_path: Path) -> None:
    """Verify that required keys missing from a file raise a KeyError."""
    filepath = tmp_path / "partial.yaml"
    filepath.write_text("strategy: bfs\n")
    with pytest.raises(KeyError, match="timeout_s"):
        load_yaml_mapping(filepath, required_keys={"strategy", "timeout_s"})
