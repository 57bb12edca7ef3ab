"""YAML data file loader for bracket tables and jurisdiction registries."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from margintax.utils.exceptions import ConfigError


def load_yaml(path: Path) -> Any:
    """Load and parse a YAML file.

    Args:
        path: Absolute or relative path to the YAML file.

    Returns:
        Parsed YAML content (typically a dict or list).

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file is not valid YAML.
    """
    with open(path) as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc


def package_data_path(relative_path: str) -> Path:
    """Resolve a path relative to the margintax package root."""
    return Path(__file__).resolve().parent.parent / relative_path

