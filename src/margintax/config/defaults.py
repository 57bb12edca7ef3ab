"""Default configuration values for margintax."""

from __future__ import annotations

from margintax.config.schema import DataConfig
from margintax.io.yaml_loader import package_data_path
from margintax.sources.brackets import YamlBracketSource
from margintax.sources.registry import StaticJurisdictionRegistry

DEFAULT_BRACKETS_FILE = "data/brackets.yaml"
DEFAULT_REGISTRY_FILE = "data/registry.yaml"


def default_data_config() -> DataConfig:
    """Data config pointing at the tables shipped with the package."""
    return DataConfig(
        brackets_path=package_data_path(DEFAULT_BRACKETS_FILE),
        registry_path=package_data_path(DEFAULT_REGISTRY_FILE),
    )


def default_bracket_source(data_config: DataConfig | None = None) -> YamlBracketSource:
    """Bracket source for ``data_config``, falling back to package data."""
    path = data_config.brackets_path if data_config is not None else None
    return YamlBracketSource(path or package_data_path(DEFAULT_BRACKETS_FILE))


def default_registry(data_config: DataConfig | None = None) -> StaticJurisdictionRegistry:
    """Jurisdiction registry for ``data_config``, falling back to package data.

    AK, FL, NV, SD, TN, TX and WY collect no income tax. NH taxes interest
    and dividends at 5% and WA taxes capital gains at 7%.
    """
    path = data_config.registry_path if data_config is not None else None
    return StaticJurisdictionRegistry.from_yaml(path or package_data_path(DEFAULT_REGISTRY_FILE))
