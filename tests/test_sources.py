"""Tests for bracket sources and the static jurisdiction registry."""

from __future__ import annotations

import math
from pathlib import Path

import pytest

from margintax.config.schema import (
    FilingStatus,
    FlatSpecialIncomePolicy,
    JurisdictionPolicy,
    NoTaxPolicy,
    ProgressivePolicy,
)
from margintax.sources.brackets import InMemoryBracketSource, YamlBracketSource, parse_bracket_table
from margintax.sources.registry import StaticJurisdictionRegistry, parse_policies
from margintax.utils.exceptions import ConfigError, InvalidJurisdiction, MissingBracketData

BRACKETS_YAML = """
jurisdictions:
  zz:
    S:
      - [10000, null, 0.2]
      - [0, 10000, 0.1]
    married_jointly:
      - {range_low: 0, range_high: null, rate: 0.15}
"""

REGISTRY_YAML = """
policies:
  ZZ: {kind: progressive}
  yy: {kind: no_tax}
  XX: {kind: flat_special_income, rate: 0.05, income_category: interest_and_dividends}
"""


class TestParseBracketTable:
    def test_rows_and_mappings(self, tmp_path: Path) -> None:
        path = tmp_path / "brackets.yaml"
        path.write_text(BRACKETS_YAML)
        source = YamlBracketSource(path)

        single = source.get_brackets("ZZ", FilingStatus.SINGLE)
        assert [b.range_low for b in single] == [0, 10_000]
        assert single[1].range_high == math.inf
        assert all(b.filing_status is FilingStatus.SINGLE for b in single)

        married = source.get_brackets("zz", "MFJ")
        assert married[0].rate == 0.15
        assert source.jurisdictions() == ["ZZ"]

    def test_missing_jurisdictions_key(self) -> None:
        with pytest.raises(ConfigError):
            parse_bracket_table({"brackets": {}})

    def test_bad_row(self) -> None:
        with pytest.raises(ConfigError):
            parse_bracket_table({"jurisdictions": {"ZZ": {"single": [[0, 0.1]]}}})

    def test_bad_rate(self) -> None:
        with pytest.raises(ConfigError):
            parse_bracket_table({"jurisdictions": {"ZZ": {"single": [[0, None, 2.0]]}}})

    def test_bad_status(self) -> None:
        with pytest.raises(ConfigError):
            parse_bracket_table({"jurisdictions": {"ZZ": {"widowed": [[0, None, 0.1]]}}})

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("jurisdictions: [unclosed")
        with pytest.raises(ConfigError):
            YamlBracketSource(path)


class TestInMemoryBracketSource:
    def test_missing_pair(self, source: InMemoryBracketSource) -> None:
        with pytest.raises(MissingBracketData) as excinfo:
            source.get_brackets("PX", FilingStatus.HEAD_OF_HOUSEHOLD)
        assert excinfo.value.jurisdiction == "PX"
        assert excinfo.value.filing_status == "head_of_household"

    def test_empty_table_is_missing(self, source: InMemoryBracketSource) -> None:
        with pytest.raises(MissingBracketData):
            source.get_brackets("EX", FilingStatus.SINGLE)

    def test_returns_snapshot(self, source: InMemoryBracketSource) -> None:
        brackets = source.get_brackets("px", "single")
        assert isinstance(brackets, tuple)
        assert len(brackets) == 3


class TestStaticJurisdictionRegistry:
    def test_lookup_normalizes(self, registry: StaticJurisdictionRegistry) -> None:
        assert isinstance(registry.get_policy(" px"), ProgressivePolicy)

    def test_unknown(self, registry: StaticJurisdictionRegistry) -> None:
        with pytest.raises(InvalidJurisdiction) as excinfo:
            registry.get_policy("QQ")
        assert excinfo.value.jurisdiction == "QQ"

    def test_no_tax_set(self, registry: StaticJurisdictionRegistry) -> None:
        assert registry.no_tax_jurisdictions() == frozenset({"NX"})
        assert registry.jurisdictions() == ["EX", "FX", "NX", "PX"]

    def test_requires_policies_or_loader(self) -> None:
        with pytest.raises(ValueError):
            StaticJurisdictionRegistry()

    def test_refresh_without_loader(self, registry: StaticJurisdictionRegistry) -> None:
        with pytest.raises(ValueError):
            registry.refresh()

    def test_refresh_is_explicit(self) -> None:
        snapshots: list[dict[str, JurisdictionPolicy]] = [
            {"AA": NoTaxPolicy()},
            {"AA": ProgressivePolicy()},
        ]
        calls = 0

        def loader() -> dict[str, JurisdictionPolicy]:
            nonlocal calls
            calls += 1
            return snapshots[min(calls - 1, 1)]

        registry = StaticJurisdictionRegistry(loader=loader)
        assert isinstance(registry.get_policy("AA"), NoTaxPolicy)
        registry.get_policy("AA")
        assert calls == 1

        registry.refresh()
        assert calls == 2
        assert isinstance(registry.get_policy("AA"), ProgressivePolicy)

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "registry.yaml"
        path.write_text(REGISTRY_YAML)
        registry = StaticJurisdictionRegistry.from_yaml(path)
        assert registry.jurisdictions() == ["XX", "YY", "ZZ"]
        flat = registry.get_policy("xx")
        assert isinstance(flat, FlatSpecialIncomePolicy)
        assert flat.rate == 0.05

        path.write_text("policies:\n  WW: {kind: no_tax}\n")
        registry.refresh()
        assert registry.jurisdictions() == ["WW"]

    def test_parse_policies_rejects_bad_kind(self) -> None:
        with pytest.raises(ConfigError):
            parse_policies({"policies": {"AA": {"kind": "poll_tax"}}})

    def test_parse_policies_requires_mapping(self) -> None:
        with pytest.raises(ConfigError):
            parse_policies(["AA"])
