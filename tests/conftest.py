"""Shared test fixtures."""

from __future__ import annotations

import math
from collections.abc import Callable

import pytest

from margintax.config.schema import (
    Bracket,
    FilingStatus,
    FlatSpecialIncomePolicy,
    NoTaxPolicy,
    ProgressivePolicy,
)
from margintax.core.engine import TaxCalculator
from margintax.sources.brackets import InMemoryBracketSource
from margintax.sources.registry import StaticJurisdictionRegistry


def _make_brackets(
    rows: list[tuple[float, float, float]],
    filing_status: FilingStatus = FilingStatus.SINGLE,
) -> list[Bracket]:
    """Build brackets from (rate, range_low, range_high) rows."""
    return [
        Bracket(rate=rate, filing_status=filing_status, range_low=low, range_high=high)
        for rate, low, high in rows
    ]


@pytest.fixture
def make_brackets() -> Callable[..., list[Bracket]]:
    """Factory for bracket sets built from (rate, range_low, range_high) rows."""
    return _make_brackets


@pytest.fixture
def three_brackets() -> list[Bracket]:
    """10% to 10k, 12% to 40k, 22% above."""
    return _make_brackets([(0.10, 0, 10_000), (0.12, 10_000, 40_000), (0.22, 40_000, math.inf)])


@pytest.fixture
def registry() -> StaticJurisdictionRegistry:
    return StaticJurisdictionRegistry(
        {
            "PX": ProgressivePolicy(),
            "FX": FlatSpecialIncomePolicy(rate=0.05, income_category="interest_and_dividends"),
            "NX": NoTaxPolicy(),
            "EX": ProgressivePolicy(),
        }
    )


@pytest.fixture
def source(three_brackets: list[Bracket]) -> InMemoryBracketSource:
    married = _make_brackets(
        [(0.10, 0, 20_000), (0.12, 20_000, 80_000), (0.22, 80_000, math.inf)],
        FilingStatus.MARRIED_JOINTLY,
    )
    return InMemoryBracketSource(
        {
            ("PX", FilingStatus.SINGLE): three_brackets,
            ("PX", FilingStatus.MARRIED_JOINTLY): married,
            ("EX", FilingStatus.SINGLE): [],
        }
    )


@pytest.fixture
def calculator(
    registry: StaticJurisdictionRegistry,
    source: InMemoryBracketSource,
) -> TaxCalculator:
    return TaxCalculator(registry, source)
