"""Tax calculation engine: policy dispatch over injected collaborators."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from margintax.config.defaults import default_bracket_source, default_registry
from margintax.config.schema import (
    DataConfig,
    FilingStatus,
    FlatSpecialIncomePolicy,
    JurisdictionPolicy,
    NoTaxPolicy,
    ProgressivePolicy,
    normalize_jurisdiction,
)
from margintax.taxes.base import BracketSource, JurisdictionRegistry
from margintax.taxes.effective import compute_effective_rate
from margintax.taxes.flat import compute_flat_liability
from margintax.taxes.progressive import BracketDiagnostic, compute_liability, validate_income
from margintax.utils.exceptions import InvalidJurisdiction, MissingBracketData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxResult:
    """Output of a single liability calculation."""

    jurisdiction: str
    filing_status: FilingStatus
    income: float
    liability: float
    policy_kind: str
    effective_rate: float | None
    diagnostics: tuple[BracketDiagnostic, ...] = field(default=())


class TaxCalculator:
    """Computes liability for a jurisdiction, filing status and income.

    The registry and bracket source are supplied by the caller; the
    calculator holds no other state, so one instance can serve concurrent
    calls as long as the collaborators can.
    """

    def __init__(self, registry: JurisdictionRegistry, source: BracketSource) -> None:
        self.registry = registry
        self.source = source

    def resolve_policy(self, jurisdiction: str) -> JurisdictionPolicy:
        """Look up the policy for ``jurisdiction``."""
        return self.registry.get_policy(normalize_jurisdiction(jurisdiction))

    def _liability(
        self,
        jurisdiction: str,
        filing_status: FilingStatus | str,
        income: float,
        diagnostics: list[BracketDiagnostic] | None,
    ) -> tuple[str, FilingStatus, JurisdictionPolicy, float]:
        validate_income(income)
        code = normalize_jurisdiction(jurisdiction)
        status = FilingStatus.parse(filing_status)
        policy = self.resolve_policy(code)

        if isinstance(policy, ProgressivePolicy):
            brackets = list(self.source.get_brackets(code, status))
            if not brackets:
                raise MissingBracketData(code, status.value)
            liability = compute_liability(brackets, income, diagnostics)
        elif isinstance(policy, FlatSpecialIncomePolicy):
            liability = compute_flat_liability(policy.rate, income)
        elif isinstance(policy, NoTaxPolicy):
            raise InvalidJurisdiction(code, "jurisdiction does not collect income tax")
        else:
            raise InvalidJurisdiction(code, f"unsupported policy {policy!r}")

        logger.debug(
            "%s %s liability on %.2f: %.2f (%s)",
            code,
            status.value,
            income,
            liability,
            policy.kind,
        )
        return code, status, policy, liability

    def compute_tax_due(
        self,
        jurisdiction: str,
        filing_status: FilingStatus | str,
        income: float,
    ) -> float:
        """Compute tax owed.

        Raises:
            InvalidIncome: If ``income`` is negative.
            InvalidJurisdiction: If the jurisdiction is unknown or collects no income tax.
            MissingBracketData: If a progressive jurisdiction has no brackets for the status.
        """
        return self._liability(jurisdiction, filing_status, income, None)[3]

    def compute_effective_rate(self, liability: float, income: float) -> float:
        """Liability as a percentage of income."""
        return compute_effective_rate(liability, income)

    def calculate(
        self,
        jurisdiction: str,
        filing_status: FilingStatus | str,
        income: float,
    ) -> TaxResult:
        """Compute liability and, for non-zero income, the effective rate."""
        diagnostics: list[BracketDiagnostic] = []
        code, status, policy, liability = self._liability(
            jurisdiction, filing_status, income, diagnostics
        )
        effective = compute_effective_rate(liability, income) if income > 0 else None
        return TaxResult(
            jurisdiction=code,
            filing_status=status,
            income=income,
            liability=liability,
            policy_kind=policy.kind,
            effective_rate=effective,
            diagnostics=tuple(diagnostics),
        )

    def compute_combined_tax_due(
        self,
        jurisdictions: Iterable[str],
        filing_status: FilingStatus | str,
        income: float,
    ) -> float:
        """Sum of the liabilities owed to each jurisdiction, e.g. federal plus state."""
        codes = list(jurisdictions)
        if not codes:
            raise InvalidJurisdiction("", "no jurisdictions given")
        return sum(self.compute_tax_due(code, filing_status, income) for code in codes)


def default_calculator(data_config: DataConfig | None = None) -> TaxCalculator:
    """Calculator over the package's (or ``data_config``'s) tables."""
    return TaxCalculator(default_registry(data_config), default_bracket_source(data_config))


def compute_tax_due(
    jurisdiction: str,
    filing_status: FilingStatus | str,
    income: float,
    registry: JurisdictionRegistry | None = None,
    source: BracketSource | None = None,
) -> float:
    """Compute tax owed, using package data for any collaborator not given."""
    calculator = TaxCalculator(
        registry if registry is not None else default_registry(),
        source if source is not None else default_bracket_source(),
    )
    return calculator.compute_tax_due(jurisdiction, filing_status, income)
