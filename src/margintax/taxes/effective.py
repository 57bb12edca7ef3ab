"""Effective tax rate."""

from __future__ import annotations

import math

from margintax.taxes.progressive import validate_income
from margintax.utils.exceptions import DivisionByZero, InvalidIncome


def compute_effective_rate(liability: float, income: float) -> float:
    """Return liability as a percentage of income.

    Raises:
        DivisionByZero: If ``income`` is zero.
        InvalidIncome: If ``income`` or ``liability`` is negative.
    """
    validate_income(income)
    if not math.isfinite(liability) or liability < 0:
        raise InvalidIncome(f"liability must be finite and non-negative, got {liability}")
    if income == 0:
        raise DivisionByZero("effective rate is undefined for zero income")
    return (liability / income) * 100
