"""Flat-rate liability for jurisdictions that tax a single income category."""

from __future__ import annotations

import math

from margintax.taxes.progressive import validate_income
from margintax.utils.exceptions import InvalidRate


def compute_flat_liability(rate: float, income: float) -> float:
    """Return ``income * rate``.

    Raises:
        InvalidRate: If ``rate`` is outside [0, 1].
        InvalidIncome: If ``income`` is negative.
    """
    if math.isnan(rate) or not 0.0 <= rate <= 1.0:
        raise InvalidRate(f"flat rate must be within [0, 1], got {rate}")
    validate_income(income)
    return income * rate
