"""Progressive (marginal) bracket liability.

Each bracket's rate applies only to the slice of income between the
bracket's floor and the smaller of its ceiling and the income itself.
Malformed bracket sets are tolerated: inverted ranges are skipped, and
every integrity issue is logged and optionally collected into a caller
supplied list, never folded into the returned number.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from margintax.config.schema import Bracket
from margintax.utils.exceptions import InvalidIncome, MissingBracketData

logger = logging.getLogger(__name__)

DiagnosticKind = Literal[
    "inverted_range",
    "gap",
    "overlap",
    "nonzero_start",
    "bounded_top",
    "mixed_filing_status",
]


@dataclass(frozen=True)
class BracketDiagnostic:
    """A non-fatal integrity issue found in a bracket set."""

    kind: DiagnosticKind
    message: str
    bracket: Bracket | None = None


def validate_income(income: float) -> None:
    """Raise ``InvalidIncome`` for negative or non-finite income."""
    if not math.isfinite(income) or income < 0:
        raise InvalidIncome(f"income must be finite and non-negative, got {income}")


def _is_inverted(bracket: Bracket) -> bool:
    return bracket.range_high < bracket.range_low


def check_brackets(brackets: Iterable[Bracket]) -> list[BracketDiagnostic]:
    """Check a bracket set against the contiguous, gapless-from-zero invariant.

    Args:
        brackets: Brackets for one jurisdiction and filing status, in any order.

    Returns:
        Issues found, in a deterministic order. Empty for a well-formed set.
    """
    items = list(brackets)
    issues: list[BracketDiagnostic] = []

    statuses = sorted({b.filing_status.value for b in items})
    if len(statuses) > 1:
        issues.append(
            BracketDiagnostic(
                "mixed_filing_status",
                f"bracket set mixes filing statuses: {', '.join(statuses)}",
            )
        )

    for b in items:
        if _is_inverted(b):
            issues.append(
                BracketDiagnostic(
                    "inverted_range",
                    f"range_high {b.range_high} is below range_low {b.range_low}; skipped",
                    b,
                )
            )

    valid = sorted(
        (b for b in items if not _is_inverted(b)),
        key=lambda b: (b.range_low, b.range_high),
    )
    if not valid:
        return issues

    if valid[0].range_low != 0:
        issues.append(
            BracketDiagnostic(
                "nonzero_start",
                f"lowest bracket starts at {valid[0].range_low}, not 0",
                valid[0],
            )
        )

    covered = valid[0].range_high
    for cur in valid[1:]:
        if cur.range_low > covered:
            issues.append(
                BracketDiagnostic(
                    "gap",
                    f"income between {covered} and {cur.range_low} is in no bracket",
                    cur,
                )
            )
        elif cur.range_low < covered:
            issues.append(
                BracketDiagnostic(
                    "overlap",
                    f"bracket starting at {cur.range_low} overlaps one ending at {covered}",
                    cur,
                )
            )
        covered = max(covered, cur.range_high)

    top = max(valid, key=lambda b: b.range_high)
    if not top.is_top:
        issues.append(
            BracketDiagnostic(
                "bounded_top",
                f"highest bracket ends at {top.range_high}; income above it is untaxed",
                top,
            )
        )
    return issues


def _report(
    issues: list[BracketDiagnostic],
    diagnostics: list[BracketDiagnostic] | None,
) -> None:
    for issue in issues:
        logger.warning("Bracket data issue (%s): %s", issue.kind, issue.message)
    if diagnostics is not None:
        diagnostics.extend(issues)


def compute_liability(
    brackets: Iterable[Bracket],
    income: float,
    diagnostics: list[BracketDiagnostic] | None = None,
) -> float:
    """Compute tax owed under progressive brackets.

    Args:
        brackets: Bracket set for one jurisdiction and filing status.
            Order does not matter.
        income: Taxable income (>= 0).
        diagnostics: Optional list that receives any bracket integrity issues.

    Returns:
        Total liability.

    Raises:
        InvalidIncome: If ``income`` is negative.
        MissingBracketData: If ``brackets`` is empty.
    """
    validate_income(income)
    items = list(brackets)
    if not items:
        raise MissingBracketData()
    _report(check_brackets(items), diagnostics)

    tax = 0.0
    for b in items:
        if _is_inverted(b) or income <= b.range_low:
            continue
        tax += (min(b.range_high, income) - b.range_low) * b.rate
    return tax


def compute_liability_vectorized(
    brackets: Sequence[Bracket],
    incomes: ArrayLike,
    diagnostics: list[BracketDiagnostic] | None = None,
) -> NDArray[np.floating[Any]]:
    """Vectorized progressive liability across many incomes.

    Args:
        brackets: Bracket set for one jurisdiction and filing status.
        incomes: Array of taxable incomes (each >= 0).
        diagnostics: Optional list that receives any bracket integrity issues.

    Returns:
        Array of liabilities with the same shape as ``incomes``.
    """
    values = np.asarray(incomes, dtype=float)
    if not np.all(np.isfinite(values)) or np.any(values < 0):
        raise InvalidIncome("incomes must all be finite and non-negative")
    if len(brackets) == 0:
        raise MissingBracketData()
    _report(check_brackets(brackets), diagnostics)

    tax: NDArray[np.floating[Any]] = np.zeros_like(values)
    for b in brackets:
        if _is_inverted(b):
            continue
        taxable_in_bracket = np.minimum(values, b.range_high) - b.range_low
        tax += np.maximum(taxable_in_bracket, 0.0) * b.rate
    return tax


def marginal_rate(brackets: Sequence[Bracket], income: float) -> float:
    """Rate applied to the next unit of income above ``income``.

    Sums the rates of every bracket whose range contains ``income``, so an
    overlapping set reports the rate the liability computation actually
    applies. Income in a gap or above a bounded top bracket has rate 0.
    """
    validate_income(income)
    if len(brackets) == 0:
        raise MissingBracketData()
    rate = 0.0
    for b in brackets:
        if not _is_inverted(b) and b.range_low <= income < b.range_high:
            rate += b.rate
    return rate
