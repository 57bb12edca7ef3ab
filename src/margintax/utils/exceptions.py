"""Custom exceptions for margintax."""

from __future__ import annotations


class MargintaxError(Exception):
    """Base exception for margintax."""


class ConfigError(MargintaxError):
    """Invalid configuration or malformed data file."""


class InvalidIncome(MargintaxError, ValueError):
    """Income (or a liability derived from it) is negative or not a number."""


class InvalidRate(MargintaxError, ValueError):
    """Tax rate outside the closed interval [0, 1]."""


class InvalidFilingStatus(MargintaxError, ValueError):
    """Unrecognized filing status code."""


class InvalidJurisdiction(MargintaxError, LookupError):
    """Unknown jurisdiction, or a no-tax jurisdiction used for a liability query."""

    def __init__(self, jurisdiction: str, reason: str = "unknown jurisdiction") -> None:
        self.jurisdiction = jurisdiction
        self.reason = reason
        super().__init__(f"{reason}: {jurisdiction!r}")


class MissingBracketData(MargintaxError, LookupError):
    """No brackets are available for a progressive jurisdiction."""

    def __init__(
        self,
        jurisdiction: str | None = None,
        filing_status: str | None = None,
    ) -> None:
        self.jurisdiction = jurisdiction
        self.filing_status = filing_status
        if jurisdiction is None:
            message = "bracket set is empty"
        else:
            message = f"no brackets for jurisdiction {jurisdiction!r}"
            if filing_status is not None:
                message += f" and filing status {filing_status!r}"
        super().__init__(message)


class DivisionByZero(MargintaxError, ZeroDivisionError):
    """Effective rate requested for zero income."""
