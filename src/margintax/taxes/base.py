"""Protocols for the collaborators that feed the tax calculator."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from margintax.config.schema import Bracket, FilingStatus, JurisdictionPolicy


class BracketSource(Protocol):
    """Supplies the ordered bracket set for a jurisdiction and filing status."""

    def get_brackets(
        self,
        jurisdiction: str,
        filing_status: FilingStatus,
    ) -> Sequence[Bracket]:
        """Return brackets for the pair.

        Raises:
            MissingBracketData: If no rules exist for the pair.
        """
        ...


class JurisdictionRegistry(Protocol):
    """Classifies jurisdictions as progressive, flat special-income or no-tax."""

    def get_policy(self, jurisdiction: str) -> JurisdictionPolicy:
        """Return the policy for a jurisdiction code.

        Raises:
            InvalidJurisdiction: If the code is unrecognized.
        """
        ...
