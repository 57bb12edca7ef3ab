"""Pydantic v2 models for brackets, filing statuses and jurisdiction policies."""

from __future__ import annotations

import math
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from margintax.utils.exceptions import InvalidFilingStatus, InvalidJurisdiction


class FilingStatus(str, Enum):
    """Taxpayer category selecting which bracket table applies."""

    SINGLE = "single"
    MARRIED_JOINTLY = "married_jointly"
    MARRIED_SEPARATELY = "married_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"

    @classmethod
    def parse(cls, value: FilingStatus | str) -> FilingStatus:
        """Accept an enum member, its value, or a short code (S, MFJ, MFS, HH)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key in _SHORT_CODES:
            return _SHORT_CODES[key]
        try:
            return cls(key)
        except ValueError:
            raise InvalidFilingStatus(f"unknown filing status: {value!r}") from None


_SHORT_CODES: dict[str, FilingStatus] = {
    "s": FilingStatus.SINGLE,
    "mfj": FilingStatus.MARRIED_JOINTLY,
    "mfs": FilingStatus.MARRIED_SEPARATELY,
    "hh": FilingStatus.HEAD_OF_HOUSEHOLD,
    "hoh": FilingStatus.HEAD_OF_HOUSEHOLD,
}


class Bracket(BaseModel):
    """One marginal rate applied over an income range.

    ``range_high`` is ``math.inf`` for the top bracket. An inverted range
    (``range_high < range_low``) is accepted here; it is a data fault that
    the liability computation skips and reports.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    rate: float = Field(ge=0, le=1, description="Marginal rate as a fraction")
    filing_status: FilingStatus
    range_low: float = Field(ge=0, description="Bracket floor")
    range_high: float = Field(default=math.inf, ge=0, description="Bracket ceiling")

    @field_validator("range_high", mode="before")
    @classmethod
    def _none_is_unbounded(cls, value: Any) -> Any:
        return math.inf if value is None else value

    @property
    def is_top(self) -> bool:
        """True when the bracket has no upper bound."""
        return math.isinf(self.range_high)


class ProgressivePolicy(BaseModel):
    """Jurisdiction taxed through progressive brackets."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["progressive"] = "progressive"


class FlatSpecialIncomePolicy(BaseModel):
    """Jurisdiction taxing one income category at a single fixed rate."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["flat_special_income"] = "flat_special_income"
    rate: float = Field(ge=0, le=1)
    income_category: str = Field(default="", description="Taxed income type, informational")


class NoTaxPolicy(BaseModel):
    """Jurisdiction with no income tax."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["no_tax"] = "no_tax"


JurisdictionPolicy = Annotated[
    Union[ProgressivePolicy, FlatSpecialIncomePolicy, NoTaxPolicy],
    Field(discriminator="kind"),
]

policy_adapter: TypeAdapter[JurisdictionPolicy] = TypeAdapter(JurisdictionPolicy)


class DataConfig(BaseModel):
    """Locations of the bracket table and jurisdiction registry files.

    ``None`` selects the tables shipped with the package.
    """

    model_config = ConfigDict(extra="forbid")

    brackets_path: Path | None = Field(default=None, description="Bracket table YAML")
    registry_path: Path | None = Field(default=None, description="Jurisdiction registry YAML")


def normalize_jurisdiction(code: str) -> str:
    """Canonical form of a jurisdiction code: stripped and upper case."""
    normalized = str(code).strip().upper()
    if not normalized:
        raise InvalidJurisdiction(code, "empty jurisdiction code")
    return normalized
