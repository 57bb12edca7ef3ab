"""Bracket sources backed by in-memory tables or YAML files."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from margintax.config.schema import Bracket, FilingStatus, normalize_jurisdiction
from margintax.io.yaml_loader import load_yaml
from margintax.utils.exceptions import ConfigError, MissingBracketData

logger = logging.getLogger(__name__)

BracketTable = Mapping[tuple[str, FilingStatus], Sequence[Bracket]]


def _parse_row(row: Any, filing_status: FilingStatus) -> Bracket:
    if isinstance(row, Mapping):
        return Bracket.model_validate({**row, "filing_status": filing_status})
    if isinstance(row, Sequence) and not isinstance(row, str) and len(row) == 3:
        low, high, rate = row
        return Bracket(
            rate=rate,
            filing_status=filing_status,
            range_low=low,
            range_high=high,
        )
    raise ConfigError(f"bracket row must be [range_low, range_high, rate], got {row!r}")


def parse_bracket_table(data: Any) -> dict[tuple[str, FilingStatus], list[Bracket]]:
    """Build a bracket table from parsed YAML content.

    Args:
        data: Mapping with a ``jurisdictions`` key, each jurisdiction mapping
            filing status names (or short codes) to lists of rows.

    Returns:
        Brackets keyed by (jurisdiction, filing status), sorted by floor.

    Raises:
        ConfigError: If the content does not describe a bracket table.
    """
    if not isinstance(data, Mapping) or not isinstance(data.get("jurisdictions"), Mapping):
        raise ConfigError("bracket table must contain a 'jurisdictions' mapping")

    table: dict[tuple[str, FilingStatus], list[Bracket]] = {}
    for code, by_status in data["jurisdictions"].items():
        if not isinstance(by_status, Mapping):
            raise ConfigError(f"jurisdiction {code!r} must map filing statuses to brackets")
        jurisdiction = normalize_jurisdiction(code)
        for status_name, rows in by_status.items():
            try:
                status = FilingStatus.parse(status_name)
                brackets = [_parse_row(row, status) for row in rows or []]
            except (ValueError, ValidationError) as exc:
                raise ConfigError(
                    f"invalid brackets for {jurisdiction}/{status_name}: {exc}"
                ) from exc
            table[(jurisdiction, status)] = sorted(brackets, key=lambda b: b.range_low)
    return table


class InMemoryBracketSource:
    """Bracket source over a fixed table."""

    def __init__(self, table: BracketTable) -> None:
        self._table: dict[tuple[str, FilingStatus], tuple[Bracket, ...]] = {
            (normalize_jurisdiction(code), FilingStatus.parse(status)): tuple(brackets)
            for (code, status), brackets in table.items()
        }

    def get_brackets(
        self,
        jurisdiction: str,
        filing_status: FilingStatus,
    ) -> Sequence[Bracket]:
        """Return the stored brackets for the pair."""
        key = (normalize_jurisdiction(jurisdiction), FilingStatus.parse(filing_status))
        brackets = self._table.get(key)
        if not brackets:
            raise MissingBracketData(key[0], key[1].value)
        return brackets

    def jurisdictions(self) -> list[str]:
        """Jurisdiction codes that have at least one bracket table."""
        return sorted({code for code, _ in self._table})


class YamlBracketSource(InMemoryBracketSource):
    """Bracket source loaded from a YAML bracket table file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        logger.debug("Loading bracket table from %s", self.path)
        super().__init__(parse_bracket_table(load_yaml(self.path)))
