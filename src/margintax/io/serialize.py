"""Serialization for data configs and calculation results."""

from __future__ import annotations

import json
import math
from typing import Any

from margintax.config.schema import DataConfig
from margintax.core.engine import TaxResult


def dump_data_config(data_config: DataConfig) -> str:
    """Serialize a data config to a JSON string."""
    return data_config.model_dump_json(indent=2)


def load_data_config(json_str: str) -> DataConfig:
    """Deserialize a data config from a JSON string."""
    return DataConfig.model_validate_json(json_str)


def _json_number(value: float) -> float | None:
    return None if math.isinf(value) else value


def tax_result_to_dict(result: TaxResult) -> dict[str, Any]:
    """Plain-dict form of a calculation result."""
    return {
        "jurisdiction": result.jurisdiction,
        "filing_status": result.filing_status.value,
        "income": result.income,
        "liability": result.liability,
        "policy_kind": result.policy_kind,
        "effective_rate": result.effective_rate,
        "diagnostics": [
            {
                "kind": d.kind,
                "message": d.message,
                "range_low": d.bracket.range_low if d.bracket is not None else None,
                "range_high": (
                    _json_number(d.bracket.range_high) if d.bracket is not None else None
                ),
            }
            for d in result.diagnostics
        ],
    }


def dump_tax_result(result: TaxResult) -> str:
    """Serialize a calculation result to JSON."""
    return json.dumps(tax_result_to_dict(result), indent=2, sort_keys=True)
