"""Static jurisdiction registry with explicit refresh."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from margintax.config.schema import (
    JurisdictionPolicy,
    NoTaxPolicy,
    normalize_jurisdiction,
    policy_adapter,
)
from margintax.io.yaml_loader import load_yaml
from margintax.utils.exceptions import ConfigError, InvalidJurisdiction

logger = logging.getLogger(__name__)

PolicyLoader = Callable[[], Mapping[str, JurisdictionPolicy]]


def parse_policies(data: Any) -> dict[str, JurisdictionPolicy]:
    """Build a policy table from parsed YAML content.

    Raises:
        ConfigError: If the content has no ``policies`` mapping or a policy is invalid.
    """
    if not isinstance(data, Mapping) or not isinstance(data.get("policies"), Mapping):
        raise ConfigError("registry must contain a 'policies' mapping")
    policies: dict[str, JurisdictionPolicy] = {}
    for code, raw in data["policies"].items():
        try:
            policies[normalize_jurisdiction(code)] = policy_adapter.validate_python(raw)
        except ValidationError as exc:
            raise ConfigError(f"invalid policy for {code!r}: {exc}") from exc
    return policies


class StaticJurisdictionRegistry:
    """Jurisdiction registry holding an immutable snapshot of policies.

    The snapshot only changes when ``refresh()`` is called, which replaces
    it wholesale from ``loader``. Lookups never trigger a reload.
    """

    def __init__(
        self,
        policies: Mapping[str, JurisdictionPolicy] | None = None,
        loader: PolicyLoader | None = None,
    ) -> None:
        if policies is None and loader is None:
            raise ValueError("either policies or loader is required")
        self._loader = loader
        self._policies: Mapping[str, JurisdictionPolicy] = {}
        if policies is not None:
            self._policies = self._normalize(policies)
        else:
            self.refresh()

    @classmethod
    def from_yaml(cls, path: Path) -> StaticJurisdictionRegistry:
        """Registry whose ``refresh()`` re-reads ``path``."""
        path = Path(path)
        return cls(loader=lambda: parse_policies(load_yaml(path)))

    @staticmethod
    def _normalize(policies: Mapping[str, JurisdictionPolicy]) -> dict[str, JurisdictionPolicy]:
        return {normalize_jurisdiction(code): policy for code, policy in policies.items()}

    def refresh(self) -> None:
        """Reload the policy snapshot from the loader."""
        if self._loader is None:
            raise ValueError("registry was built without a loader")
        self._policies = self._normalize(self._loader())
        logger.debug("Jurisdiction registry refreshed: %d entries", len(self._policies))

    def get_policy(self, jurisdiction: str) -> JurisdictionPolicy:
        """Return the policy for a jurisdiction code."""
        code = normalize_jurisdiction(jurisdiction)
        try:
            return self._policies[code]
        except KeyError:
            raise InvalidJurisdiction(code) from None

    def jurisdictions(self) -> list[str]:
        """All known jurisdiction codes, sorted."""
        return sorted(self._policies)

    def no_tax_jurisdictions(self) -> frozenset[str]:
        """Codes of jurisdictions that collect no income tax."""
        return frozenset(
            code for code, policy in self._policies.items() if isinstance(policy, NoTaxPolicy)
        )
