"""Registry for legacy units that predate the core/vertical split."""

from __future__ import annotations

from typing import Any

from composekit.module import LegacyUnit
from composekit.registry.base import UnitRegistry

__all__ = ["LegacyRegistry"]


class LegacyRegistry(UnitRegistry[LegacyUnit]):
    """Same lock and filtering discipline as the core registry, without dependency checks."""

    unit_model = LegacyUnit
    kind = "legacy"

    def _extra_stats(self, units: list[LegacyUnit]) -> dict[str, Any]:
        return {"unit_ids": [unit.id for unit in units]}
