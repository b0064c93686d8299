"""Registry for core units: horizontal, industry-agnostic capabilities."""

from __future__ import annotations

from collections import Counter
from typing import Any, Iterable

from composekit.errors import CompositionError
from composekit.module import CoreUnit
from composekit.registry.base import UnitRegistry
from composekit.registry.types import CoreRegistrationResult, DependencyCheck
from composekit.registry.validation import candidate_field

__all__ = ["CoreRegistry"]


class CoreRegistry(UnitRegistry[CoreUnit]):
    """Holds core units and answers dependency questions for verticals."""

    unit_model = CoreUnit
    kind = "core"
    result_type = CoreRegistrationResult

    def _result_fields(self, candidate: Any, error: CompositionError | None) -> dict[str, Any]:
        category = candidate_field(candidate, "category")
        return {"category": category if isinstance(category, str) else None}

    def validate_required_modules(self, required_ids: Iterable[str]) -> DependencyCheck:
        """Check that every ID in ``required_ids`` is registered, regardless of context."""
        with self._write_lock:
            known = set(self._units)
        missing = [unit_id for unit_id in required_ids if unit_id not in known]
        return DependencyCheck(valid=not missing, missing=missing)

    def _extra_stats(self, units: list[CoreUnit]) -> dict[str, Any]:
        return {"by_category": dict(Counter(unit.category for unit in units))}
