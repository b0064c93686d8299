"""Registry for vertical units: industry orchestration over core units."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Any

from composekit.context import ModuleContext
from composekit.errors import CompositionError, MissingCoreDependencyError, UnitValidationError
from composekit.module import NavigationItem, RouteNode, VerticalUnit
from composekit.registry.base import UnitRegistry, sort_navigation
from composekit.registry.types import ActiveVerticalInfo, VerticalRegistrationResult
from composekit.registry.validation import candidate_field

if TYPE_CHECKING:
    from composekit.feature_flags import FeatureFlagStore
    from composekit.registry.core import CoreRegistry
    from composekit.views import BoundaryFactory

logger = logging.getLogger(__name__)

__all__ = ["VerticalRegistry"]


class VerticalRegistry(UnitRegistry[VerticalUnit]):
    """Holds vertical units and resolves the active one for a context.

    A vertical is admitted only if every core unit it requires is registered in
    the core registry. In migration mode a missing requirement is downgraded to
    a warning and the vertical is still registered.
    """

    unit_model = VerticalUnit
    kind = "vertical"
    result_type = VerticalRegistrationResult

    def __init__(
        self,
        core_registry: CoreRegistry,
        flags: FeatureFlagStore | None = None,
        boundary: BoundaryFactory | None = None,
        migration_mode: bool | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            core_registry: Registry the required core units are looked up in.
            flags: See UnitRegistry.
            boundary: See UnitRegistry.
            migration_mode: True or False to fix the dependency policy. None infers
                migration mode from an empty core registry at registration time.
        """
        super().__init__(flags=flags, boundary=boundary)
        self._core = core_registry
        self._migration_mode = migration_mode

    @property
    def core_registry(self) -> CoreRegistry:
        return self._core

    @property
    def migration_mode(self) -> bool:
        """Whether missing required core units are currently tolerated."""
        if self._migration_mode is not None:
            return self._migration_mode
        return self._core.count == 0

    def _check_admission(self, unit: VerticalUnit) -> list[str]:
        if not unit.required_core_modules:
            raise UnitValidationError(
                unit_id=unit.id,
                errors=["required_core_modules: must require at least one core unit"],
            )

        warnings: list[str] = []
        check = self._core.validate_required_modules(unit.required_core_modules)
        if not check.valid:
            if not self.migration_mode:
                raise MissingCoreDependencyError(vertical_id=unit.id, missing=check.missing)
            message = f"Vertical '{unit.id}' requires core units that are not loaded yet: {', '.join(check.missing)}"
            logger.warning("Migration mode: %s", message)
            warnings.append(message)

        if unit.optional_core_modules:
            optional = self._core.validate_required_modules(unit.optional_core_modules)
            for missing_id in optional.missing:
                message = f"Optional core unit '{missing_id}' for vertical '{unit.id}' is not registered"
                logger.warning("%s", message)
                warnings.append(message)

        return warnings

    def _result_fields(self, candidate: Any, error: CompositionError | None) -> dict[str, Any]:
        industry = candidate_field(candidate, "industry")
        required = candidate_field(candidate, "required_core_modules")
        required = list(required) if isinstance(required, (list, tuple)) else []
        if isinstance(error, MissingCoreDependencyError):
            missing = error.missing
        elif error is None:
            missing = self._core.validate_required_modules(required).missing
        else:
            missing = []
        return {
            "industry": industry if isinstance(industry, str) else None,
            "required_core_modules": required,
            "missing_core_modules": missing,
        }

    # ----- Active vertical -----

    def get_active_vertical(self, context: ModuleContext) -> VerticalUnit | None:
        """Return the first registered vertical whose predicate and permissions pass.

        Registration order decides precedence. Feature flags are not consulted.
        """
        for vertical in self.units():
            if not self._predicate_allows(vertical, context):
                continue
            if not context.has_any_permission(vertical.permissions):
                continue
            return vertical
        return None

    def get_active_vertical_info(self, context: ModuleContext) -> ActiveVerticalInfo | None:
        vertical = self.get_active_vertical(context)
        if vertical is None:
            return None

        enabled_core = [unit.id for unit in self._core.get_units_by_ids(vertical.required_core_modules, context)]
        return ActiveVerticalInfo(
            vertical_id=vertical.id,
            name=vertical.name,
            industry=vertical.industry,
            enabled_core_modules=enabled_core,
            dashboard_path=f"/vertical/{vertical.id}/dashboard" if vertical.dashboard is not None else None,
        )

    def get_routes(self, context: ModuleContext) -> list[RouteNode]:
        """Routes of the active vertical's required core units, then the vertical's own."""
        vertical = self.get_active_vertical(context)
        if vertical is None:
            logger.warning("No active vertical found, returning empty routes")
            return []

        core_routes = self._core.get_routes_by_ids(vertical.required_core_modules, context)
        return core_routes + self._collect_routes([vertical])

    def get_navigation(self, context: ModuleContext) -> list[NavigationItem]:
        """The active vertical's navigation, then its core units' navigation, sorted by order."""
        vertical = self.get_active_vertical(context)
        if vertical is None:
            logger.warning("No active vertical found, returning empty navigation")
            return []

        core_navigation = self._core.get_navigation_by_ids(vertical.required_core_modules, context)
        return sort_navigation([*vertical.navigation, *core_navigation])

    def _extra_stats(self, units: list[VerticalUnit]) -> dict[str, Any]:
        return {"by_industry": dict(Counter(unit.industry for unit in units))}
