"""Generic unit registry: lock-after-init storage plus context filtering."""

from __future__ import annotations

import inspect
import logging
import threading
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Iterable, TypeVar

from composekit.context import ModuleContext
from composekit.errors import CompositionError, DuplicateUnitError, RegistryLockedError
from composekit.feature_flags import module_flag_key
from composekit.module import NavigationItem, RouteNode, Unit
from composekit.registry.types import RegistrationResult
from composekit.registry.validation import candidate_id, coerce_unit
from composekit.views import BoundaryFactory, transform_element

if TYPE_CHECKING:
    from composekit.feature_flags import FeatureFlagStore
    from composekit.routing.types import ModuleRouteConfig

logger = logging.getLogger(__name__)

__all__ = ["UnitRegistry", "sort_navigation", "transform_route"]

U = TypeVar("U", bound=Unit)


def transform_route(route: RouteNode, boundary: BoundaryFactory | None = None) -> RouteNode:
    """Return ``route`` with deferred elements wrapped, recursing into children.

    The input node is never mutated; unchanged nodes are returned as-is.
    """
    updates: dict[str, Any] = {}
    element = transform_element(route.element, boundary)
    if element is not route.element:
        updates["element"] = element
    error_element = transform_element(route.error_element, boundary)
    if error_element is not route.error_element:
        updates["error_element"] = error_element
    if route.children:
        children = [transform_route(child, boundary) for child in route.children]
        if any(new is not old for new, old in zip(children, route.children)):
            updates["children"] = children
    return route.model_copy(update=updates) if updates else route


def sort_navigation(items: Iterable[NavigationItem]) -> list[NavigationItem]:
    """Stable sort by ``order``; entries without one go last in their original order."""
    return sorted(items, key=lambda item: item.effective_order)


class UnitRegistry(Generic[U]):
    """Registry holding one kind of unit.

    Registration is expected to happen once during bootstrap, after which
    ``lock()`` freezes the registry. Registering into a locked registry raises
    RegistryLockedError; every other registration problem is reported through
    the returned result.

    Subclasses set ``unit_model`` and ``kind`` and may override the
    ``_check_admission`` and ``_result_fields`` hooks.

    Thread safety:
        Internally synchronized. Queries work on snapshots.
    """

    unit_model: ClassVar[type[Unit]] = Unit
    kind: ClassVar[str] = "unit"
    result_type: ClassVar[type[RegistrationResult]] = RegistrationResult

    def __init__(
        self,
        flags: FeatureFlagStore | None = None,
        boundary: BoundaryFactory | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            flags: Flag store consulted for ``module.<id>`` when the context does
                not carry that flag itself. Without one, such units are disabled.
            boundary: Async-boundary factory used to wrap deferred route elements.
        """
        self._units: dict[str, U] = {}
        self._flags = flags
        self._boundary = boundary
        self._locked = False
        self._initialized = False
        self._init_ran = False
        self._destroyed = False
        self._write_lock = threading.RLock()

    @property
    def registry_name(self) -> str:
        return type(self).__name__

    # ----- Registration -----

    def register(self, unit: Any) -> RegistrationResult:
        """Validate and store a unit.

        Args:
            unit: A unit model instance, a mapping, or an object with the same attributes.

        Returns:
            A result describing success or the reason for rejection.

        Raises:
            RegistryLockedError: If the registry has been locked.
        """
        unit_id = candidate_id(unit)
        with self._write_lock:
            if self._locked:
                raise RegistryLockedError(registry=self.kind, unit_id=unit_id)

            try:
                validated = coerce_unit(self.unit_model, unit)
                if validated.id in self._units:
                    raise DuplicateUnitError(registry=self.kind, unit_id=validated.id)
                warnings = self._check_admission(validated)
            except CompositionError as e:
                logger.error("%s failed to register %s '%s': %s", self.registry_name, self.kind, unit_id, e)
                return self.result_type(id=unit_id, success=False, error=e, **self._result_fields(unit, e))

            self._units[validated.id] = validated  # type: ignore[assignment]

        logger.info("%s registered %s: %s", self.registry_name, self.kind, validated.id)
        return self.result_type(
            id=validated.id,
            success=True,
            routes=len(validated.routes),
            navigation_items=len(validated.navigation),
            warnings=warnings,
            **self._result_fields(validated, None),
        )

    def register_all(self, units: Iterable[Any]) -> list[RegistrationResult]:
        """Register each unit in order; one rejected unit does not stop the rest."""
        return [self.register(unit) for unit in units]

    def _check_admission(self, unit: U) -> list[str]:
        """Kind-specific checks run after the duplicate check.

        Raise a CompositionError to reject the unit; return warnings to accept it.
        """
        return []

    def _result_fields(self, candidate: Any, error: CompositionError | None) -> dict[str, Any]:
        """Extra keyword arguments for ``result_type``."""
        return {}

    # ----- Lock -----

    def lock(self) -> None:
        """Freeze the registry. Idempotent; a second call only warns."""
        with self._write_lock:
            if self._locked:
                logger.warning("%s is already locked", self.registry_name)
                return
            self._locked = True
            count = len(self._units)
        logger.info("%s locked with %d %s units", self.registry_name, count, self.kind)

    def unlock(self) -> None:
        """Reopen the registry for registration during development hot reloads."""
        with self._write_lock:
            self._locked = False
        logger.warning("%s unlocked; only use this during development reloads", self.registry_name)

    @property
    def is_locked(self) -> bool:
        with self._write_lock:
            return self._locked

    @property
    def is_initialized(self) -> bool:
        with self._write_lock:
            return self._initialized

    # ----- Query Methods -----

    def get(self, unit_id: str) -> U | None:
        """Look up a unit by ID. Returns None if not found."""
        with self._write_lock:
            return self._units.get(unit_id)

    def has(self, unit_id: str) -> bool:
        with self._write_lock:
            return unit_id in self._units

    def list(self) -> list[str]:
        """Return registered unit IDs in registration order."""
        with self._write_lock:
            return [*self._units]

    def units(self) -> list[U]:
        """Return registered units in registration order (snapshot)."""
        with self._write_lock:
            return [*self._units.values()]

    @property
    def count(self) -> int:
        with self._write_lock:
            return len(self._units)

    def is_unit_enabled(self, unit: U, context: ModuleContext) -> bool:
        """Apply the flag check, the unit predicate and the permission check, in that order."""
        flag = module_flag_key(unit.id)
        if flag in context.feature_flags:
            if not context.feature_flags[flag]:
                return False
        elif self._flags is None or not self._flags.is_enabled(flag):
            return False

        if not self._predicate_allows(unit, context):
            return False

        return context.has_any_permission(unit.permissions)

    def _predicate_allows(self, unit: U, context: ModuleContext) -> bool:
        """Evaluate ``unit.is_enabled``; a predicate that raises counts as disabled."""
        if unit.is_enabled is None:
            return True
        try:
            return bool(unit.is_enabled(context))
        except Exception as e:
            logger.error(
                "%s: is_enabled for %s '%s' raised, treating it as disabled: %s",
                self.registry_name,
                self.kind,
                unit.id,
                e,
            )
            return False

    def get_enabled_units(self, context: ModuleContext) -> list[U]:
        """Return the units visible in ``context``, in registration order."""
        return [unit for unit in self.units() if self.is_unit_enabled(unit, context)]

    def get_units_by_ids(self, unit_ids: Iterable[str], context: ModuleContext) -> list[U]:
        """Return enabled units whose ID is in ``unit_ids``, in registration order."""
        wanted = set(unit_ids)
        return [unit for unit in self.get_enabled_units(context) if unit.id in wanted]

    def get_routes(self, context: ModuleContext) -> list[RouteNode]:
        return self._collect_routes(self.get_enabled_units(context))

    def get_navigation(self, context: ModuleContext) -> list[NavigationItem]:
        return self._collect_navigation(self.get_enabled_units(context))

    def get_routes_by_ids(self, unit_ids: Iterable[str], context: ModuleContext) -> list[RouteNode]:
        return self._collect_routes(self.get_units_by_ids(unit_ids, context))

    def get_navigation_by_ids(self, unit_ids: Iterable[str], context: ModuleContext) -> list[NavigationItem]:
        return self._collect_navigation(self.get_units_by_ids(unit_ids, context))

    def get_route_configs(self, context: ModuleContext) -> list[ModuleRouteConfig]:
        """Return route containers for the enabled units, ready for the route builder."""
        return [unit.route_config() for unit in self.get_enabled_units(context)]

    def _collect_routes(self, units: Iterable[U]) -> list[RouteNode]:
        return [transform_route(route, self._boundary) for unit in units for route in unit.routes]

    def _collect_navigation(self, units: Iterable[U]) -> list[NavigationItem]:
        return sort_navigation(item for unit in units for item in unit.navigation)

    # ----- Lifecycle -----

    async def initialize(self) -> None:
        """Run every unit's ``on_init`` sequentially, in registration order.

        Hooks run at most once per registry lifetime; only ``reset()`` rearms them.
        A failing hook is logged and does not stop the sweep. Hooks may be plain
        functions or coroutine functions.
        """
        with self._write_lock:
            if self._init_ran:
                logger.warning("%s is already initialized", self.registry_name)
                return
            self._init_ran = True
            units = self.units()

        logger.info("%s initializing %d %s units", self.registry_name, len(units), self.kind)
        for unit in units:
            if unit.on_init is None:
                continue
            try:
                result = unit.on_init()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error("%s failed to initialize %s '%s': %s", self.registry_name, self.kind, unit.id, e)
                continue
            logger.info("%s initialized %s: %s", self.registry_name, self.kind, unit.id)

        with self._write_lock:
            self._initialized = True
        logger.info("%s initialized %d %s units", self.registry_name, len(units), self.kind)

    async def destroy(self) -> None:
        """Run every unit's ``on_destroy`` once. Failures are logged and skipped."""
        with self._write_lock:
            if self._destroyed:
                logger.warning("%s is already destroyed", self.registry_name)
                return
            self._destroyed = True
            units = self.units()

        for unit in units:
            if unit.on_destroy is None:
                continue
            try:
                result = unit.on_destroy()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error("%s failed to destroy %s '%s': %s", self.registry_name, self.kind, unit.id, e)
                continue
            logger.info("%s destroyed %s: %s", self.registry_name, self.kind, unit.id)

        with self._write_lock:
            self._initialized = False

    def reset(self) -> None:
        """Drop every unit and clear the lock and lifecycle state. For tests only."""
        with self._write_lock:
            self._units.clear()
            self._locked = False
            self._initialized = False
            self._init_ran = False
            self._destroyed = False
        logger.debug("%s reset", self.registry_name)

    # ----- Stats -----

    def get_stats(self) -> dict[str, Any]:
        """Diagnostic snapshot of the registry."""
        with self._write_lock:
            units = [*self._units.values()]
            locked = self._locked
            initialized = self._initialized
        stats: dict[str, Any] = {
            "total_units": len(units),
            "locked": locked,
            "initialized": initialized,
            "total_routes": sum(len(unit.routes) for unit in units),
            "total_navigation_items": sum(len(unit.navigation) for unit in units),
        }
        stats.update(self._extra_stats(units))
        return stats

    def _extra_stats(self, units: list[U]) -> dict[str, Any]:
        return {}

    def __len__(self) -> int:
        return self.count

    def __contains__(self, unit_id: object) -> bool:
        return isinstance(unit_id, str) and self.has(unit_id)
