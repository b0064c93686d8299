"""Application composition: owns the flag store, the registries and the builders."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Iterable

from composekit.config import Config
from composekit.context import ModuleContext
from composekit.errors import ConfigError
from composekit.feature_flags import FeatureFlagStore
from composekit.module import NavigationItem
from composekit.navigation import NavigationBuilder
from composekit.registry.core import CoreRegistry
from composekit.registry.legacy import LegacyRegistry
from composekit.registry.types import ActiveVerticalInfo, RegistrationResult
from composekit.registry.vertical import VerticalRegistry
from composekit.routing.builder import RouteBuilder
from composekit.routing.types import BuiltRoute, ModuleRouteConfig, RouteBuilderOptions, RouteTree, VerticalRouteConfig
from composekit.views import BoundaryFactory

logger = logging.getLogger(__name__)

__all__ = ["AppComposition", "BootstrapReport"]


@dataclass
class BootstrapReport:
    """Registration results of one bootstrap, per registry."""

    core: list[RegistrationResult] = field(default_factory=list)
    verticals: list[RegistrationResult] = field(default_factory=list)
    legacy: list[RegistrationResult] = field(default_factory=list)

    @property
    def failed(self) -> list[RegistrationResult]:
        return [r for r in (*self.core, *self.verticals, *self.legacy) if not r.success]

    @property
    def ok(self) -> bool:
        return not self.failed


class AppComposition:
    """Explicit application context holding one instance of each registry.

    Construct it once at startup, register units through ``bootstrap()``, and
    hand it to whatever renders navigation and routes. Nothing here is
    process-global, so tests can build a fresh composition each time.
    """

    def __init__(
        self,
        flags: FeatureFlagStore | None = None,
        config: Config | None = None,
        migration_mode: bool | None = None,
        boundary: BoundaryFactory | None = None,
    ) -> None:
        """Initialize the composition.

        Args:
            flags: Flag store shared by all registries. Platform defaults if None.
            config: Optional Config for ``composition.*`` and ``routes.*`` keys.
            migration_mode: Overrides ``composition.migration_mode`` from config.
            boundary: Async-boundary factory for deferred route elements.

        Raises:
            ConfigError: If ``composition.migration_mode`` is not a bool or null.
        """
        self._config = config or Config()
        if migration_mode is None:
            migration_mode = self._config.get("composition.migration_mode")
            if migration_mode is not None and not isinstance(migration_mode, bool):
                raise ConfigError(
                    f"composition.migration_mode must be true, false or null, got {type(migration_mode).__name__}"
                )

        self._boundary = boundary
        self.flags = flags or FeatureFlagStore()
        self.core = CoreRegistry(flags=self.flags, boundary=boundary)
        self.verticals = VerticalRegistry(
            self.core,
            flags=self.flags,
            boundary=boundary,
            migration_mode=migration_mode,
        )
        self.legacy = LegacyRegistry(flags=self.flags, boundary=boundary)
        self.navigation = NavigationBuilder(self.verticals, self.legacy)

    @classmethod
    def from_config(cls, config: Config, boundary: BoundaryFactory | None = None) -> AppComposition:
        """Build a composition whose flag store follows ``feature_flags.*`` keys.

        ``feature_flags.defaults`` overlays the platform defaults, and
        ``feature_flags.path`` names a YAML file overlaid on top of that. A relative
        path is resolved against the directory of the config file, if it has one.
        """
        flags = FeatureFlagStore()
        defaults = config.get("feature_flags.defaults")
        if defaults is not None:
            flags.update(defaults)
        path = config.get("feature_flags.path")
        if path:
            if config.path and not os.path.isabs(path):
                path = os.path.join(os.path.dirname(config.path), path)
            flags = FeatureFlagStore.load(path, defaults=flags.get_all())
        return cls(flags=flags, config=config, boundary=boundary)

    @property
    def config(self) -> Config:
        return self._config

    # ----- Bootstrap -----

    async def bootstrap(
        self,
        core: Iterable[Any] = (),
        verticals: Iterable[Any] = (),
        legacy: Iterable[Any] = (),
    ) -> BootstrapReport:
        """Register, initialize and lock every registry.

        Core units go first so vertical dependency checks see them. A rejected
        unit is reported in the returned report and does not stop the rest.
        """
        report = BootstrapReport(
            core=self.core.register_all(core),
            verticals=self.verticals.register_all(verticals),
            legacy=self.legacy.register_all(legacy),
        )
        for failed in report.failed:
            logger.error("Unit '%s' was not registered: %s", failed.id, failed.error)

        for registry in (self.core, self.verticals, self.legacy):
            await registry.initialize()
            registry.lock()

        stats = self.get_stats()
        logger.info(
            "Composition ready: %d core, %d vertical, %d legacy units",
            stats["core"]["total_units"],
            stats["verticals"]["total_units"],
            stats["legacy"]["total_units"],
        )
        return report

    async def shutdown(self) -> None:
        """Run every unit's ``on_destroy`` hook, verticals first."""
        for registry in (self.verticals, self.core, self.legacy):
            await registry.destroy()

    def create_context(self, tenant_id: str, business_unit_id: str, permissions: Iterable[str], **kwargs: Any) -> ModuleContext:
        return self.flags.create_context(tenant_id, business_unit_id, permissions, **kwargs)

    # ----- Queries -----

    def get_active_vertical_info(self, context: ModuleContext) -> ActiveVerticalInfo | None:
        return self.verticals.get_active_vertical_info(context)

    def build_navigation(self, context: ModuleContext) -> list[NavigationItem]:
        return self.navigation.build_navigation(context)

    def route_sources(self, context: ModuleContext) -> tuple[list[ModuleRouteConfig], list[VerticalRouteConfig]]:
        """Route containers reachable in ``context``.

        The active vertical's enabled core units and the enabled legacy units are
        returned as module containers; the active vertical itself as the only
        vertical container.
        """
        modules: list[ModuleRouteConfig] = []
        verticals: list[VerticalRouteConfig] = []
        vertical = self.verticals.get_active_vertical(context)
        if vertical is not None:
            modules.extend(unit.route_config() for unit in self.core.get_units_by_ids(vertical.required_core_modules, context))
            verticals.append(vertical.route_config())
        modules.extend(self.legacy.get_route_configs(context))
        return modules, verticals

    def route_builder(self, context: ModuleContext, **overrides: Any) -> RouteBuilder:
        """A RouteBuilder for ``context`` with ``routes.*`` config defaults applied."""
        settings = {
            "include_admin": self._config.get("routes.include_admin", False),
            "include_public": self._config.get("routes.include_public", True),
            "debug": self._config.get("routes.debug", False),
        }
        settings.update(overrides)
        return RouteBuilder(RouteBuilderOptions(context=context, **settings), boundary=self._boundary)

    async def build_routes_async(self, context: ModuleContext, **overrides: Any) -> list[BuiltRoute]:
        modules, verticals = self.route_sources(context)
        builder = self.route_builder(context, **overrides)
        routes = await builder.build_from_modules_async(modules)
        for vertical in verticals:
            routes.extend(await builder.build_from_vertical_async(vertical))
        return routes

    def build_routes(self, context: ModuleContext, **overrides: Any) -> list[BuiltRoute]:
        modules, verticals = self.route_sources(context)
        builder = self.route_builder(context, **overrides)
        routes = builder.build_from_modules(modules)
        for vertical in verticals:
            routes.extend(builder.build_from_vertical(vertical))
        return routes

    async def build_route_tree_async(self, context: ModuleContext, **overrides: Any) -> RouteTree:
        modules, verticals = self.route_sources(context)
        return await self.route_builder(context, **overrides).build_route_tree_async(modules, verticals)

    def build_route_tree(self, context: ModuleContext, **overrides: Any) -> RouteTree:
        modules, verticals = self.route_sources(context)
        return self.route_builder(context, **overrides).build_route_tree(modules, verticals)

    def get_stats(self) -> dict[str, Any]:
        return {
            "core": self.core.get_stats(),
            "verticals": self.verticals.get_stats(),
            "legacy": self.legacy.get_stats(),
            "flags": self.flags.get_all(),
        }
