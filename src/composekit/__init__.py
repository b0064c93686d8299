"""composekit - Module and vertical composition engine."""

from __future__ import annotations

# Composition
from composekit.app import AppComposition, BootstrapReport

# Context and flags
from composekit.context import ModuleContext, has_any_permission
from composekit.feature_flags import (
    DEFAULT_FEATURE_FLAGS,
    FeatureFlagStore,
    create_module_context,
    module_flag_key,
)

# Unit model
from composekit.module import (
    CoreUnit,
    LegacyUnit,
    NavigationItem,
    RouteLayout,
    RouteMeta,
    RouteNode,
    RouteProtection,
    Unit,
    VerticalUnit,
)
from composekit.views import LazyView, LoadingBoundary, transform_element

# Registries
from composekit.registry import (
    ActiveVerticalInfo,
    CoreRegistrationResult,
    CoreRegistry,
    DependencyCheck,
    LegacyRegistry,
    RegistrationResult,
    UnitRegistry,
    VerticalRegistrationResult,
    VerticalRegistry,
    validate_unit,
)

# Builders
from composekit.navigation import NavigationBuilder
from composekit.routing import (
    BuiltRoute,
    ModuleRouteConfig,
    RouteBuilder,
    RouteBuilderOptions,
    RouteTree,
    VerticalRouteConfig,
    build_dynamic_routes,
    get_route_stats,
)

# Config
from composekit.config import Config

# Errors
from composekit.errors import (
    CompositionError,
    ConfigError,
    ConfigNotFoundError,
    DuplicateUnitError,
    ErrorCodes,
    FeatureFlagError,
    MissingCoreDependencyError,
    RegistryLockedError,
    UnitValidationError,
)

__version__ = "0.1.0"

__all__ = [
    # Composition
    "AppComposition",
    "BootstrapReport",
    # Context and flags
    "DEFAULT_FEATURE_FLAGS",
    "FeatureFlagStore",
    "ModuleContext",
    "create_module_context",
    "has_any_permission",
    "module_flag_key",
    # Unit model
    "CoreUnit",
    "LazyView",
    "LegacyUnit",
    "LoadingBoundary",
    "NavigationItem",
    "RouteLayout",
    "RouteMeta",
    "RouteNode",
    "RouteProtection",
    "Unit",
    "VerticalUnit",
    "transform_element",
    # Registries
    "ActiveVerticalInfo",
    "CoreRegistrationResult",
    "CoreRegistry",
    "DependencyCheck",
    "LegacyRegistry",
    "RegistrationResult",
    "UnitRegistry",
    "VerticalRegistrationResult",
    "VerticalRegistry",
    "validate_unit",
    # Builders
    "BuiltRoute",
    "ModuleRouteConfig",
    "NavigationBuilder",
    "RouteBuilder",
    "RouteBuilderOptions",
    "RouteTree",
    "VerticalRouteConfig",
    "build_dynamic_routes",
    "get_route_stats",
    # Config
    "Config",
    # Errors
    "CompositionError",
    "ConfigError",
    "ConfigNotFoundError",
    "DuplicateUnitError",
    "ErrorCodes",
    "FeatureFlagError",
    "MissingCoreDependencyError",
    "RegistryLockedError",
    "UnitValidationError",
]
