"""composekit route builder.

Usage::

    from composekit.routing import RouteBuilder, RouteBuilderOptions

    builder = RouteBuilder(RouteBuilderOptions(context=ctx, include_admin=True))
    routes = builder.build_from_modules(core.get_route_configs(ctx))
"""

from __future__ import annotations

from composekit.module import RouteLayout, RouteProtection
from composekit.routing.builder import (
    RouteBuilder,
    build_dynamic_routes,
    build_dynamic_routes_async,
    get_route_stats,
    join_path,
)
from composekit.routing.types import (
    BuiltRoute,
    ModuleRouteConfig,
    RouteBuilderOptions,
    RouteScope,
    RouteTree,
    VerticalRouteConfig,
)

__all__ = [
    "BuiltRoute",
    "ModuleRouteConfig",
    "RouteBuilder",
    "RouteBuilderOptions",
    "RouteLayout",
    "RouteProtection",
    "RouteScope",
    "RouteTree",
    "VerticalRouteConfig",
    "build_dynamic_routes",
    "build_dynamic_routes_async",
    "get_route_stats",
    "join_path",
]
