"""Route builder: turns unit route definitions into the route forest for a context."""

from __future__ import annotations

import asyncio
import inspect
import logging
import re
import threading
from collections import Counter
from typing import Any, Callable, Coroutine, Iterable

from composekit.context import ModuleContext
from composekit.module import RouteLayout, RouteNode, RouteProtection
from composekit.routing.types import (
    BuiltRoute,
    ModuleRouteConfig,
    RouteBuilderOptions,
    RouteScope,
    RouteTree,
    VerticalRouteConfig,
)
from composekit.views import BoundaryFactory, is_deferred, transform_element

logger = logging.getLogger(__name__)

__all__ = [
    "RouteBuilder",
    "build_dynamic_routes",
    "build_dynamic_routes_async",
    "get_route_stats",
    "join_path",
]

_SEPARATORS = re.compile(r"/+")


def join_path(base_path: str, path: str) -> str:
    """Prefix ``path`` with ``base_path`` and collapse repeated separators."""
    if not base_path:
        return path
    if not path:
        return base_path
    return _SEPARATORS.sub("/", f"{base_path}/{path}")


def _run_sync(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a coroutine to completion from synchronous code.

    Uses ``asyncio.run`` when no loop is running in this thread, otherwise runs
    the coroutine on a fresh loop in a helper thread.
    """
    try:
        asyncio.get_running_loop()
        has_loop = True
    except RuntimeError:
        has_loop = False

    if not has_loop:
        return asyncio.run(coro)

    result_holder: dict[str, Any] = {}
    exception_holder: dict[str, BaseException] = {}

    def thread_target() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            result_holder["output"] = loop.run_until_complete(coro)
        except Exception as e:
            exception_holder["error"] = e
        finally:
            loop.close()

    thread = threading.Thread(target=thread_target, daemon=True)
    thread.start()
    thread.join()

    if "error" in exception_holder:
        raise exception_holder["error"]
    return result_holder["output"]


class RouteBuilder:
    """Builds routes from route containers against one context snapshot.

    Every check happens top-down: the container guard, then per route the tier
    filter, the route guard and the feature flag, then the children. A failing
    check drops the route and everything below it. Guards may return a bool or
    an awaitable; the ``*_async`` methods await them, and the plain methods run
    the same logic on an event loop.
    """

    def __init__(self, options: RouteBuilderOptions | None = None, boundary: BoundaryFactory | None = None) -> None:
        self._options = options or RouteBuilderOptions()
        self._context = self._options.context or ModuleContext()
        self._boundary = boundary

    @property
    def options(self) -> RouteBuilderOptions:
        return self._options

    @property
    def context(self) -> ModuleContext:
        return self._context

    def update_context(self, **changes: Any) -> None:
        """Replace fields of the guard context for subsequent builds."""
        self._context = self._context.with_changes(**changes)

    def _trace(self, msg: str, *args: Any) -> None:
        logger.log(logging.INFO if self._options.debug else logging.DEBUG, msg, *args)

    async def _guard_allows(self, guard: Callable[..., Any], label: str) -> bool:
        try:
            result = guard(self._context)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.error("Guard for %s raised, dropping it: %s", label, e)
            return False
        return bool(result)

    # ----- Async API -----

    async def build_from_modules_async(self, modules: Iterable[ModuleRouteConfig]) -> list[BuiltRoute]:
        routes: list[BuiltRoute] = []
        for module in modules:
            self._trace("Building routes for module: %s", module.module_id)
            if module.module_guard is not None and not await self._guard_allows(
                module.module_guard, f"module '{module.module_id}'"
            ):
                self._trace("Module guard failed: %s", module.module_id)
                continue

            scope = RouteScope(
                source_id=module.module_id,
                base_path=module.base_path,
                default_protection=module.default_protection,
                default_layout=module.default_layout,
            )
            routes.extend(await self._build_all(module.routes, scope))
        return routes

    async def build_from_vertical_async(self, vertical: VerticalRouteConfig) -> list[BuiltRoute]:
        self._trace("Building routes for vertical: %s", vertical.vertical_id)
        if vertical.vertical_guard is not None and not await self._guard_allows(
            vertical.vertical_guard, f"vertical '{vertical.vertical_id}'"
        ):
            self._trace("Vertical guard failed: %s", vertical.vertical_id)
            return []

        scope = RouteScope(
            source_id=vertical.vertical_id,
            base_path=vertical.base_path,
            default_protection=vertical.default_protection,
            default_layout=vertical.default_layout,
        )
        return await self._build_all(vertical.routes, scope)

    async def build_route_async(self, node: RouteNode, scope: RouteScope | None = None) -> BuiltRoute | None:
        """Build one route, or return None if any check drops it."""
        scope = scope or RouteScope()
        protection = node.protection or scope.default_protection or RouteProtection.AUTHENTICATED

        if protection is RouteProtection.PUBLIC and not self._options.include_public:
            self._trace("Public routes excluded: %s", node.path)
            return None
        if protection is RouteProtection.ADMIN and not self._options.include_admin:
            self._trace("Admin routes excluded: %s", node.path)
            return None

        if node.guard is not None and not await self._guard_allows(node.guard, f"route '{node.path}'"):
            self._trace("Route guard failed: %s", node.path)
            return None

        if node.feature_flag is not None and not self._context.is_flag_enabled(node.feature_flag):
            self._trace("Feature flag disabled: %s (%s)", node.path, node.feature_flag)
            return None

        children = None
        if node.children is not None:
            children = await self._build_all(node.children, scope)

        return BuiltRoute(
            path=join_path(scope.base_path, node.path),
            protection=protection,
            layout=node.layout or scope.default_layout or RouteLayout.APP,
            element=transform_element(node.element, self._boundary),
            error_element=transform_element(node.error_element, self._boundary),
            index=node.index,
            children=children,
            definition=node,
            source_id=scope.source_id,
        )

    async def _build_all(self, nodes: Iterable[RouteNode], scope: RouteScope) -> list[BuiltRoute]:
        built: list[BuiltRoute] = []
        for node in nodes:
            route = await self.build_route_async(node, scope)
            if route is not None:
                built.append(route)
        return built

    async def build_route_tree_async(
        self,
        modules: Iterable[ModuleRouteConfig],
        verticals: Iterable[VerticalRouteConfig],
    ) -> RouteTree:
        """Partition every surviving top-level route by its effective tier."""
        tree = RouteTree()
        for route in await self._build_everything(modules, verticals):
            tree.add(route)
        return tree

    async def _build_everything(
        self,
        modules: Iterable[ModuleRouteConfig],
        verticals: Iterable[VerticalRouteConfig],
    ) -> list[BuiltRoute]:
        routes = await self.build_from_modules_async(modules)
        for vertical in verticals:
            routes.extend(await self.build_from_vertical_async(vertical))
        return routes

    # ----- Sync API -----

    def build_from_modules(self, modules: Iterable[ModuleRouteConfig]) -> list[BuiltRoute]:
        return _run_sync(self.build_from_modules_async(modules))

    def build_from_vertical(self, vertical: VerticalRouteConfig) -> list[BuiltRoute]:
        return _run_sync(self.build_from_vertical_async(vertical))

    def build_route(self, node: RouteNode, scope: RouteScope | None = None) -> BuiltRoute | None:
        return _run_sync(self.build_route_async(node, scope))

    def build_route_tree(
        self,
        modules: Iterable[ModuleRouteConfig],
        verticals: Iterable[VerticalRouteConfig],
    ) -> RouteTree:
        return _run_sync(self.build_route_tree_async(modules, verticals))


async def build_dynamic_routes_async(
    modules: Iterable[ModuleRouteConfig],
    verticals: Iterable[VerticalRouteConfig],
    options: RouteBuilderOptions | None = None,
    boundary: BoundaryFactory | None = None,
) -> list[BuiltRoute]:
    """Module routes followed by each vertical's routes, with a fresh builder."""
    return await RouteBuilder(options, boundary)._build_everything(modules, verticals)


def build_dynamic_routes(
    modules: Iterable[ModuleRouteConfig],
    verticals: Iterable[VerticalRouteConfig],
    options: RouteBuilderOptions | None = None,
    boundary: BoundaryFactory | None = None,
) -> list[BuiltRoute]:
    return _run_sync(build_dynamic_routes_async(modules, verticals, options, boundary))


def get_route_stats(routes: Iterable[BuiltRoute]) -> dict[str, Any]:
    """Counts over a built route forest, descendants included.

    ``total`` counts top-level routes only; the per-key counters cover every
    route in the forest.
    """
    top_level = list(routes)
    by_protection: Counter[str] = Counter()
    by_layout: Counter[str] = Counter()
    by_source: Counter[str] = Counter()
    lazy = 0
    with_guards = 0

    for top in top_level:
        for route in top.walk():
            by_protection[route.protection.value] += 1
            by_layout[route.layout.value] += 1
            by_source[route.source_id or "unknown"] += 1
            definition = route.definition
            if definition is None:
                continue
            if definition.guard is not None:
                with_guards += 1
            if definition.chunk_name or is_deferred(definition.element):
                lazy += 1

    return {
        "total": len(top_level),
        "by_protection": dict(by_protection),
        "by_layout": dict(by_layout),
        "by_source": dict(by_source),
        "lazy": lazy,
        "with_guards": with_guards,
    }
