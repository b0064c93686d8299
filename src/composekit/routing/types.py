"""Route builder types: options, route containers, built routes and the tier tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator

from composekit.context import ModuleContext
from composekit.module import RouteLayout, RouteNode, RouteProtection

if TYPE_CHECKING:
    from composekit.module import Unit, VerticalUnit

__all__ = [
    "BuiltRoute",
    "ModuleRouteConfig",
    "RouteBuilderOptions",
    "RouteScope",
    "RouteTree",
    "VerticalRouteConfig",
]


@dataclass(frozen=True)
class RouteBuilderOptions:
    """Builder-wide settings.

    Attributes:
        include_admin: Keep routes whose effective tier is admin.
        include_public: Keep routes whose effective tier is public.
        context: Context guards and feature flags are evaluated against.
            Defaults to an empty context, in which flag-gated routes are dropped.
        debug: Log per-route decisions at INFO instead of DEBUG.
    """

    include_admin: bool = False
    include_public: bool = True
    context: ModuleContext | None = None
    debug: bool = False


@dataclass
class ModuleRouteConfig:
    """Routes of one core or legacy unit plus the defaults they inherit."""

    module_id: str
    routes: list[RouteNode]
    base_path: str = ""
    default_protection: RouteProtection | None = None
    default_layout: RouteLayout | None = None
    module_guard: Callable[..., Any] | None = None

    @classmethod
    def from_unit(cls, unit: Unit) -> ModuleRouteConfig:
        return cls(
            module_id=unit.id,
            routes=list(unit.routes),
            base_path=unit.base_path,
            default_protection=unit.default_protection,
            default_layout=unit.default_layout,
            module_guard=unit.guard,
        )


@dataclass
class VerticalRouteConfig:
    """Routes authored by a vertical itself, outside its core units."""

    vertical_id: str
    routes: list[RouteNode]
    base_path: str = ""
    vertical_guard: Callable[..., Any] | None = None
    default_protection: RouteProtection = RouteProtection.AUTHENTICATED
    default_layout: RouteLayout = RouteLayout.APP

    @classmethod
    def from_unit(cls, unit: VerticalUnit) -> VerticalRouteConfig:
        return cls(
            vertical_id=unit.id,
            routes=list(unit.routes),
            base_path=unit.base_path,
            vertical_guard=unit.guard,
            default_protection=unit.default_protection or RouteProtection.AUTHENTICATED,
            default_layout=unit.default_layout or RouteLayout.APP,
        )


@dataclass(frozen=True)
class RouteScope:
    """Container defaults applied while building one unit's routes."""

    source_id: str | None = None
    base_path: str = ""
    default_protection: RouteProtection | None = None
    default_layout: RouteLayout | None = None


@dataclass
class BuiltRoute:
    """A route that survived every check, ready for the host router.

    ``protection`` and ``layout`` are the effective values after defaults were
    applied; ``definition`` is the node it was built from.
    """

    path: str
    protection: RouteProtection = RouteProtection.AUTHENTICATED
    layout: RouteLayout = RouteLayout.APP
    element: Any = None
    error_element: Any = None
    index: bool = False
    children: list[BuiltRoute] | None = None
    definition: RouteNode | None = None
    source_id: str | None = None

    def walk(self) -> Iterator[BuiltRoute]:
        """Yield this route and every descendant, pre-order."""
        yield self
        for child in self.children or []:
            yield from child.walk()


@dataclass
class RouteTree:
    """Top-level built routes partitioned by effective protection tier."""

    public: list[BuiltRoute] = field(default_factory=list)
    authenticated: list[BuiltRoute] = field(default_factory=list)
    admin: list[BuiltRoute] = field(default_factory=list)
    owner: list[BuiltRoute] = field(default_factory=list)

    def add(self, route: BuiltRoute) -> None:
        self.bucket(route.protection).append(route)

    def bucket(self, protection: RouteProtection) -> list[BuiltRoute]:
        return getattr(self, RouteProtection(protection).value)

    @property
    def total(self) -> int:
        return len(self.public) + len(self.authenticated) + len(self.admin) + len(self.owner)
