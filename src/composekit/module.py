"""Registration unit model: navigation entries, route definitions and unit shapes."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from composekit.routing.types import ModuleRouteConfig, VerticalRouteConfig

__all__ = [
    "DEFAULT_NAV_ORDER",
    "CoreCategory",
    "CoreUnit",
    "Industry",
    "LegacyUnit",
    "NavigationItem",
    "RouteLayout",
    "RouteMeta",
    "RouteNode",
    "RouteProtection",
    "Unit",
    "VerticalUnit",
]

DEFAULT_NAV_ORDER = 999

CoreCategory = Literal["inventory", "maintenance", "clients", "purchases", "other"]
Industry = Literal["construction", "equipment-rental", "fleet", "healthcare", "other"]


class RouteProtection(str, Enum):
    """Coarse access tier of a route."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"
    OWNER = "owner"


class RouteLayout(str, Enum):
    """Shell layout a route renders inside."""

    NONE = "none"
    APP = "app"
    AUTH = "auth"
    ADMIN = "admin"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class NavigationItem(_FrozenModel):
    """One entry of the navigation forest.

    Attributes:
        id: Entry identifier, unique among siblings.
        label: Display text.
        path: Target path; group headers usually have none.
        icon: Icon name understood by the shell.
        children: Nested entries.
        order: Sort key; entries without one sort after all ordered entries.
        permissions: Visible if the context holds at least one of these.
        badge: Supplier of a dynamic badge value, evaluated by the shell.
    """

    id: str = Field(min_length=1)
    label: str
    path: str | None = None
    icon: str | None = None
    children: list[NavigationItem] | None = None
    order: int | None = None
    permissions: list[str] | None = None
    badge: Callable[[], Any] | None = None

    @property
    def effective_order(self) -> int:
        return DEFAULT_NAV_ORDER if self.order is None else self.order

    def resolve_badge(self) -> Any:
        """Evaluate the badge supplier, or None if there is none."""
        return self.badge() if self.badge is not None else None


class RouteMeta(_FrozenModel):
    """Route metadata for titles, breadcrumbs and menus. Extra keys are kept."""

    model_config = ConfigDict(frozen=True, extra="allow")

    title: str | None = None
    description: str | None = None
    breadcrumb: str | None = None
    icon: str | None = None
    hidden: bool = False


class RouteNode(_FrozenModel):
    """Abstract route definition as declared by a unit.

    ``element`` and ``error_element`` are either resolved renderables or
    :class:`~composekit.views.LazyView` tokens. ``guard`` receives the
    :class:`~composekit.context.ModuleContext` and returns a bool or an
    awaitable resolving to one.
    """

    path: str = ""
    element: Any = None
    index: bool = False
    children: list[RouteNode] | None = None
    protection: RouteProtection | None = None
    layout: RouteLayout | None = None
    permissions: list[str] | None = None
    guard: Callable[..., Any] | None = None
    feature_flag: str | None = None
    meta: RouteMeta | None = None
    error_element: Any = None
    redirect_on_fail: str | None = None
    chunk_name: str | None = None


class Unit(_FrozenModel):
    """Shape shared by core, vertical and legacy units.

    ``base_path``, ``default_protection``, ``default_layout`` and ``guard`` describe
    the unit as a route container for the route builder.
    """

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    version: str | None = None
    routes: list[RouteNode]
    navigation: list[NavigationItem]
    permissions: list[str] | None = None
    is_enabled: Callable[..., Any] | None = None
    on_init: Callable[[], Any] | None = None
    on_destroy: Callable[[], Any] | None = None
    base_path: str = ""
    default_protection: RouteProtection | None = None
    default_layout: RouteLayout | None = None
    guard: Callable[..., Any] | None = None

    @field_validator("id", "name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    def route_config(self) -> ModuleRouteConfig:
        """Describe this unit as a route container for the route builder."""
        from composekit.routing.types import ModuleRouteConfig

        return ModuleRouteConfig.from_unit(self)


class CoreUnit(Unit):
    """Horizontal, industry-agnostic capability."""

    type: Literal["core"] = "core"
    category: CoreCategory
    icon: str | None = None
    priority: int | None = None


class VerticalUnit(Unit):
    """Industry orchestration over a set of core units.

    Emptiness of ``required_core_modules`` is checked by the vertical registry,
    after the duplicate check, so it is not a shape constraint here.
    """

    type: Literal["vertical"] = "vertical"
    industry: Industry
    required_core_modules: list[str]
    optional_core_modules: list[str] | None = None
    dashboard: Any = None
    config_schema: dict[str, Any] | None = None

    def route_config(self) -> VerticalRouteConfig:
        from composekit.routing.types import VerticalRouteConfig

        return VerticalRouteConfig.from_unit(self)


class LegacyUnit(Unit):
    """Standalone unit that predates the core/vertical split."""

    type: Literal["legacy"] = "legacy"
    dependencies: list[str] | None = None
    vertical: str | None = None


NavigationItem.model_rebuild()
RouteNode.model_rebuild()
