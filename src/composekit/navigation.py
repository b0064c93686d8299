"""Navigation builder: merges, filters and orders the navigation forest for a context."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Iterator

from composekit.context import ModuleContext, has_any_permission
from composekit.module import NavigationItem
from composekit.registry.base import sort_navigation

if TYPE_CHECKING:
    from composekit.registry.legacy import LegacyRegistry
    from composekit.registry.vertical import VerticalRegistry

logger = logging.getLogger(__name__)

__all__ = [
    "NavigationBuilder",
    "filter_by_permissions",
    "find_by_path",
    "flatten",
    "get_breadcrumbs",
    "sort_by_order",
]


def _changed(new: list[NavigationItem], old: list[NavigationItem]) -> bool:
    return len(new) != len(old) or any(a is not b for a, b in zip(new, old))


def filter_by_permissions(items: Iterable[NavigationItem], permissions: Iterable[str]) -> list[NavigationItem]:
    """Drop entries the permissions do not reach, recursing into surviving entries.

    Returns new nodes where children changed; the input forest is left untouched.
    """
    granted = list(permissions)
    result: list[NavigationItem] = []
    for item in items:
        if not has_any_permission(item.permissions, granted):
            continue
        if item.children:
            children = filter_by_permissions(item.children, granted)
            if _changed(children, item.children):
                item = item.model_copy(update={"children": children})
        result.append(item)
    return result


def sort_by_order(items: Iterable[NavigationItem]) -> list[NavigationItem]:
    """Stable sort of the forest and every subtree by ``order`` (missing sorts last)."""
    result: list[NavigationItem] = []
    for item in sort_navigation(items):
        if item.children:
            children = sort_by_order(item.children)
            if _changed(children, item.children):
                item = item.model_copy(update={"children": children})
        result.append(item)
    return result


def _walk(items: Iterable[NavigationItem]) -> Iterator[NavigationItem]:
    for item in items:
        yield item
        if item.children:
            yield from _walk(item.children)


def find_by_path(items: Iterable[NavigationItem], path: str) -> NavigationItem | None:
    """Depth-first search for the first entry whose path equals ``path``."""
    return next((item for item in _walk(items) if item.path == path), None)


def get_breadcrumbs(items: Iterable[NavigationItem], path: str) -> list[NavigationItem]:
    """Return the ancestor chain plus the entry matching ``path``, or [] if none matches."""
    for item in items:
        if item.path == path:
            return [item]
        if item.children:
            trail = get_breadcrumbs(item.children, path)
            if trail:
                return [item, *trail]
    return []


def flatten(items: Iterable[NavigationItem]) -> list[NavigationItem]:
    """Pre-order list of every entry, ancestors before descendants."""
    return list(_walk(items))


class NavigationBuilder:
    """Builds the navigation shown for a context.

    The active vertical's navigation (which already includes its required core
    units) comes first, followed by legacy unit navigation.
    """

    def __init__(self, vertical_registry: VerticalRegistry, legacy_registry: LegacyRegistry | None = None) -> None:
        self._verticals = vertical_registry
        self._legacy = legacy_registry

    def build_navigation(self, context: ModuleContext) -> list[NavigationItem]:
        vertical_items = self._verticals.get_navigation(context)
        legacy_items = self._legacy.get_navigation(context) if self._legacy is not None else []

        filtered = filter_by_permissions([*vertical_items, *legacy_items], context.permissions)
        tree = sort_by_order(filtered)
        logger.debug(
            "Built navigation with %d top-level entries for tenant %s",
            len(tree),
            context.tenant_id,
        )
        return tree

    find_by_path = staticmethod(find_by_path)
    get_breadcrumbs = staticmethod(get_breadcrumbs)
    flatten = staticmethod(flatten)
