"""View references: deferred-load tokens and the loading boundary that wraps them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

__all__ = ["DEFAULT_LOADING_FALLBACK", "LazyView", "LoadingBoundary", "is_deferred", "transform_element"]

logger = logging.getLogger(__name__)

DEFAULT_LOADING_FALLBACK = "Loading..."


@dataclass(frozen=True)
class LazyView:
    """Opaque token for a view that is loaded on first render.

    The loader is never called by composekit; the host's renderer resolves it
    inside the boundary the route is wrapped in.
    """

    loader: Callable[[], Any]
    chunk_name: str | None = None

    def load(self) -> Any:
        return self.loader()


@dataclass(frozen=True)
class LoadingBoundary:
    """Default async boundary: the deferred view plus what to show meanwhile."""

    view: LazyView
    fallback: Any = DEFAULT_LOADING_FALLBACK


BoundaryFactory = Callable[[LazyView], Any]


def is_deferred(element: Any) -> bool:
    return isinstance(element, LazyView)


def transform_element(element: Any, boundary: BoundaryFactory | None = None) -> Any:
    """Wrap a deferred view in a loading boundary; pass everything else through.

    Args:
        element: A resolved renderable, a LazyView, or None.
        boundary: Host async-boundary primitive. Defaults to LoadingBoundary.
    """
    if element is None or not is_deferred(element):
        return element
    factory = boundary or LoadingBoundary
    logger.debug("Wrapping deferred view %s in loading boundary", element.chunk_name or element.loader)
    return factory(element)
