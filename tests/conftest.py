"""Shared test fixtures for the composekit test suite."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from composekit.context import ModuleContext
from composekit.feature_flags import FeatureFlagStore
from composekit.module import CoreUnit, LegacyUnit, NavigationItem, RouteNode, VerticalUnit
from composekit.registry.core import CoreRegistry
from composekit.registry.legacy import LegacyRegistry
from composekit.registry.vertical import VerticalRegistry


# === Unit factories ===


def _base_fields(unit_id: str) -> dict[str, Any]:
    return {
        "id": unit_id,
        "name": unit_id.replace("-", " ").title(),
        "routes": [RouteNode(path=f"/{unit_id}")],
        "navigation": [NavigationItem(id=unit_id, label=unit_id.title(), path=f"/{unit_id}")],
    }


@pytest.fixture
def make_core_unit() -> Callable[..., CoreUnit]:
    """Factory for valid core units; keyword arguments override fields."""

    def _make(unit_id: str = "inventory", **overrides: Any) -> CoreUnit:
        data = {**_base_fields(unit_id), "category": "inventory", **overrides}
        return CoreUnit(**data)

    return _make


@pytest.fixture
def make_vertical_unit() -> Callable[..., VerticalUnit]:
    """Factory for valid vertical units requiring ``inventory`` by default."""

    def _make(unit_id: str = "rental", **overrides: Any) -> VerticalUnit:
        data = {
            **_base_fields(unit_id),
            "industry": "equipment-rental",
            "required_core_modules": ["inventory"],
            **overrides,
        }
        return VerticalUnit(**data)

    return _make


@pytest.fixture
def make_legacy_unit() -> Callable[..., LegacyUnit]:
    def _make(unit_id: str = "reports", **overrides: Any) -> LegacyUnit:
        return LegacyUnit(**{**_base_fields(unit_id), **overrides})

    return _make


# === Context ===


@pytest.fixture
def make_context() -> Callable[..., ModuleContext]:
    """Factory for contexts; ``flags`` becomes the context's feature flag map."""

    def _make(
        permissions: list[str] | None = None,
        flags: dict[str, bool] | None = None,
        **kwargs: Any,
    ) -> ModuleContext:
        kwargs.setdefault("tenant_id", "tenant-1")
        kwargs.setdefault("business_unit_id", "bu-1")
        return ModuleContext(
            permissions=list(permissions or []),
            feature_flags=dict(flags or {}),
            **kwargs,
        )

    return _make


# === Registries ===


@pytest.fixture
def flags() -> FeatureFlagStore:
    return FeatureFlagStore()


@pytest.fixture
def core_registry(flags: FeatureFlagStore) -> CoreRegistry:
    return CoreRegistry(flags=flags)


@pytest.fixture
def vertical_registry(core_registry: CoreRegistry, flags: FeatureFlagStore) -> VerticalRegistry:
    return VerticalRegistry(core_registry, flags=flags)


@pytest.fixture
def legacy_registry(flags: FeatureFlagStore) -> LegacyRegistry:
    return LegacyRegistry(flags=flags)
