"""composekit registry system.

Provides the core, vertical and legacy unit registries, registration results
and unit shape validation.

Usage::

    from composekit.registry import CoreRegistry, VerticalRegistry

    core = CoreRegistry(flags=store)
    core.register(inventory_unit)
    verticals = VerticalRegistry(core, flags=store)
    verticals.register(rental_vertical)
    core.lock()
    verticals.lock()
"""

from __future__ import annotations

from composekit.registry.base import UnitRegistry, sort_navigation, transform_route
from composekit.registry.core import CoreRegistry
from composekit.registry.legacy import LegacyRegistry
from composekit.registry.types import (
    ActiveVerticalInfo,
    CoreRegistrationResult,
    DependencyCheck,
    RegistrationResult,
    VerticalRegistrationResult,
)
from composekit.registry.validation import coerce_unit, validate_unit
from composekit.registry.vertical import VerticalRegistry

__all__ = [
    "ActiveVerticalInfo",
    "CoreRegistrationResult",
    "CoreRegistry",
    "DependencyCheck",
    "LegacyRegistry",
    "RegistrationResult",
    "UnitRegistry",
    "VerticalRegistrationResult",
    "VerticalRegistry",
    "coerce_unit",
    "sort_navigation",
    "transform_route",
    "validate_unit",
]
