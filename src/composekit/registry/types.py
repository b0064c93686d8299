"""Registry types: registration results, dependency checks and active vertical info."""

from __future__ import annotations

from dataclasses import dataclass, field

from composekit.errors import CompositionError

__all__ = [
    "ActiveVerticalInfo",
    "CoreRegistrationResult",
    "DependencyCheck",
    "RegistrationResult",
    "VerticalRegistrationResult",
]


@dataclass
class RegistrationResult:
    """Outcome of a single ``register()`` call.

    ``routes`` and ``navigation_items`` count the unit's top-level entries and
    are zero on failure.
    """

    id: str
    success: bool
    routes: int = 0
    navigation_items: int = 0
    error: CompositionError | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass
class CoreRegistrationResult(RegistrationResult):
    category: str | None = None


@dataclass
class VerticalRegistrationResult(RegistrationResult):
    industry: str | None = None
    required_core_modules: list[str] = field(default_factory=list)
    missing_core_modules: list[str] = field(default_factory=list)


@dataclass
class DependencyCheck:
    """Result of checking a set of core unit IDs against the core registry."""

    valid: bool
    missing: list[str] = field(default_factory=list)


@dataclass
class ActiveVerticalInfo:
    """Summary of the vertical that is active for a context."""

    vertical_id: str
    name: str
    industry: str
    enabled_core_modules: list[str] = field(default_factory=list)
    dashboard_path: str | None = None
