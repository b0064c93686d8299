"""Tests for the composekit public API surface.

Verifies that all expected names are importable from the top-level
``composekit`` package and that ``__all__`` is comprehensive.
"""

import re

import composekit


class TestPublicAPIImports:
    """Every public component must be importable from ``import composekit``."""

    def test_composition_importable(self):
        from composekit import AppComposition, BootstrapReport

        assert AppComposition is not None
        assert BootstrapReport is not None

    def test_registries_importable(self):
        from composekit import CoreRegistry, LegacyRegistry, VerticalRegistry

        assert CoreRegistry is not None
        assert VerticalRegistry is not None
        assert LegacyRegistry is not None

    def test_builders_importable(self):
        from composekit import NavigationBuilder, RouteBuilder

        assert NavigationBuilder is not None
        assert RouteBuilder is not None

    def test_unit_models_importable(self):
        from composekit import CoreUnit, LegacyUnit, VerticalUnit

        assert CoreUnit is not None
        assert VerticalUnit is not None
        assert LegacyUnit is not None

    def test_errors_share_base(self):
        from composekit import (
            CompositionError,
            DuplicateUnitError,
            MissingCoreDependencyError,
            RegistryLockedError,
            UnitValidationError,
        )

        for error_cls in (DuplicateUnitError, MissingCoreDependencyError, RegistryLockedError, UnitValidationError):
            assert issubclass(error_cls, CompositionError)

    def test_submodule_only_names_not_in_top_level(self):
        assert "UnitRegistry" in composekit.__all__
        assert "RouteScope" not in composekit.__all__
        assert "join_path" not in composekit.__all__


class TestVersion:
    def test_version_is_set(self):
        assert isinstance(composekit.__version__, str)
        assert re.match(r"^\d+\.\d+\.\d+", composekit.__version__)


class TestPublicAPIAll:
    """Verify __all__ is comprehensive and matches actual exports."""

    EXPECTED_NAMES = {
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
    }

    def test_all_contains_all_expected_names(self):
        actual = set(composekit.__all__)
        missing = self.EXPECTED_NAMES - actual
        assert not missing, f"Missing from __all__: {missing}"

    def test_all_has_no_unexpected_extras(self):
        actual = set(composekit.__all__)
        extra = actual - self.EXPECTED_NAMES
        assert not extra, f"Unexpected names in __all__: {extra}"

    def test_all_names_are_importable(self):
        _MISSING = object()
        for name in composekit.__all__:
            obj = getattr(composekit, name, _MISSING)
            assert obj is not _MISSING, f"Name '{name}' listed in __all__ but not found on module"
