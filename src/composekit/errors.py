"""Error hierarchy for the composekit framework."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "CompositionError",
    "ConfigNotFoundError",
    "ConfigError",
    "FeatureFlagError",
    "RegistryLockedError",
    "UnitValidationError",
    "DuplicateUnitError",
    "MissingCoreDependencyError",
    "ErrorCodes",
]


class CompositionError(Exception):
    """Base error for all composekit errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(CompositionError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(CompositionError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class FeatureFlagError(CompositionError):
    """Raised when a feature flag source is malformed."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="FEATURE_FLAG_INVALID", message=message, **kwargs)


class RegistryLockedError(CompositionError):
    """Raised when a unit is registered after its registry was locked.

    This is a programmer error and is never folded into a registration result.
    """

    def __init__(self, registry: str, unit_id: str, **kwargs: Any) -> None:
        super().__init__(
            code="REGISTRY_LOCKED",
            message=f"Cannot register '{unit_id}': {registry} registry is locked",
            details={"registry": registry, "unit_id": unit_id},
            **kwargs,
        )

    @property
    def registry(self) -> str:
        """Kind of registry that rejected the registration."""
        return self.details["registry"]

    @property
    def unit_id(self) -> str:
        """The unit ID that was rejected."""
        return self.details["unit_id"]


class UnitValidationError(CompositionError):
    """Raised when a unit does not have the expected shape."""

    def __init__(self, unit_id: str, errors: list[str], **kwargs: Any) -> None:
        label = unit_id or "<unknown>"
        super().__init__(
            code="UNIT_INVALID",
            message=f"Unit '{label}' is malformed: {'; '.join(errors)}",
            details={"unit_id": unit_id, "errors": list(errors)},
            **kwargs,
        )

    @property
    def errors(self) -> list[str]:
        """Individual validation failures."""
        return self.details["errors"]


class DuplicateUnitError(CompositionError):
    """Raised when a unit ID is already present in the registry."""

    def __init__(self, registry: str, unit_id: str, **kwargs: Any) -> None:
        super().__init__(
            code="UNIT_DUPLICATE",
            message=f"Unit '{unit_id}' is already registered in the {registry} registry",
            details={"registry": registry, "unit_id": unit_id},
            **kwargs,
        )


class MissingCoreDependencyError(CompositionError):
    """Raised when a vertical requires core units that are not registered."""

    def __init__(self, vertical_id: str, missing: list[str], **kwargs: Any) -> None:
        super().__init__(
            code="MISSING_CORE_DEPENDENCY",
            message=(
                f"Vertical '{vertical_id}' requires core units that don't exist: "
                f"{', '.join(missing)}"
            ),
            details={"vertical_id": vertical_id, "missing": list(missing)},
            **kwargs,
        )

    @property
    def missing(self) -> list[str]:
        """Required core unit IDs that could not be resolved."""
        return self.details["missing"]


class ErrorCodes:
    """All framework error codes as constants.

    Example:
        if result.error and result.error.code == ErrorCodes.UNIT_DUPLICATE:
            skip_package()
    """

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    FEATURE_FLAG_INVALID = "FEATURE_FLAG_INVALID"
    REGISTRY_LOCKED = "REGISTRY_LOCKED"
    UNIT_INVALID = "UNIT_INVALID"
    UNIT_DUPLICATE = "UNIT_DUPLICATE"
    MISSING_CORE_DEPENDENCY = "MISSING_CORE_DEPENDENCY"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
