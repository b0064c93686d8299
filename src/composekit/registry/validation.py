"""Unit shape validation for the registry system."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from composekit.errors import UnitValidationError
from composekit.module import Unit

__all__ = ["candidate_field", "candidate_id", "coerce_unit", "validate_unit"]

U = TypeVar("U", bound=Unit)


def candidate_field(candidate: Any, name: str, default: Any = None) -> Any:
    """Read a field from a unit candidate that may be a mapping or an object."""
    if isinstance(candidate, Mapping):
        return candidate.get(name, default)
    return getattr(candidate, name, default)


def candidate_id(candidate: Any) -> str:
    value = candidate_field(candidate, "id")
    return value if isinstance(value, str) else ""


def _format_errors(exc: ValidationError) -> list[str]:
    errors: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "<unit>"
        errors.append(f"{loc}: {err['msg']}")
    return errors


def coerce_unit(model: type[U], candidate: Any) -> U:
    """Turn a unit model, mapping or duck-typed object into a validated ``model``.

    Instances of ``model`` are returned unchanged. Instances of a different unit
    model are re-validated field by field, so a vertical handed to the core
    registry fails on its type tag.

    Raises:
        UnitValidationError: If the candidate does not have the expected shape.
    """
    if isinstance(candidate, model):
        return candidate

    unit_id = candidate_id(candidate)
    try:
        if isinstance(candidate, BaseModel):
            return model.model_validate(dict(candidate))
        if isinstance(candidate, Mapping):
            return model.model_validate(dict(candidate))
        return model.model_validate(candidate, from_attributes=True)
    except ValidationError as e:
        raise UnitValidationError(unit_id=unit_id, errors=_format_errors(e), cause=e) from e


def validate_unit(model: type[Unit], candidate: Any) -> list[str]:
    """Validate that ``candidate`` has the shape of ``model``.

    Returns a list of validation error strings. Empty list means valid.
    """
    try:
        coerce_unit(model, candidate)
    except UnitValidationError as e:
        return e.errors
    return []
