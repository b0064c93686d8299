"""Per-request module context."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable

__all__ = ["ModuleContext", "has_any_permission"]


def has_any_permission(required: Iterable[str] | None, granted: Iterable[str]) -> bool:
    """OR-check: True if nothing is required or at least one requirement is granted."""
    if not required:
        return True
    granted_set = set(granted)
    return any(permission in granted_set for permission in required)


@dataclass(frozen=True)
class ModuleContext:
    """Read-only snapshot of the tenant, permissions and flags for one request.

    The same object is handed to unit ``is_enabled`` predicates and to route
    guards. ``user``, ``role``, ``path`` and ``query`` are only populated when the
    host evaluates guards that need them.
    """

    tenant_id: str = ""
    business_unit_id: str = ""
    permissions: list[str] = field(default_factory=list)
    feature_flags: dict[str, bool] = field(default_factory=dict)
    config: dict[str, Any] | None = None
    user: Any = None
    role: str | None = None
    path: str = ""
    query: dict[str, str] = field(default_factory=dict)

    def has_any_permission(self, required: Iterable[str] | None) -> bool:
        return has_any_permission(required, self.permissions)

    def is_flag_enabled(self, flag: str) -> bool:
        """Flag lookup against this context only; absent flags are disabled."""
        return bool(self.feature_flags.get(flag, False))

    def with_changes(self, **changes: Any) -> ModuleContext:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
