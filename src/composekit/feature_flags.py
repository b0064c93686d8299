"""Process-wide feature flag store.

One ``module.<unit_id>`` flag per capability unit decides whether the whole unit
is reachable; any other flag name can gate individual routes through
``RouteNode.feature_flag``.
"""

from __future__ import annotations

import inspect
import logging
import os
import threading
from typing import Any, Callable, Iterable, Mapping

import yaml

from composekit.context import ModuleContext
from composekit.errors import ConfigNotFoundError, FeatureFlagError

__all__ = [
    "DEFAULT_FEATURE_FLAGS",
    "FeatureFlagStore",
    "create_module_context",
    "module_flag_key",
]

logger = logging.getLogger(__name__)

DEFAULT_FEATURE_FLAGS: dict[str, bool] = {
    # Capability units
    "module.inventory": True,
    "module.clients": True,
    "module.purchases": True,
    "module.rental": True,
    # Feature toggles
    "feature.csv-import": True,
    "feature.pdf-generation": True,
    "feature.advanced-reporting": False,
    "feature.contract-signatures": False,
    # Experimental
    "experimental.ai-assistant": False,
    "experimental.mobile-app": False,
}


def module_flag_key(unit_id: str) -> str:
    """Flag name that enables or disables a whole unit."""
    return f"module.{unit_id}"


def _validate_flags(data: Any, source: str) -> dict[str, bool]:
    if not isinstance(data, Mapping):
        raise FeatureFlagError(f"Feature flags in {source} must be a mapping, got {type(data).__name__}")
    flags: dict[str, bool] = {}
    for key, value in data.items():
        if not isinstance(key, str) or not key:
            raise FeatureFlagError(f"Feature flag names in {source} must be non-empty strings")
        if not isinstance(value, bool):
            raise FeatureFlagError(f"Feature flag '{key}' in {source} must be a boolean, got {type(value).__name__}")
        flags[key] = value
    return flags


class FeatureFlagStore:
    """Key/value store of boolean flags with partial overwrite.

    Thread safety:
        Internally synchronized. Reads return snapshots.
    """

    def __init__(self, flags: Mapping[str, bool] | None = None) -> None:
        self._flags: dict[str, bool] = dict(DEFAULT_FEATURE_FLAGS if flags is None else flags)
        self._yaml_path: str | None = None
        self._lock = threading.Lock()

    @classmethod
    def load(cls, yaml_path: str, defaults: Mapping[str, bool] | None = None) -> FeatureFlagStore:
        """Build a store from ``defaults`` overlaid with the flags in a YAML file.

        The file is either a flat mapping of flag name to bool, or a mapping with
        a top-level ``flags`` key holding that mapping.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            FeatureFlagError: If the file is not valid YAML or a value is not a bool.
        """
        store = cls(flags=defaults)
        store.update(cls._read_file(yaml_path))
        store._yaml_path = yaml_path
        return store

    @staticmethod
    def _read_file(yaml_path: str) -> dict[str, bool]:
        if not os.path.isfile(yaml_path):
            raise ConfigNotFoundError(config_path=yaml_path)

        with open(yaml_path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise FeatureFlagError(f"Invalid YAML in {yaml_path}: {e}") from e

        if data is None:
            return {}
        if isinstance(data, dict) and "flags" in data:
            data = data["flags"] or {}
        return _validate_flags(data, yaml_path)

    def is_enabled(self, flag: str) -> bool:
        """Return the flag value; unknown flags are disabled."""
        with self._lock:
            return self._flags.get(flag, False)

    def is_module_enabled(self, unit_id: str) -> bool:
        return self.is_enabled(module_flag_key(unit_id))

    def has(self, flag: str) -> bool:
        with self._lock:
            return flag in self._flags

    def get_all(self) -> dict[str, bool]:
        """Return a copy of every flag."""
        with self._lock:
            return dict(self._flags)

    def update(self, updates: Mapping[str, bool]) -> None:
        """Overwrite the given flags, leaving all others untouched."""
        validated = _validate_flags(updates, "update")
        with self._lock:
            self._flags = {**self._flags, **validated}

    def reload(self) -> None:
        """Re-read the YAML file this store was loaded from.

        Raises FeatureFlagError if the store was not created via ``load()``.
        """
        with self._lock:
            yaml_path = self._yaml_path
        if yaml_path is None:
            raise FeatureFlagError("Cannot reload: feature flags were not loaded from a YAML file")
        self.update(self._read_file(yaml_path))

    async def load_for_tenant(
        self,
        tenant_id: str,
        loader: Callable[[str], Any] | None = None,
    ) -> None:
        """Refresh flags for a tenant.

        ``loader`` receives the tenant ID and returns (or resolves to) a partial
        flag mapping. Without a loader there is no tenant flag source yet and the
        call only logs.
        """
        if loader is None:
            logger.info("No tenant flag loader configured, keeping current flags for tenant %s", tenant_id)
            return

        logger.info("Loading feature flags for tenant %s", tenant_id)
        result = loader(tenant_id)
        if inspect.isawaitable(result):
            result = await result
        if result:
            self.update(result)

    def create_context(
        self,
        tenant_id: str,
        business_unit_id: str,
        permissions: Iterable[str],
        **kwargs: Any,
    ) -> ModuleContext:
        """Build a ModuleContext carrying a snapshot of this store's flags."""
        return ModuleContext(
            tenant_id=tenant_id,
            business_unit_id=business_unit_id,
            permissions=list(permissions),
            feature_flags=self.get_all(),
            **kwargs,
        )


def create_module_context(
    tenant_id: str,
    business_unit_id: str,
    permissions: Iterable[str],
    store: FeatureFlagStore | None = None,
    **kwargs: Any,
) -> ModuleContext:
    """Build a ModuleContext with flags from ``store`` (platform defaults if omitted)."""
    return (store or FeatureFlagStore()).create_context(tenant_id, business_unit_id, permissions, **kwargs)
