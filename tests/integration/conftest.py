"""Shared fixtures for integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from composekit.module import CoreUnit, NavigationItem, RouteNode, VerticalUnit


# --- Config file templates ---

FLAGS_YAML = """\
flags:
  module.reports: true
  feature.contract-signatures: true
"""

CONFIG_YAML = """\
composition:
  migration_mode: false
routes:
  include_admin: true
feature_flags:
  defaults:
    module.inventory: true
  path: {flags_path}
"""


@pytest.fixture
def inventory_unit() -> CoreUnit:
    return CoreUnit(
        id="inventory",
        name="Inventory",
        category="inventory",
        routes=[RouteNode(path="/inventory")],
        navigation=[NavigationItem(id="inventory", label="Inventory", path="/inventory", order=10)],
    )


@pytest.fixture
def rental_vertical() -> VerticalUnit:
    return VerticalUnit(
        id="rental",
        name="Equipment Rental",
        industry="equipment-rental",
        required_core_modules=["inventory"],
        routes=[RouteNode(path="/rental/dashboard")],
        navigation=[NavigationItem(id="rental-dashboard", label="Dashboard", path="/rental/dashboard", order=0)],
        dashboard="RentalDashboard",
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    flags_path = tmp_path / "flags.yaml"
    flags_path.write_text(FLAGS_YAML)
    config_path = tmp_path / "composekit.yaml"
    config_path.write_text(CONFIG_YAML.format(flags_path=flags_path))
    return config_path
