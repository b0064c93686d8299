"""Tests for the navigation builder and its tree helpers."""

from __future__ import annotations

from typing import Callable

from composekit.context import ModuleContext
from composekit.module import CoreUnit, LegacyUnit, NavigationItem, VerticalUnit
from composekit.navigation import (
    NavigationBuilder,
    filter_by_permissions,
    find_by_path,
    flatten,
    get_breadcrumbs,
    sort_by_order,
)
from composekit.registry.core import CoreRegistry
from composekit.registry.legacy import LegacyRegistry
from composekit.registry.vertical import VerticalRegistry


def _item(item_id: str, **kwargs: object) -> NavigationItem:
    return NavigationItem(id=item_id, label=item_id.upper(), **kwargs)


def _three_levels() -> list[NavigationItem]:
    c = _item("c", path="/c")
    b = _item("b", path="/b", children=[c])
    a = _item("a", children=[b])
    return [_item("x", path="/x"), a]


class TestFilterByPermissions:
    def test_or_semantics(self) -> None:
        items = [_item("ab", permissions=["a", "b"])]
        assert [i.id for i in filter_by_permissions(items, ["b"])] == ["ab"]
        assert filter_by_permissions(items, ["c"]) == []

    def test_unrestricted_parent_still_filters_children(self) -> None:
        """Children are filtered even when the parent declares no permissions."""
        parent = _item("p", children=[_item("open"), _item("secret", permissions=["admin"])])
        result = filter_by_permissions([parent], [])
        assert [c.id for c in result[0].children] == ["open"]

    def test_hidden_parent_hides_subtree(self) -> None:
        parent = _item("p", permissions=["admin"], children=[_item("child")])
        assert filter_by_permissions([parent], ["user"]) == []

    def test_input_not_mutated(self) -> None:
        """Filtering the same tree for two contexts gives independent results."""
        parent = _item("p", children=[_item("open"), _item("secret", permissions=["admin"])])
        tree = [parent]
        as_user = filter_by_permissions(tree, [])
        as_admin = filter_by_permissions(tree, ["admin"])
        assert len(parent.children) == 2
        assert len(as_user[0].children) == 1
        assert as_admin[0] is parent

    def test_grandchild_change_propagates(self) -> None:
        tree = [_item("a", children=[_item("b", children=[_item("c", permissions=["x"])])])]
        result = filter_by_permissions(tree, [])
        assert result[0].children[0].children == []


class TestSortByOrder:
    def test_stable_with_missing_orders(self) -> None:
        """Orders [None, 1, None, 0] sort to [0, 1, None, None] keeping None order."""
        items = [_item("u1"), _item("one", order=1), _item("u2"), _item("zero", order=0)]
        assert [i.id for i in sort_by_order(items)] == ["zero", "one", "u1", "u2"]

    def test_children_sorted(self) -> None:
        parent = _item("p", children=[_item("late", order=5), _item("early", order=1)])
        result = sort_by_order([parent])
        assert [c.id for c in result[0].children] == ["early", "late"]
        assert [c.id for c in parent.children] == ["late", "early"]


class TestTreeHelpers:
    def test_find_by_path(self) -> None:
        tree = _three_levels()
        assert find_by_path(tree, "/c").id == "c"
        assert find_by_path(tree, "/missing") is None

    def test_find_by_path_first_match(self) -> None:
        tree = [_item("first", path="/dup"), _item("second", path="/dup")]
        assert find_by_path(tree, "/dup").id == "first"

    def test_breadcrumbs(self) -> None:
        """A > B > C with C at /c gives [A, B, C]."""
        crumbs = get_breadcrumbs(_three_levels(), "/c")
        assert [i.id for i in crumbs] == ["a", "b", "c"]

    def test_breadcrumbs_not_found(self) -> None:
        assert get_breadcrumbs(_three_levels(), "/zzz") == []

    def test_flatten_pre_order(self) -> None:
        assert [i.id for i in flatten(_three_levels())] == ["x", "a", "b", "c"]


class TestNavigationBuilder:
    def test_vertical_then_legacy_filtered_and_sorted(
        self,
        core_registry: CoreRegistry,
        vertical_registry: VerticalRegistry,
        legacy_registry: LegacyRegistry,
        make_core_unit: Callable[..., CoreUnit],
        make_vertical_unit: Callable[..., VerticalUnit],
        make_legacy_unit: Callable[..., LegacyUnit],
        make_context: Callable[..., ModuleContext],
    ) -> None:
        core_registry.register(make_core_unit(navigation=[_item("inventory", order=10)]))
        vertical_registry.register(
            make_vertical_unit(
                navigation=[
                    _item("dashboard", order=0),
                    _item("admin-only", order=1, permissions=["admin"]),
                ]
            )
        )
        legacy_registry.register(make_legacy_unit(navigation=[_item("reports", order=5), _item("misc")]))

        builder = NavigationBuilder(vertical_registry, legacy_registry)
        tree = builder.build_navigation(make_context(flags={"module.reports": True}))
        assert [i.id for i in tree] == ["dashboard", "reports", "inventory", "misc"]

    def test_without_legacy_registry(
        self,
        vertical_registry: VerticalRegistry,
        make_vertical_unit: Callable[..., VerticalUnit],
        make_context: Callable[..., ModuleContext],
    ) -> None:
        vertical_registry.register(make_vertical_unit())
        builder = NavigationBuilder(vertical_registry)
        assert [i.id for i in builder.build_navigation(make_context())] == ["rental"]

    def test_helpers_exposed_on_builder(self) -> None:
        assert NavigationBuilder.find_by_path(_three_levels(), "/b").id == "b"
        assert [i.id for i in NavigationBuilder.flatten([_item("a")])] == ["a"]
