"""Example core unit: inventory tracking."""

from composekit import CoreUnit, LazyView, NavigationItem, RouteMeta, RouteNode


def _load_inventory_page():
    return "InventoryPage"


def _load_item_detail():
    return "ItemDetailPage"


inventory = CoreUnit(
    id="inventory",
    name="Inventory",
    description="Track items, stock levels and locations",
    version="1.0.0",
    category="inventory",
    icon="package",
    routes=[
        RouteNode(
            path="/inventory",
            element=LazyView(_load_inventory_page, chunk_name="inventory"),
            meta=RouteMeta(title="Inventory", breadcrumb="Inventory"),
            children=[
                RouteNode(path=":itemId", element=LazyView(_load_item_detail, chunk_name="inventory-item")),
            ],
        ),
        RouteNode(
            path="/inventory/import",
            element="CsvImportPage",
            feature_flag="feature.csv-import",
            permissions=["inventory:write"],
        ),
    ],
    navigation=[
        NavigationItem(
            id="inventory",
            label="Inventory",
            path="/inventory",
            icon="package",
            order=10,
            children=[
                NavigationItem(id="inventory-import", label="Import", path="/inventory/import", permissions=["inventory:write"]),
            ],
        ),
    ],
)
