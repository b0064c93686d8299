"""Example vertical unit: equipment rental built on inventory."""

from composekit import NavigationItem, RouteNode, VerticalUnit


def _rental_dashboard():
    return "RentalDashboard"


rental = VerticalUnit(
    id="rental",
    name="Equipment Rental",
    industry="equipment-rental",
    required_core_modules=["inventory"],
    optional_core_modules=["clients"],
    dashboard=_rental_dashboard,
    routes=[
        RouteNode(path="/rental/dashboard", element="RentalDashboard"),
        RouteNode(path="/rental/contracts", element="ContractsPage", feature_flag="feature.contract-signatures"),
    ],
    navigation=[
        NavigationItem(id="rental-dashboard", label="Dashboard", path="/rental/dashboard", icon="gauge", order=0),
    ],
)
