"""Example legacy unit: reporting screens from before the core/vertical split."""

reports = {
    "id": "reports",
    "name": "Reports",
    "base_path": "/reports",
    "default_protection": "owner",
    "routes": [
        {"path": "/", "element": "ReportsHome", "index": True},
        {"path": "/advanced", "element": "AdvancedReports", "feature_flag": "feature.advanced-reporting"},
    ],
    "navigation": [
        {"id": "reports", "label": "Reports", "path": "/reports", "order": 50, "permissions": ["reports:read"]},
    ],
    "permissions": ["reports:read"],
}
