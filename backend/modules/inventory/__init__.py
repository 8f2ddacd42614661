MODULE_ID = "inventory"
MODULE_VERSION = "1.0.0"
MODULE_DESCRIPTION = "Spool records, batch operations, CSV/JSON import/export, and the public view"

ROUTES = [
    "inventory.routes",
]

TABLES = [
    "inventory_records",
]

PUBLISHES = []

SUBSCRIBES = []

IMPLEMENTS = []

REQUIRES = ["SharingProvider"]

DAEMONS = []


def register(app, registry) -> None:
    """Register the inventory module routes."""
    from modules.inventory import routes

    app.include_router(routes.router, prefix="/api")
    app.include_router(routes.router, prefix="/api/v1")
