MODULE_ID = "catalog"
MODULE_VERSION = "1.0.0"
MODULE_DESCRIPTION = "Shared reference lists: manufacturers, materials, colors, diameters, storage locations"

ROUTES = [
    "catalog.routes",
]

TABLES = [
    "manufacturers",
    "materials",
    "colors",
    "diameters",
    "storage_locations",
]

PUBLISHES = []

SUBSCRIBES = []

IMPLEMENTS = []

REQUIRES = []

DAEMONS = []


def register(app, registry) -> None:
    """Register the catalog module routes."""
    from modules.catalog import routes

    app.include_router(routes.router, prefix="/api")
    app.include_router(routes.router, prefix="/api/v1")
