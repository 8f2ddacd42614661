MODULE_ID = "accounts"
MODULE_VERSION = "1.0.0"
MODULE_DESCRIPTION = "Users, login, and per-owner sharing settings"

ROUTES = [
    "accounts.routes",
]

TABLES = [
    "users",
    "sharing_rules",
]

PUBLISHES = []

SUBSCRIBES = []

IMPLEMENTS = ["SharingProvider"]

REQUIRES = []

DAEMONS = []


def register(app, registry) -> None:
    """Register the accounts module: routes and SharingProvider."""
    from modules.accounts import routes
    from modules.accounts.services import AccountSharingProvider

    app.include_router(routes.router, prefix="/api")
    app.include_router(routes.router, prefix="/api/v1")

    registry.register_provider("SharingProvider", AccountSharingProvider())
