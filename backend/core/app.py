# core/app.py — App factory with dynamic module discovery
#
# Creates and configures the FastAPI application. Discovers all modules under
# backend/modules/, resolves load order from REQUIRES/IMPLEMENTS declarations,
# and calls each module's register(app, registry) function.
#
# main.py: from core.app import create_app; app = create_app()

import hmac
import importlib
import logging
import pathlib
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from core.errors import InventoryError
from core.schemas import HealthCheck

log = logging.getLogger("spoolvault.api")

_version_file = pathlib.Path(__file__).parent.parent.parent / "VERSION"
if _version_file.exists():
    __version__ = _version_file.read_text().strip()
else:
    __version__ = "0.4.0"


# ---------------------------------------------------------------------------
# Module discovery helpers
# ---------------------------------------------------------------------------

def _discover_modules() -> list[str]:
    """Return the module packages under backend/modules/ that carry a MODULE_ID."""
    modules_dir = pathlib.Path(__file__).parent.parent / "modules"
    found = []
    for entry in sorted(modules_dir.iterdir()):
        if not entry.is_dir() or not (entry / "__init__.py").exists():
            continue
        pkg_name = f"modules.{entry.name}"
        try:
            mod = importlib.import_module(pkg_name)
        except Exception as exc:
            log.warning(f"Module discovery: skipping {pkg_name!r}: {exc}")
            continue
        if hasattr(mod, "MODULE_ID"):
            found.append(pkg_name)
    return found


def _resolve_load_order(pkg_names: list[str]) -> list[str]:
    """Order modules so that interface providers register before their consumers.

    Kahn's sort over REQUIRES -> IMPLEMENTS edges. Modules caught in a cycle
    (or requiring an interface nobody implements) are appended in discovery
    order with a warning instead of failing startup.
    """
    manifests = {pkg: importlib.import_module(pkg) for pkg in pkg_names}

    providers: dict[str, str] = {}
    for pkg, mod in manifests.items():
        for iface in getattr(mod, "IMPLEMENTS", []):
            providers[iface] = pkg

    depends_on: dict[str, set[str]] = {pkg: set() for pkg in pkg_names}
    for pkg, mod in manifests.items():
        for iface in getattr(mod, "REQUIRES", []):
            provider_pkg = providers.get(iface)
            if provider_pkg and provider_pkg != pkg:
                depends_on[pkg].add(provider_pkg)

    pending = {pkg: len(deps) for pkg, deps in depends_on.items()}
    queue = sorted(pkg for pkg, count in pending.items() if count == 0)
    ordered: list[str] = []

    while queue:
        pkg = queue.pop(0)
        ordered.append(pkg)
        for other, deps in depends_on.items():
            if pkg in deps:
                pending[other] -= 1
                if pending[other] == 0:
                    queue.append(other)
                    queue.sort()

    remaining = [pkg for pkg in pkg_names if pkg not in ordered]
    if remaining:
        log.warning(
            f"Module load order: circular or unresolvable dependencies for "
            f"{remaining}; appending in discovery order."
        )
        ordered.extend(remaining)
    return ordered


# ---------------------------------------------------------------------------
# Middleware and error handlers
# ---------------------------------------------------------------------------

def _setup_middleware(app: FastAPI) -> None:
    """Attach rate limiting and CORS."""
    from core.config import settings
    from core.rate_limit import limiter
    from slowapi import _rate_limit_exceeded_handler
    from slowapi.errors import RateLimitExceeded

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    if "*" in origins:
        log.warning(
            "CORS origin '*' cannot be combined with credentials; "
            "ignoring CORS_ORIGINS. Set explicit origins instead."
        )
        origins = []

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-API-Key", "Accept"],
    )


def _api_path(path: str) -> str:
    """'/api/v1/records' and '/api/records' both become '/records'."""
    if path.startswith("/api/v1/"):
        return path[7:]
    if path.startswith("/api/"):
        return path[4:]
    return ""


def _register_http_middleware(app: FastAPI) -> None:
    """Security headers on every response, optional X-API-Key perimeter check."""
    from core.config import settings

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        return response

    @app.middleware("http")
    async def check_api_key(request: Request, call_next):
        path = request.url.path
        api_path = _api_path(path)
        if (
            not settings.api_key
            or path == "/health"
            or api_path.startswith("/auth")
            or api_path.startswith("/public/")
            or request.method == "OPTIONS"
        ):
            return await call_next(request)

        api_key = request.headers.get("X-API-Key")
        if not api_key or not hmac.compare_digest(api_key, settings.api_key):
            return JSONResponse(status_code=401, content={"detail": "Invalid or missing API key"})
        return await call_next(request)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Malformed JSON and wrong body shapes are client errors, not 422s
        log.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"detail": _first_error(exc)})


def _first_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    err = errors[0]
    loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    return f"{loc}: {err.get('msg')}" if loc else str(err.get("msg"))


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app() -> FastAPI:
    """Create and fully configure the SpoolVault FastAPI application.

    Modules are discovered, ordered and registered here (not in lifespan) so
    every route exists before the first request arrives.
    """
    from core.config import settings
    from core.db import SessionLocal, init_db
    from core.registry import registry

    ordered_pkgs = _resolve_load_order(_discover_modules())
    log.info(f"Module load order: {[p.split('.')[-1] for p in ordered_pkgs]}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db()
        registry.validate_dependencies()

        from modules.accounts.services import ensure_admin
        db = SessionLocal()
        try:
            ensure_admin(db, settings.admin_username, settings.admin_password)
        finally:
            db.close()

        if not settings.api_key:
            log.warning("API_KEY is not set; perimeter authentication is disabled.")
        yield

    app = FastAPI(
        title="SpoolVault",
        description="Filament spool inventory with bulk import/export and public sharing",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
    )

    _setup_middleware(app)
    _register_http_middleware(app)
    _register_exception_handlers(app)

    @app.get("/health", tags=["System"], response_model=HealthCheck)
    def health():
        """Liveness plus a database round trip."""
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            database = "ok"
        except Exception as exc:
            log.error(f"Health check: database unreachable: {exc}")
            database = "unavailable"
        finally:
            db.close()
        status = "ok" if database == "ok" else "degraded"
        return {"status": status, "version": __version__, "database": database}

    for pkg in ordered_pkgs:
        mod = importlib.import_module(pkg)
        registry.record_requires(getattr(mod, "MODULE_ID", pkg), getattr(mod, "REQUIRES", []))
        if hasattr(mod, "register"):
            try:
                mod.register(app, registry)
                log.debug(f"Registered module: {pkg}")
            except Exception as exc:
                log.error(f"Failed to register module {pkg!r}: {exc}", exc_info=True)

    return app
