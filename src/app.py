"""Pizzeria FastAPI application.

JSON HTTP backend for ordering pizzas: processes commands synchronously and
forwards orders to the pizza factory. Every request runs inside the
pizzeria domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 3000 --reload
"""

from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pizzeria.config import get_settings
from pizzeria.domain import pizzeria

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay from pyproject.toml:
#   - unset / "test" -> in-memory providers
#   - "production"   -> PostgreSQL
pizzeria.init()

from pizzeria.api.errors import register_exception_handlers  # noqa: E402
from pizzeria.api.middleware import OriginGuardMiddleware, RequestTelemetryMiddleware  # noqa: E402
from pizzeria.api.routes import auth_router, franchise_router, order_router  # noqa: E402
from pizzeria.telemetry import get_dispatcher, get_metrics  # noqa: E402
from pizzeria.user.seed import ensure_admin  # noqa: E402
from pizzeria.utils.logging import get_logger  # noqa: E402

logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    dispatcher, metrics = get_dispatcher(), get_metrics()
    await dispatcher.start()
    await metrics.start()

    if settings.default_admin_email and settings.default_admin_password:
        with pizzeria.domain_context():
            ensure_admin(
                settings.default_admin_name,
                settings.default_admin_email,
                settings.default_admin_password,
            )

    logger.info("pizzeria_started", version=settings.version, environment=settings.environment)
    yield

    await metrics.stop()
    await dispatcher.stop()
    logger.info("pizzeria_stopped")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Pizzeria API",
    description="Pizza ordering: users, franchises, menu and orders",
    version=settings.version,
    lifespan=lifespan,
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the pizzeria domain context for each request."""
    with pizzeria.domain_context():
        response = await call_next(request)
    return response


app.add_middleware(RequestTelemetryMiddleware)
app.add_middleware(OriginGuardMiddleware, allowed_origins=settings.cors_allowed_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(order_router)
api_router.include_router(franchise_router)


def endpoint_docs() -> list[dict]:
    """Describe every API endpoint from the generated OpenAPI schema.

    An endpoint requires auth when it takes the bearer ``authorization``
    header, which only the caller dependency declares.
    """
    endpoints = []
    for path, operations in app.openapi()["paths"].items():
        if not path.startswith("/api"):
            continue
        for method, operation in sorted(operations.items()):
            headers = {p["name"].lower() for p in operation.get("parameters", []) if p["in"] == "header"}
            endpoints.append(
                {
                    "method": method.upper(),
                    "path": path,
                    "requiresAuth": "authorization" in headers,
                    "description": operation.get("description") or operation.get("summary", ""),
                }
            )
    return endpoints


@api_router.get("/docs")
async def docs():
    return {
        "version": settings.version,
        "endpoints": endpoint_docs(),
        "config": {
            "factory": settings.factory_url,
            "db": pizzeria.config["databases"]["default"]["provider"],
        },
    }


app.include_router(api_router)


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------
@app.get("/")
async def root():
    return JSONResponse(content={"message": "welcome to JWT Pizza", "version": settings.version})
