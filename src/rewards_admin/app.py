from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from rewards_admin import __version__
from rewards_admin.core.settings import settings
from .api.routes import api_router
from .core.logging import configure_logging
from .observability.tracing import configure_tracing
from .services.actions.cache import PathCache


APP_VERSION = __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "List view cache configured",
        enabled=settings.list_cache_enabled,
        ttl_seconds=settings.list_cache_ttl_seconds,
    )
    try:
        yield
    finally:
        await app.state.path_cache.clear()


def create_app() -> FastAPI:
    """Application factory for the rewards admin service."""
    configure_logging(
        service_name="rewards-admin-api",
        environment=settings.environment,
        version=APP_VERSION,
        level=settings.log_level,
        json_output=settings.log_json,
    )
    app = FastAPI(
        title="Rewards Admin API",
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    # Available before the lifespan runs, e.g. under test transports.
    app.state.path_cache = PathCache(
        ttl_seconds=settings.list_cache_ttl_seconds,
        enabled=settings.list_cache_enabled,
    )
    configure_tracing(
        app,
        service_name="rewards-admin-api",
        service_version=APP_VERSION,
        environment=settings.environment,
    )
    app.include_router(api_router)

    @app.get("/healthz", tags=["Health"])
    async def health_check() -> dict[str, str]:
        return {
            "status": "ok",
            "environment": settings.environment,
            "version": APP_VERSION,
        }

    return app
