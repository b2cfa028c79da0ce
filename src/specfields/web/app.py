"""FastAPI application factory."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from specfields.application import ServiceFactory, load_catalog, load_settings
from specfields.contracts import FieldStore
from specfields.infrastructure import InMemoryFieldStore, SanityFieldStore
from specfields.web.exceptions import register_exception_handlers
from specfields.web.routers import forms_router, legacy_router

logger = logging.getLogger(__name__)

SETTINGS_ENV = "SPECFIELDS_SETTINGS"
CATALOG_ENV = "SPECFIELDS_CATALOG"


def build_default_factory() -> ServiceFactory:
    """Build services from the environment.

    ``SPECFIELDS_SETTINGS`` names a settings JSON file. When its Sanity
    project id is set the API reads from Sanity; otherwise
    ``SPECFIELDS_CATALOG`` names a catalog file served from memory.
    Without either, the API serves an empty catalog.
    """
    settings_path = os.environ.get(SETTINGS_ENV)
    settings = load_settings(Path(settings_path) if settings_path else None)

    store: FieldStore
    if settings.sanity.project_id:
        store = SanityFieldStore(settings.sanity)
    elif catalog_path := os.environ.get(CATALOG_ENV):
        store = InMemoryFieldStore.from_catalog(load_catalog(Path(catalog_path)))
    else:
        logger.warning("No Sanity project or catalog configured; serving an empty catalog")
        store = InMemoryFieldStore()
    return ServiceFactory(store=store, settings=settings)


def create_app(factory: ServiceFactory | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        factory: Services to serve. Built from the environment when omitted,
            at startup.

    Returns:
        Configured FastAPI application instance.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "factory", None) is None:
            app.state.factory = build_default_factory()
        yield
        services: ServiceFactory = app.state.factory
        services.close()
        if isinstance(services.store, SanityFieldStore):
            await services.store.aclose()

    app = FastAPI(
        title="Specification Fields API",
        description="REST API for specification field forms and legacy data",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.factory = factory

    # CORS middleware for browser access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(forms_router, prefix="/api/v1")
    app.include_router(legacy_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        services: ServiceFactory | None = app.state.factory
        state = services.get_registry().state.value if services is not None else "unknown"
        return {"status": "healthy", "registry": state}

    return app


# Application instance for ASGI servers (uvicorn)
app = create_app()
