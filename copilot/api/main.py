"""
HTTP service for the retail chat copilot.

On startup: logging is configured, missing tables are created and the
product catalog is loaded once if a source is set and the catalog is
empty. All routes are served under /api/v1.

Run locally with: python -m copilot.api.main

Dependencies: fastapi, uvicorn, copilot.api, copilot.observability, copilot.configs
System role: Application assembly
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from copilot import __version__
from copilot.api import api_router
from copilot.api.deps import get_service_cache
from copilot.application.services import CatalogService
from copilot.boundary.db import create_tables, get_async_session_factory
from copilot.configs import get_settings
from copilot.observability.logger import configure_logging
from copilot.observability.middleware import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


async def load_catalog_on_startup() -> None:
    """Load the product catalog when a source is configured and the catalog is empty."""
    settings = get_settings()
    source = settings.catalog.product_data_source_uri
    if not source:
        logger.info(f"{__name__}:load_catalog_on_startup - No product data source configured")
        return

    SessionFactory = get_async_session_factory()
    async with SessionFactory() as db:
        catalog = CatalogService(
            db=db,
            provider=get_service_cache().provider,
            request_timeout=settings.catalog.request_timeout,
        )
        result = await catalog.load_product_data(source)

    logger.info(
        f"{__name__}:load_catalog_on_startup - Catalog ready",
        extra={"loaded": result.loaded, "skipped": result.skipped},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: logging, schema, catalog. Shutdown only logs."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"{__name__}:lifespan - Starting in {settings.environment}")

    try:
        await create_tables()
        await load_catalog_on_startup()
    except Exception as e:
        logger.exception(f"{__name__}:lifespan - Startup failed: {type(e).__name__}: {e}")
        raise

    logger.info(f"{__name__}:lifespan - Ready")
    yield
    logger.info(f"{__name__}:lifespan - Shutting down")


def create_app() -> FastAPI:
    """Build the FastAPI app with middleware and the versioned router."""
    app = FastAPI(
        title="Cosmic Works Copilot API",
        description="Retrieval-augmented chat with a semantic completion cache",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "copilot.api.main:app",
        host="localhost",
        port=8082,
        reload=True,
    )
