"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gisty.config import get_settings
from gisty.exceptions import (
    GistDecodeError,
    GistNotFoundError,
    GistTransportError,
    GistValidationError,
    gist_decode_error_handler,
    gist_not_found_handler,
    gist_transport_error_handler,
    gist_validation_error_handler,
)
from gisty.routers import gists, health
from gisty.services.gist_service import GistService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

gist_service: GistService | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown of resources.
    """
    global gist_service

    settings = get_settings()
    logger.info(f"Starting {settings.app_name} for user '{settings.username}'")

    gist_service = GistService(settings, log=logger)
    await gist_service.start()
    if settings.cache_dir is None:
        logger.info("Gist cache disabled")
    else:
        logger.info(f"Caching gists in {settings.cache_dir}")

    yield

    logger.info("Shutting down services")
    await gist_service.close()


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Paginated GitHub gist listing with a local gist cache",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(GistValidationError, gist_validation_error_handler)
    app.add_exception_handler(GistNotFoundError, gist_not_found_handler)
    app.add_exception_handler(GistTransportError, gist_transport_error_handler)
    app.add_exception_handler(GistDecodeError, gist_decode_error_handler)

    async def get_gist_service_dep():
        return gist_service

    app.dependency_overrides[gists.get_gist_service] = get_gist_service_dep
    app.dependency_overrides[health.get_gist_service] = get_gist_service_dep

    app.include_router(health.router)
    app.include_router(gists.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "gisty.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
