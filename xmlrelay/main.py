"""Application factories for the Ingestion and Storage services."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .database import init_db
from .middleware import RequestIdMiddleware
from .routers import health_router, processed_files_router, upload_router

logger = logging.getLogger("uvicorn.error")

INGESTION_SERVICE = "ingestion"
STORAGE_SERVICE = "storage"


async def handle_unexpected_exception(
    request: Request, exc: Exception
) -> JSONResponse:
    """Ensure unexpected exceptions return a JSON payload."""

    logger.exception(
        "Unhandled exception while processing %s %s", request.method, request.url.path
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def _build_app(service_name: str, *, title: str, description: str, lifespan) -> FastAPI:
    app = FastAPI(
        title=title, version=__version__, description=description, lifespan=lifespan
    )
    app.state.service_name = service_name
    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(Exception, handle_unexpected_exception)
    app.include_router(health_router)
    return app


@asynccontextmanager
async def ingestion_lifespan(app: FastAPI):
    """Resolve settings up front so the staging directory exists before uploads."""

    settings = get_settings()
    logger.info(
        "Ingestion service forwarding to %s (staging in %s)",
        settings.receive_url,
        settings.staging_dir,
    )
    yield


@asynccontextmanager
async def storage_lifespan(app: FastAPI):
    """Create the record table and apply migrations."""

    init_db()
    yield


def create_ingestion_app() -> FastAPI:
    app = _build_app(
        INGESTION_SERVICE,
        title="XML to JSON Processor API",
        description="Upload XML files, convert them to JSON and forward them for storage.",
        lifespan=ingestion_lifespan,
    )
    app.include_router(upload_router)
    return app


def create_storage_app() -> FastAPI:
    app = _build_app(
        STORAGE_SERVICE,
        title="Processed Files API",
        description="Receive converted JSON documents and manage the stored records.",
        lifespan=storage_lifespan,
    )
    app.include_router(processed_files_router)
    return app


ingestion_app = create_ingestion_app()
storage_app = create_storage_app()


__all__ = [
    "INGESTION_SERVICE",
    "STORAGE_SERVICE",
    "create_ingestion_app",
    "create_storage_app",
    "ingestion_app",
    "storage_app",
]
