"""API routers for the ingestion and storage services."""

from .health import router as health_router
from .processed_files import router as processed_files_router
from .upload import router as upload_router

__all__ = ["health_router", "processed_files_router", "upload_router"]
