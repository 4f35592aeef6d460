"""ASGI middleware utilities for the xmlrelay services."""

from .request_context import REQUEST_ID_HEADER, RequestIdMiddleware, get_request_id

__all__ = ["REQUEST_ID_HEADER", "RequestIdMiddleware", "get_request_id"]
