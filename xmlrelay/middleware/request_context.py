"""Request identifiers shared by both services so one upload can be traced end to end."""

from __future__ import annotations

import contextvars
import logging
import re
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

LOGGER = logging.getLogger(__name__)


def get_request_id(default: str | None = None) -> str | None:
    """Return the request identifier stored in the current context."""

    return _REQUEST_ID.get(default)


def _normalise_request_id(value: str | None) -> str:
    if value:
        candidate = value.strip()
        if _REQUEST_ID_PATTERN.match(candidate):
            return candidate
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Accept or mint an ``X-Request-ID`` and log each request under it."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        request_id = _normalise_request_id(request.headers.get(self.header_name))
        token = _REQUEST_ID.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _REQUEST_ID.reset(token)
        LOGGER.info(
            "[%s] %s %s -> %s",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
        )
        response.headers[self.header_name] = request_id
        return response


__all__ = ["REQUEST_ID_HEADER", "RequestIdMiddleware", "get_request_id"]
