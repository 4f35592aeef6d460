"""Error taxonomy shared by the ingestion and storage services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:  # pragma: no cover
    from .services.forwarder import ForwardFailure


class RelayError(Exception):
    """Base class for per-request failures raised by the services."""

    default_code = "relay_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        extra: Dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.extra = extra or {}


class BadInputError(RelayError):
    """Raised when an upload is missing or unusable."""

    default_code = "bad_input"


class EmptyUploadError(BadInputError):
    """Raised when zero bytes were staged for an upload."""

    default_code = "empty_upload"


class UploadTooLargeError(BadInputError):
    """Raised when an upload exceeds the configured size limit."""

    default_code = "upload_too_large"


class ConversionError(RelayError):
    """Raised when a source document cannot be converted."""

    default_code = "conversion_failed"


class MalformedInputError(ConversionError):
    """Raised when the input is not well-formed markup."""

    default_code = "malformed_input"


class ForwardingError(RelayError):
    """Raised when the Storage Service did not accept a forwarded document."""

    default_code = "forwarding_failed"

    def __init__(self, failure: "ForwardFailure") -> None:
        super().__init__(failure.describe(), extra={"detail": failure.detail})
        self.failure = failure

    @property
    def transport(self) -> bool:
        """True when no response was received from the Storage Service."""

        return self.failure.transport

    @property
    def status_code(self) -> int | None:
        return getattr(self.failure, "status_code", None)


class AuthError(RelayError):
    """Raised when an inbound credential does not match the shared secret."""

    default_code = "unauthorized"


class NotFoundError(RelayError):
    """Raised when a record id is unknown to the store."""

    default_code = "not_found"


class StoreError(RelayError):
    """Raised when the persistence layer fails."""

    default_code = "store_error"


__all__ = [
    "AuthError",
    "BadInputError",
    "ConversionError",
    "EmptyUploadError",
    "ForwardingError",
    "MalformedInputError",
    "NotFoundError",
    "RelayError",
    "StoreError",
    "UploadTooLargeError",
]
