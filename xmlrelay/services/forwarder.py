"""HTTP client relaying converted documents to the Storage Service."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Union

import requests

from ..config import Settings

log = logging.getLogger(__name__)

API_KEY_HEADER = "ApiKey"
REQUEST_ID_HEADER = "X-Request-ID"


@dataclass(frozen=True)
class ForwardSuccess:
    """The Storage Service accepted the document."""

    status_code: int
    file_id: int | None = None


@dataclass(frozen=True)
class ForwardFailure(ABC):
    """Base class for forwarding failures."""

    detail: str

    transport: ClassVar[bool] = False

    @abstractmethod
    def describe(self) -> str:
        """Return the message reported to the uploader."""


@dataclass(frozen=True)
class TransportFailure(ForwardFailure):
    """No response was received from the Storage Service."""

    transport: ClassVar[bool] = True

    def describe(self) -> str:
        return f"Error communicating with the storage service: {self.detail}"


@dataclass(frozen=True)
class ApplicationFailure(ForwardFailure):
    """The Storage Service answered with a non-2xx status."""

    status_code: int = 0

    def describe(self) -> str:
        return (
            "Error occurred while sending JSON to the storage service "
            f"(status {self.status_code}): {self.detail}"
        )


ForwardResult = Union[ForwardSuccess, TransportFailure, ApplicationFailure]


def _extract_file_id(response: Any) -> int | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return int(data["fileId"])
    except (KeyError, TypeError, ValueError):
        return None


class StorageServiceClient:
    """Issue exactly one receive request per forwarded document."""

    def __init__(
        self,
        *,
        receive_url: str,
        api_key: str,
        timeout_connect: float = 10,
        timeout_read: float = 60,
    ) -> None:
        self.receive_url = receive_url
        self._api_key = api_key
        self._timeout = (timeout_connect, timeout_read)

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageServiceClient":
        return cls(
            receive_url=settings.receive_url,
            api_key=settings.api_key,
            timeout_connect=settings.forward_connect_timeout_s,
            timeout_read=settings.forward_read_timeout_s,
        )

    def forward(
        self, file_name: str, file_content: str, *, request_id: str | None = None
    ) -> ForwardResult:
        """POST ``{fileName, fileContent}`` to the Storage Service without retrying."""

        headers = {API_KEY_HEADER: self._api_key}
        if request_id:
            headers[REQUEST_ID_HEADER] = request_id
        payload = {"fileName": file_name, "fileContent": file_content}

        log.info("Forwarding %r (%s chars) to %s", file_name, len(file_content), self.receive_url)
        try:
            response = requests.post(
                self.receive_url,
                json=payload,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            log.error("Storage service request failed: %s", exc)
            return TransportFailure(detail=str(exc) or exc.__class__.__name__)

        if not 200 <= response.status_code < 300:
            snippet = (response.text or "")[:500]
            log.error("Storage service error %s: %s", response.status_code, snippet)
            return ApplicationFailure(
                detail=snippet or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        return ForwardSuccess(
            status_code=response.status_code, file_id=_extract_file_id(response)
        )


__all__ = [
    "API_KEY_HEADER",
    "ApplicationFailure",
    "ForwardFailure",
    "ForwardResult",
    "ForwardSuccess",
    "StorageServiceClient",
    "TransportFailure",
]
