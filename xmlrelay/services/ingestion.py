"""Upload orchestration: stage, convert, forward."""

from __future__ import annotations

import logging
import ntpath
from dataclasses import dataclass

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from ..config import Settings
from ..errors import BadInputError, ForwardingError
from .converter import convert_file
from .forwarder import ForwardSuccess, StorageServiceClient
from .staging import stage_upload

LOGGER = logging.getLogger(__name__)

DEFAULT_LOGICAL_NAME = "document"


@dataclass(frozen=True)
class IngestionResult:
    file_name: str
    file_id: int | None


def resolve_logical_name(file_name: str | None, original_filename: str | None) -> str:
    """Prefer the caller's name, else the upload's filename without its extension."""

    if file_name and file_name.strip():
        return file_name.strip()
    base = ntpath.basename(original_filename or "")
    stem, _ = ntpath.splitext(base)
    return stem or base or DEFAULT_LOGICAL_NAME


async def process_upload(
    *,
    upload: UploadFile | None,
    file_name: str | None,
    settings: Settings,
    client: StorageServiceClient,
    request_id: str | None = None,
) -> IngestionResult:
    """Run one upload through staging, conversion and forwarding.

    Raises:
        BadInputError: when no file (or an empty one) was uploaded.
        MalformedInputError: when the upload is not well-formed XML.
        ForwardingError: when the Storage Service did not accept the document.
    """

    if upload is None or upload.size == 0:
        raise BadInputError("File not uploaded")

    logical_name = resolve_logical_name(file_name, upload.filename)

    async with stage_upload(
        upload, staging_dir=settings.staging_dir, max_size=settings.max_upload_size
    ) as staged:
        json_content = await run_in_threadpool(convert_file, staged.upload_path)
        await run_in_threadpool(staged.write_converted, logical_name, json_content)
        result = await run_in_threadpool(
            client.forward, logical_name, json_content, request_id=request_id
        )
        if not isinstance(result, ForwardSuccess):
            raise ForwardingError(result)

    LOGGER.info("Upload %r forwarded as record %s", logical_name, result.file_id)
    return IngestionResult(file_name=logical_name, file_id=result.file_id)


__all__ = ["IngestionResult", "process_upload", "resolve_logical_name"]
