"""Request-scoped staging of uploaded bytes and converted artifacts."""

from __future__ import annotations

import logging
import re
import secrets
import shutil
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

from fastapi import UploadFile

from ..errors import EmptyUploadError, UploadTooLargeError

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB


def _secure_filename(filename: str, *, suffix: str = ".xml") -> str:
    """Return a filesystem-safe version of the provided filename."""

    if not filename:
        return f"document-{secrets.token_hex(8)}{suffix}"
    name = Path(filename.replace("\\", "/")).name
    cleaned = re.sub(r"[^A-Za-z0-9._-]", "_", name).lstrip(".")
    return cleaned or f"document-{secrets.token_hex(8)}{suffix}"


@dataclass
class StagedUpload:
    """Handle to the bytes of one upload, valid inside ``stage_upload``."""

    directory: Path
    upload_path: Path
    original_filename: str
    size: int
    converted_path: Path | None = None

    def read_bytes(self) -> bytes:
        return self.upload_path.read_bytes()

    def write_converted(self, name: str, content: str) -> Path:
        """Write the converted document next to the upload as ``<name>.json``."""

        stem = _secure_filename(name, suffix="")
        path = self.directory / f"{stem}.json"
        path.write_text(content, encoding="utf-8")
        self.converted_path = path
        return path


@asynccontextmanager
async def stage_upload(
    upload: UploadFile, *, staging_dir: Path, max_size: int
) -> AsyncIterator[StagedUpload]:
    """Copy ``upload`` into a private staging directory for the duration of the block.

    The directory, the staged bytes and any converted artifact are removed on
    every exit path.

    Raises:
        EmptyUploadError: if the upload contained zero bytes.
        UploadTooLargeError: if the upload exceeds ``max_size`` bytes.
    """

    staging_dir.mkdir(parents=True, exist_ok=True)
    directory = Path(tempfile.mkdtemp(prefix="upload-", dir=staging_dir))
    original_filename = upload.filename or ""
    upload_path = directory / f"incoming-{_secure_filename(original_filename)}"

    try:
        total_bytes = 0
        with upload_path.open("wb") as buffer:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_bytes += len(chunk)
                if total_bytes > max_size:
                    raise UploadTooLargeError("File exceeds maximum allowed size")
                buffer.write(chunk)

        if total_bytes == 0:
            raise EmptyUploadError("File not uploaded")

        LOGGER.debug("Staged %s (%s bytes) in %s", original_filename, total_bytes, directory)
        yield StagedUpload(
            directory=directory,
            upload_path=upload_path,
            original_filename=original_filename,
            size=total_bytes,
        )
    finally:
        shutil.rmtree(directory, ignore_errors=True)
        await upload.close()
        LOGGER.debug("Released staging directory %s", directory)


__all__ = ["CHUNK_SIZE", "StagedUpload", "stage_upload"]
