"""Storage Service endpoints: receive, list, get, download and delete records."""

from __future__ import annotations

import io
import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse
from pydantic import ValidationError
from sqlmodel import Session

from ..config import Settings, get_settings
from ..database import get_session
from ..errors import AuthError, NotFoundError, StoreError
from ..models import ProcessedFileCreate, ProcessedFileRead, ReceiveResponse
from ..services.forwarder import API_KEY_HEADER
from ..services.processed_files import (
    delete_processed_file,
    get_processed_file,
    list_processed_files,
    store_processed_file,
    verify_api_key,
)

LOGGER = logging.getLogger(__name__)

router = APIRouter(tags=["processed-files"])


def _not_found(exc: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)


def _store_failed(exc: StoreError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message
    )


def _content_disposition(filename: str) -> str:
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def _parse_payload(raw: bytes) -> ProcessedFileCreate | None:
    if not raw.strip() or raw.strip() == b"null":
        return None
    return ProcessedFileCreate.model_validate_json(raw)


@router.post("/ReceiveProcessedFile", response_model=ReceiveResponse)
async def receive_processed_file(
    request: Request,
    *,
    api_key: str | None = Header(None, alias=API_KEY_HEADER),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> ReceiveResponse:
    """Authenticate and persist a document forwarded by the Ingestion Service."""

    try:
        verify_api_key(api_key, settings.api_key)
    except AuthError as exc:
        LOGGER.warning("Rejected forwarded file: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.message
        ) from exc

    try:
        payload = _parse_payload(await request.body())
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file data: {exc.errors(include_url=False)[0]['msg']}",
        ) from exc
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file data"
        )

    try:
        record = await run_in_threadpool(
            store_processed_file,
            session=session,
            file_name=payload.file_name,
            file_content=payload.file_content,
        )
    except StoreError as exc:
        raise _store_failed(exc) from exc

    return ReceiveResponse(message="File stored successfully", file_id=record.id)


@router.get("/", response_model=list[ProcessedFileRead])
def read_processed_files(
    *, session: Session = Depends(get_session)
) -> list[ProcessedFileRead]:
    """Return every stored record."""

    try:
        records = list_processed_files(session=session)
    except StoreError as exc:
        raise _store_failed(exc) from exc
    return [ProcessedFileRead.model_validate(record) for record in records]


@router.get("/{file_id}", response_model=ProcessedFileRead)
def read_processed_file(
    file_id: int, *, session: Session = Depends(get_session)
) -> ProcessedFileRead:
    """Return a single stored record."""

    try:
        record = get_processed_file(session=session, file_id=file_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    except StoreError as exc:
        raise _store_failed(exc) from exc
    return ProcessedFileRead.model_validate(record)


@router.get("/{file_id}/download")
def download_processed_file(
    file_id: int, *, session: Session = Depends(get_session)
) -> StreamingResponse:
    """Stream the stored JSON content as ``<fileName>.json``."""

    try:
        record = get_processed_file(session=session, file_id=file_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    except StoreError as exc:
        raise _store_failed(exc) from exc

    stream = io.BytesIO(record.file_content.encode("utf-8"))
    return StreamingResponse(
        stream,
        media_type="application/json",
        headers={"Content-Disposition": _content_disposition(f"{record.file_name}.json")},
    )


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_processed_file(
    file_id: int, *, session: Session = Depends(get_session)
) -> Response:
    """Delete a stored record."""

    try:
        delete_processed_file(session=session, file_id=file_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    except StoreError as exc:
        raise _store_failed(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
