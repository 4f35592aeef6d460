"""Ingestion Service endpoint accepting XML uploads."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..config import Settings, get_settings
from ..deps import get_storage_client
from ..errors import BadInputError, ConversionError, ForwardingError, UploadTooLargeError
from ..middleware import get_request_id
from ..services.forwarder import StorageServiceClient
from ..services.ingestion import process_upload

LOGGER = logging.getLogger(__name__)

router = APIRouter(tags=["ingestion"])


class UploadResponse(BaseModel):
    """Confirmation that a file was converted and stored downstream."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    file_id: int | None = None


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    *,
    file: UploadFile | None = File(None),
    file_name: str | None = Form(None, alias="fileName"),
    settings: Settings = Depends(get_settings),
    client: StorageServiceClient = Depends(get_storage_client),
) -> UploadResponse:
    """Convert an uploaded XML document to JSON and forward it for storage."""

    try:
        result = await process_upload(
            upload=file,
            file_name=file_name,
            settings=settings,
            client=client,
            request_id=get_request_id(),
        )
    except UploadTooLargeError as exc:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=exc.message
        ) from exc
    except BadInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message
        ) from exc
    except ConversionError as exc:
        LOGGER.warning("Rejected upload %r: %s", file.filename if file else None, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing XML file: {exc.message}",
        ) from exc
    except ForwardingError as exc:
        code = (
            status.HTTP_502_BAD_GATEWAY
            if exc.transport
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        raise HTTPException(status_code=code, detail=exc.message) from exc
    except Exception as exc:
        LOGGER.exception("Unexpected failure while processing upload")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An unexpected error occurred: {exc}",
        ) from exc

    return UploadResponse(
        message="File processed and sent successfully", file_id=result.file_id
    )


__all__ = ["router", "UploadResponse"]
