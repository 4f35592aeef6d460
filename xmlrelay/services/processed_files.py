"""Record Store operations over the ``processed_files`` table."""

from __future__ import annotations

import hmac
import logging
import threading
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..errors import AuthError, NotFoundError, StoreError
from ..models import ProcessedFile

LOGGER = logging.getLogger(__name__)

# Serialises inserts and deletes issued by this process.
_WRITE_LOCK = threading.Lock()


def verify_api_key(presented: str | None, expected: str) -> None:
    """Compare an inbound credential with the shared secret in constant time.

    Raises:
        AuthError: if the secret is unset or the credential does not match.
    """

    if not expected or presented is None:
        raise AuthError("Invalid API Key")
    if not hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8")):
        raise AuthError("Invalid API Key")


def store_processed_file(
    *, session: Session, file_name: str, file_content: str
) -> ProcessedFile:
    """Insert a record; the store assigns ``id`` and ``processed_date``."""

    record = ProcessedFile(
        file_name=file_name,
        file_content=file_content,
        processed_date=datetime.now(UTC),
    )
    try:
        with _WRITE_LOCK:
            session.add(record)
            session.commit()
            session.refresh(record)
    except SQLAlchemyError as exc:
        session.rollback()
        LOGGER.error("Failed to store %r: %s", file_name, exc)
        raise StoreError(f"Database error: {exc}") from exc

    LOGGER.info("Stored processed file %s (%r)", record.id, record.file_name)
    return record


def list_processed_files(*, session: Session) -> list[ProcessedFile]:
    """Return every stored record ordered by id."""

    statement = select(ProcessedFile).order_by(ProcessedFile.id)
    try:
        return list(session.exec(statement))
    except SQLAlchemyError as exc:
        raise StoreError(f"An error occurred while retrieving files: {exc}") from exc


def get_processed_file(*, session: Session, file_id: int) -> ProcessedFile:
    """Return a single record.

    Raises:
        NotFoundError: if no record with this id exists.
    """

    try:
        record = session.get(ProcessedFile, file_id)
    except SQLAlchemyError as exc:
        raise StoreError(f"An error occurred while retrieving the file: {exc}") from exc
    if record is None:
        raise NotFoundError(f"Processed file {file_id} not found")
    return record


def delete_processed_file(*, session: Session, file_id: int) -> None:
    """Hard-delete a record.

    Raises:
        NotFoundError: if no record with this id exists, including one already deleted.
    """

    try:
        with _WRITE_LOCK:
            record = session.get(ProcessedFile, file_id)
            if record is None:
                raise NotFoundError(f"Processed file {file_id} not found")
            session.delete(record)
            session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise StoreError(f"Database error: {exc}") from exc

    LOGGER.info("Deleted processed file %s", file_id)


__all__ = [
    "delete_processed_file",
    "get_processed_file",
    "list_processed_files",
    "store_processed_file",
    "verify_api_key",
]
