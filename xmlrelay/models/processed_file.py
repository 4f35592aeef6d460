"""Persisted converted documents and their JSON wire shapes."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, field_validator
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel
from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    """Return the current time in UTC."""

    return datetime.now(UTC)


class ProcessedFile(SQLModel, table=True):
    """A converted document stored by the Storage Service."""

    __tablename__ = "processed_files"
    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted max row.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    file_name: str = Field(index=True, nullable=False)
    processed_date: datetime = Field(default_factory=_utcnow, nullable=False)
    file_content: str = Field(sa_column=Column(Text, nullable=False))


class ProcessedFileCreate(BaseModel):
    """Body of a forwarded document: ``{fileName, fileContent}``."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = PydanticField(
        min_length=1,
        validation_alias=AliasChoices("fileName", "FileName", "file_name"),
        serialization_alias="fileName",
    )
    file_content: str = PydanticField(
        validation_alias=AliasChoices("fileContent", "FileContent", "file_content"),
        serialization_alias="fileContent",
    )

    @field_validator("file_content")
    @classmethod
    def require_json(cls, value: str) -> str:
        try:
            json.loads(value)
        except (ValueError, RecursionError) as exc:
            raise ValueError(f"fileContent is not valid JSON: {exc}") from exc
        return value


class ProcessedFileRead(BaseModel):
    """Public representation of a stored record."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    file_name: str
    processed_date: datetime
    file_content: str


class ReceiveResponse(BaseModel):
    """Acknowledgement returned after a record is stored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    file_id: int


__all__ = [
    "ProcessedFile",
    "ProcessedFileCreate",
    "ProcessedFileRead",
    "ReceiveResponse",
]
