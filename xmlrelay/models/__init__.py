"""Database models and wire schemas for xmlrelay."""

from .processed_file import (
    ProcessedFile,
    ProcessedFileCreate,
    ProcessedFileRead,
    ReceiveResponse,
)

__all__ = [
    "ProcessedFile",
    "ProcessedFileCreate",
    "ProcessedFileRead",
    "ReceiveResponse",
]
