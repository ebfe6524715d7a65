"""
Parashift v2 API Client.

Provides:
- Download page images and source files of a document
- Fetch OCR tokens of a document
- Upload documents (base64 encoded, JSON:API envelope)
- List documents by ID

Failures are raised as ParashiftError subclasses; the client never exits
the process.
"""

from .client import (
    IMAGE_FILE_TYPE,
    SOURCE_FILE_TYPE,
    DocumentNotFoundError,
    LocalFileError,
    ParashiftAPIError,
    ParashiftClient,
    ParashiftConnectionError,
    ParashiftDecodeError,
    ParashiftError,
    extension_by_mime_type,
)

__all__ = [
    "IMAGE_FILE_TYPE",
    "SOURCE_FILE_TYPE",
    "DocumentNotFoundError",
    "LocalFileError",
    "ParashiftAPIError",
    "ParashiftClient",
    "ParashiftConnectionError",
    "ParashiftDecodeError",
    "ParashiftError",
    "extension_by_mime_type",
]
