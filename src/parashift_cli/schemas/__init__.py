"""
Wire schemas for the Parashift v2 API.

Every request and response body is a JSON:API style envelope: one resource
(or a list of resources) under "data", each carrying a type, an optional id
and a typed attributes object.
"""

from .resources import (
    DOCUMENTS_TYPE,
    DocumentAttributes,
    DocumentCreateAttributes,
    DocumentFile,
    FileAttributes,
    Rectangle,
    Resource,
    ResourceArrayResponse,
    ResourceDecodeError,
    ResourceRequest,
    ResourceResponse,
    TextAttributes,
)

__all__ = [
    "DOCUMENTS_TYPE",
    "DocumentAttributes",
    "DocumentCreateAttributes",
    "DocumentFile",
    "FileAttributes",
    "Rectangle",
    "Resource",
    "ResourceArrayResponse",
    "ResourceDecodeError",
    "ResourceRequest",
    "ResourceResponse",
    "TextAttributes",
]
