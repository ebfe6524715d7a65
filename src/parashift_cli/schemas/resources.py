"""
Resource envelopes and attribute types for the Parashift v2 API.

Decoding rules:
- Required keys must be present with the right JSON type, otherwise
  ResourceDecodeError is raised
- Optional keys may be missing or null
- Ids are strings on our side even when the server sends numbers
- Encoding omits a resource id that is None (create requests have no id)
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, TypeVar

A = TypeVar("A")

DOCUMENTS_TYPE = "documents"


class ResourceDecodeError(ValueError):
    """Payload does not match the expected resource schema."""

    pass


def _require(data: Any, key: str, kinds: tuple[type, ...]) -> Any:
    """Fetch a required key and check its JSON type."""
    if not isinstance(data, dict):
        raise ResourceDecodeError(f"expected an object containing '{key}', got {type(data).__name__}")
    if key not in data or data[key] is None:
        raise ResourceDecodeError(f"missing field '{key}'")
    return _check(key, data[key], kinds)


def _optional(data: dict, key: str, kinds: tuple[type, ...]) -> Any:
    value = data.get(key)
    if value is None:
        return None
    return _check(key, value, kinds)


def _check(key: str, value: Any, kinds: tuple[type, ...]) -> Any:
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and bool not in kinds:
        raise ResourceDecodeError(f"field '{key}' has invalid type bool")
    if not isinstance(value, kinds):
        raise ResourceDecodeError(f"field '{key}' has invalid type {type(value).__name__}")
    return value


def _identifier(data: dict, key: str, required: bool = True) -> Optional[str]:
    """Decode an identifier that may arrive as string or integer."""
    if required:
        value = _require(data, key, (str, int))
    else:
        value = _optional(data, key, (str, int))
    return None if value is None else str(value)


NUMBER = (int, float)


@dataclass(frozen=True)
class FileAttributes:
    """A downloadable file attached to a document."""

    url: str
    mime_type: str
    file_type: str  # e.g. "color_jpeg" (page image), "input_file" (original upload)

    @classmethod
    def from_dict(cls, data: dict) -> "FileAttributes":
        return cls(
            url=_require(data, "url", (str,)),
            mime_type=_require(data, "mime_type", (str,)),
            file_type=_require(data, "file_type", (str,)),
        )


@dataclass(frozen=True)
class Rectangle:
    """Bounding box in document coordinates (no unit conversion)."""

    top: float
    bottom: float
    left: float
    right: float

    @classmethod
    def from_dict(cls, data: dict) -> "Rectangle":
        return cls(
            top=float(_require(data, "top", NUMBER)),
            bottom=float(_require(data, "bottom", NUMBER)),
            left=float(_require(data, "left", NUMBER)),
            right=float(_require(data, "right", NUMBER)),
        )


@dataclass(frozen=True)
class TextAttributes:
    """One recognized OCR token."""

    value: str
    coordinates: Rectangle
    page_id: str
    confidence: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict) -> "TextAttributes":
        confidence = _optional(data, "confidence", NUMBER) if isinstance(data, dict) else None
        return cls(
            value=_require(data, "value", (str,)),
            coordinates=Rectangle.from_dict(_require(data, "coordinates", (dict,))),
            page_id=_identifier(data, "page_id"),
            confidence=float(confidence) if confidence is not None else None,
        )


@dataclass(frozen=True)
class DocumentAttributes:
    """Server-side document metadata returned by upload and list."""

    tenant_id: str
    status: str
    workflow_step: str
    workflow_status: str
    validation_required: bool
    not_for_training: bool
    created_at: str
    updated_at: str
    document_type_identifier: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentAttributes":
        return cls(
            tenant_id=_identifier(data, "tenant_id"),
            status=_require(data, "status", (str,)),
            workflow_step=_require(data, "workflow_step", (str,)),
            workflow_status=_require(data, "workflow_status", (str,)),
            validation_required=_require(data, "validation_required", (bool,)),
            not_for_training=_require(data, "not_for_training", (bool,)),
            created_at=_require(data, "created_at", (str,)),
            updated_at=_require(data, "updated_at", (str,)),
            document_type_identifier=_optional(data, "document_type_identifier", (str,)),
        )


@dataclass(frozen=True)
class DocumentFile:
    """A file embedded in an upload request."""

    file_name: str
    base64_file: str = field(repr=False)

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentFile":
        return cls(
            file_name=_require(data, "file_name", (str,)),
            base64_file=_require(data, "base64_file", (str,)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"file_name": self.file_name, "base64_file": self.base64_file}


@dataclass(frozen=True)
class DocumentCreateAttributes:
    """Attributes of a document create (upload) request."""

    files: tuple[DocumentFile, ...]
    classification_scope: Optional[tuple[str, ...]] = None

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentCreateAttributes":
        files = _require(data, "files", (list,))
        scope = _optional(data, "classification_scope", (list,))
        if scope is not None:
            scope = tuple(_check("classification_scope", s, (str,)) for s in scope)
        return cls(
            files=tuple(DocumentFile.from_dict(f) for f in files),
            classification_scope=scope,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"files": [f.to_dict() for f in self.files]}
        if self.classification_scope is not None:
            result["classification_scope"] = list(self.classification_scope)
        return result


@dataclass(frozen=True)
class Resource(Generic[A]):
    """
    One JSON:API resource object.

    The id is None on create requests and always set on server responses
    that identify a resource.
    """

    type: str
    attributes: A
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, decode_attributes: Callable[[dict], A]) -> "Resource[A]":
        resource_type = _require(data, "type", (str,))
        attributes = _require(data, "attributes", (dict,))
        return cls(
            type=resource_type,
            id=_identifier(data, "id", required=False),
            attributes=decode_attributes(attributes),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type}
        if self.id is not None:
            result["id"] = self.id
        result["attributes"] = self.attributes.to_dict()  # type: ignore[attr-defined]
        return result


@dataclass(frozen=True)
class ResourceRequest(Generic[A]):
    """Request body wrapping a single resource."""

    data: Resource[A]

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data.to_dict()}

    @classmethod
    def from_dict(cls, payload: Any, decode_attributes: Callable[[dict], A]) -> "ResourceRequest[A]":
        return cls(data=Resource.from_dict(_require(payload, "data", (dict,)), decode_attributes))


@dataclass(frozen=True)
class ResourceResponse(Generic[A]):
    """Response body wrapping a single resource."""

    data: Resource[A]

    @classmethod
    def from_dict(cls, payload: Any, decode_attributes: Callable[[dict], A]) -> "ResourceResponse[A]":
        return cls(data=Resource.from_dict(_require(payload, "data", (dict,)), decode_attributes))


@dataclass(frozen=True)
class ResourceArrayResponse(Generic[A]):
    """Response body wrapping a list of resources."""

    data: tuple[Resource[A], ...]

    @classmethod
    def from_dict(
        cls, payload: Any, decode_attributes: Callable[[dict], A]
    ) -> "ResourceArrayResponse[A]":
        items = _require(payload, "data", (list,))
        return cls(data=tuple(Resource.from_dict(item, decode_attributes) for item in items))
