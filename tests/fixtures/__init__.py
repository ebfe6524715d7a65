"""
Sample API payloads and profiles for testing.

Builders return plain dicts shaped like Parashift v2 API responses so tests
can register them with `responses`.
"""

BASE_URL = "https://api.parashift.test"
TOKEN = "test-token-12345"

SAMPLE_CONFIG = """
profiles:
  - name: a
    api_token: token-a
    domain: a.parashift.test
    default: false
  - name: b
    api_token: test-token-12345
    domain: api.parashift.test
    tenant_id: 77
    default: true
"""


def document_resource(doc_id: str | None = "1001", **overrides) -> dict:
    """Document resource as returned by /v2/documents/."""
    attributes = {
        "tenant_id": "77",
        "status": "pending",
        "workflow_step": "classification",
        "workflow_status": "in_progress",
        "validation_required": False,
        "not_for_training": False,
        "created_at": "2024-11-19T10:00:00Z",
        "updated_at": "2024-11-19T10:00:01Z",
        "document_type_identifier": None,
    }
    attributes.update(overrides)
    resource = {"type": "documents", "attributes": attributes}
    if doc_id is not None:
        resource["id"] = doc_id
    return resource


def file_resource(file_id: str, file_type: str, mime_type: str, url: str) -> dict:
    """File resource as returned by /v2/files/."""
    return {
        "type": "files",
        "id": file_id,
        "attributes": {"url": url, "mime_type": mime_type, "file_type": file_type},
    }


def token_resource(value: str, rect: tuple, confidence: float | None = None) -> dict:
    """Recognition resource as returned by /v2/documents/<id>/recognitions."""
    top, bottom, left, right = rect
    return {
        "type": "recognitions",
        "id": f"r-{value}",
        "attributes": {
            "value": value,
            "confidence": confidence,
            "coordinates": {"top": top, "bottom": bottom, "left": left, "right": right},
            "page_id": "1",
        },
    }
