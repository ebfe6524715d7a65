"""
Parashift v2 API client implementation.
"""

import base64
import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import requests

from ..config import Profile
from ..schemas import (
    DOCUMENTS_TYPE,
    DocumentAttributes,
    DocumentCreateAttributes,
    DocumentFile,
    FileAttributes,
    Resource,
    ResourceArrayResponse,
    ResourceDecodeError,
    ResourceRequest,
    ResourceResponse,
    TextAttributes,
)

logger = logging.getLogger(__name__)

IMAGE_FILE_TYPE = "color_jpeg"
SOURCE_FILE_TYPE = "input_file"

JSON_API_CONTENT_TYPE = "application/vnd.api+json"

_EXTENSIONS = {
    "image/jpeg": ".jpeg",
    "application/pdf": ".pdf",
}


class ParashiftError(Exception):
    """Base exception for Parashift client errors."""

    pass


class ParashiftAPIError(ParashiftError):
    """API answered with a status other than the expected one."""

    def __init__(self, status_code: int, message: str, response_body: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        super().__init__(f"Request failed with status code {status_code} {message}".rstrip() + ".")


class ParashiftConnectionError(ParashiftError):
    """Request could not be sent or timed out."""

    pass


class ParashiftDecodeError(ParashiftError):
    """Response body does not match the expected schema."""

    pass


class DocumentNotFoundError(ParashiftError):
    """API returned no resources for a document."""

    def __init__(self, document_id: int | str):
        self.document_id = document_id
        super().__init__(f"Document {document_id} does not exist.")


class LocalFileError(ParashiftError):
    """Local file could not be read or written."""

    pass


def extension_by_mime_type(mime_type: str) -> str:
    """File extension for a MIME type; empty for unknown types."""
    return _EXTENSIONS.get(mime_type, "")


class ParashiftClient:
    """
    Client for the Parashift v2 API.

    Every request carries the profile's API token and the JSON:API content
    type. File downloads go straight to the URL the API hands out, without
    the token.
    """

    DEFAULT_TIMEOUT = 60
    DOWNLOAD_CHUNK_SIZE = 64 * 1024

    def __init__(self, base_url: str, token: str, timeout: int = DEFAULT_TIMEOUT):
        """
        Initialize Parashift client.

        Args:
            base_url: API root (e.g., "https://api.parashift.io")
            token: API token, sent verbatim as the Authorization header
            timeout: Request timeout in seconds
        """
        # http.client encodes header values as latin-1
        try:
            token.encode("latin-1")
        except UnicodeEncodeError as e:
            raise ParashiftError("API token contains characters not allowed in an HTTP header.") from e

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "Content-Type": JSON_API_CONTENT_TYPE,
            "Authorization": token,
        })

    @classmethod
    def from_profile(cls, profile: Profile, timeout: int = DEFAULT_TIMEOUT) -> "ParashiftClient":
        return cls(profile.base_url, profile.api_token, timeout=timeout)

    def __repr__(self) -> str:
        return f"ParashiftClient(base_url={self.base_url!r})"

    def _request(
        self,
        method: str,
        endpoint: str,
        expected_status: int,
        params: Optional[dict] = None,
        data: Optional[str] = None,
    ) -> requests.Response:
        """Make an API request and check the status before anything is decoded."""
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {url} params={params}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                data=data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise ParashiftConnectionError(f"Request to {self.base_url} timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise ParashiftConnectionError(f"Unable to send request.\n\n{e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")

        if response.status_code != expected_status:
            raise ParashiftAPIError(
                status_code=response.status_code,
                message=response.reason or "",
                response_body=response.text,
            )

        return response

    @staticmethod
    def _decode(response: requests.Response, envelope: Any, decode_attributes: Callable) -> Any:
        try:
            payload = response.json()
        except ValueError as e:
            raise ParashiftDecodeError(f"Unable to parse response. {e}") from e
        try:
            return envelope.from_dict(payload, decode_attributes)
        except ResourceDecodeError as e:
            raise ParashiftDecodeError(f"Unable to parse response. {e}") from e

    def get_files(self, file_type: str, document_id: int | str) -> list[Resource[FileAttributes]]:
        """
        Files of one type attached to a document.

        Args:
            file_type: Server-side file type, e.g. "color_jpeg" or "input_file"
            document_id: Parashift document ID

        Returns:
            Matching file resources in server order

        Raises:
            DocumentNotFoundError: The API returned no files at all
        """
        response = self._request(
            "GET",
            "/v2/files/",
            expected_status=200,
            params={
                "filter[record_id]": str(document_id),
                "extra_fields[files]": "url",
            },
        )
        content = self._decode(response, ResourceArrayResponse, FileAttributes.from_dict)

        # An empty list can also mean the document has no files yet
        if not content.data:
            raise DocumentNotFoundError(document_id)

        return [f for f in content.data if f.attributes.file_type == file_type]

    def download_files(
        self,
        file_type: str,
        document_id: int | str,
        target_dir: Path = Path("."),
        progress: Optional[Callable[[Path], None]] = None,
    ) -> list[Path]:
        """
        Download all files of one type into target_dir.

        Files are named <document_id>-<n><extension>, numbered from 0 in the
        order the API lists them. Existing files are overwritten.

        Args:
            file_type: Server-side file type
            document_id: Parashift document ID
            target_dir: Directory to write into
            progress: Called with each destination path before it is downloaded

        Returns:
            Paths written, in download order
        """
        written = []
        for index, file in enumerate(self.get_files(file_type, document_id)):
            extension = extension_by_mime_type(file.attributes.mime_type)
            destination = Path(target_dir) / f"{document_id}-{index}{extension}"
            if progress:
                progress(destination)
            self.download_file(file.attributes.url, destination)
            written.append(destination)
        return written

    def get_images(
        self,
        document_id: int | str,
        target_dir: Path = Path("."),
        progress: Optional[Callable[[Path], None]] = None,
    ) -> list[Path]:
        """Download the rendered page images of a document."""
        return self.download_files(IMAGE_FILE_TYPE, document_id, target_dir, progress)

    def get_source_files(
        self,
        document_id: int | str,
        target_dir: Path = Path("."),
        progress: Optional[Callable[[Path], None]] = None,
    ) -> list[Path]:
        """Download the originally uploaded files of a document."""
        return self.download_files(SOURCE_FILE_TYPE, document_id, target_dir, progress)

    def download_file(self, url: str, destination: Path) -> int:
        """
        Fetch a file URL handed out by the API and write it to destination.

        Uses a plain GET outside the session, so the API token is not sent.

        Returns:
            Number of bytes written
        """
        logger.debug(f"Downloading {url} to {destination}")
        try:
            response = requests.get(url, timeout=self.timeout, stream=True)
        except requests.exceptions.RequestException as e:
            raise ParashiftConnectionError(f"Unable to download {destination}: {e}") from e

        with response:
            if not response.ok:
                raise ParashiftAPIError(
                    status_code=response.status_code,
                    message=response.reason or "",
                )

            size = 0
            try:
                with open(destination, "wb") as f:
                    for chunk in response.iter_content(chunk_size=self.DOWNLOAD_CHUNK_SIZE):
                        f.write(chunk)
                        size += len(chunk)
            except requests.exceptions.RequestException as e:
                raise ParashiftConnectionError(f"Download of {destination} failed: {e}") from e
            except OSError as e:
                raise LocalFileError(f"Unable to write {destination}: {e.strerror or e}") from e

        logger.debug(f"Wrote {size} bytes to {destination}")
        return size

    def get_tokens(self, document_id: int | str) -> list[Resource[TextAttributes]]:
        """
        OCR tokens recognized in a document.

        Raises:
            DocumentNotFoundError: The API returned no tokens
        """
        response = self._request(
            "GET",
            f"/v2/documents/{document_id}/recognitions",
            expected_status=200,
        )
        content = self._decode(response, ResourceArrayResponse, TextAttributes.from_dict)

        if not content.data:
            raise DocumentNotFoundError(document_id)

        return list(content.data)

    def upload_document(
        self,
        file_path: Path,
        classification_scope: Optional[list[str]] = None,
    ) -> Resource[DocumentAttributes]:
        """
        Upload a file as a new document.

        Args:
            file_path: Local file to upload
            classification_scope: Document types the classifier may choose from

        Returns:
            The created document resource (id always set)
        """
        file_path = Path(file_path)
        if not file_path.name:
            raise LocalFileError(f"Unable to determine file name of {file_path}.")

        try:
            file_bytes = file_path.read_bytes()
        except OSError as e:
            raise LocalFileError(f"Unable to read {file_path}: {e.strerror or e}") from e

        payload = ResourceRequest(
            data=Resource(
                type=DOCUMENTS_TYPE,
                attributes=DocumentCreateAttributes(
                    files=(
                        DocumentFile(
                            file_name=file_path.name,
                            base64_file=base64.b64encode(file_bytes).decode("ascii"),
                        ),
                    ),
                    classification_scope=(
                        tuple(classification_scope) if classification_scope is not None else None
                    ),
                ),
            )
        )

        logger.debug(f"Uploading {file_path.name} ({len(file_bytes)} bytes)")
        response = self._request(
            "POST",
            "/v2/documents/",
            expected_status=201,
            data=json.dumps(payload.to_dict()),
        )
        content = self._decode(response, ResourceResponse, DocumentAttributes.from_dict)

        if content.data.id is None:
            raise ParashiftDecodeError("Unable to parse response. Created document has no id.")

        return content.data

    def list_documents(self, document_ids: list[str]) -> list[Resource[DocumentAttributes]]:
        """
        Documents with the given IDs.

        Returns:
            Document resources in server order (each with an id)
        """
        response = self._request(
            "GET",
            "/v2/documents/",
            expected_status=200,
            params={"filter[id][eq]": ",".join(str(d) for d in document_ids)},
        )
        content = self._decode(response, ResourceArrayResponse, DocumentAttributes.from_dict)

        for doc in content.data:
            if doc.id is None:
                raise ParashiftDecodeError("Unable to parse response. Document without id.")

        return list(content.data)
