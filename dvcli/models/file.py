"""File metadata bodies, multipart upload payloads and file records."""

from __future__ import annotations

import io
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Optional, Union

from pydantic import Field, field_validator

from dvcli.core.exceptions import PathValidationError, ValidationError
from dvcli.core.validation import validate_path_exists

from .base import RequestBody, ResponsePayload, non_blank
from .progress import OperationPhase, ProgressCallback, UploadProgress

FILE_PART = "file"
METADATA_PART = "jsonData"
OCTET_STREAM = "application/octet-stream"
CHUNK_SIZE = 1024 * 1024


class FileMetadata(RequestBody):
    """Metadata fields shared by regular and direct uploads."""

    description: str | None = None
    directory_label: str | None = Field(None, alias="directoryLabel")
    categories: list[str] | None = None
    restrict: bool | None = None

    @field_validator("categories")
    @classmethod
    def _check_categories(cls, value: list[str] | None) -> list[str] | None:
        if value is not None:
            for category in value:
                non_blank(category, "category")
        return value


class UploadBody(FileMetadata):
    """File metadata sent as the ``jsonData`` part of an upload."""

    tab_ingest: bool | None = Field(None, alias="tabIngest")
    force_replace: bool | None = Field(None, alias="forceReplace")

    @classmethod
    def example(cls) -> UploadBody:
        """Return a filled-in body to use as a starting point."""
        return cls(
            description="Some description",
            directory_label="some/path",
            categories=["Some category"],
            restrict=False,
            tab_ingest=True,
            force_replace=False,
        )


class DirectChecksum(RequestBody):
    """Checksum of a directly uploaded file, in JSON-LD notation."""

    type: str = Field("MD5", alias="@type")
    value: str = Field(..., alias="@value")


class DirectUploadBody(FileMetadata):
    """Registration body for a file already stored through an upload URL.

    ``fileName``, ``storageIdentifier`` and ``checksum`` are filled in by
    :meth:`dvcli.services.files.FileService.direct_upload`; anything set
    there by the caller is overwritten.
    """

    mime_type: str | None = Field(None, alias="mimeType")
    file_name: str | None = Field(None, alias="fileName")
    storage_identifier: str | None = Field(None, alias="storageIdentifier")
    checksum: DirectChecksum | None = None

    @classmethod
    def example(cls) -> DirectUploadBody:
        """Return a filled-in body to use as a starting point."""
        return cls(
            description="Some description",
            directory_label="some/path",
            categories=["Some category"],
            restrict=False,
            mime_type="text/plain",
        )


# =============================================================================
# Streaming
# =============================================================================


class ProgressReader:
    """Binary reader that reports every chunk handed to the HTTP layer.

    Exposes ``fileno``, ``tell`` and ``seek`` of the wrapped stream so httpx
    can size the request body up front.
    """

    def __init__(
        self,
        raw: IO[bytes],
        total: int,
        callback: Optional[ProgressCallback] = None,
        file_name: str = "",
    ) -> None:
        self._raw = raw
        self._total = total
        self._callback = callback
        self._file_name = file_name
        self._sent = 0

    def read(self, size: int = -1) -> bytes:
        chunk = self._raw.read(size)
        if chunk:
            self._sent += len(chunk)
            if self._callback is not None:
                self._callback(
                    UploadProgress(
                        phase=OperationPhase.UPLOADING,
                        current=self._sent,
                        total=self._total,
                        file_name=self._file_name,
                    )
                )
        return chunk

    def fileno(self) -> int:
        return self._raw.fileno()

    def tell(self) -> int:
        return self._raw.tell()

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        position = self._raw.seek(offset, whence)
        self._sent = position
        return position

    def chunks(self, size: int = CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the remaining content in ``size`` pieces."""
        while True:
            chunk = self.read(size)
            if not chunk:
                return
            yield chunk


# =============================================================================
# Multipart Payload
# =============================================================================


@dataclass(frozen=True)
class FileUpload:
    """File content plus metadata, rendered as a two-part multipart body.

    ``content`` is either the raw bytes or the path of a local file, which
    is opened at send time and streamed rather than held in memory.

    Both parts are mandatory: a missing filename, content or metadata is
    rejected here, before any request is built.
    """

    filename: str
    content: Union[bytes, Path]
    metadata: UploadBody

    def __post_init__(self) -> None:
        if not self.filename or not str(self.filename).strip():
            raise ValidationError("Upload needs a filename", field="filename", value=self.filename)
        if self.content is None:
            raise ValidationError("Upload needs file content", field="content")
        if not isinstance(self.content, (bytes, bytearray, Path)):
            raise ValidationError(
                "File content must be bytes or a Path",
                field="content",
                value=type(self.content).__name__,
            )
        if self.metadata is None:
            raise ValidationError("Upload needs a metadata body", field="metadata")
        if not isinstance(self.metadata, UploadBody):
            raise ValidationError(
                "Upload metadata must be an UploadBody",
                field="metadata",
                value=type(self.metadata).__name__,
            )

    @classmethod
    def from_path(cls, path: str | Path, metadata: UploadBody | None = None) -> FileUpload:
        """Reference a local file; the upload keeps the file's own name.

        Raises:
            PathValidationError: If the file is missing.
        """
        p = validate_path_exists(path, must_be_file=True)
        return cls(p.name, p, metadata if metadata is not None else UploadBody())

    @property
    def size(self) -> int:
        if isinstance(self.content, Path):
            try:
                return self.content.stat().st_size
            except OSError as e:
                raise PathValidationError(str(self.content), e.strerror or "cannot be read") from e
        return len(self.content)

    @contextmanager
    def open_content(
        self, progress_callback: Optional[ProgressCallback] = None
    ) -> Iterator[Union[bytes, IO[bytes], ProgressReader]]:
        """Open the content for sending.

        Yields the bytes themselves when there is nothing to stream or
        report, otherwise a binary reader that is closed on exit.

        Raises:
            PathValidationError: If a local file cannot be opened.
        """
        if isinstance(self.content, Path):
            try:
                raw: IO[bytes] = open(self.content, "rb")
            except OSError as e:
                raise PathValidationError(str(self.content), e.strerror or "cannot be read") from e
        elif progress_callback is None:
            yield bytes(self.content)
            return
        else:
            raw = io.BytesIO(bytes(self.content))

        with raw:
            if progress_callback is None:
                yield raw
            else:
                yield ProgressReader(raw, self.size, progress_callback, self.filename)

    @contextmanager
    def multipart(
        self, progress_callback: Optional[ProgressCallback] = None
    ) -> Iterator[tuple[dict[str, tuple[str, Any, str]], dict[str, str]]]:
        """Render ``(files, data)`` for an httpx multipart request."""
        with self.open_content(progress_callback) as source:
            files = {FILE_PART: (self.filename, source, OCTET_STREAM)}
            data = {METADATA_PART: self.metadata.to_json()}
            yield files, data


# =============================================================================
# Responses
# =============================================================================


class Checksum(ResponsePayload):
    """File checksum, e.g. ``{"type": "MD5", "value": "..."}``."""

    type: str
    value: str


class DataFile(ResponsePayload):
    """Stored file as described by the server."""

    id: int
    persistent_id: str | None = Field(None, alias="persistentId")
    filename: str | None = None
    content_type: str | None = Field(None, alias="contentType")
    filesize: int | None = None
    storage_identifier: str | None = Field(None, alias="storageIdentifier")
    checksum: Checksum | None = None


class FileRecord(ResponsePayload):
    """File entry of a dataset version."""

    label: str
    description: str | None = None
    restricted: bool | None = None
    directory_label: str | None = Field(None, alias="directoryLabel")
    categories: list[str] = Field(default_factory=list)
    version: int | None = None
    dataset_version_id: int | None = Field(None, alias="datasetVersionId")
    data_file: DataFile = Field(..., alias="dataFile")

    @classmethod
    def table_columns(cls) -> list[str]:
        """Return columns for table output."""
        return ["label", "directoryLabel", "restricted", "version"]

    def to_row(self) -> dict[str, Any]:
        """Flatten for table output."""
        row = self.to_dict()
        row["id"] = self.data_file.id
        return row


class UploadResult(ResponsePayload):
    """Files added or replaced by an upload."""

    files: list[FileRecord] = Field(default_factory=list)


class UploadTicket(ResponsePayload):
    """Upload URL(s) handed out for a direct upload.

    Small files get a single ``url``; larger ones get numbered part
    ``urls`` plus ``abort``/``complete`` endpoints.
    """

    url: str | None = None
    urls: dict[str, str] = Field(default_factory=dict)
    part_size: int | None = Field(None, alias="partSize")
    storage_identifier: str = Field(..., alias="storageIdentifier")
    abort: str | None = None
    complete: str | None = None

    @property
    def is_multipart(self) -> bool:
        return self.url is None
