"""File service for uploading, replacing and downloading data files."""

from __future__ import annotations

import hashlib
import re
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

import httpx

from dvcli.core.exceptions import PathValidationError, RemoteError, TransportError, ValidationError
from dvcli.core.identifiers import Identifier
from dvcli.core.result import Failure, Result, Success
from dvcli.core.validation import validate_path_exists
from dvcli.models.file import (
    CHUNK_SIZE,
    METADATA_PART,
    DirectChecksum,
    DirectUploadBody,
    FileUpload,
    ProgressReader,
    UploadResult,
    UploadTicket,
)
from dvcli.models.progress import DownloadProgress, OperationPhase, ProgressCallback

from .base import BaseService, as_identifier, operation
from .datasets import DATASETS_PATH

FILES_PATH = "api/files"
ACCESS_PATH = "api/access/datafile"
PART_SUFFIX = ".part"

# Objects stay tagged as temporary until the file is registered
TEMP_OBJECT_TAG = "dv-state=temp"

_FILENAME_EXT_RE = re.compile(r"filename\*\s*=\s*([^']*)'[^']*'([^;\s]+)", re.IGNORECASE)
_FILENAME_RE = re.compile(r'filename\s*=\s*"?([^";]+)"?', re.IGNORECASE)


class FileService(BaseService):
    """Service for data file operations.

    Re-uploading a file whose name already exists in the dataset does not
    overwrite it; the server stores the new file under a suffixed name and
    the response reports that name.
    """

    # =========================================================================
    # Upload
    # =========================================================================

    @operation
    def upload(
        self,
        dataset: Identifier | str | int,
        upload: FileUpload,
        *,
        progress_callback: Optional[ProgressCallback] = None,
        timeout: float | None = None,
    ) -> Result[UploadResult]:
        """Add a file to the draft version of a dataset.

        Args:
            dataset: Dataset id or persistent id
            upload: File content and metadata
            progress_callback: Called with an UploadProgress per sent chunk
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the added file records
        """
        path, params = as_identifier(dataset).route(DATASETS_PATH, "add")
        with upload.multipart(progress_callback) as (files, data):
            return self._post(
                path,
                UploadResult,
                params=params,
                files=files,
                data=data,
                timeout=timeout,
            )

    @operation
    def replace(
        self,
        file: Identifier | str | int,
        upload: FileUpload,
        *,
        progress_callback: Optional[ProgressCallback] = None,
        timeout: float | None = None,
    ) -> Result[UploadResult]:
        """Replace an existing file with new content.

        Args:
            file: File id or persistent id
            upload: Replacement content and metadata
            progress_callback: Called with an UploadProgress per sent chunk
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the replacement file records
        """
        path, params = as_identifier(file).route(FILES_PATH, "replace")
        with upload.multipart(progress_callback) as (files, data):
            return self._post(
                path,
                UploadResult,
                params=params,
                files=files,
                data=data,
                timeout=timeout,
            )

    @operation
    def direct_upload(
        self,
        dataset: Identifier | str | int,
        path: str | Path,
        metadata: DirectUploadBody | None = None,
        *,
        progress_callback: Optional[ProgressCallback] = None,
        timeout: float | None = None,
    ) -> Result[UploadResult]:
        """Upload a file straight to the dataset's storage, then register it.

        Three requests: an upload URL is requested for the file size, the
        content is PUT to that URL, and the stored object is registered with
        the dataset. Only single-part upload URLs are supported.

        Args:
            dataset: Dataset id or persistent id
            path: Local file to upload
            metadata: File metadata; name, storage id and checksum are
                filled in here
            progress_callback: Called with an UploadProgress per sent chunk
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the registered file records
        """
        identifier = as_identifier(dataset)
        local = validate_path_exists(path, must_be_file=True)
        body = metadata if metadata is not None else DirectUploadBody()
        size = _file_size(local)

        ticket_path, params = identifier.route(DATASETS_PATH, "uploadurls")
        ticket = self._get(
            ticket_path, UploadTicket, params={**params, "size": str(size)}, timeout=timeout
        )
        if isinstance(ticket, Failure):
            return ticket
        if ticket.value.is_multipart:
            return Failure(
                ValidationError(
                    f"{local.name} is too large for a single-part direct upload",
                    field="size",
                    value=size,
                )
            )

        stored = self._put_object(ticket.value.url, local, size, progress_callback, timeout)
        if isinstance(stored, Failure):
            return stored

        registration = body.model_copy(
            update={
                "file_name": local.name,
                "storage_identifier": ticket.value.storage_identifier,
                "checksum": DirectChecksum(value=_md5_of(local)),
            }
        )
        add_path, add_params = identifier.route(DATASETS_PATH, "add")
        return self._post(
            add_path,
            UploadResult,
            params=add_params,
            files={METADATA_PART: (None, registration.to_json())},
            timeout=timeout,
        )

    def _put_object(
        self,
        url: str,
        local: Path,
        size: int,
        progress_callback: Optional[ProgressCallback],
        timeout: float | None,
    ) -> Result[None]:
        headers = {"x-amz-tagging": TEMP_OBJECT_TAG, "Content-Length": str(size)}
        try:
            with open(local, "rb") as raw:
                reader = ProgressReader(raw, size, progress_callback, local.name)
                resp = self.client.put_to_url(
                    url, content=reader.chunks(), headers=headers, timeout=timeout
                )
        except OSError as e:
            raise PathValidationError(str(local), e.strerror or "cannot be read") from e
        except TransportError as e:
            return Failure(e)

        if not resp.is_success:
            return Failure(
                RemoteError(
                    resp.status_code,
                    f"Upload URL rejected the file ({resp.status_code} {resp.reason_phrase})",
                    str(resp.request.url.copy_with(query=None)),
                )
            )
        return Success(None)

    # =========================================================================
    # Download
    # =========================================================================

    @operation
    def download(
        self,
        file: Identifier | str | int,
        *,
        timeout: float | None = None,
    ) -> Result[bytes]:
        """Download a file's content into memory.

        Args:
            file: File id or persistent id
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the raw bytes
        """
        path, params = as_identifier(file).route(ACCESS_PATH)
        try:
            resp = self.client.get(path, params=params, timeout=timeout)
        except TransportError as e:
            return Failure(e)

        if not resp.is_success:
            return Failure(self._remote_error(resp))
        return Success(resp.content)

    @operation
    def download_to(
        self,
        file: Identifier | str | int,
        dest: str | Path,
        *,
        progress_callback: Optional[ProgressCallback] = None,
        timeout: float | None = None,
    ) -> Result[Path]:
        """Stream a file's content to disk.

        The content goes to a ``.part`` file next to the target, which is
        renamed only once the whole body has arrived; on any failure it is
        removed and the target is left untouched.

        Args:
            file: File id or persistent id
            dest: Target file, or an existing directory to save into under
                the server-provided filename
            progress_callback: Called with a DownloadProgress per received chunk
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the written path
        """
        identifier = as_identifier(file)
        path, params = identifier.route(ACCESS_PATH)
        target = Path(dest)

        try:
            with self.client.stream("GET", path, params=params, timeout=timeout) as resp:
                if not resp.is_success:
                    resp.read()
                    return Failure(self._remote_error(resp))

                if target.is_dir():
                    target = target / _filename_from(resp.headers, identifier)
                total = int(resp.headers.get("content-length") or 0)
                partial = target.with_name(target.name + PART_SUFFIX)
                try:
                    with open(partial, "wb") as fh:
                        for chunk in resp.iter_bytes():
                            fh.write(chunk)
                            if progress_callback is not None:
                                progress_callback(
                                    DownloadProgress(
                                        phase=OperationPhase.DOWNLOADING,
                                        current=resp.num_bytes_downloaded,
                                        total=total,
                                        file_path=str(target),
                                    )
                                )
                    partial.replace(target)
                except OSError as e:
                    raise PathValidationError(str(target), e.strerror or "cannot be written") from e
                finally:
                    partial.unlink(missing_ok=True)
        except TransportError as e:
            return Failure(e)

        return Success(target)


# =============================================================================
# Helpers
# =============================================================================


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError as e:
        raise PathValidationError(str(path), e.strerror or "cannot be read") from e


def _md5_of(path: Path) -> str:
    digest = hashlib.md5()
    try:
        with open(path, "rb") as fh:
            for chunk in iter(lambda: fh.read(CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as e:
        raise PathValidationError(str(path), e.strerror or "cannot be read") from e
    return digest.hexdigest()


def _filename_from(headers: httpx.Headers, identifier: Identifier) -> str:
    disposition = headers.get("content-disposition", "")
    name = ""

    extended = _FILENAME_EXT_RE.search(disposition)
    if extended:
        charset, value = extended.group(1) or "utf-8", extended.group(2)
        try:
            name = unquote(value, encoding=charset, errors="replace")
        except LookupError:
            name = unquote(value)
    else:
        match = _FILENAME_RE.search(disposition)
        if match:
            name = match.group(1)

    name = Path(name.strip()).name
    if name and name not in (".", ".."):
        return name
    safe = re.sub(r"[^A-Za-z0-9._-]", "_", identifier.value)
    return f"datafile-{safe}"
