"""Data models for dvcli.

Provides Pydantic models for request bodies and response payloads of the
Dataverse native API.
"""

from __future__ import annotations

from .base import BaseModel, RequestBody, ResponsePayload, format_validation_error
from .collection import (
    Collection,
    CollectionCreateBody,
    CollectionItem,
    CollectionType,
    Contact,
    ContactRecord,
)
from .dataset import (
    Dataset,
    DatasetCreateBody,
    DatasetCreated,
    DatasetVersion,
    DatasetVersionBody,
    EditMetadataBody,
    License,
    MetadataBlock,
    MetadataField,
    TypeClass,
    VersionKind,
)
from .envelope import ApiResponse, ApiStatus, Message
from .file import (
    Checksum,
    DataFile,
    DirectChecksum,
    DirectUploadBody,
    FileMetadata,
    FileRecord,
    FileUpload,
    ProgressReader,
    UploadBody,
    UploadResult,
    UploadTicket,
)
from .info import VersionInfo
from .progress import DownloadProgress, OperationPhase, Progress, ProgressCallback, UploadProgress

__all__ = [
    # Base
    "BaseModel",
    "RequestBody",
    "ResponsePayload",
    "format_validation_error",
    # Envelope
    "ApiResponse",
    "ApiStatus",
    "Message",
    # Info
    "VersionInfo",
    # Collections
    "CollectionType",
    "Contact",
    "CollectionCreateBody",
    "ContactRecord",
    "Collection",
    "CollectionItem",
    # Datasets
    "TypeClass",
    "VersionKind",
    "MetadataField",
    "MetadataBlock",
    "License",
    "DatasetVersionBody",
    "DatasetCreateBody",
    "EditMetadataBody",
    "DatasetCreated",
    "Dataset",
    "DatasetVersion",
    # Files
    "FileMetadata",
    "UploadBody",
    "DirectChecksum",
    "DirectUploadBody",
    "FileUpload",
    "ProgressReader",
    "UploadTicket",
    "Checksum",
    "DataFile",
    "FileRecord",
    "UploadResult",
    # Progress
    "OperationPhase",
    "Progress",
    "ProgressCallback",
    "UploadProgress",
    "DownloadProgress",
]
