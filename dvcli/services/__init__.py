"""Service layer for Dataverse operations.

Each service method is one API operation and returns a
:class:`~dvcli.core.result.Result` instead of raising.
"""

from __future__ import annotations

from .base import BaseService, as_identifier, operation
from .collections import CollectionService
from .datasets import DatasetService
from .files import FileService
from .info import InfoService

__all__ = [
    "BaseService",
    "operation",
    "as_identifier",
    "InfoService",
    "CollectionService",
    "DatasetService",
    "FileService",
]
