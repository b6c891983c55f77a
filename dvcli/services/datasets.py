"""Dataset service for Dataverse dataset operations."""

from __future__ import annotations

from dvcli.core.exceptions import ValidationError
from dvcli.core.identifiers import Identifier
from dvcli.core.result import Failure, Result
from dvcli.core.validation import validate_alias
from dvcli.models.dataset import (
    Dataset,
    DatasetCreateBody,
    DatasetCreated,
    DatasetVersion,
    EditMetadataBody,
    VersionKind,
)
from dvcli.models.envelope import Message

from .base import BaseService, as_identifier, operation
from .collections import collection_path

DATASETS_PATH = "api/datasets"


class DatasetService(BaseService):
    """Service for dataset operations.

    Datasets are addressed by numeric id or persistent identifier; see
    :class:`~dvcli.core.identifiers.Identifier`.
    """

    @operation
    def get(
        self,
        target: Identifier | str | int,
        *,
        timeout: float | None = None,
    ) -> Result[Dataset]:
        """Get a dataset with its latest version.

        Args:
            target: Dataset id or persistent id
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the Dataset
        """
        path, params = as_identifier(target).route(DATASETS_PATH)
        return self._get(path, Dataset, params=params, timeout=timeout)

    @operation
    def create(
        self,
        collection: str | int,
        body: DatasetCreateBody,
        *,
        timeout: float | None = None,
    ) -> Result[DatasetCreated]:
        """Create a draft dataset inside a collection.

        Args:
            collection: Alias or id of the owning collection
            body: Dataset version with its metadata blocks
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the new id and persistent id
        """
        return self._post(
            collection_path(collection, "datasets"),
            DatasetCreated,
            json=body.to_dict(),
            timeout=timeout,
        )

    @operation
    def edit(
        self,
        target: Identifier | str | int,
        body: EditMetadataBody,
        replace: bool = False,
        *,
        timeout: float | None = None,
    ) -> Result[DatasetVersion]:
        """Edit the metadata of the draft version.

        Args:
            target: Dataset id or persistent id
            body: Fields to add or replace
            replace: Overwrite existing values instead of adding to them
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the updated DatasetVersion
        """
        path, params = as_identifier(target).route(DATASETS_PATH, "editMetadata")
        params["replace"] = "true" if replace else "false"
        return self._put(
            path,
            DatasetVersion,
            params=params,
            json=body.to_dict(),
            timeout=timeout,
        )

    @operation
    def delete(
        self,
        target: Identifier | str | int,
        *,
        timeout: float | None = None,
    ) -> Result[Message]:
        """Delete an unpublished dataset."""
        path, params = as_identifier(target).route(DATASETS_PATH)
        return self._delete(path, Message, params=params, timeout=timeout)

    @operation
    def publish(
        self,
        target: Identifier | str | int,
        version_kind: VersionKind | str = VersionKind.MAJOR,
        *,
        timeout: float | None = None,
    ) -> Result[Dataset]:
        """Publish the draft version of a dataset.

        Args:
            target: Dataset id or persistent id
            version_kind: ``major``, ``minor`` or ``updatecurrent``
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the published Dataset
        """
        kind = _version_kind(version_kind)
        path, params = as_identifier(target).route(DATASETS_PATH, "actions/:publish")
        params["type"] = kind.value
        return self._post(path, Dataset, params=params, timeout=timeout)

    @operation
    def link(
        self,
        target: Identifier | str | int,
        collection: str | int,
        *,
        timeout: float | None = None,
    ) -> Result[Message]:
        """Link a dataset into another collection.

        The link endpoint only takes a numeric id, so a persistent id is
        resolved with :meth:`get` first.

        Args:
            target: Dataset id or persistent id
            collection: Alias or id of the collection to link into
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the server message
        """
        identifier = as_identifier(target)
        alias = validate_alias(str(collection))

        if identifier.is_persistent:
            found = self.get(identifier, timeout=timeout)
            if isinstance(found, Failure):
                return found
            identifier = Identifier.from_id(found.value.id)

        path, _ = identifier.route(DATASETS_PATH, f"link/{alias}")
        return self._put(path, Message, timeout=timeout)


def _version_kind(value: VersionKind | str) -> VersionKind:
    try:
        return VersionKind(value)
    except ValueError as e:
        allowed = ", ".join(kind.value for kind in VersionKind)
        raise ValidationError(
            f"Unknown version kind '{value}' (expected one of: {allowed})",
            field="version_kind",
            value=value,
        ) from e
