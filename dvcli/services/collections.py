"""Collection service for Dataverse collection ("dataverse") operations."""

from __future__ import annotations

from dvcli.core.result import Result
from dvcli.core.validation import validate_alias
from dvcli.models.collection import Collection, CollectionCreateBody, CollectionItem
from dvcli.models.envelope import Message

from .base import BaseService, operation

COLLECTIONS_PATH = "api/dataverses"


def collection_path(alias: str | int, *suffix: str) -> str:
    """Build ``api/dataverses/{alias}[/suffix...]`` for an alias or numeric id."""
    parts = [COLLECTIONS_PATH, validate_alias(str(alias))]
    parts.extend(part.strip("/") for part in suffix if part)
    return "/".join(parts)


class CollectionService(BaseService):
    """Service for collection operations.

    Collections are addressed by alias or numeric id, both of which go into
    the same path segment.
    """

    @operation
    def create(
        self,
        parent: str | int,
        body: CollectionCreateBody,
        *,
        timeout: float | None = None,
    ) -> Result[Collection]:
        """Create a collection below a parent collection.

        Args:
            parent: Alias or id of the parent (``root`` for the top level)
            body: Collection attributes
            timeout: Request timeout override in seconds

        Returns:
            Result carrying the created Collection
        """
        return self._post(
            collection_path(parent),
            Collection,
            json=body.to_dict(),
            timeout=timeout,
        )

    @operation
    def delete(self, alias: str | int, *, timeout: float | None = None) -> Result[Message]:
        """Delete an unpublished, empty collection."""
        return self._delete(collection_path(alias), Message, timeout=timeout)

    @operation
    def publish(self, alias: str | int, *, timeout: float | None = None) -> Result[Collection]:
        """Publish a collection."""
        return self._post(
            collection_path(alias, "actions/:publish"),
            Collection,
            timeout=timeout,
        )

    @operation
    def get_contents(
        self,
        alias: str | int,
        *,
        timeout: float | None = None,
    ) -> Result[list[CollectionItem]]:
        """List the datasets and sub-collections directly inside a collection.

        Args:
            alias: Collection alias or id
            timeout: Request timeout override in seconds

        Returns:
            Result carrying a list of CollectionItem
        """
        return self._get(
            collection_path(alias, "contents"),
            list[CollectionItem],
            timeout=timeout,
        )
