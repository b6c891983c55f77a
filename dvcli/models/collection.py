"""Collection (dataverse) request bodies and response payloads."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import Field, field_validator

from dvcli.core.validation import ALIAS_PATTERN, EMAIL_PATTERN

from .base import RequestBody, ResponsePayload, non_blank


class CollectionType(str, Enum):
    """Collection category. Values are the exact literals the API accepts."""

    DEPARTMENT = "DEPARTMENT"
    JOURNALS = "JOURNALS"
    LABORATORY = "LABORATORY"
    ORGANIZATIONS_INSTITUTIONS = "ORGANIZATIONS_INSTITUTIONS"
    RESEARCHERS = "RESEARCHERS"
    RESEARCH_GROUP = "RESEARCH_GROUP"
    RESEARCH_PROJECTS = "RESEARCH_PROJECTS"
    TEACHING_COURSES = "TEACHING_COURSES"
    UNCATEGORIZED = "UNCATEGORIZED"


class Contact(RequestBody):
    """Collection contact."""

    contact_email: str = Field(..., alias="contactEmail")
    display_order: int | None = Field(None, alias="displayOrder", ge=0)

    @field_validator("contact_email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError(f"not an e-mail address: {value!r}")
        return value


class CollectionCreateBody(RequestBody):
    """Body for ``POST api/dataverses/{parent}``."""

    name: str
    alias: str
    dataverse_contacts: list[Contact] = Field(default_factory=list, alias="dataverseContacts")
    affiliation: str | None = None
    description: str | None = None
    dataverse_type: CollectionType = Field(..., alias="dataverseType")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return non_blank(value, "name")

    @field_validator("alias")
    @classmethod
    def _check_alias(cls, value: str) -> str:
        non_blank(value, "alias")
        if not ALIAS_PATTERN.match(value):
            raise ValueError("alias may only contain letters, digits, '-' and '_'")
        return value

    @classmethod
    def new(
        cls,
        name: str,
        alias: str,
        dataverse_type: CollectionType | str,
        *,
        affiliation: str | None = None,
        description: str | None = None,
        contacts: Iterable[str] = (),
    ) -> CollectionCreateBody:
        """Build a body field by field.

        Raises:
            ValidationError: If a field is empty or out of range.
        """
        return cls.from_dict(
            {
                "name": name,
                "alias": alias,
                "dataverseType": dataverse_type,
                "affiliation": affiliation,
                "description": description,
                "dataverseContacts": [{"contactEmail": email} for email in contacts],
            }
        )

    def add_contact(self, email: str, display_order: int | None = None) -> CollectionCreateBody:
        """Append a contact and return self for chaining."""
        self.dataverse_contacts.append(
            Contact.from_dict({"contactEmail": email, "displayOrder": display_order})
        )
        return self


# =============================================================================
# Responses
# =============================================================================


class ContactRecord(ResponsePayload):
    """Contact as reported by the server."""

    contact_email: str | None = Field(None, alias="contactEmail")
    display_order: int | None = Field(None, alias="displayOrder")


class Collection(ResponsePayload):
    """Collection record returned by create and publish."""

    id: int
    alias: str
    name: str
    affiliation: str | None = None
    description: str | None = None
    dataverse_type: str | None = Field(None, alias="dataverseType")
    dataverse_contacts: list[ContactRecord] = Field(
        default_factory=list, alias="dataverseContacts"
    )
    permission_root: bool | None = Field(None, alias="permissionRoot")
    owner_id: int | None = Field(None, alias="ownerId")
    creation_date: str | None = Field(None, alias="creationDate")
    is_released: bool | None = Field(None, alias="isReleased")

    @classmethod
    def table_columns(cls) -> list[str]:
        """Return columns for table output."""
        return ["id", "alias", "name", "dataverseType", "isReleased"]


class CollectionItem(ResponsePayload):
    """Entry of a collection's contents: a sub-collection or a dataset."""

    type: str
    id: int
    title: str | None = None
    identifier: str | None = None
    persistent_url: str | None = Field(None, alias="persistentUrl")
    protocol: str | None = None
    authority: str | None = None
    publisher: str | None = None
    publication_date: str | None = Field(None, alias="publicationDate")
    storage_identifier: str | None = Field(None, alias="storageIdentifier")

    @property
    def persistent_id(self) -> str | None:
        """Persistent id of a dataset entry, e.g. ``doi:10.5072/FK2/ABC``."""
        if self.protocol and self.authority and self.identifier:
            return f"{self.protocol}:{self.authority}/{self.identifier}"
        return None

    @classmethod
    def table_columns(cls) -> list[str]:
        """Return columns for table output."""
        return ["type", "id", "title", "identifier", "publicationDate"]
