"""Dataset request bodies and response payloads.

Dataset metadata travels as metadata blocks, each a list of typed fields::

    {"typeName": "title", "multiple": false,
     "typeClass": "primitive", "value": "My dataset"}

Compound fields nest further fields, keyed by their ``typeName``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Any, Union

from pydantic import Field, field_validator, model_validator

from dvcli.core.exceptions import ValidationError

from .base import RequestBody, ResponsePayload, non_blank

CITATION_BLOCK = "citation"


class TypeClass(str, Enum):
    """Kind of a metadata field value."""

    PRIMITIVE = "primitive"
    CONTROLLED_VOCABULARY = "controlledVocabulary"
    COMPOUND = "compound"


class VersionKind(str, Enum):
    """Version bump applied when publishing a dataset."""

    MAJOR = "major"
    MINOR = "minor"
    UPDATE_CURRENT = "updatecurrent"


# =============================================================================
# Metadata Fields
# =============================================================================


class MetadataField(RequestBody):
    """Single field of a metadata block.

    ``multiple`` must agree with the shape of ``value``: a list for
    multi-valued fields, a scalar otherwise.
    """

    type_name: str = Field(..., alias="typeName")
    multiple: bool
    type_class: TypeClass = Field(..., alias="typeClass")
    value: Union[
        str,
        list[str],
        dict[str, MetadataField],
        list[dict[str, MetadataField]],
    ]

    @field_validator("type_name")
    @classmethod
    def _check_type_name(cls, value: str) -> str:
        return non_blank(value, "typeName")

    @model_validator(mode="after")
    def _check_value_shape(self) -> MetadataField:
        is_list = isinstance(self.value, list)
        if self.multiple != is_list:
            expected = "a list" if self.multiple else "a single value"
            raise ValueError(
                f"field '{self.type_name}' has multiple={self.multiple}, "
                f"value must be {expected}"
            )

        items = self.value if is_list else [self.value]
        if self.type_class is TypeClass.COMPOUND:
            if not all(isinstance(item, dict) for item in items):
                raise ValueError(f"compound field '{self.type_name}' needs sub-field mappings")
        elif not all(isinstance(item, str) for item in items):
            raise ValueError(
                f"{self.type_class.value} field '{self.type_name}' needs string values"
            )
        return self

    @classmethod
    def _build(
        cls,
        type_name: str,
        type_class: TypeClass,
        value: Any,
        multiple: bool | None,
    ) -> MetadataField:
        if isinstance(value, (list, tuple)):
            value = list(value)
        return cls.from_dict(
            {
                "typeName": type_name,
                "multiple": isinstance(value, list) if multiple is None else multiple,
                "typeClass": type_class,
                "value": value,
            }
        )

    @classmethod
    def primitive(
        cls,
        type_name: str,
        value: str | Sequence[str],
        *,
        multiple: bool | None = None,
    ) -> MetadataField:
        """Free-text field. ``multiple`` defaults to whether ``value`` is a list."""
        return cls._build(type_name, TypeClass.PRIMITIVE, value, multiple)

    @classmethod
    def controlled(
        cls,
        type_name: str,
        value: str | Sequence[str],
        *,
        multiple: bool | None = None,
    ) -> MetadataField:
        """Field restricted to a controlled vocabulary (e.g. ``subject``)."""
        return cls._build(type_name, TypeClass.CONTROLLED_VOCABULARY, value, multiple)

    @classmethod
    def compound(
        cls,
        type_name: str,
        value: Mapping[str, MetadataField] | Sequence[Mapping[str, MetadataField]],
        *,
        multiple: bool | None = None,
    ) -> MetadataField:
        """Field grouping sub-fields, e.g. ``author`` with ``authorName``.

        Pass one mapping for a single-valued field or a list of mappings for
        a multi-valued one.
        """
        if isinstance(value, Mapping):
            value = dict(value)
        else:
            value = [dict(item) for item in value]
        return cls._build(type_name, TypeClass.COMPOUND, value, multiple)


class MetadataBlock(RequestBody):
    """Named group of metadata fields, e.g. the ``citation`` block."""

    display_name: str | None = Field(None, alias="displayName")
    fields: list[MetadataField] = Field(default_factory=list)


class License(RequestBody):
    """Dataset license, e.g. ``CC0 1.0``."""

    name: str
    uri: str | None = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return non_blank(value, "license name")


# =============================================================================
# Request Bodies
# =============================================================================


class DatasetVersionBody(RequestBody):
    """The ``datasetVersion`` member of a create body."""

    license: License | None = None
    terms_of_use: str | None = Field(None, alias="termsOfUse")
    metadata_blocks: dict[str, MetadataBlock] = Field(
        default_factory=dict, alias="metadataBlocks"
    )


class DatasetCreateBody(RequestBody):
    """Body for ``POST api/dataverses/{collection}/datasets``."""

    dataset_version: DatasetVersionBody = Field(
        default_factory=DatasetVersionBody, alias="datasetVersion"
    )

    @classmethod
    def new(
        cls,
        *,
        license: License | str | None = None,
        terms_of_use: str | None = None,
    ) -> DatasetCreateBody:
        """Start an empty body; add fields with :meth:`add_field`."""
        if isinstance(license, str):
            license = License.from_dict({"name": license})
        return cls(
            datasetVersion=DatasetVersionBody(license=license, termsOfUse=terms_of_use)
        )

    def add_field(
        self,
        field: MetadataField,
        block: str = CITATION_BLOCK,
        display_name: str | None = None,
    ) -> DatasetCreateBody:
        """Append a field to a metadata block, creating the block if needed."""
        blocks = self.dataset_version.metadata_blocks
        if block not in blocks:
            blocks[block] = MetadataBlock(displayName=display_name)
        elif display_name and blocks[block].display_name is None:
            blocks[block].display_name = display_name
        blocks[block].fields.append(field)
        return self

    @classmethod
    def citation(
        cls,
        title: str,
        authors: Iterable[str],
        contacts: Iterable[tuple[str, str]],
        descriptions: Iterable[str],
        subjects: Iterable[str],
        *,
        license: License | str | None = None,
    ) -> DatasetCreateBody:
        """Build a body holding the minimal citation block.

        Args:
            title: Dataset title.
            authors: Author names.
            contacts: ``(name, email)`` pairs.
            descriptions: Description paragraphs.
            subjects: Subject vocabulary terms, e.g. ``"Medicine, Health and Life Sciences"``.
            license: License name or :class:`License`.

        Raises:
            ValidationError: If the title is empty or a value is malformed.
        """
        if not title or not title.strip():
            raise ValidationError("Dataset title must not be empty", field="title", value=title)

        primitive = MetadataField.primitive
        body = cls.new(license=license)
        body.add_field(primitive("title", title), display_name="Citation Metadata")
        body.add_field(
            MetadataField.compound(
                "author",
                [{"authorName": primitive("authorName", name)} for name in authors],
            )
        )
        body.add_field(
            MetadataField.compound(
                "datasetContact",
                [
                    {
                        "datasetContactName": primitive("datasetContactName", name),
                        "datasetContactEmail": primitive("datasetContactEmail", email),
                    }
                    for name, email in contacts
                ],
            )
        )
        body.add_field(
            MetadataField.compound(
                "dsDescription",
                [
                    {"dsDescriptionValue": primitive("dsDescriptionValue", text)}
                    for text in descriptions
                ],
            )
        )
        body.add_field(MetadataField.controlled("subject", list(subjects)))
        return body

    def get_field(self, type_name: str, block: str = CITATION_BLOCK) -> MetadataField | None:
        """Look up a field by ``typeName``."""
        metadata_block = self.dataset_version.metadata_blocks.get(block)
        if metadata_block is None:
            return None
        return next((f for f in metadata_block.fields if f.type_name == type_name), None)


class EditMetadataBody(RequestBody):
    """Body for ``PUT api/datasets/{id}/editMetadata``."""

    fields: list[MetadataField] = Field(..., min_length=1)


# =============================================================================
# Responses
# =============================================================================


class DatasetCreated(ResponsePayload):
    """Identifiers assigned to a new dataset."""

    id: int
    persistent_id: str = Field(..., alias="persistentId")


class Dataset(ResponsePayload):
    """Dataset record returned by get and publish."""

    id: int
    identifier: str | None = None
    persistent_url: str | None = Field(None, alias="persistentUrl")
    protocol: str | None = None
    authority: str | None = None
    publisher: str | None = None
    publication_date: str | None = Field(None, alias="publicationDate")
    storage_identifier: str | None = Field(None, alias="storageIdentifier")
    latest_version: dict[str, Any] | None = Field(None, alias="latestVersion")

    @property
    def persistent_id(self) -> str | None:
        """Persistent id, e.g. ``doi:10.5072/FK2/ABC``."""
        if self.protocol and self.authority and self.identifier:
            return f"{self.protocol}:{self.authority}/{self.identifier}"
        return None

    @classmethod
    def table_columns(cls) -> list[str]:
        """Return columns for table output."""
        return ["id", "identifier", "publisher", "publicationDate"]


class DatasetVersion(ResponsePayload):
    """Dataset version returned after editing metadata."""

    id: int | None = None
    dataset_id: int | None = Field(None, alias="datasetId")
    dataset_persistent_id: str | None = Field(None, alias="datasetPersistentId")
    version_state: str | None = Field(None, alias="versionState")
    version_number: int | None = Field(None, alias="versionNumber")
    version_minor_number: int | None = Field(None, alias="versionMinorNumber")
    metadata_blocks: dict[str, Any] | None = Field(None, alias="metadataBlocks")

    @classmethod
    def table_columns(cls) -> list[str]:
        """Return columns for table output."""
        return ["id", "datasetPersistentId", "versionState", "versionNumber"]
