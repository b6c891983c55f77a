"""Addressing of datasets and files by numeric id or persistent identifier."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dvcli.core.exceptions import InvalidIdentifierError
from dvcli.core.validation import NUMERIC_ID_PATTERN, validate_numeric_id, validate_persistent_id

PERSISTENT_ID_SEGMENT = ":persistentId"
PERSISTENT_ID_PARAM = "persistentId"


class IdentifierKind(Enum):
    """How a resource is addressed."""

    ID = "id"
    PERSISTENT_ID = "persistent_id"


@dataclass(frozen=True)
class Identifier:
    """A dataset or file target: database id or persistent identifier.

    Dataverse accepts both forms on most endpoints, but spells them
    differently: a numeric id goes into the path, a persistent id is replaced
    by the ``:persistentId`` placeholder and passed as a query parameter.
    """

    value: str
    kind: IdentifierKind

    @classmethod
    def from_id(cls, value: str | int) -> Identifier:
        """Build a target from a numeric database id."""
        return cls(validate_numeric_id(value), IdentifierKind.ID)

    @classmethod
    def from_pid(cls, value: str) -> Identifier:
        """Build a target from a persistent identifier (e.g. ``doi:...``)."""
        return cls(validate_persistent_id(value), IdentifierKind.PERSISTENT_ID)

    @classmethod
    def parse(cls, text: str | int) -> Identifier:
        """Guess the kind from the text: all digits is an id, anything else a pid."""
        if isinstance(text, int):
            return cls.from_id(text)
        stripped = (text or "").strip()
        if not stripped:
            raise InvalidIdentifierError("identifier", str(text), "identifier is required")
        if NUMERIC_ID_PATTERN.match(stripped):
            return cls.from_id(stripped)
        return cls.from_pid(stripped)

    @property
    def is_persistent(self) -> bool:
        return self.kind is IdentifierKind.PERSISTENT_ID

    def route(self, prefix: str, suffix: str = "") -> tuple[str, dict[str, str]]:
        """Build the path and query parameters addressing this target.

        Args:
            prefix: Collection path, e.g. ``api/datasets``.
            suffix: Path below the resource, e.g. ``actions/:publish``.

        Returns:
            Tuple of (path, params).
        """
        segment = PERSISTENT_ID_SEGMENT if self.is_persistent else self.value
        parts = [prefix.strip("/"), segment]
        if suffix:
            parts.append(suffix.strip("/"))
        path = "/".join(parts)

        params: dict[str, str] = {}
        if self.is_persistent:
            params[PERSISTENT_ID_PARAM] = self.value
        return path, params

    def __str__(self) -> str:
        return self.value
