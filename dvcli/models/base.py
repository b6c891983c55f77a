"""Base models shared by request bodies and response payloads."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypeVar

import pydantic
import yaml
from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict

from dvcli.core.exceptions import PathValidationError, ValidationError

B = TypeVar("B", bound="RequestBody")


def format_validation_error(exc: pydantic.ValidationError) -> ValidationError:
    """Convert a pydantic error into a dvcli ValidationError naming the field."""
    first = exc.errors()[0] if exc.errors() else {}
    loc = ".".join(str(part) for part in first.get("loc", ()))
    msg = first.get("msg", str(exc))
    count = exc.error_count()
    message = f"{exc.title}: {loc + ': ' if loc else ''}{msg}"
    if count > 1:
        message = f"{message} (+{count - 1} more)"
    return ValidationError(message, field=loc or None, value=first.get("input"))


class BaseModel(PydanticBaseModel):
    """Base model with common configuration."""

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire-format dictionary."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def to_json(self, *, indent: int | None = None) -> str:
        """Convert to wire-format JSON text."""
        return json.dumps(self.to_dict(), indent=indent)


class RequestBody(BaseModel):
    """Typed request body.

    Unknown keys are rejected, so a declarative file with a misspelled field
    fails before any request is sent. String values are sent as given.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @classmethod
    def from_dict(cls: type[B], data: Any) -> B:
        """Validate a mapping in wire format.

        Raises:
            ValidationError: If the mapping does not match the schema.
        """
        try:
            return cls.model_validate(data)
        except pydantic.ValidationError as e:
            raise format_validation_error(e) from e

    @classmethod
    def from_json(cls: type[B], text: str) -> B:
        """Parse and validate JSON text."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls: type[B], text: str) -> B:
        """Parse and validate YAML text."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValidationError(f"Invalid YAML: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls: type[B], path: str | Path) -> B:
        """Load a body from a JSON or YAML file.

        JSON is tried first; anything else is parsed as YAML.

        Raises:
            PathValidationError: If the file cannot be read.
            ValidationError: If the content is malformed or off-schema.
        """
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except OSError as e:
            raise PathValidationError(str(path), e.strerror or "cannot be read") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            return cls.from_yaml(text)
        return cls.from_dict(data)


class ResponsePayload(BaseModel):
    """Typed response payload.

    Extra fields sent by newer servers are kept rather than rejected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")


def non_blank(value: str, field: str) -> str:
    """Reject empty or whitespace-only strings."""
    if not value or not value.strip():
        raise ValueError(f"{field} must not be empty")
    return value
