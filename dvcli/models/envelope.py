"""The ``{"status", "data", "message"}`` wrapper used by the native API."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field

from .base import ResponsePayload


class ApiStatus(str, Enum):
    """Status literal reported inside every native API response."""

    OK = "OK"
    ERROR = "ERROR"


class ApiResponse(ResponsePayload):
    """Native API response wrapper."""

    status: ApiStatus
    data: Any = None
    message: Any = None
    request_url: str | None = Field(None, alias="requestUrl")
    request_method: str | None = Field(None, alias="requestMethod")

    @staticmethod
    def is_envelope(body: Any) -> bool:
        """Check whether a decoded body uses the wrapper."""
        return (
            isinstance(body, dict)
            and body.get("status") in (ApiStatus.OK.value, ApiStatus.ERROR.value)
        )

    @property
    def is_ok(self) -> bool:
        return self.status is ApiStatus.OK

    @property
    def error_message(self) -> str:
        """Readable message for an ERROR response."""
        if self.message is None:
            return "Request failed"
        if isinstance(self.message, str):
            return self.message
        return str(self.message)


class Message(ResponsePayload):
    """Plain message payload returned by delete and link endpoints."""

    message: str
