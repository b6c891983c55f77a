"""Exception hierarchy for dvcli.

Provides typed exceptions for different failure modes with clear error messages.
Operation functions never raise these; they return them inside a
:class:`~dvcli.core.result.Failure`.
"""

from __future__ import annotations

from typing import Any


class DVCliError(Exception):
    """Base exception for all dvcli errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {
            "error": type(self).__name__,
            "message": self.message,
        }
        if self.details:
            result["details"] = {k: str(v) for k, v in self.details.items()}
        return result


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DVCliError):
    """Error in configuration (missing, invalid, or malformed)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ProfileNotFoundError(ConfigurationError):
    """Requested profile does not exist."""

    def __init__(self, profile: str):
        super().__init__(f"Profile not found: {profile}", field="profile", value=profile)
        self.profile = profile


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DVCliError):
    """Input validation failed before any request was sent."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidURLError(ValidationError):
    """Invalid URL format."""

    def __init__(self, url: str, reason: str = ""):
        msg = f"Invalid URL: {url}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field="url", value=url)
        self.url = url
        self.reason = reason


class InvalidIdentifierError(ValidationError):
    """Invalid Dataverse identifier (alias, id, persistent id)."""

    def __init__(self, identifier_type: str, value: str, reason: str = ""):
        msg = f"Invalid {identifier_type}: {value}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field=identifier_type, value=value)
        self.identifier_type = identifier_type
        self.reason = reason


class PathValidationError(ValidationError):
    """Path validation failed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path: {path} - {reason}", field="path", value=path)
        self.path = path
        self.reason = reason


# =============================================================================
# Transport Errors
# =============================================================================


class TransportError(DVCliError):
    """The HTTP exchange could not be completed (DNS, TCP, TLS, timeout)."""

    def __init__(self, url: str, cause: str | None = None):
        msg = f"Network error connecting to {url}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg, {"url": url})
        self.url = url
        self.cause = cause


# =============================================================================
# Remote Errors
# =============================================================================


class RemoteError(DVCliError):
    """The server answered, but reported a failure."""

    def __init__(self, status: int, message: str, url: str | None = None):
        details: dict[str, Any] = {"status": status}
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.status = status
        self.url = url

    @property
    def is_auth_error(self) -> bool:
        """Whether the server rejected the credentials."""
        return self.status in (401, 403)

    @property
    def is_not_found(self) -> bool:
        """Whether the addressed resource does not exist."""
        return self.status == 404


# =============================================================================
# Decode Errors
# =============================================================================


class DecodeError(DVCliError):
    """A successful response did not match the expected payload shape."""

    MAX_EXCERPT = 200

    def __init__(self, message: str, body: str | None = None):
        details: dict[str, Any] = {}
        if body:
            excerpt = body if len(body) <= self.MAX_EXCERPT else body[: self.MAX_EXCERPT] + "..."
            details["body"] = excerpt
        super().__init__(message, details)
        self.body = body
