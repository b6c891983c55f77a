"""Base service with the request/response mapping shared by all operations."""

from __future__ import annotations

import logging
from functools import lru_cache, wraps
from typing import TYPE_CHECKING, Any, Callable, TypeVar

import httpx
import pydantic
from pydantic import TypeAdapter

from dvcli.core.exceptions import DecodeError, DVCliError, RemoteError, TransportError
from dvcli.core.identifiers import Identifier
from dvcli.core.result import Failure, Result, Success
from dvcli.models.base import format_validation_error
from dvcli.models.envelope import ApiResponse

if TYPE_CHECKING:
    from dvcli.core.client import DataverseClient

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def operation(f: F) -> F:
    """Return any dvcli error raised by an operation as a Failure.

    Argument problems (a malformed identifier, an unreadable file) surface
    the same way as remote failures, so callers only ever inspect a Result.
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except DVCliError as e:
            return Failure(e)

    return wrapper  # type: ignore


@lru_cache(maxsize=None)
def _adapter(payload_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(payload_type)


def as_identifier(target: Identifier | str | int) -> Identifier:
    """Accept an Identifier, a numeric id, or a persistent id string."""
    if isinstance(target, Identifier):
        return target
    return Identifier.parse(target)


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, client: DataverseClient) -> None:
        """Initialize service with a Dataverse client.

        Args:
            client: DataverseClient instance, possibly shared between threads.
        """
        self.client = client

    # =========================================================================
    # Verbs
    # =========================================================================

    def _get(self, path: str, payload_type: Any, **kwargs: Any) -> Result[Any]:
        """Execute GET request and decode the payload.

        Args:
            path: API endpoint path
            payload_type: Type the payload is validated against
            **kwargs: Additional request parameters

        Returns:
            Success with the payload, or Failure with the classified error
        """
        return self._send(self.client.get, path, payload_type, **kwargs)

    def _post(self, path: str, payload_type: Any, **kwargs: Any) -> Result[Any]:
        """Execute POST request and decode the payload."""
        return self._send(self.client.post, path, payload_type, **kwargs)

    def _put(self, path: str, payload_type: Any, **kwargs: Any) -> Result[Any]:
        """Execute PUT request and decode the payload."""
        return self._send(self.client.put, path, payload_type, **kwargs)

    def _delete(self, path: str, payload_type: Any, **kwargs: Any) -> Result[Any]:
        """Execute DELETE request and decode the payload."""
        return self._send(self.client.delete, path, payload_type, **kwargs)

    def _send(
        self,
        verb: Callable[..., httpx.Response],
        path: str,
        payload_type: Any,
        **kwargs: Any,
    ) -> Result[Any]:
        try:
            resp = verb(path, **kwargs)
        except TransportError as e:
            return Failure(e)
        return self._evaluate(resp, payload_type)

    # =========================================================================
    # Response Mapping
    # =========================================================================

    def _evaluate(self, resp: httpx.Response, payload_type: Any) -> Result[Any]:
        """Map an HTTP response onto a Result.

        Args:
            resp: Response of any status.
            payload_type: Type the payload is validated against.

        Returns:
            Success with the payload; Failure with RemoteError for non-2xx
            statuses and ``"status": "ERROR"`` envelopes; Failure with
            DecodeError when the body is not JSON or off-schema.
        """
        if not resp.is_success:
            return Failure(self._remote_error(resp))

        try:
            body = resp.json()
        except ValueError:
            return Failure(
                DecodeError(
                    f"Response from {resp.request.url.path} is not valid JSON",
                    resp.text,
                )
            )

        if ApiResponse.is_envelope(body):
            try:
                envelope = ApiResponse.model_validate(body)
            except pydantic.ValidationError as e:
                reason = format_validation_error(e).message
                return Failure(DecodeError(f"Malformed response envelope: {reason}", resp.text))
            if not envelope.is_ok:
                return Failure(
                    RemoteError(resp.status_code, envelope.error_message, str(resp.request.url))
                )
            body = envelope.data

        try:
            payload = _adapter(payload_type).validate_python(body)
        except pydantic.ValidationError as e:
            reason = format_validation_error(e).message
            return Failure(DecodeError(f"Unexpected response payload: {reason}", resp.text))

        return Success(payload)

    def _remote_error(self, resp: httpx.Response) -> RemoteError:
        """Build a RemoteError, preferring the server's own message."""
        message = None
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            message = str(body["message"])
        if not message:
            message = f"{resp.status_code} {resp.reason_phrase}".strip()

        logger.debug("Remote error %s: %s", resp.status_code, message)
        return RemoteError(resp.status_code, message, str(resp.request.url))
