"""HTTP client for the Dataverse native API.

Thin transport over :mod:`httpx`: binds a base URL and an optional API token,
and turns network-level failures into :class:`TransportError`. HTTP error
statuses are returned to the caller untouched; classifying them is the job of
the service layer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import httpx

from dvcli import __version__
from dvcli.core.exceptions import TransportError
from dvcli.core.validation import validate_server_url

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

DEFAULT_TIMEOUT = 30.0
API_KEY_HEADER = "X-Dataverse-key"
USER_AGENT = f"dvcli/{__version__}"


# =============================================================================
# DataverseClient
# =============================================================================


@dataclass(frozen=True)
class DataverseClient:
    """Immutable handle on a Dataverse instance.

    The handle owns one :class:`httpx.Client` (and therefore one connection
    pool) and may be shared by any number of threads issuing independent
    calls. Constructing it performs no network activity.
    """

    base_url: str
    api_token: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    transport: httpx.BaseTransport | None = field(default=None, repr=False, compare=False)
    _http: httpx.Client = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate the URL and build the underlying HTTP client."""
        object.__setattr__(self, "base_url", validate_server_url(self.base_url))
        object.__setattr__(
            self,
            "_http",
            httpx.Client(
                base_url=self.base_url + "/",
                headers=self._default_headers(),
                timeout=self.timeout,
                verify=self.verify_ssl,
                follow_redirects=True,
                transport=self.transport,
            ),
        )

    def _default_headers(self) -> dict[str, str]:
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if self.api_token:
            headers[API_KEY_HEADER] = self.api_token
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    # =========================================================================
    # Client Management
    # =========================================================================

    @property
    def is_authenticated(self) -> bool:
        """Check if requests carry an API token."""
        return bool(self.api_token)

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._http.close()

    def __enter__(self) -> DataverseClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def _url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any | None = None,
        data: dict[str, str] | None = None,
        files: Any | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Execute a single HTTP request.

        Args:
            method: HTTP method.
            path: API path relative to the base URL.
            params: Query parameters.
            json: JSON body.
            data: Form fields (sent as multipart parts together with ``files``).
            files: Multipart file parts.
            timeout: Request timeout override in seconds.

        Returns:
            HTTP response, whatever its status.

        Raises:
            TransportError: If the exchange could not be completed.
        """
        request_timeout = timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT
        logger.debug("%s %s params=%s", method, path, params)

        try:
            resp = self._http.request(
                method,
                path.lstrip("/"),
                params=params or None,
                json=json,
                data=data,
                files=files,
                timeout=request_timeout,
            )
        except httpx.TimeoutException as e:
            effective = timeout if timeout is not None else self.timeout
            raise TransportError(self._url_for(path), f"Timeout after {effective}s") from e
        except httpx.ConnectError as e:
            raise TransportError(self._url_for(path), f"Connection failed: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(self._url_for(path), str(e) or type(e).__name__) from e

        logger.debug("%s %s -> %s", method, path, resp.status_code)
        return resp

    def get(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """GET request."""
        return self._request("GET", path, params=params, timeout=timeout)

    def post(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any | None = None,
        data: dict[str, str] | None = None,
        files: Any | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """POST request."""
        return self._request(
            "POST",
            path,
            params=params,
            json=json,
            data=data,
            files=files,
            timeout=timeout,
        )

    def put(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any | None = None,
        data: dict[str, str] | None = None,
        files: Any | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """PUT request."""
        return self._request(
            "PUT",
            path,
            params=params,
            json=json,
            data=data,
            files=files,
            timeout=timeout,
        )

    def delete(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """DELETE request."""
        return self._request("DELETE", path, params=params, timeout=timeout)

    # =========================================================================
    # Streaming
    # =========================================================================

    @contextmanager
    def stream(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Iterator[httpx.Response]:
        """Open a streaming response, for downloads too large to hold in memory.

        Raises:
            TransportError: If the exchange fails before or while streaming.
        """
        request_timeout = timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT
        logger.debug("%s %s (stream) params=%s", method, path, params)
        try:
            with self._http.stream(
                method,
                path.lstrip("/"),
                params=params or None,
                timeout=request_timeout,
            ) as resp:
                yield resp
        except httpx.TimeoutException as e:
            effective = timeout if timeout is not None else self.timeout
            raise TransportError(self._url_for(path), f"Timeout after {effective}s") from e
        except httpx.RequestError as e:
            raise TransportError(self._url_for(path), str(e) or type(e).__name__) from e

    # =========================================================================
    # Upload URLs
    # =========================================================================

    def put_to_url(
        self,
        url: str,
        *,
        content: Iterable[bytes],
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """PUT a streamed body to an absolute URL handed out by the server.

        Upload URLs are pre-signed, so the API token is not sent along.

        Raises:
            TransportError: If the exchange could not be completed.
        """
        request_timeout = timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT
        request = self._http.build_request(
            "PUT", url, content=content, headers=headers, timeout=request_timeout
        )
        for name in (API_KEY_HEADER, "Authorization"):
            request.headers.pop(name, None)
        # signed query strings stay out of logs and errors
        target = str(request.url.copy_with(query=None))
        logger.debug("PUT %s (upload url)", target)

        try:
            resp = self._http.send(request)
        except httpx.TimeoutException as e:
            effective = timeout if timeout is not None else self.timeout
            raise TransportError(target, f"Timeout after {effective}s") from e
        except httpx.RequestError as e:
            raise TransportError(target, str(e) or type(e).__name__) from e

        logger.debug("PUT upload url -> %s", resp.status_code)
        return resp
