"""Tests for the HTTP transport."""

from __future__ import annotations

import json

import httpx
import pytest

from dvcli import __version__
from dvcli.core.client import DataverseClient
from dvcli.core.exceptions import InvalidURLError, TransportError


def _echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"path": request.url.path})


class TestClientConstruction:
    """Tests for client construction."""

    def test_normalizes_base_url(self):
        client = DataverseClient("https://demo.dataverse.org/")
        assert client.base_url == "https://demo.dataverse.org"
        client.close()

    def test_rejects_relative_url(self):
        with pytest.raises(InvalidURLError):
            DataverseClient("demo.dataverse.org")

    def test_is_frozen(self):
        client = DataverseClient("https://demo.dataverse.org")
        with pytest.raises(AttributeError):
            client.api_token = "other"  # type: ignore[misc]
        client.close()

    def test_no_network_on_construction(self):
        def fail(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        with DataverseClient("https://demo.dataverse.org", transport=httpx.MockTransport(fail)):
            pass

    def test_repr_omits_transport(self):
        client = DataverseClient("https://demo.dataverse.org")
        assert "transport" not in repr(client)
        client.close()


class TestClientHeaders:
    """Tests for authentication headers."""

    def test_token_sent_on_every_request(self, make_client):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = make_client(handler)
        client.get("api/info/version")
        client.post("api/dataverses/root", json={"name": "x"})

        for request in seen:
            assert request.headers["X-Dataverse-key"] == "secret-token"
            assert request.headers["Authorization"] == "Bearer secret-token"
            assert request.headers["User-Agent"] == f"dvcli/{__version__}"

    def test_no_auth_headers_without_token(self, make_client):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = make_client(handler, api_token=None)
        client.get("api/info/version")

        assert "X-Dataverse-key" not in seen[0].headers
        assert "Authorization" not in seen[0].headers
        assert not client.is_authenticated


class TestClientRequests:
    """Tests for request construction."""

    def test_path_joined_to_base_url(self, make_client):
        client = make_client(_echo)
        resp = client.get("/api/info/version")
        assert resp.json() == {"path": "/api/info/version"}

    def test_base_url_with_path_prefix(self):
        client = DataverseClient(
            "https://example.org/dataverse",
            transport=httpx.MockTransport(_echo),
        )
        resp = client.get("api/info/version")
        assert resp.json() == {"path": "/dataverse/api/info/version"}
        client.close()

    def test_query_params(self, make_client):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = make_client(handler)
        client.post(
            "api/datasets/:persistentId/actions/:publish",
            params={"persistentId": "doi:1/2", "type": "major"},
        )

        assert seen[0].url.params["persistentId"] == "doi:1/2"
        assert seen[0].url.params["type"] == "major"

    def test_no_query_string_without_params(self, make_client):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = make_client(handler)
        client.get("api/info/version")
        assert seen[0].url.query == b""

    def test_json_body(self, make_client):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={})

        client = make_client(handler)
        client.put("api/datasets/1/editMetadata", json={"fields": []})

        assert seen[0].method == "PUT"
        assert json.loads(seen[0].content) == {"fields": []}

    def test_http_errors_are_returned(self, make_client):
        client = make_client(lambda request: httpx.Response(404, json={"message": "not found"}))
        resp = client.delete("api/dataverses/missing")
        assert resp.status_code == 404


class TestClientTransportErrors:
    """Tests for network-level failures."""

    def test_connect_error(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        with pytest.raises(TransportError, match="Connection failed") as exc_info:
            client.get("api/info/version")
        assert exc_info.value.url == "https://demo.dataverse.org/api/info/version"

    def test_timeout(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)
        with pytest.raises(TransportError, match="Timeout after 2.5s"):
            client.get("api/info/version", timeout=2.5)

    def test_timeout_override_reaches_transport(self, make_client):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = make_client(handler, timeout=10.0)
        client.get("api/info/version")
        client.get("api/info/version", timeout=1.5)

        assert seen[0].extensions["timeout"]["read"] == 10.0
        assert seen[1].extensions["timeout"]["read"] == 1.5

    def test_other_request_errors(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("server hung up", request=request)

        client = make_client(handler)
        with pytest.raises(TransportError, match="server hung up"):
            client.get("api/info/version")
