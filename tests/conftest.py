"""Pytest configuration and fixtures for dvcli tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable, Generator

import httpx
import pytest

from dvcli.core.client import DataverseClient

BASE_URL = "https://demo.dataverse.org"
API_TOKEN = "secret-token"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_yaml() -> str:
    """Sample config YAML content."""
    return """
default_profile: test
output_format: table

profiles:
  test:
    url: https://dataverse-test.example.org
    verify_ssl: false
    timeout: 30

  production:
    url: https://dataverse.example.org
    verify_ssl: true
    timeout: 60
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep DVCLI_* variables from the developer's shell out of tests."""
    for name in ("DVCLI_URL", "DVCLI_TOKEN", "DVCLI_PROFILE", "DVCLI_VERIFY_SSL", "DVCLI_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_client() -> Generator[Callable[..., DataverseClient], None, None]:
    """Build DataverseClients whose requests are answered by a handler."""
    clients: list[DataverseClient] = []

    def factory(handler: Handler, *, api_token: str | None = API_TOKEN, **kwargs) -> DataverseClient:
        client = DataverseClient(
            BASE_URL,
            api_token=api_token,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
