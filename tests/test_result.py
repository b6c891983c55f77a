"""Tests for the Result envelope."""

from __future__ import annotations

import pytest

from dvcli.core.exceptions import RemoteError
from dvcli.core.result import Failure, Success


class TestSuccess:
    """Tests for Success."""

    def test_carries_value(self):
        result = Success({"version": "6.2"})
        assert result.ok
        assert result.error is None
        assert result.unwrap() == {"version": "6.2"}

    def test_map(self):
        assert Success(2).map(lambda v: v * 3) == Success(6)


class TestFailure:
    """Tests for Failure."""

    def test_carries_error(self):
        error = RemoteError(404, "not found")
        result = Failure(error)
        assert not result.ok
        assert result.value is None
        assert result.error is error

    def test_unwrap_raises(self):
        with pytest.raises(RemoteError, match="not found"):
            Failure(RemoteError(404, "not found")).unwrap()

    def test_map_is_noop(self):
        result = Failure(RemoteError(500, "boom"))
        assert result.map(lambda v: v) is result
