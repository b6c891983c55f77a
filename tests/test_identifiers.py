"""Tests for dataset/file addressing."""

from __future__ import annotations

import pytest

from dvcli.core.exceptions import InvalidIdentifierError
from dvcli.core.identifiers import Identifier, IdentifierKind


class TestIdentifierParse:
    """Tests for Identifier construction."""

    def test_digits_are_an_id(self):
        ident = Identifier.parse("42")
        assert ident.kind is IdentifierKind.ID
        assert not ident.is_persistent

    def test_int_is_an_id(self):
        assert Identifier.parse(42) == Identifier.from_id("42")

    def test_text_is_a_persistent_id(self):
        ident = Identifier.parse("doi:10.5072/FK2/ABC123")
        assert ident.is_persistent
        assert str(ident) == "doi:10.5072/FK2/ABC123"

    def test_surrounding_whitespace_ignored(self):
        assert Identifier.parse("  17 ").value == "17"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_rejected(self, value: str):
        with pytest.raises(InvalidIdentifierError):
            Identifier.parse(value)

    def test_from_id_rejects_pid(self):
        with pytest.raises(InvalidIdentifierError):
            Identifier.from_id("doi:10.5072/FK2/ABC123")

    def test_pid_needs_protocol(self):
        with pytest.raises(InvalidIdentifierError, match="persistent_id"):
            Identifier.parse("10.5072/FK2/ABC123")

    def test_immutable(self):
        ident = Identifier.from_id(1)
        with pytest.raises(AttributeError):
            ident.value = "2"  # type: ignore[misc]


class TestIdentifierRoute:
    """Tests for path and query parameter construction."""

    def test_id_goes_into_path(self):
        path, params = Identifier.from_id(42).route("api/datasets", "actions/:publish")
        assert path == "api/datasets/42/actions/:publish"
        assert params == {}

    def test_pid_goes_into_query(self):
        pid = "doi:10.5072/FK2/ABC123"
        path, params = Identifier.from_pid(pid).route("api/datasets", "actions/:publish")
        assert path == "api/datasets/:persistentId/actions/:publish"
        assert params == {"persistentId": pid}

    def test_no_suffix(self):
        path, _ = Identifier.from_id(7).route("/api/access/datafile/")
        assert path == "api/access/datafile/7"

    def test_route_returns_fresh_params(self):
        ident = Identifier.from_pid("hdl:1902.1/111012")
        _, first = ident.route("api/datasets")
        first["type"] = "major"
        _, second = ident.route("api/datasets")
        assert "type" not in second
