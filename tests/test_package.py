"""Tests for dvcli package imports and exports."""

from __future__ import annotations

import logging


class TestPackageImports:
    """Tests for package imports."""

    def test_import_dvcli(self):
        import dvcli

        assert hasattr(dvcli, "__version__")

    def test_public_api(self):
        import dvcli

        for name in dvcli.__all__:
            assert hasattr(dvcli, name), name

    def test_import_core_modules(self):
        from dvcli.core import (
            client,
            config,
            exceptions,
            identifiers,
            logging,
            output,
            result,
            validation,
        )

        assert client is not None
        assert config is not None
        assert exceptions is not None
        assert identifiers is not None
        assert logging is not None
        assert output is not None
        assert result is not None
        assert validation is not None

    def test_import_models(self):
        from dvcli.models import base, collection, dataset, envelope, file, info

        assert base is not None
        assert collection is not None
        assert dataset is not None
        assert envelope is not None
        assert file is not None
        assert info is not None

    def test_import_services(self):
        from dvcli.services import base, collections, datasets, files, info

        assert base is not None
        assert collections is not None
        assert datasets is not None
        assert files is not None
        assert info is not None

    def test_import_cli(self):
        from dvcli.cli import collection, common, config_cmd, dataset, file, info, main

        assert main is not None
        assert common is not None
        assert config_cmd is not None
        assert info is not None
        assert collection is not None
        assert dataset is not None
        assert file is not None

    def test_library_logger_is_silent(self):
        handlers = logging.getLogger("dvcli").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)


class TestExceptionHierarchy:
    """Tests for exception hierarchy."""

    def test_base(self):
        from dvcli.core.exceptions import DVCliError

        exc = DVCliError("test error")
        assert "test error" in str(exc)
        assert isinstance(exc, Exception)

    def test_taxonomy(self):
        from dvcli.core.exceptions import (
            DecodeError,
            DVCliError,
            RemoteError,
            TransportError,
            ValidationError,
        )

        for cls in (DecodeError, RemoteError, TransportError, ValidationError):
            assert issubclass(cls, DVCliError)

    def test_transport_error(self):
        from dvcli.core.exceptions import TransportError

        exc = TransportError("https://example.org", "connection failed")
        assert "example.org" in str(exc)
        assert exc.cause == "connection failed"

    def test_remote_error(self):
        from dvcli.core.exceptions import RemoteError

        exc = RemoteError(403, "Forbidden", "https://example.org/api/datasets/1")
        assert exc.message == "Forbidden"
        assert exc.is_auth_error
        assert not exc.is_not_found
        assert exc.to_dict()["details"]["status"] == "403"

    def test_decode_error_truncates_body(self):
        from dvcli.core.exceptions import DecodeError

        exc = DecodeError("Bad payload", "x" * 500)
        assert exc.body == "x" * 500
        assert len(exc.details["body"]) == DecodeError.MAX_EXCERPT + 3

    def test_validation_errors(self):
        from dvcli.core.exceptions import (
            InvalidIdentifierError,
            InvalidURLError,
            PathValidationError,
            ValidationError,
        )

        url_exc = InvalidURLError("bad-url", "missing scheme")
        assert "bad-url" in str(url_exc)

        id_exc = InvalidIdentifierError("alias", "bad alias", "invalid chars")
        assert "alias" in str(id_exc)
        assert "bad alias" in str(id_exc)

        path_exc = PathValidationError("/bad/path", "does not exist")
        assert "/bad/path" in str(path_exc)

        for exc in (url_exc, id_exc, path_exc):
            assert isinstance(exc, ValidationError)
