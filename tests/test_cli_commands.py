"""Tests for dvcli resource commands against a mocked Dataverse instance."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
import yaml
from click.testing import CliRunner

from dvcli.cli.common import Context, ExitCode
from dvcli.cli.main import cli
from dvcli.core.config import Config
from dvcli.models.file import DirectUploadBody

PID = "doi:10.5072/FK2/ABC123"

SAMPLE_DATASET = {
    "id": 42,
    "identifier": "FK2/ABC123",
    "protocol": "doi",
    "authority": "10.5072",
    "persistentUrl": "https://doi.org/10.5072/FK2/ABC123",
    "latestVersion": {"versionState": "DRAFT"},
}


def _ok(data: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json={"status": "OK", "data": data})


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def invoke(runner: CliRunner, make_client, seen) -> Callable[..., Any]:
    """Run a command with its client answered by a fixed response or handler."""

    def run(args: list[str], response: httpx.Response | Callable, **kwargs: Any):
        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if callable(response):
                return response(request)
            return response

        ctx = Context()
        ctx.config = Config()
        ctx.client = make_client(handler)
        return runner.invoke(cli, args, obj=ctx, **kwargs)

    return run


# =============================================================================
# Info
# =============================================================================


class TestInfoCommands:
    """Tests for info commands."""

    def test_version_json(self, invoke, seen):
        result = invoke(["info", "version"], _ok({"version": "6.2", "build": "1234"}))

        assert result.exit_code == ExitCode.SUCCESS
        assert json.loads(result.stdout) == {"version": "6.2", "build": "1234"}
        assert seen[0].url.path == "/api/info/version"

    def test_version_quiet(self, invoke):
        result = invoke(["info", "version", "-q"], _ok({"version": "6.2"}))

        assert result.output.strip() == "6.2"

    def test_version_table(self, invoke):
        result = invoke(["info", "version", "-o", "table"], _ok({"version": "6.2"}))

        assert result.exit_code == 0
        assert "6.2" in result.output

    def test_timeout_option(self, invoke, seen):
        invoke(["info", "version", "--timeout", "2.5"], _ok({"version": "6.2"}))

        assert seen[0].extensions["timeout"]["read"] == 2.5

    def test_invalid_timeout(self, invoke, seen):
        result = invoke(["info", "version", "--timeout", "0"], _ok({"version": "6.2"}))

        assert result.exit_code == 2
        assert seen == []


# =============================================================================
# Exit Codes
# =============================================================================


class TestExitCodes:
    """Tests for mapping failures onto exit codes."""

    def test_remote_error(self, invoke):
        result = invoke(
            ["dataset", "get", "99"],
            httpx.Response(404, json={"status": "ERROR", "message": "Dataset not found"}),
        )

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_auth_error(self, invoke):
        result = invoke(
            ["dataset", "get", "42"],
            httpx.Response(401, json={"status": "ERROR", "message": "Bad api key"}),
        )

        assert result.exit_code == ExitCode.AUTH_ERROR

    def test_transport_error(self, invoke):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        result = invoke(["dataset", "get", "42"], refuse)

        assert result.exit_code == ExitCode.NETWORK_ERROR

    def test_decode_error(self, invoke):
        result = invoke(["dataset", "get", "42"], httpx.Response(200, text="<html/>"))

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_missing_profile(self, runner: CliRunner):
        ctx = Context()
        ctx.config = Config()

        result = runner.invoke(cli, ["info", "version"], obj=ctx)

        assert result.exit_code == ExitCode.GENERAL_ERROR


# =============================================================================
# Collections
# =============================================================================


class TestCollectionCommands:
    """Tests for collection commands."""

    def test_create_inline(self, invoke, seen):
        result = invoke(
            [
                "collection", "create", "--parent", "root",
                "--name", "My Lab", "--alias", "mylab", "--type", "LABORATORY",
                "--contact", "lab@example.org",
            ],
            _ok({"id": 12, "alias": "mylab", "name": "My Lab"}, 201),
        )

        assert result.exit_code == 0
        assert json.loads(seen[0].content) == {
            "name": "My Lab",
            "alias": "mylab",
            "dataverseContacts": [{"contactEmail": "lab@example.org"}],
            "dataverseType": "LABORATORY",
        }
        assert json.loads(result.stdout)["alias"] == "mylab"

    def test_create_from_body(self, invoke, seen, tmp_path: Path):
        body = tmp_path / "collection.yaml"
        body.write_text("name: My Lab\nalias: mylab\ndataverseType: LABORATORY\n")

        result = invoke(
            ["collection", "create", "--parent", "root", "--body", str(body), "-q"],
            _ok({"id": 12, "alias": "mylab", "name": "My Lab"}, 201),
        )

        assert result.exit_code == 0
        assert result.output.strip() == "mylab"
        assert seen[0].url.path == "/api/dataverses/root"

    def test_create_body_and_flags(self, invoke, seen, tmp_path: Path):
        body = tmp_path / "collection.yaml"
        body.write_text("name: My Lab\n")

        result = invoke(
            ["collection", "create", "--parent", "root", "--body", str(body), "--name", "X"],
            _ok({}),
        )

        assert result.exit_code == 2
        assert seen == []

    def test_create_missing_flags(self, invoke, seen):
        result = invoke(["collection", "create", "--parent", "root", "--name", "X"], _ok({}))

        assert result.exit_code == 2
        assert "--alias" in result.output
        assert seen == []

    def test_create_invalid_body(self, invoke, seen, tmp_path: Path):
        body = tmp_path / "collection.yaml"
        body.write_text("name: My Lab\nalias: mylab\ndataverseTpye: LABORATORY\n")

        result = invoke(
            ["collection", "create", "--parent", "root", "--body", str(body)], _ok({})
        )

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert seen == []

    def test_delete_requires_confirmation(self, invoke, seen):
        result = invoke(["collection", "delete", "mylab"], _ok({"message": "deleted"}), input="n\n")

        assert result.exit_code != 0
        assert seen == []

    def test_delete_with_yes(self, invoke, seen):
        result = invoke(["collection", "delete", "mylab", "--yes"], _ok({"message": "deleted"}))

        assert result.exit_code == 0
        assert seen[0].method == "DELETE"

    def test_contents_table(self, invoke):
        result = invoke(
            ["collection", "contents", "root", "-o", "table"],
            _ok([{"type": "dataverse", "id": 13, "title": "Sub collection"}]),
        )

        assert result.exit_code == 0
        assert "dataverse" in result.output


# =============================================================================
# Datasets
# =============================================================================


class TestDatasetCommands:
    """Tests for dataset commands."""

    def test_get_by_pid(self, invoke, seen):
        result = invoke(["dataset", "get", PID], _ok(SAMPLE_DATASET))

        assert result.exit_code == 0
        assert json.loads(result.stdout)["id"] == 42
        assert seen[0].url.params["persistentId"] == PID

    def test_create_quiet_prints_pid(self, invoke, seen, tmp_path: Path):
        body = tmp_path / "dataset.json"
        body.write_text(json.dumps({"datasetVersion": {"metadataBlocks": {}}}))

        result = invoke(
            ["dataset", "create", "-c", "root", "--body", str(body), "-q"],
            _ok({"id": 42, "persistentId": PID}, 201),
        )

        assert result.exit_code == 0
        assert result.output.strip() == PID
        assert seen[0].url.path == "/api/dataverses/root/datasets"

    def test_edit_replace(self, invoke, seen, tmp_path: Path):
        body = tmp_path / "fields.yaml"
        body.write_text(
            "fields:\n"
            "  - typeName: title\n"
            "    multiple: false\n"
            "    typeClass: primitive\n"
            "    value: New title\n"
        )

        result = invoke(
            ["dataset", "edit", "42", "--body", str(body), "--replace"],
            _ok({"id": 7, "datasetId": 42, "versionState": "DRAFT"}),
        )

        assert result.exit_code == 0
        assert seen[0].url.params["replace"] == "true"

    def test_publish_minor(self, invoke, seen):
        result = invoke(["dataset", "publish", "42", "--version", "minor"], _ok(SAMPLE_DATASET))

        assert result.exit_code == 0
        assert seen[0].url.params["type"] == "minor"

    def test_publish_unknown_version(self, invoke, seen):
        result = invoke(["dataset", "publish", "42", "--version", "patch"], _ok(SAMPLE_DATASET))

        assert result.exit_code == 2
        assert seen == []

    def test_delete_with_yes(self, invoke, seen):
        result = invoke(["dataset", "delete", "42", "-y"], _ok({"message": "Dataset 42 deleted"}))

        assert result.exit_code == 0
        assert seen[0].url.path == "/api/datasets/42"

    def test_link(self, invoke, seen):
        result = invoke(
            ["dataset", "link", "42", "--collection", "otherlab"],
            _ok({"message": "Dataset 42 linked successfully to otherlab"}),
        )

        assert result.exit_code == 0
        assert seen[0].url.path == "/api/datasets/42/link/otherlab"


# =============================================================================
# Files
# =============================================================================


class TestFileCommands:
    """Tests for file commands."""

    UPLOADED = {
        "files": [
            {
                "label": "data.csv",
                "restricted": True,
                "categories": ["Data"],
                "dataFile": {"id": 17, "filename": "data.csv", "filesize": 8},
            }
        ]
    }

    def test_upload_inline_metadata(self, invoke, seen, tmp_path: Path):
        path = tmp_path / "data.csv"
        path.write_bytes(b"a,b\n1,2\n")

        result = invoke(
            ["file", "upload", str(path), "--id", PID, "--category", "Data", "--restrict", "-q"],
            _ok(self.UPLOADED),
        )

        assert result.exit_code == 0
        assert result.output.strip() == "17"
        assert seen[0].url.path == "/api/datasets/:persistentId/add"
        assert b'{"categories": ["Data"], "restrict": true}' in seen[0].content

    def test_upload_json_output(self, invoke, tmp_path: Path):
        path = tmp_path / "data.csv"
        path.write_bytes(b"a,b\n1,2\n")

        result = invoke(["file", "upload", str(path), "--id", "42"], _ok(self.UPLOADED))

        assert result.exit_code == 0
        assert json.loads(result.stdout)["files"][0]["dataFile"]["id"] == 17

    def test_replace_force(self, invoke, seen, tmp_path: Path):
        path = tmp_path / "data.csv"
        path.write_bytes(b"a,b\n3,4\n")

        result = invoke(
            ["file", "replace", str(path), "--id", "17", "--force", "-q"], _ok(self.UPLOADED)
        )

        assert result.exit_code == 0
        assert seen[0].url.path == "/api/files/17/replace"
        assert b'{"forceReplace": true}' in seen[0].content

    def test_download_to_stdout(self, invoke):
        result = invoke(["file", "download", "17"], httpx.Response(200, content=b"a,b\n1,2\n"))

        assert result.exit_code == 0
        assert result.stdout_bytes == b"a,b\n1,2\n"

    def test_download_to_directory(self, invoke, tmp_path: Path):
        response = httpx.Response(
            200,
            content=b"a,b\n1,2\n",
            headers={"Content-Disposition": 'attachment; filename="data.csv"'},
        )

        result = invoke(["file", "download", "17", "--out", str(tmp_path), "-q"], response)

        assert result.exit_code == 0
        assert result.output.strip() == str(tmp_path / "data.csv")
        assert (tmp_path / "data.csv").read_bytes() == b"a,b\n1,2\n"

    def test_download_restricted(self, invoke):
        result = invoke(
            ["file", "download", "17"],
            httpx.Response(403, json={"status": "ERROR", "message": "Restricted file"}),
        )

        assert result.exit_code == ExitCode.AUTH_ERROR

    def test_upload_direct(self, invoke, seen, tmp_path: Path):
        path = tmp_path / "scan.tif"
        path.write_bytes(b"tiff-bytes")

        def respond(request: httpx.Request) -> httpx.Response:
            if request.url.host == "bucket.s3.example.org":
                return httpx.Response(200)
            if request.url.path.endswith("/uploadurls"):
                return _ok(
                    {
                        "url": "https://bucket.s3.example.org/obj?X-Amz-Signature=abc",
                        "storageIdentifier": "s3://bucket:obj",
                    }
                )
            return _ok(self.UPLOADED)

        args = ["file", "upload", str(path), "--id", PID, "--direct", "--mime-type", "image/tiff"]

        result = invoke([*args, "-q"], respond)

        assert result.exit_code == 0
        assert result.output.strip() == "17"
        assert [r.method for r in seen] == ["GET", "PUT", "POST"]
        assert b'"mimeType": "image/tiff"' in seen[2].content
        assert b'"storageIdentifier": "s3://bucket:obj"' in seen[2].content

    def test_mime_type_needs_direct(self, invoke, seen, tmp_path: Path):
        path = tmp_path / "data.csv"
        path.write_bytes(b"a,b\n")

        result = invoke(
            ["file", "upload", str(path), "--id", "42", "--mime-type", "text/csv"],
            _ok(self.UPLOADED),
        )

        assert result.exit_code == 2
        assert seen == []

    def test_gen_body_json(self, runner: CliRunner):
        result = runner.invoke(cli, ["file", "gen-body"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["directoryLabel"] == "some/path"

    def test_gen_body_direct_yaml(self, runner: CliRunner, tmp_path: Path):
        out = tmp_path / "body.yaml"

        result = runner.invoke(
            cli, ["file", "gen-body", "--direct", "--format", "yaml", "--out", str(out)]
        )

        assert result.exit_code == 0
        body = yaml.safe_load(out.read_text())
        assert body["mimeType"] == "text/plain"
        assert DirectUploadBody.from_dict(body) == DirectUploadBody.example()

    def test_gen_body_feeds_upload(self, runner: CliRunner, invoke, seen, tmp_path: Path):
        body = tmp_path / "body.json"
        runner.invoke(cli, ["file", "gen-body", "--out", str(body)])
        path = tmp_path / "data.csv"
        path.write_bytes(b"a,b\n")

        result = invoke(
            ["file", "upload", str(path), "--id", "42", "--body", str(body), "-q"],
            _ok(self.UPLOADED),
        )

        assert result.exit_code == 0
        assert b'"description": "Some description"' in seen[0].content
