"""File commands for dvcli."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Callable, Optional

import click
import yaml

from dvcli.cli.common import Context, global_options, handle_errors, load_body, unwrap
from dvcli.core.output import OutputFormat, create_progress, print_output, print_success
from dvcli.core.result import Result
from dvcli.models.file import (
    DirectUploadBody,
    FileMetadata,
    FileRecord,
    FileUpload,
    UploadBody,
    UploadResult,
)
from dvcli.models.progress import Progress, ProgressCallback
from dvcli.services.files import FileService

BODY_FILE = click.Path(exists=True, dir_okay=False)
LOCAL_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
def file() -> None:
    """Upload, replace and download data files.

    Dataset and file arguments accept a numeric id or a persistent id.
    """
    pass


def _transfer(
    ctx: Context,
    message: str,
    call: Callable[[Optional[ProgressCallback]], Result[Any]],
) -> Result[Any]:
    """Run a transfer, drawing a byte bar on stderr unless quiet."""
    if ctx.quiet:
        return call(None)

    with create_progress() as progress:
        task = progress.add_task(message, total=None)

        def report(update: Progress) -> None:
            progress.update(task, completed=update.current, total=update.total or None)

        return call(report)


def _emit_upload(ctx: Context, result: Result[UploadResult]) -> None:
    uploaded = unwrap(result)
    if ctx.quiet or ctx.output_format is OutputFormat.TABLE:
        print_output(
            [record.to_row() for record in uploaded.files],
            format=ctx.output_format,
            columns=["id", *FileRecord.table_columns()],
            quiet=ctx.quiet,
        )
    else:
        print_output(uploaded.to_dict(), format=OutputFormat.JSON)


@file.command("upload")
@click.argument("path", type=LOCAL_FILE)
@click.option("--id", "dataset_id", required=True, help="Dataset id or persistent id")
@click.option("--body", "body_file", type=BODY_FILE, help="JSON/YAML file metadata")
@click.option("--description", help="File description")
@click.option("--category", "categories", multiple=True, help="File category (repeatable)")
@click.option("--directory", "directory_label", help="Directory label inside the dataset")
@click.option("--restrict", is_flag=True, help="Restrict access to the file")
@click.option("--direct", is_flag=True, help="Send the content straight to the dataset's storage")
@click.option("--mime-type", "mime_type", help="Content type of the file (with --direct)")
@global_options
@handle_errors
def file_upload(
    ctx: Context,
    path: Path,
    dataset_id: str,
    body_file: Optional[str],
    description: Optional[str],
    categories: tuple[str, ...],
    directory_label: Optional[str],
    restrict: bool,
    direct: bool,
    mime_type: Optional[str],
) -> None:
    """Upload a file to a dataset.

    A file whose name already exists in the dataset is stored under a
    suffixed name by the server; the output shows the name it kept.

    With --direct the file is PUT to an upload URL of the dataset's S3
    store and registered afterwards. Write a metadata template with
    `dvcli file gen-body`.

    Example:
        dvcli file upload data.csv --id doi:10.5072/FK2/ABC123 --category Data
        dvcli file upload scan.tif --id doi:10.5072/FK2/ABC123 --direct
    """
    if mime_type and not direct:
        raise click.UsageError("--mime-type only applies to --direct uploads")

    body_cls: type[FileMetadata] = DirectUploadBody if direct else UploadBody
    if body_file:
        if description or categories or directory_label or restrict or mime_type:
            raise click.UsageError("Use either --body or inline flags, not both")
        metadata = load_body(body_cls, body_file)
    else:
        inline: dict[str, Any] = {
            "description": description,
            "directoryLabel": directory_label,
            "categories": list(categories) or None,
            "restrict": True if restrict else None,
        }
        if direct:
            inline["mimeType"] = mime_type
        metadata = body_cls.from_dict(inline)

    service = FileService(ctx.get_client())
    if isinstance(metadata, DirectUploadBody):
        result = _transfer(
            ctx,
            f"Uploading {path.name}",
            lambda report: service.direct_upload(
                dataset_id, path, metadata, progress_callback=report, timeout=ctx.timeout
            ),
        )
    else:
        upload = FileUpload.from_path(path, metadata)
        result = _transfer(
            ctx,
            f"Uploading {upload.filename}",
            lambda report: service.upload(
                dataset_id, upload, progress_callback=report, timeout=ctx.timeout
            ),
        )
    _emit_upload(ctx, result)


@file.command("replace")
@click.argument("path", type=LOCAL_FILE)
@click.option("--id", "file_id", required=True, help="File id or persistent id")
@click.option("--body", "body_file", type=BODY_FILE, help="JSON/YAML file metadata")
@click.option("--force", is_flag=True, help="Allow a replacement of a different content type")
@global_options
@handle_errors
def file_replace(
    ctx: Context,
    path: Path,
    file_id: str,
    body_file: Optional[str],
    force: bool,
) -> None:
    """Replace a file with new content.

    Example:
        dvcli file replace data-v2.csv --id 17 --force
    """
    metadata = load_body(UploadBody, body_file) if body_file else UploadBody()
    if force:
        metadata = metadata.model_copy(update={"force_replace": True})

    upload = FileUpload.from_path(path, metadata)
    service = FileService(ctx.get_client())
    result = _transfer(
        ctx,
        f"Replacing file {file_id}",
        lambda report: service.replace(
            file_id, upload, progress_callback=report, timeout=ctx.timeout
        ),
    )
    _emit_upload(ctx, result)


@file.command("download")
@click.argument("file_id")
@click.option(
    "--out",
    "out",
    type=click.Path(path_type=Path),
    help="Target file or directory (default: write to stdout)",
)
@global_options
@handle_errors
def file_download(ctx: Context, file_id: str, out: Optional[Path]) -> None:
    """Download a file's content.

    Example:
        dvcli file download 17 --out ./downloads
        dvcli file download doi:10.5072/FK2/ABC123/XYZ > data.csv
    """
    service = FileService(ctx.get_client())

    if out is None:
        content = unwrap(service.download(file_id, timeout=ctx.timeout))
        click.get_binary_stream("stdout").write(content)
        return

    saved = unwrap(
        _transfer(
            ctx,
            f"Downloading file {file_id}",
            lambda report: service.download_to(
                file_id, out, progress_callback=report, timeout=ctx.timeout
            ),
        )
    )
    if ctx.quiet:
        click.echo(str(saved))
    else:
        print_success(f"Saved to {saved}")


@file.command("gen-body")
@click.option("--direct", is_flag=True, help="Template for a --direct upload")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "yaml"]),
    default="json",
    show_default=True,
    help="Template format",
)
@click.option(
    "--out",
    type=click.File("w"),
    default="-",
    help="Write the template to a file (default: stdout)",
)
def file_gen_body(direct: bool, fmt: str, out: IO[str]) -> None:
    """Write an example file metadata body to fill out.

    Example:
        dvcli file gen-body --format yaml --out body.yaml
        dvcli file upload data.csv --id 42 --body body.yaml
    """
    example = DirectUploadBody.example() if direct else UploadBody.example()
    if fmt == "yaml":
        out.write(yaml.safe_dump(example.to_dict(), sort_keys=False))
    else:
        out.write(example.to_json(indent=2) + "\n")
