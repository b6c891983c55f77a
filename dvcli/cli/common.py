"""Common CLI utilities, decorators, and helpers."""

from __future__ import annotations

import sys
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, TypeVar

import click

from dvcli.core.client import DataverseClient
from dvcli.core.config import Config, get_token
from dvcli.core.exceptions import (
    ConfigurationError,
    DVCliError,
    ProfileNotFoundError,
    RemoteError,
    TransportError,
)
from dvcli.core.logging import setup_logging
from dvcli.core.output import OutputFormat, print_error, print_output
from dvcli.core.result import Failure, Result
from dvcli.core.validation import validate_timeout
from dvcli.models.base import BaseModel, RequestBody

F = TypeVar("F", bound=Callable[..., Any])
B = TypeVar("B", bound=RequestBody)


# =============================================================================
# Exit Codes
# =============================================================================


class ExitCode:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 2
    NETWORK_ERROR = 3


def exit_code_for(error: DVCliError) -> int:
    """Map a classified error onto a process exit code."""
    if isinstance(error, TransportError):
        return ExitCode.NETWORK_ERROR
    if isinstance(error, RemoteError) and error.is_auth_error:
        return ExitCode.AUTH_ERROR
    return ExitCode.GENERAL_ERROR


# =============================================================================
# Context Object
# =============================================================================


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[Config] = None
        self.client: Optional[DataverseClient] = None
        self.profile_name: Optional[str] = None
        self.output_option: Optional[str] = None
        self.quiet: bool = False
        self.verbose: bool = False
        self.timeout: Optional[float] = None

    def load_config(self) -> Config:
        """Load the configuration once per invocation."""
        if self.config is None:
            self.config = Config.load()
        return self.config

    @property
    def output_format(self) -> OutputFormat:
        """Format from ``--output``, else the configured default."""
        if self.output_option:
            return OutputFormat.from_string(self.output_option)
        return OutputFormat.from_string(self.load_config().output_format)

    def get_client(self) -> DataverseClient:
        """Get or create the client for the selected profile.

        Returns:
            DataverseClient carrying the token from the environment, if any.

        Raises:
            ConfigurationError: If no profile is configured.
        """
        if self.client is not None:
            return self.client

        config = self.load_config()
        try:
            profile = config.get_profile(self.profile_name)
        except ProfileNotFoundError as e:
            raise ConfigurationError(
                f"Profile '{self.profile_name or config.default_profile}' not found. "
                "Run 'dvcli config init' or set DVCLI_URL."
            ) from e

        self.client = DataverseClient(
            base_url=profile.url,
            api_token=get_token(),
            timeout=self.timeout if self.timeout is not None else profile.timeout,
            verify_ssl=profile.verify_ssl,
        )
        return self.client


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Global Options
# =============================================================================


def global_options(f: F) -> F:
    """Add global options to a command."""

    @click.option(
        "--profile",
        "-p",
        envvar="DVCLI_PROFILE",
        help="Config profile to use",
    )
    @click.option(
        "--output",
        "-o",
        "output_format",
        type=click.Choice(["json", "table"]),
        default=None,
        help="Output format (default: json)",
    )
    @click.option(
        "--quiet",
        "-q",
        is_flag=True,
        help="Minimal output (identifiers only)",
    )
    @click.option(
        "--verbose",
        "-v",
        is_flag=True,
        help="Log requests and responses to stderr",
    )
    @click.option(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds",
    )
    @pass_context
    @wraps(f)
    def wrapper(
        ctx: Context,
        profile: Optional[str],
        output_format: Optional[str],
        quiet: bool,
        verbose: bool,
        timeout: Optional[float],
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Populate context from global options and invoke the command."""
        ctx.profile_name = profile
        ctx.output_option = output_format
        ctx.quiet = quiet
        ctx.verbose = verbose
        if timeout is not None:
            try:
                ctx.timeout = validate_timeout(timeout)
            except DVCliError as e:
                raise click.BadParameter(str(e), param_hint="--timeout") from e

        setup_logging(quiet=quiet, verbose=verbose)

        return f(ctx, *args, **kwargs)

    return wrapper  # type: ignore


def confirm_destructive(message: str) -> Callable[[F], F]:
    """Require confirmation for destructive operations."""

    def decorator(f: F) -> F:
        @click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
        @wraps(f)
        def wrapper(*args: Any, yes: bool, **kwargs: Any) -> Any:
            if not yes:
                click.confirm(message, abort=True)
            return f(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


# =============================================================================
# Error Handling
# =============================================================================


def handle_errors(f: F) -> F:
    """Print classified errors and exit with the matching code."""

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except DVCliError as e:
            print_error(str(e))
            sys.exit(exit_code_for(e))
        except click.ClickException:
            raise
        except OSError as e:
            print_error(f"Unexpected error: {e}")
            sys.exit(ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore


# =============================================================================
# Result Emission
# =============================================================================


def to_output(value: Any) -> Any:
    """Convert payload models to plain JSON-ready data."""
    if isinstance(value, BaseModel):
        return value.to_dict()
    if isinstance(value, list):
        return [to_output(item) for item in value]
    if isinstance(value, Path):
        return str(value)
    return value


def unwrap(result: Result[Any]) -> Any:
    """Return the payload, or raise the error for :func:`handle_errors`."""
    if isinstance(result, Failure):
        raise result.error
    return result.value


def emit(
    ctx: Context,
    result: Result[Any],
    *,
    columns: Sequence[str] | None = None,
    title: str | None = None,
    id_field: str = "id",
) -> None:
    """Print a successful payload in the selected format."""
    print_output(
        to_output(unwrap(result)),
        format=ctx.output_format,
        columns=columns,
        title=title,
        quiet=ctx.quiet,
        id_field=id_field,
    )


def load_body(body_cls: type[B], path: str | Path) -> B:
    """Load a request body from a JSON or YAML file."""
    return body_cls.from_file(path)
