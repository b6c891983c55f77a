"""Core modules for dvcli."""

from dvcli.core.client import DataverseClient
from dvcli.core.config import CONFIG_DIR, CONFIG_FILE, Config, Profile
from dvcli.core.exceptions import (
    ConfigurationError,
    DecodeError,
    DVCliError,
    InvalidIdentifierError,
    InvalidURLError,
    PathValidationError,
    ProfileNotFoundError,
    RemoteError,
    TransportError,
    ValidationError,
)
from dvcli.core.identifiers import Identifier, IdentifierKind
from dvcli.core.logging import setup_logging
from dvcli.core.output import (
    OutputFormat,
    console,
    print_error,
    print_json,
    print_output,
    print_success,
    print_table,
)
from dvcli.core.result import Failure, Result, Success
from dvcli.core.validation import (
    validate_alias,
    validate_numeric_id,
    validate_path_exists,
    validate_persistent_id,
    validate_server_url,
    validate_timeout,
)

__all__ = [
    # Exceptions
    "DVCliError",
    "ConfigurationError",
    "ProfileNotFoundError",
    "ValidationError",
    "InvalidURLError",
    "InvalidIdentifierError",
    "PathValidationError",
    "TransportError",
    "RemoteError",
    "DecodeError",
    # Result
    "Result",
    "Success",
    "Failure",
    # Identifiers
    "Identifier",
    "IdentifierKind",
    # Validation
    "validate_server_url",
    "validate_alias",
    "validate_numeric_id",
    "validate_persistent_id",
    "validate_path_exists",
    "validate_timeout",
    # Config
    "Config",
    "Profile",
    "CONFIG_DIR",
    "CONFIG_FILE",
    # Client
    "DataverseClient",
    # Output
    "OutputFormat",
    "print_output",
    "print_table",
    "print_json",
    "print_error",
    "print_success",
    "console",
    # Logging
    "setup_logging",
]
