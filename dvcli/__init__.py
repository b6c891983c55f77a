"""dvcli - a client library and CLI for the Dataverse native API.

This package maps typed operations onto the Dataverse REST surface:
- Create, publish, delete, and list collections (dataverses)
- Create, edit, publish, link, and delete datasets
- Upload, replace, and download files
- Query instance information

Every operation returns a Result envelope instead of raising.
"""

__version__ = "0.1.0"

from dvcli.core.logging import install_null_handler

install_null_handler()

from dvcli.core.client import DataverseClient  # noqa: E402
from dvcli.core.config import Config, Profile  # noqa: E402
from dvcli.core.exceptions import (  # noqa: E402
    ConfigurationError,
    DecodeError,
    DVCliError,
    RemoteError,
    TransportError,
    ValidationError,
)
from dvcli.core.identifiers import Identifier  # noqa: E402
from dvcli.core.result import Failure, Result, Success  # noqa: E402
from dvcli.services import (  # noqa: E402
    CollectionService,
    DatasetService,
    FileService,
    InfoService,
)

__all__ = [
    "__version__",
    "DataverseClient",
    "Config",
    "Profile",
    "Identifier",
    "Result",
    "Success",
    "Failure",
    "DVCliError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "RemoteError",
    "DecodeError",
    "InfoService",
    "CollectionService",
    "DatasetService",
    "FileService",
]
