"""Input validation helpers for dvcli."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlparse

from dvcli.core.exceptions import (
    InvalidIdentifierError,
    InvalidURLError,
    PathValidationError,
    ValidationError,
)

# =============================================================================
# Patterns
# =============================================================================

ALIAS_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
NUMERIC_ID_PATTERN = re.compile(r"^\d+$")
PID_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:\S+$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")

ALLOWED_SCHEMES = ("http", "https")

# Built-in alias of the top-level collection
ROOT_ALIAS = ":root"


# =============================================================================
# URL Validation
# =============================================================================


def validate_server_url(url: str) -> str:
    """Validate and normalize a Dataverse instance URL.

    Args:
        url: Server URL.

    Returns:
        URL without surrounding whitespace or trailing slashes.

    Raises:
        InvalidURLError: If the URL is empty, relative, or not http(s).
    """
    if not url or not isinstance(url, str):
        raise InvalidURLError(str(url), "URL is required")

    url = url.strip().rstrip("/")
    parsed = urlparse(url)

    if not parsed.scheme:
        raise InvalidURLError(url, "URL must include scheme (http:// or https://)")
    if parsed.scheme not in ALLOWED_SCHEMES:
        raise InvalidURLError(url, f"Unsupported scheme '{parsed.scheme}'")
    if not parsed.hostname:
        raise InvalidURLError(url, "URL must include hostname")

    return url


# =============================================================================
# Identifier Validation
# =============================================================================


def validate_alias(alias: str) -> str:
    """Validate a collection alias or numeric collection id.

    Args:
        alias: Collection alias (letters, digits, '-' and '_'), or
            ``:root`` for the top-level collection.

    Returns:
        The stripped alias.
    """
    if alias is None or not str(alias).strip():
        raise InvalidIdentifierError("alias", str(alias), "alias is required")
    alias = str(alias).strip()
    if alias != ROOT_ALIAS and not ALIAS_PATTERN.match(alias):
        raise InvalidIdentifierError(
            "alias", alias, "only letters, digits, '-' and '_' are allowed"
        )
    return alias


def validate_numeric_id(value: str | int) -> str:
    """Validate a numeric database id and return it as a string."""
    text = str(value).strip()
    if not NUMERIC_ID_PATTERN.match(text):
        raise InvalidIdentifierError("id", text, "must be a non-negative integer")
    return text


def validate_persistent_id(pid: str) -> str:
    """Validate a persistent identifier such as ``doi:10.5072/FK2/ABC``."""
    if pid is None or not str(pid).strip():
        raise InvalidIdentifierError("persistent_id", str(pid), "persistent id is required")
    pid = str(pid).strip()
    if not PID_PATTERN.match(pid):
        raise InvalidIdentifierError(
            "persistent_id", pid, "expected '<protocol>:<authority>/<identifier>'"
        )
    return pid


# =============================================================================
# Misc Validation
# =============================================================================


def validate_path_exists(path: str | Path, must_be_file: bool = False) -> Path:
    """Validate that a local path exists.

    Args:
        path: Path to check.
        must_be_file: Also require a regular file.

    Returns:
        The path as a Path object.
    """
    p = Path(path)
    if not p.exists():
        raise PathValidationError(str(path), "does not exist")
    if must_be_file and not p.is_file():
        raise PathValidationError(str(path), "not a file")
    return p


def validate_timeout(timeout: float | int) -> float:
    """Validate a request timeout in seconds."""
    try:
        value = float(timeout)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid timeout: {timeout}", field="timeout", value=timeout) from e
    if value <= 0:
        raise ValidationError(
            f"Invalid timeout: {timeout} (must be > 0)", field="timeout", value=timeout
        )
    return value
