"""Configuration management for dvcli.

Supports YAML profiles and environment variable overrides. API tokens are
only ever read from the environment; they are never written to disk.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from dvcli.core.exceptions import ConfigurationError, ProfileNotFoundError, ValidationError
from dvcli.core.validation import validate_server_url, validate_timeout

# =============================================================================
# Constants
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "dvcli"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_TIMEOUT = 30.0
OUTPUT_FORMATS = ("json", "table")

# Environment variable names
ENV_URL = "DVCLI_URL"
ENV_TOKEN = "DVCLI_TOKEN"
ENV_PROFILE = "DVCLI_PROFILE"
ENV_VERIFY_SSL = "DVCLI_VERIFY_SSL"
ENV_TIMEOUT = "DVCLI_TIMEOUT"


# =============================================================================
# Profile
# =============================================================================


@dataclass
class Profile:
    """Connection settings for one Dataverse installation.

    A profile names where to connect and how, never who: the API token
    comes from ``DVCLI_TOKEN`` at run time.
    """

    url: str
    verify_ssl: bool = True
    timeout: float = DEFAULT_TIMEOUT

    def to_dict(self) -> dict[str, Any]:
        """Convert to the mapping stored under ``profiles.<name>``."""
        return {
            "url": self.url,
            "verify_ssl": self.verify_ssl,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], name: str = "default") -> "Profile":
        """Build a profile from its stored mapping.

        Raises:
            ConfigurationError: If the URL or timeout of profile ``name`` is invalid.
        """
        return _checked_profile(
            name,
            data.get("url", ""),
            verify_ssl=bool(data.get("verify_ssl", True)),
            timeout=data.get("timeout", DEFAULT_TIMEOUT),
        )


def _checked_profile(name: str, url: str, *, verify_ssl: bool, timeout: Any) -> Profile:
    try:
        return Profile(
            url=validate_server_url(url),
            verify_ssl=verify_ssl,
            timeout=validate_timeout(timeout),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Profile '{name}': {e.message}", field=name) from e


# =============================================================================
# Config
# =============================================================================


@dataclass
class Config:
    """Contents of ``config.yaml``: named profiles plus CLI defaults.

    ``default_profile`` is the profile used when ``--profile`` is not given;
    ``output_format`` is the default of ``--output``.
    """

    default_profile: str = "default"
    output_format: str = "json"
    profiles: dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load config from file with environment variable overrides.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Defaults

        ``DVCLI_URL`` replaces the ``default`` profile, taking its TLS and
        timeout settings from ``DVCLI_VERIFY_SSL`` and ``DVCLI_TIMEOUT``.

        Args:
            config_path: Optional path to config file.

        Returns:
            Loaded configuration.

        Raises:
            ConfigurationError: If the file or an environment value is malformed.
        """
        path = config_path or CONFIG_FILE
        config = cls()

        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config: {e}") from e

            if not isinstance(data, dict):
                raise ConfigurationError(f"Failed to load config: {path} is not a mapping")

            config.default_profile = data.get("default_profile", "default")
            config.output_format = data.get("output_format", "json")
            if config.output_format not in OUTPUT_FORMATS:
                raise ConfigurationError(
                    "Invalid output format", field="output_format", value=config.output_format
                )

            for name, pdata in (data.get("profiles") or {}).items():
                if not isinstance(pdata, dict):
                    raise ConfigurationError(f"Profile '{name}' must be a mapping", field=name)
                config.profiles[name] = Profile.from_dict(pdata, name)

        if url := os.getenv(ENV_URL):
            config.profiles["default"] = _checked_profile(
                "default",
                url,
                verify_ssl=os.getenv(ENV_VERIFY_SSL, "true").lower() in ("true", "1", "yes"),
                timeout=os.getenv(ENV_TIMEOUT, str(DEFAULT_TIMEOUT)),
            )

        if profile := os.getenv(ENV_PROFILE):
            config.default_profile = profile

        return config

    def save(self, config_path: Optional[Path] = None) -> None:
        """Write profiles and defaults as YAML; no token is ever written.

        Args:
            config_path: Optional path to config file.
        """
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "default_profile": self.default_profile,
            "output_format": self.output_format,
            "profiles": {name: p.to_dict() for name, p in self.profiles.items()},
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """Get profile by name or default.

        Args:
            name: Profile name. If None, uses default_profile.

        Returns:
            Profile configuration.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        name = name or self.default_profile
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        return self.profiles[name]

    def has_profile(self, name: str) -> bool:
        """Check if profile exists."""
        return name in self.profiles

    def add_profile(
        self,
        name: str,
        url: str,
        verify_ssl: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        overwrite: bool = False,
    ) -> Profile:
        """Register a Dataverse installation under ``name``.

        The URL is normalized (no trailing slash) before it is stored. The
        first profile added also becomes the default.

        Raises:
            ConfigurationError: If the URL or timeout is invalid, or the
                profile exists and ``overwrite`` is False.
        """
        if name in self.profiles and not overwrite:
            raise ConfigurationError(f"Profile '{name}' already exists", field=name)

        profile = _checked_profile(name, url, verify_ssl=verify_ssl, timeout=timeout)
        self.profiles[name] = profile
        if len(self.profiles) == 1:
            self.default_profile = name
        return profile

    def remove_profile(self, name: str) -> bool:
        """Forget a profile.

        Returns:
            True if removed, False if there was no such profile.

        Raises:
            ConfigurationError: If ``name`` is the default profile.
        """
        if name not in self.profiles:
            return False
        if name == self.default_profile:
            raise ConfigurationError(
                f"Cannot remove the default profile '{name}'; switch to another one first",
                field=name,
            )
        del self.profiles[name]
        return True

    def set_default_profile(self, name: str) -> None:
        """Set the default profile.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        self.default_profile = name


def get_token() -> Optional[str]:
    """Get the API token from the environment.

    Returns:
        Token if set and non-empty, None otherwise.
    """
    return os.getenv(ENV_TOKEN) or None
