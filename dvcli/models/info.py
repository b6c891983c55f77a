"""Instance information payloads."""

from __future__ import annotations

from pydantic import Field

from .base import ResponsePayload


class VersionInfo(ResponsePayload):
    """Software version of a Dataverse instance."""

    version: str = Field(..., description="Version string, e.g. '6.2'")
    build: str | None = Field(None, description="Build identifier")

    def _part(self, index: int) -> int | None:
        parts = self.version.split(".")
        if len(parts) <= index:
            return None
        digits = "".join(ch for ch in parts[index] if ch.isdigit())
        return int(digits) if digits else None

    @property
    def major(self) -> int | None:
        """Major version number, if the version string has one."""
        return self._part(0)

    @property
    def minor(self) -> int | None:
        """Minor version number, if the version string has one."""
        return self._part(1)
