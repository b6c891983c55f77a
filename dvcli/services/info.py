"""Instance information service."""

from __future__ import annotations

from dvcli.core.result import Result
from dvcli.models.info import VersionInfo

from .base import BaseService, operation


class InfoService(BaseService):
    """Service for instance-level information."""

    @operation
    def get_version(self, *, timeout: float | None = None) -> Result[VersionInfo]:
        """Get the software version of the instance.

        Args:
            timeout: Request timeout override in seconds

        Returns:
            Result carrying VersionInfo
        """
        return self._get("api/info/version", VersionInfo, timeout=timeout)
