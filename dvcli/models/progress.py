"""Progress models for tracking file transfers.

Instances are handed to an optional ``progress_callback`` while a file is
uploaded or downloaded. ``current`` and ``total`` count bytes; ``total`` is
0 when the size is unknown.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class OperationPhase(Enum):
    """Transfer phases for progress tracking."""

    UPLOADING = "uploading"
    DOWNLOADING = "downloading"


@dataclass
class Progress:
    """Base progress information."""

    phase: OperationPhase
    current: int = 0
    total: int = 0
    message: str = ""

    @property
    def percent(self) -> float:
        """Calculate completion percentage."""
        if self.total == 0:
            return 0.0
        return (self.current / self.total) * 100

    @property
    def mb_done(self) -> float:
        """Return megabytes transferred."""
        return self.current / (1024 * 1024)


@dataclass
class UploadProgress(Progress):
    """Upload-specific progress."""

    file_name: str = ""


@dataclass
class DownloadProgress(Progress):
    """Download-specific progress."""

    file_path: str = ""


ProgressCallback = Callable[[Progress], None]
