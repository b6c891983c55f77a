"""Logging utilities for dvcli.

Library modules log through ``logging.getLogger(__name__)`` at DEBUG level
only. The package logger carries a ``NullHandler``, so nothing is emitted
unless the application (the CLI, or any other caller) configures logging.
"""

from __future__ import annotations

import logging
import sys

# =============================================================================
# Constants
# =============================================================================

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER_NAME = "dvcli"


# =============================================================================
# Logger Setup
# =============================================================================


def install_null_handler() -> None:
    """Keep the library silent when the application configures no logging."""
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())


def setup_logging(
    level: int = logging.WARNING,
    *,
    quiet: bool = False,
    verbose: bool = False,
) -> None:
    """Configure logging for the dvcli command line.

    Args:
        level: Base logging level.
        quiet: If True, only show errors.
        verbose: If True, show debug messages (request/response trace).
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )
    logging.getLogger(PACKAGE_LOGGER_NAME).setLevel(level)

    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
