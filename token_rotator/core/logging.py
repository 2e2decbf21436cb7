"""
Logging utilities for the rotation function and operator scripts.

Provides a consistent logging format and configuration.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    # The Lambda runtime installs its own root handler, which makes
    # basicConfig a no-op; the level still has to be applied.
    logging.getLogger().setLevel(level.upper())


__all__ = ["configure_logging"]
