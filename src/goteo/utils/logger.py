"""Minimal logging utilities for Goteo.

Provides a simple get_logger function that wraps the standard library logging.
The library never configures handlers; applications decide where records go.

Example:
    >>> from goteo.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Compacted buffer")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "goteo." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'goteo.mymodule'
    """
    if not (name == "goteo" or name.startswith("goteo.")):
        name = f"goteo.{name}"
    return logging.getLogger(name)
