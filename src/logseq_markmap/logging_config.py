"""Logging configuration for logseq-markmap."""

import sys

from loguru import logger


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Route loguru to stderr.

    ``quiet`` keeps interactive sessions readable by only letting warnings through;
    ``verbose`` wins when both are set.
    """
    logger.remove()
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = "INFO"
    logger.add(sys.stderr, level=level, format="{level.icon} {name}: {message}")
