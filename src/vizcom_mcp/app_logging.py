"""Logging configuration helpers."""

import logging
import sys


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure package logging with a single stderr handler.

    stdout is reserved for the MCP stdio stream.
    """
    logger = logging.getLogger("vizcom_mcp")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
