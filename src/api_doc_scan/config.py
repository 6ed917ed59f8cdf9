"""Defaults and logging setup for the command line."""

import logging

DEFAULT_OPENAPI_VERSION = "3.0.3"
DEFAULT_TITLE = "API"
DEFAULT_API_VERSION = "0.1.0"

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; DEBUG shows dropped tokens and built operations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )
