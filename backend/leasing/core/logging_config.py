"""Logging setup for the API host and the standalone worker."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once; later calls only adjust the level."""
    logging.basicConfig(stream=sys.stdout, format=LOG_FORMAT)
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))
