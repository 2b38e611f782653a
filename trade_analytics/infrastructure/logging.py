"""Logging setup for command-line use."""

import logging
import sys

_handler: logging.Handler | None = None


def setup_logging(level: int = logging.WARNING) -> None:
    """Configure logging to output to stdout with proper formatting.

    Safe to call repeatedly; the handler installed by a previous call is
    replaced rather than duplicated.
    """
    global _handler

    root_logger = logging.getLogger()
    if _handler is not None:
        root_logger.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    _handler.setFormatter(formatter)
    root_logger.addHandler(_handler)
    root_logger.setLevel(level)

    # Set lower log levels for some noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
