"""Define utility functions to simplify logging to the CLI."""

import logging

from rich.console import Console

logger = logging.getLogger("stateplan")
console = Console()


def log_info(message: str) -> None:
    """Log the given string at INFO level through the package logger."""
    logger.info(message)


def configure_logging(verbose: bool = False) -> None:
    """Route the package logger to standard error at the requested verbosity.

    :param verbose: Whether to emit DEBUG messages (defaults to False = INFO and above)
    """
    level = logging.DEBUG if verbose else logging.INFO
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
