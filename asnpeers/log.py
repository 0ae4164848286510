"""
asnpeers - Logging

Diagnostics go to stderr through rich so they do not mix with the peer
listing printed on stdout.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "asnpeers"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the asnpeers namespace"""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single RichHandler to the package logger"""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
