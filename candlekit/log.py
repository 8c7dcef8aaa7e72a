"""Logging setup for the candlekit CLI."""

import logging

from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
