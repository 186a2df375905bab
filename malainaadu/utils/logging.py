"""Logging setup shared by the CLI and the HTTP server."""

import logging

from rich.logging import RichHandler

_configured = False


def setup_logging(verbose: bool = False) -> None:
    """Route stdlib logging through rich. Safe to call more than once."""
    global _configured
    level = logging.DEBUG if verbose else logging.INFO

    if _configured:
        logging.getLogger().setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True
