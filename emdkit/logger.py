"""Console logging for emdkit."""
from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "emdkit"

# Logs go to stderr so that --format json output on stdout stays parseable.
console = Console(stderr=True)


def _root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(console=console, show_path=False, show_time=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        root.setLevel(logging.WARNING)
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the emdkit namespace.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger whose records are rendered by the shared Rich handler
    """
    _root()
    return logging.getLogger(name)


def set_verbose(verbose: bool) -> None:
    """Switch emdkit logging between warnings only and full debug output."""
    _root().setLevel(logging.DEBUG if verbose else logging.WARNING)
