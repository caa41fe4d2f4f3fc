"""Logging setup for the faceanchor command-line tools."""

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(
    level: Union[int, str] = logging.INFO, console: Optional[Console] = None
) -> None:
    """
    Route faceanchor log records through a Rich handler.

    Library modules only create loggers; handlers are installed here by the
    entry points.

    Args:
        level: Logging level name or number
        console (Console, optional): Rich console to render to
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = RichHandler(
        console=console,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root = logging.getLogger("faceanchor")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
