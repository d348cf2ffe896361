"""
Rich logging setup for LawQuill.

Installs a RichHandler on the root logger so conversions print readable,
colourised progress and warnings on the terminal.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_console: Optional[Console] = None


def get_console() -> Console:
    """Return the console shared by the CLI and the log handler."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def setup_logging(level: str = "INFO", use_rich: bool = True) -> None:
    """
    Setup logging for the application.

    Args:
        level: Log level name
        use_rich: Whether to use rich logging
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if use_rich:
        rich_handler = RichHandler(
            console=get_console(),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        rich_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))

        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)
        root_logger.handlers.clear()
        root_logger.addHandler(rich_handler)
    else:
        logging.basicConfig(
            level=numeric_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger(__name__).debug(f"Logging initialized at {level} level (rich={use_rich})")
