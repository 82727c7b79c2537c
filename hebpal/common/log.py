"""
Logging setup for the command line.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import settings


def setup_logging(level: Optional[str] = None, console: Optional[Console] = None) -> None:
    """Route the root logger through a RichHandler on stderr."""
    level_name = (level or settings.LOG_LEVEL).upper()
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root = logging.getLogger()
    # Replace a handler from an earlier call instead of stacking duplicates
    for old in [h for h in root.handlers if isinstance(h, RichHandler)]:
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.WARNING))
