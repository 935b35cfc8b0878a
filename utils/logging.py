"""Centralized logging setup for the page alignment tools."""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union


_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

LOGGER_NAME = "pagealign"


def configure_logging(level: Union[int, str] = logging.INFO, logfile: Optional[str] = None) -> None:
    """Configure the root logger with a stderr (and optional file) handler.

    ``level`` accepts either a logging constant or a level name such as ``"DEBUG"``.
    Stdout is left to the command line's step listing.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if logfile:
        handlers.append(logging.FileHandler(logfile, encoding="utf-8"))

    logging.basicConfig(level=level, format=_LOG_FORMAT, handlers=handlers, force=True)


logger = logging.getLogger(LOGGER_NAME)
