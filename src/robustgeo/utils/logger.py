"""Logging utilities."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from ..config import debug_enabled


def setup_logger(name: str = 'robustgeo', log_level: Optional[int] = None,
                 log_file: Optional[str] = None) -> logging.Logger:
    """Setup logger with console and optional file handler.

    Calling it again for the same logger does not duplicate handlers.
    """
    if log_level is None:
        log_level = logging.DEBUG if debug_enabled() else logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    has_console = any(
        isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
        for h in logger.handlers
    )
    if not has_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        target = str(Path(log_file).resolve())
        has_file = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == target
            for h in logger.handlers
        )
        if not has_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
