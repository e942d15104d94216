"""
Logging setup for scripts and services that embed the engine.

Library modules only create named loggers; handlers are configured once by
whoever owns the process.
"""

import sys
import logging
from pathlib import Path
from typing import Optional

from config.settings import LOG_FILE, LOG_FORMAT, LOG_LEVEL


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure root logging: console always, file when a path is given.

    Args:
        level: Level name (default LOG_LEVEL from settings)
        log_file: Log file path (default LOG_FILE from settings; empty disables)
    """
    level_name = (level or LOG_LEVEL).upper()
    log_file = LOG_FILE if log_file is None else log_file

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
