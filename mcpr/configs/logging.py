"""
mcpr Logging

stdout belongs to the MCP protocol stream, so mcpr logs only to stderr and
to a log file:

    stderr  WARNING and above (everything when debugging)
    file    INFO and above (DEBUG when debugging)

MCPR_DEBUG turns on debugging, MCPR_LOG_FILE moves the log file
(default: $MCPR_DATA_PATH/mcpr.log).
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from mcpr.configs.paths import get_data_path

ROOT_LOGGER = "mcpr"
LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
TRUTHY = ("true", "1", "yes")


def _debug_from_env() -> bool:
    return os.environ.get("MCPR_DEBUG", "").lower() in TRUTHY


def _log_file_from_env() -> Path:
    configured = os.environ.get("MCPR_LOG_FILE")
    return Path(configured) if configured else get_data_path() / "mcpr.log"


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    return handler


def setup_logging(
    debug: Optional[bool] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Attach the stderr and file handlers to the mcpr logger.

    Calling it again replaces the handlers instead of stacking them.

    Args:
        debug: Log at DEBUG everywhere. Defaults to MCPR_DEBUG.
        log_file: Log file path. Defaults to MCPR_LOG_FILE or the data dir.

    Returns:
        The top-level "mcpr" logger
    """
    debug = _debug_from_env() if debug is None else debug
    path = Path(log_file) if log_file else _log_file_from_env()
    path.parent.mkdir(parents=True, exist_ok=True)

    file_level = logging.DEBUG if debug else logging.INFO
    stderr_level = logging.DEBUG if debug else logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER)
    for old in list(logger.handlers):
        old.close()
    logger.handlers.clear()
    logger.setLevel(file_level)
    logger.addHandler(_handler(logging.StreamHandler(sys.stderr), stderr_level))
    logger.addHandler(_handler(logging.FileHandler(path), file_level))

    logger.debug(f"Logging to file: {path}")
    return logger


def get_logger(component: str) -> logging.Logger:
    """Logger for one part of mcpr, e.g. get_logger("bridge") -> "mcpr.bridge"."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")
