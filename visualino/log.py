"""
Application logging setup.

Call setup_logging() once at startup; modules then log through
logging.getLogger(__name__).
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from PySide6.QtCore import QStandardPaths

LOG_DIR_ENV = "VISUALINO_LOG_DIR"
LOG_FILENAME = "visualino.log"

_FORMAT = "[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_initialized = False


def default_log_dir() -> Path:
    override = os.environ.get(LOG_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    base = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppLocalDataLocation)
    if not base:
        base = str(Path.home() / ".visualino")
    return Path(base) / "logs"


def setup_logging(
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_dir: Path | None = None,
) -> Path | None:
    """Configure console and rotating file handlers on the root logger.

    Returns the log file path, or None when the log directory is not writable
    and only console logging could be set up.
    """
    global _initialized
    if _initialized:
        return None

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_file: Path | None = None
    target_dir = log_dir if log_dir is not None else default_log_dir()
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        log_file = target_dir / LOG_FILENAME
        file_handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024, backupCount=3, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except OSError as exc:
        log_file = None
        root_logger.warning("File logging disabled, cannot write to %s: %s", target_dir, exc)

    _initialized = True
    logging.getLogger(__name__).debug("Logging initialized (file: %s)", log_file)
    return log_file
