# catalog_browser/config/logging_config.py

"""Logging for catalog_browser runs.

One log file per process, kept under ``Settings.LOGS_DIR`` (the profile's
``logs/`` directory unless ``CATALOG_LOG_DIR`` says otherwise).  Fetches
run in worker threads, so file records carry the thread name.  Stderr
only shows warnings, leaving stdout for the CLI's JSON.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from catalog_browser.config.settings import Settings

LOGGER_NAME = "catalog_browser"

_FILE_FORMAT = (
    "%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] "
    "%(name)s (%(filename)s:%(lineno)d): %(message)s"
)
_STDERR_FORMAT = "%(levelname)s %(name)s: %(message)s"
_TIME_FORMAT = "%H:%M:%S"


def _run_log_path(logs_dir: Path) -> Path:
    return logs_dir / datetime.now().strftime("run_%Y%m%d_%H%M%S.log")


def current_log_file() -> Path | None:
    """Return the file the package logger already writes to, if any."""
    for handler in logging.getLogger(LOGGER_NAME).handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach the run's file and stderr handlers to ``catalog_browser``.

    Safe to call more than once: later calls leave the handlers alone and
    return the log file chosen by the first call.
    """
    existing = current_log_file()
    if existing is not None:
        return existing

    target_dir = Settings.LOGS_DIR if logs_dir is None else logs_dir
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = _run_log_path(target_dir)

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG)

    to_file = logging.FileHandler(log_file, encoding="utf-8")
    to_file.setLevel(logging.DEBUG)
    to_file.setFormatter(logging.Formatter(_FILE_FORMAT, _TIME_FORMAT))
    package_logger.addHandler(to_file)

    to_stderr = logging.StreamHandler(sys.stderr)
    to_stderr.setLevel(logging.WARNING)
    to_stderr.setFormatter(logging.Formatter(_STDERR_FORMAT))
    package_logger.addHandler(to_stderr)

    package_logger.debug(
        "Logging to %s (profile %s)", log_file, Settings.PROFILE_DIR,
    )
    return log_file
