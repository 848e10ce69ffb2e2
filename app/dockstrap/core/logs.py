"""Run log configuration.

Each installer run writes a fresh log file named after its start time,
e.g. ``/var/log/docker-install/install_20260216_103000.log``. Console
output is handled by Rich separately; the file receives every record from
the ``dockstrap`` logger hierarchy, including captured command output at
DEBUG level when verbose logging is on.
"""

import logging
from datetime import datetime
from pathlib import Path

LOGGER_NAME = "dockstrap"
LOG_FORMAT = "[%(levelname)s] %(asctime)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_TAG = "_dockstrap_run_log"


def log_file_name(now: datetime | None = None) -> str:
    """Return the log file name for a run started at ``now``."""
    return f"install_{(now or datetime.now()).strftime('%Y%m%d_%H%M%S')}.log"


def setup_logging(
    log_dir: Path,
    *,
    verbose: bool = False,
    now: datetime | None = None,
) -> Path | None:
    """Attach a file handler for this run to the package logger.

    Handlers from a previous call are replaced, so repeated invocation in
    one process (as in tests) does not duplicate output.

    Args:
        log_dir: Directory for the log file; created if missing.
        verbose: Record DEBUG messages (command output) as well.
        now: Run start time used in the file name.

    Returns:
        Path of the log file, or None if the directory is not writable.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    teardown_logging()

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / log_file_name(now)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot create log file in %s: %s", log_dir, e)
        return None

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    setattr(handler, _HANDLER_TAG, True)
    logger.addHandler(handler)
    return log_path


def teardown_logging() -> None:
    """Close and detach the run log handler, if any."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()
