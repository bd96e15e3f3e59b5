# src/config/logging_config.py

"""Logging for steal_deals runs.

Every launch gets its own ``logs/run_<timestamp>.log`` holding the full
``steal_deals.*`` hierarchy at DEBUG: backend calls, auth events and admin
writes. The Textual UI owns the terminal, so stderr only receives records
at ``Settings.CONSOLE_LOG_LEVEL`` (``STEAL_DEALS_LOG_LEVEL``) and above.
Run logs older than the newest ``Settings.LOG_KEEP_RUNS`` are removed at
start-up.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | "
    "%(message)s"
)
_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level() -> int:
    """Configured stderr level; unknown names fall back to WARNING."""
    level = logging.getLevelName(Settings.CONSOLE_LOG_LEVEL.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def _prune_old_runs(logs_dir: Path, keep: int) -> list[Path]:
    """Delete all but the newest ``keep`` run logs; returns what was removed."""
    runs = sorted(logs_dir.glob("run_*.log"))
    stale = runs[: max(len(runs) - keep, 0)]
    for path in stale:
        path.unlink(missing_ok=True)
    return stale


def setup_logging() -> Path:
    """Attach the run's file and stderr handlers to ``steal_deals``.

    Calling it again reuses the handlers already attached and returns the
    log file they write to.
    """
    project_logger = logging.getLogger("steal_deals")
    for handler in project_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)

    logs_dir = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    stale = _prune_old_runs(logs_dir, Settings.LOG_KEEP_RUNS - 1)
    log_file = logs_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level())
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    project_logger.setLevel(logging.DEBUG)
    project_logger.addHandler(file_handler)
    project_logger.addHandler(console_handler)

    project_logger.info("Logging to %s", log_file)
    if stale:
        project_logger.debug("Removed %d old run logs", len(stale))

    return log_file
