# src/todo_keeper/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "todo.log"


class _AppOnlyFilter(logging.Filter):
    """
    Console filter: records from `app_package` pass at the handler level,
    everything else (third-party, 'py.warnings') only at ERROR+.

    The task list is printed to stdout; stderr should stay quiet while the user types.
    """

    def __init__(self, app_package: str) -> None:
        super().__init__()
        self._app_package = app_package

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == self._app_package or name.startswith(self._app_package + "."):
            return True
        return record.levelno >= logging.ERROR


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(_AppOnlyFilter(__name__.partition(".")[0]))
    return handler


def _file_handler(
    path: Path, level: int, formatter: logging.Formatter, max_bytes: int, backup_count: int
) -> logging.Handler:
    # One log file spans many sessions; rotate instead of growing forever.
    handler = RotatingFileHandler(
        str(path), maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> Path:
    """
    Route all logging to a filtered stderr handler and a rotating file in `log_dir`.

    Call once from the entry point, before the first log call. Replaces any
    handlers already on the root logger. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    root.addHandler(_console_handler(console_level, formatter))
    root.addHandler(_file_handler(log_file, file_level, formatter, max_bytes, backup_count))

    logging.captureWarnings(True)
    return log_file
