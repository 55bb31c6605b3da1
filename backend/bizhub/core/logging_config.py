"""
Logging configuration

One console handler, coloured when attached to a terminal, plus optional
dated files under LOG_DIR:

    app_YYYY-MM-DD.log    INFO and above
    error_YYYY-MM-DD.log  ERROR and above (stock and ledger failures end up here)
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# library loggers that drown out order/ledger messages at INFO
NOISY_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
}

LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
RESET = "\033[0m"


class ColoredFormatter(logging.Formatter):
    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        # copy, file handlers share the record
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{RESET}"
        return super().format(record)


def _console_handler(stream=None) -> logging.Handler:
    stream = stream or sys.stdout
    handler = logging.StreamHandler(stream)
    handler.setLevel(logging.DEBUG)
    formatter_cls = ColoredFormatter if getattr(stream, "isatty", lambda: False)() else logging.Formatter
    handler.setFormatter(formatter_cls(LOG_FORMAT, DATE_FORMAT))
    return handler


def _dated_file_handler(directory: Path, stem: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(directory / f"{stem}_{date.today().isoformat()}.log", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = None, stream=None):
    """
    Configure the root logger

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown names fall back to INFO
        log_dir: when given, app_/error_ files are written there as well
        stream: console stream, stdout by default
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.addHandler(_console_handler(stream))

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        root.addHandler(_dated_file_handler(directory, "app", logging.INFO))
        root.addHandler(_dated_file_handler(directory, "error", logging.ERROR))

    for name, level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    logging.info(f"📋 Logging at {logging.getLevelName(root.level)}" + (f", files in {log_dir}" if log_dir else ""))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
