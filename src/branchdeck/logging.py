"""Application logging helpers."""

from __future__ import annotations

import logging as py_logging
from pathlib import Path
from typing import TextIO

LOG_LEVELS = {
    "DEBUG": py_logging.DEBUG,
    "INFO": py_logging.INFO,
    "WARN": py_logging.WARNING,
    "WARNING": py_logging.WARNING,
    "ERROR": py_logging.ERROR,
}
LOG_FILENAME = "branchdeck.log"
_FALLBACK_LOG_PATH = Path(".branchdeck/logs") / LOG_FILENAME
_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def default_log_path(data_dir: str | Path | None = None) -> Path:
    """Log file location under the data directory.

    The terminal belongs to the UI while it runs, so the log file is the
    only place records end up unless a stream is configured explicitly.
    """
    if data_dir is None:
        return (Path.cwd() / _FALLBACK_LOG_PATH).resolve()
    try:
        resolved = Path(data_dir).expanduser() / "logs" / LOG_FILENAME
    except RuntimeError:
        resolved = (Path.cwd() / _FALLBACK_LOG_PATH).resolve()
    else:
        if not resolved.is_absolute():
            resolved = resolved.resolve()
    return resolved


def normalize_level(level: str) -> str:
    normalized = level.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    return normalized


def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    *,
    log_file: str | Path | None = None,
) -> py_logging.Logger:
    resolved = LOG_LEVELS.get(normalize_level(level), py_logging.INFO)

    logger = py_logging.getLogger("branchdeck")
    logger.setLevel(resolved)
    logger.handlers.clear()
    formatter = py_logging.Formatter(_FORMAT)

    if stream is not None:
        handler = py_logging.StreamHandler(stream)
        handler.setLevel(resolved)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if log_file:
        try:
            log_path = Path(log_file).expanduser()
        except RuntimeError:
            log_path = Path(log_file)
        if not log_path.is_absolute():
            log_path = log_path.resolve()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = py_logging.FileHandler(log_path, encoding="utf-8")
        except OSError:
            pass
        else:
            file_handler.setLevel(py_logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(py_logging.NullHandler())

    logger.propagate = False
    return logger
