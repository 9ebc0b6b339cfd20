"""
Structured logging utilities for openresample.

Console logs are human-readable; when a log directory is configured the same
records are also written as JSON lines to ``openresample.log``.
"""
import logging
import json
import os
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional

from .config import env

# Extra fields copied into JSON records when a call site attaches them
EXTRA_FIELDS = ("method", "n_units", "n_replicates", "n_candidates", "grouped")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def get_logger(name: str, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with a console handler and optional JSON file output.

    Args:
        name: Logger name (usually __name__)
        log_dir: Directory for ``openresample.log``. Falls back to the
            ``OPENRESAMPLE_LOG_DIR`` environment variable; no file is written
            when neither is set.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    level = str(env("OPENRESAMPLE_LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level, logging.INFO))

    log_dir = log_dir or env("OPENRESAMPLE_LOG_DIR")
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        logfile = os.path.join(log_dir, "openresample.log")
        json_handler = logging.FileHandler(filename=logfile, encoding='utf-8', delay=True)
        json_handler.setFormatter(JSONFormatter())
        logger.addHandler(json_handler)

    console_handler = logging.StreamHandler()
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    return logger


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """Apply a level (and optional JSON log directory) to every openresample logger."""
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level!r}")
    logfile = os.path.abspath(os.path.join(log_dir, "openresample.log")) if log_dir else None
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)

    for name, logger in list(logging.root.manager.loggerDict.items()):
        if not isinstance(logger, logging.Logger) or not name.startswith("openresample"):
            continue
        logger.setLevel(numeric)
        if logfile is None:
            continue
        if any(isinstance(h, logging.FileHandler) and h.baseFilename == logfile for h in logger.handlers):
            continue
        json_handler = logging.FileHandler(filename=logfile, encoding='utf-8', delay=True)
        json_handler.setFormatter(JSONFormatter())
        logger.addHandler(json_handler)
