"""Logging for BoardKit.

All engine, client and API loggers live under the ``boardkit`` namespace and
share one rotating log file. Error text from GitHub goes through
:func:`sanitize_for_log` before it is logged or stored in a result.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "boardkit"

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "boardkit.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# httpx logs every request line at INFO
NOISY_LOGGERS = ("httpx", "httpcore")

_REDACTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"gh[opsu]_[A-Za-z0-9]{36}"), "[GITHUB_TOKEN]"),
    (re.compile(r"github_pat_[A-Za-z0-9_]{82}"), "[GITHUB_TOKEN]"),
    (re.compile(r"Bearer [A-Za-z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"token=[A-Za-z0-9._-]+"), "token=[REDACTED]"),
)


def sanitize_for_log(text: str) -> str:
    """Remove GitHub credentials from text before it is logged.

    Args:
        text: Text that may contain sensitive data, such as an error body.

    Returns:
        Sanitized text safe for logging.
    """
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Configure the ``boardkit`` logger.

    Safe to call more than once; earlier handlers are closed and replaced.

    Args:
        log_dir: Directory for log files. Falls back to BOARDKIT_LOG_DIR,
                 then 'logs' in the current directory.
        log_file: Log file name.
        max_bytes: Size at which the file is rotated.
        backup_count: Number of rotated files to keep.
        level: Level name. Falls back to BOARDKIT_LOG_LEVEL, then INFO.
               Unknown names mean INFO.
        console: Also log to stderr.

    Returns:
        The ``boardkit`` logger.
    """
    directory = Path(log_dir or os.environ.get("BOARDKIT_LOG_DIR", DEFAULT_LOG_DIR))
    directory.mkdir(parents=True, exist_ok=True)

    level_name = (level or os.environ.get("BOARDKIT_LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_path = directory / log_file
    _attach(
        logger,
        RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        ),
        log_level,
    )
    if console:
        _attach(logger, logging.StreamHandler(), log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
        )

    logger.info("BoardKit logging initialized (level=%s, file=%s)", level_name, log_path)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a component logger, e.g. ``get_logger("cli")`` -> ``boardkit.cli``."""
    if not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
