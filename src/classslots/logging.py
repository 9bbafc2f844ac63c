"""Logging setup for classslots.

One rotating log file plus an optional console stream, both attached to the
``classslots`` logger. Modules log through ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE = "classslots.log"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Content store credentials that can show up in URLs, headers or echoed bodies
_REDACTIONS = [
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"token=[a-zA-Z0-9._-]+"), "token=[REDACTED]"),
    (re.compile(r'"(content_store_token|password)":\s*"[^"]*"'), r'"\1": "[REDACTED]"'),
]


def setup_logging(
    level: str | None = None,
    log_dir: str | Path | None = None,
    console: bool = True,
) -> logging.Logger:
    """Attach file and console handlers to the ``classslots`` logger.

    Calling it again replaces the handlers instead of adding more.

    Args:
        level: Level name; falls back to CLASSSLOTS_LOG_LEVEL, then INFO.
        log_dir: Directory of the log file; falls back to CLASSSLOTS_LOG_DIR,
            then ./logs.
        console: Also log to stderr.

    Returns:
        The ``classslots`` logger.
    """
    log_dir = Path(log_dir or os.environ.get("CLASSSLOTS_LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    level = (level or os.environ.get("CLASSSLOTS_LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level, logging.INFO)

    logger = logging.getLogger("classslots")
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_dir / LOG_FILE, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Logging to %s at %s", log_dir / LOG_FILE, level)
    return logger


def sanitize_for_log(text: str, max_length: int | None = 2000) -> str:
    """Redact credentials, then cut the text to ``max_length`` characters."""
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    if max_length is not None and len(text) > max_length:
        text = text[:max_length] + f"... [{len(text) - max_length} more chars]"
    return text
