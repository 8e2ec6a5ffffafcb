"""Logging channels for the HRMS API.

Two named channels are configured at startup:

  hrms        application log; access denials and check failures land here
              through the ``hrms.*`` module loggers
  hrms.audit  one line per recorded write request

Console output goes through ``hrms``. When file logging is on each channel
also gets its own rotating file under ``log_dir`` (hrms.log, audit.log).
"""

import logging
import logging.handlers
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from hrms.core.config import Settings


LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
AUDIT_FORMAT = "%(asctime)s [AUDIT] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

APP_CHANNEL = "hrms"
AUDIT_CHANNEL = "hrms.audit"


def _parse_level(level: str) -> int:
    level_upper = level.upper()
    if level_upper not in LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of: {', '.join(LEVELS)}")
    return getattr(logging, level_upper)


def setup_logger(
    name: str,
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
    fmt: str = LOG_FORMAT,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Attach handlers to a named channel.

    Calling it again for the same channel only updates the level.

    Raises:
        ValueError: if the level name is not a logging level
    """
    logger = logging.getLogger(name)
    logger.setLevel(_parse_level(level))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt, datefmt=DATE_FORMAT)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def configure_logging(settings: "Settings") -> logging.Logger:
    """Set up the application and audit channels from settings.

    The audit channel always logs at INFO so recorded writes are kept even
    when the application log is quieter. It has no console handler of its
    own; its records reach the console through ``hrms``.
    """
    log_dir = Path(settings.log_dir)

    app_logger = setup_logger(
        APP_CHANNEL,
        level=settings.log_level,
        log_file=log_dir / "hrms.log" if settings.file_logging else None,
    )

    setup_logger(
        AUDIT_CHANNEL,
        level="INFO",
        log_file=log_dir / "audit.log" if settings.file_logging else None,
        console=False,
        fmt=AUDIT_FORMAT,
    )

    return app_logger
