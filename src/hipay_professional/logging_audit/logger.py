"""Logging setup for applications using the HiPay Professional SDK.

The library only emits records through module loggers
(``logging.getLogger(__name__)``). :func:`configure_logging` is for the
command line and for applications wanting console plus rotating file output
with credential redaction.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .formatters import CredentialRedactingFormatter

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = Path("logs") / "hipay-professional.log"
LOG_FILE_ENV_VAR = "HIPAY_LOG_FILE"
MAX_LOG_FILE_SIZE = 10 * 1024 * 1024
BACKUP_COUNT = 5

_logging_configured = False

logger = logging.getLogger(__name__)


def _parse_level(level: str) -> int:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level!r} (use DEBUG, INFO, WARNING, ERROR or CRITICAL)")
    return numeric_level


def _log_file_path(log_file: Optional[Path]) -> Path:
    if log_file is not None:
        return Path(log_file)
    from_env = os.environ.get(LOG_FILE_ENV_VAR)
    return Path(from_env) if from_env else DEFAULT_LOG_FILE


def _installed_handlers(root_logger: logging.Logger) -> List[logging.Handler]:
    """Handlers a previous configure_logging call attached to the root logger."""
    return [
        handler
        for handler in root_logger.handlers
        if isinstance(handler.formatter, CredentialRedactingFormatter)
    ]


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    redact_credentials: bool = True,
) -> None:
    """Attach a console handler and a rotating file handler to the root logger.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Console level name; the file always receives DEBUG
        log_file: Log file, defaults to HIPAY_LOG_FILE then logs/hipay-professional.log
        redact_credentials: Mask API credentials in both outputs

    Raises:
        ValueError: If the level name is unknown
        RuntimeError: If the log directory cannot be created
    """
    global _logging_configured

    console_level = _parse_level(level)
    path = _log_file_path(log_file)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(f"Cannot create log directory {path.parent}: {e}") from e

    root_logger = logging.getLogger()
    for handler in _installed_handlers(root_logger):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.DEBUG)

    formatter = CredentialRedactingFormatter(fmt=LOG_FORMAT, redact=redact_credentials)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    try:
        rotating = RotatingFileHandler(
            path, maxBytes=MAX_LOG_FILE_SIZE, backupCount=BACKUP_COUNT, encoding="utf-8"
        )
    except OSError as e:
        logger.warning(f"Cannot open log file {path} ({e}); logging to console only")
    else:
        rotating.setLevel(logging.DEBUG)
        rotating.setFormatter(formatter)
        root_logger.addHandler(rotating)

    _logging_configured = True


def get_logger(module_name: str) -> logging.Logger:
    """Return the logger of a module, typically ``get_logger(__name__)``."""
    return logging.getLogger(module_name)
