"""
Logging Configuration
loguru sinks for console, application file, errors and the audit trail
"""

from loguru import logger
import sys
from pathlib import Path

from expense_manager.config.settings import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

_configured = False


def _is_audit(record) -> bool:
    return "AUDIT" in record["extra"]


def setup_logger():
    """
    Configure the shared loguru logger on first call

    Every module calls this at import; later calls return the logger as is.

    Returns:
        logger: Configured logger instance
    """
    global _configured
    if _configured:
        return logger

    logger.remove()

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level=settings.LOG_LEVEL,
        colorize=True,
        filter=lambda record: not _is_audit(record)
    )

    logger.add(
        settings.LOG_FILE,
        format=FILE_FORMAT,
        level=settings.LOG_LEVEL,
        rotation=settings.LOG_ROTATION,
        retention="30 days",
        compression="zip"
    )

    logger.add(
        log_dir / "error.log",
        format=FILE_FORMAT,
        level="ERROR",
        rotation=settings.LOG_ROTATION,
        retention="90 days",
        compression="zip"
    )

    # One JSON line per status transition, login or deletion
    logger.add(
        log_dir / "audit.log",
        filter=_is_audit,
        serialize=True,
        rotation=settings.LOG_ROTATION,
        retention="365 days",
        compression="zip"
    )

    _configured = True
    return logger


def log_audit(user_id: int, action: str, details: str):
    """
    Log audit trail entry

    Args:
        user_id: User ID who performed the action
        action: Action performed
        details: Action details
    """
    logger.bind(AUDIT=True, user_id=user_id, action=action).info(
        f"USER_ID={user_id} | ACTION={action} | DETAILS={details}"
    )
