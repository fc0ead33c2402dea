"""
Editing context logger.

Provides logging interface for the editing context with automatic [edit] prefix.
All editing modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from vitae.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[edit]"


def setup_editing_logger(log_dir: Path) -> Path:
    """
    Setup logger for an editing session.

    Args:
        log_dir: Directory for this editing session

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="edit",
        log_dir=log_dir,
        details={"Save delay": f"{os.getenv('VITAE_DEBOUNCE_SECONDS', '1.0')}s"},
    )


def _log_info(message: str) -> None:
    """Log info message with [edit] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [edit] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [edit] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [edit] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [edit] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_exception(message: str) -> None:
    """Log error message with [edit] prefix and the active traceback."""
    logger.exception(f"{CONTEXT_PREFIX} {message}")


def log_mutation(operation: str, detail: str = "") -> None:
    """Log a committed document mutation."""
    suffix = f" ({detail})" if detail else ""
    _log_debug(f"{operation}{suffix}")


def log_rejected(operation: str, error: Exception) -> None:
    """Log an operation rejected by a schema check before any state changed."""
    _log_warning(f"{operation} rejected: {error}")
