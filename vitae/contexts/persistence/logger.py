"""
Persistence context logger.

Provides logging interface for the persistence context with automatic [persist] prefix.
All persistence modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[persist]"


def _log_info(message: str) -> None:
    """Log info message with [persist] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [persist] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [persist] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [persist] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [persist] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_exception(message: str) -> None:
    """Log error message with [persist] prefix and the active traceback."""
    logger.exception(f"{CONTEXT_PREFIX} {message}")


def log_load_failure(key: str, reason: str, error: Exception) -> None:
    """Log a failed load; a missing document is expected on first run and logged at info."""
    if reason == "not_found":
        _log_info(f"No saved document under '{key}'")
    else:
        _log_warning(f"Could not load document '{key}' ({reason}): {error}")


def log_save_result(key: str, success: bool, size: int = 0, error: Exception = None) -> None:
    """Log the outcome of a write."""
    if success:
        _log_debug(f"Saved document '{key}' ({size} bytes)")
    else:
        _log_error(f"Failed to save document '{key}': {error}")
