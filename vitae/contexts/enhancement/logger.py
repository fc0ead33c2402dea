"""
Enhancement context logger.

Provides logging interface for the enhancement context with automatic [enhance] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[enhance]"


def _log_info(message: str) -> None:
    """Log info message with [enhance] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [enhance] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [enhance] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [enhance] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_exception(message: str) -> None:
    """Log error message with [enhance] prefix and the active traceback."""
    logger.exception(f"{CONTEXT_PREFIX} {message}")
