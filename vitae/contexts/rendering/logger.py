"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from vitae.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, output_format: str = "html") -> Path:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this rendering session
        output_format: Output format shown in the session header ("html" or "markdown")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        details={"Output format": output_format},
    )


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_export_start(template_id: str, output_path: Path) -> None:
    """Log start of an export."""
    _log_info(f"Exporting resume with '{template_id}' template")
    _log_debug(f"Destination: {output_path}")


def log_export_result(result, elapsed_time: float) -> None:
    """
    Log export result.

    Args:
        result: ExportResult from export_resume()
        elapsed_time: Time taken
    """
    if result.success:
        _log_success(f"Export succeeded ({elapsed_time:.2f}s)")
        _log_info(f"  Output: {result.output_path}")
    else:
        _log_error(f"Export failed ({elapsed_time:.2f}s)")
        _log_error(f"  Error: {result.error}")
