"""
Session log setup shared by the context loggers.

A session log is one directory per CLI run holding a {context}.log file with
every DEBUG record, while INFO and above also go to the console. The first
lines of each log describe the session: VITAE version, context, the storage
file being edited, and where document events are appended.

Context-specific wrappers are defined in contexts/{context}/logger.py.
"""

import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from vitae import __version__

load_dotenv()
CONSOLE_LEVEL = os.getenv("VITAE_CONSOLE_LOG_LEVEL", "INFO")

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {extra[session]} | {message}"
CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(context_name: str, log_dir: Path, details: Optional[dict] = None) -> Path:
    """
    Route loguru output for one session and write the session header.

    Replaces any previously configured handlers, so calling this twice in one
    process starts a new session rather than duplicating output.

    Args:
        context_name: Context running the session ("edit" or "render")
        log_dir: Directory for this session (created if missing)
        details: Extra header lines, e.g. {"Output format": "html"}

    Returns:
        Path to the session log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.configure(
        handlers=[
            {"sink": log_file, "format": FILE_FORMAT, "level": "DEBUG", "encoding": "utf-8"},
            {"sink": sys.stdout, "format": CONSOLE_FORMAT, "level": CONSOLE_LEVEL, "colorize": True},
        ],
        extra={"session": f"{context_name}@{log_dir.name}"},
    )

    for line in session_header(context_name, details):
        logger.info(line)

    return log_file


def session_header(context_name: str, details: Optional[dict] = None) -> list:
    """Lines describing the session: version, context, storage, event log, command."""
    storage_path = Path(os.getenv("VITAE_STORAGE_PATH", "data/storage"))
    storage_key = os.getenv("VITAE_STORAGE_KEY", "resumeData")
    events_file = os.getenv("VITAE_EVENTS_FILE")

    lines = [
        f"VITAE {__version__} | {context_name} session",
        f"Document: {storage_path / (storage_key + '.json')}",
        f"Event log: {events_file or 'disabled'}",
        f"Command: {Path(sys.argv[0]).name} {' '.join(sys.argv[1:])}".rstrip(),
    ]
    lines.extend(f"{key}: {value}" for key, value in (details or {}).items())
    return lines
