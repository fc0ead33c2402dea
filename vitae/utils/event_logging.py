"""
Document event logging utilities for VITAE.

Appends one JSON object per line to the file named by VITAE_EVENTS_FILE so that
saves and load failures can be audited across sessions. When the variable is
unset, event logging is disabled and every call is a no-op.

For detailed within-context logging, use vitae.utils.logger instead.

Usage:
    from vitae.utils.event_logging import log_document_event

    log_document_event(
        event_type="document_saved",
        source="persistence",
        storage_key="resumeData",
        experience_entries=2,
    )
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from vitae.utils.timestamp import now_exact

load_dotenv()
_events_file = os.getenv("VITAE_EVENTS_FILE")
EVENTS_FILE = Path(_events_file) if _events_file else None


def log_document_event(
    event_type: str, source: str, events_file: Optional[Path] = None, **extra_fields
) -> None:
    """
    Log an event to the document event log.

    Args:
        event_type: Type of event (e.g., "document_saved", "document_load_failed")
        source: Event source (e.g., "persistence", "cli")
        events_file: Override for VITAE_EVENTS_FILE
        **extra_fields: Additional event-specific fields
    """
    events_file = events_file or EVENTS_FILE
    if events_file is None:
        return

    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def get_recent_events(
    n: int = 10, event_type: Optional[str] = None, events_file: Optional[Path] = None
) -> List[dict]:
    """
    Get the last n events from the event log, optionally filtered by type.

    Args:
        n: Number of recent events to return (default: 10)
        event_type: Filter to only events of this type (optional)
        events_file: Override for VITAE_EVENTS_FILE

    Returns:
        List of event dicts (most recent last)
    """
    events_file = events_file or EVENTS_FILE
    if events_file is None or not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events
