"""
Shared utilities for VITAE.

Common functionality used across contexts:
- Session log setup with a VITAE session header
- Document event logging (JSON Lines)
- Timestamps
"""

from vitae.utils.timestamp import format_timestamp, now, now_exact

__all__ = ["now", "now_exact", "format_timestamp"]
