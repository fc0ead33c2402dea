"""Custom exceptions for the persistence context."""

from typing import Optional

# Reasons a stored document could not be loaded
NOT_FOUND = "not_found"
PARSE_ERROR = "parse_error"
MALFORMED = "malformed"
BACKEND_ERROR = "backend_error"


class PersistenceLoadError(Exception):
    """
    Exception raised when the stored document is missing or unreadable.

    Callers recover by falling back to the default document; this is never fatal.

    Attributes:
        key: Storage key that was read
        reason: One of NOT_FOUND, PARSE_ERROR, MALFORMED, BACKEND_ERROR
        original_error: The underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        key: str,
        reason: str,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.key = key
        self.reason = reason
        self.original_error = original_error

        parts = [message]
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class PersistenceSaveError(Exception):
    """
    Exception raised when writing the document to the backend fails.

    The in-memory document stays authoritative; the next mutation schedules
    another write.

    Attributes:
        key: Storage key that was written
        original_error: The underlying exception
    """

    def __init__(self, message: str, key: str, original_error: Optional[Exception] = None):
        self.message = message
        self.key = key
        self.original_error = original_error

        parts = [message]
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))
