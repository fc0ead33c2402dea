"""Custom exceptions for the enhancement context."""

from typing import Optional


class EnhancementError(Exception):
    """
    Exception raised when text enhancement fails or its result cannot be applied.

    Attributes:
        message: Error description
        section: Document section that was being enhanced
        field: Field that was being enhanced
        original_error: The underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        section: Optional[str] = None,
        field: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.section = section
        self.field = field
        self.original_error = original_error

        parts = [message]
        if section and field:
            parts.append(f"Target: {section}.{field}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))
