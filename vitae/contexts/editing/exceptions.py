"""Custom exceptions for the editing context with schema references."""

from typing import Iterable, Optional


class InvalidFieldError(ValueError):
    """
    Exception raised when an operation names a field outside an entity's schema.

    Attributes:
        message: Error description
        field: The rejected field name
        entity: Entity the field was looked up on (e.g., 'experience')
        allowed: Field names the entity does accept
    """

    def __init__(
        self,
        message: str,
        field: Optional[object] = None,
        entity: Optional[str] = None,
        allowed: Optional[Iterable[str]] = None,
    ):
        self.message = message
        self.field = field
        self.entity = entity
        self.allowed = tuple(allowed) if allowed is not None else ()

        parts = [message]
        if self.allowed:
            parts.append(f"Allowed fields: {', '.join(self.allowed)}")

        super().__init__("\n".join(parts))


class IndexOutOfRangeError(IndexError):
    """
    Exception raised when an operation references a position that does not exist.

    Attributes:
        message: Error description
        index: The rejected index
        collection: Name of the sequence (e.g., 'experience_entries')
        length: Length of the sequence at the time of the call
    """

    def __init__(self, message: str, index: object, collection: str, length: int):
        self.message = message
        self.index = index
        self.collection = collection
        self.length = length
        super().__init__(message)


class InvalidTemplateError(ValueError):
    """
    Exception raised when a template identifier is not one of the known templates.

    Attributes:
        template_id: The rejected identifier
        allowed: Known template identifiers
    """

    def __init__(self, template_id: object, allowed: Iterable[str]):
        self.template_id = template_id
        self.allowed = tuple(allowed)
        super().__init__(
            f"Unknown template '{template_id}'. Available templates: {', '.join(self.allowed)}"
        )


class MalformedDocumentError(ValueError):
    """
    Exception raised when raw stored data cannot be repaired into a resume document.

    This covers structural problems only (e.g., 'experienceEntries' is not a list).
    Missing fields are not malformed; they are filled with defaults during repair.
    """

    pass
