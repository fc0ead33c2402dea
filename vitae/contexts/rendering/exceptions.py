"""Custom exceptions for the rendering context with template references."""

from pathlib import Path
from typing import Optional


class TemplateRenderError(Exception):
    """
    Exception raised when template rendering fails.

    Attributes:
        message: Error description
        template_id: Identifier of the template being rendered
        template_path: Path to the template file
        original_error: The original Jinja2 error
    """

    def __init__(
        self,
        message: str,
        template_id: Optional[str] = None,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.template_id = template_id
        self.template_path = template_path
        self.original_error = original_error

        parts = [message]

        if template_id and template_path:
            parts.append(f"\nTemplate: {template_path}")
            parts.append(f"Template id: {template_id}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))
