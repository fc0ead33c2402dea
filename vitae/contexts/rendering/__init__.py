"""
Rendering Context

Responsibilities:
- Loads and caches the six presentation templates and their catalog settings
- Renders a document snapshot to HTML or markdown
- Exports print-ready HTML files

Owns: Templates, presentation settings, output files
Never: Modifies document content
"""

from vitae.contexts.rendering.exceptions import TemplateRenderError
from vitae.contexts.rendering.export import ExportResult, export_resume
from vitae.contexts.rendering.markdown_formatter import render_markdown
from vitae.contexts.rendering.renderer import (
    format_date,
    format_date_range,
    get_default_registry,
    render_html,
)
from vitae.contexts.rendering.template_registry import TemplateRegistry

__all__ = [
    "TemplateRegistry",
    "get_default_registry",
    "render_html",
    "render_markdown",
    "format_date",
    "format_date_range",
    "export_resume",
    "ExportResult",
    "TemplateRenderError",
]
