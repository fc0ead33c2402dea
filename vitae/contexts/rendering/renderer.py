"""
HTML rendering of resume documents.

The renderer is a pure function of a document snapshot: it reads the snapshot's
template_id, never modifies the document, and leaves out every visual block whose
data is empty (no "Education" heading without education entries, no GPA line
without a GPA, and so on).
"""

from datetime import datetime
from typing import Any, Dict, Optional

from jinja2 import TemplateError

from vitae.contexts.editing.document_data_structure import PRESENT, ResumeDocument
from vitae.contexts.rendering.exceptions import TemplateRenderError
from vitae.contexts.rendering.logger import _log_debug
from vitae.contexts.rendering.template_registry import TemplateRegistry

# Accepted stored date layouts, most specific first
DATE_FORMATS = (
    ("%Y-%m-%d", "%b %Y"),
    ("%Y-%m", "%b %Y"),
    ("%Y", "%Y"),
)


def format_date(value: str) -> str:
    """
    Format a stored date for display.

    Examples:
        format_date("2020-01")   # "Jan 2020"
        format_date("Present")   # "Present"
        format_date("")          # ""
        format_date("Spring 2019")  # "Spring 2019" (unrecognized text is kept)
    """
    if not value:
        return ""
    if value == PRESENT:
        return PRESENT

    text = value.strip()
    for parse_format, display_format in DATE_FORMATS:
        try:
            return datetime.strptime(text, parse_format).strftime(display_format)
        except ValueError:
            continue
    return value


def format_date_range(start: str, end: str) -> str:
    """Join formatted start and end dates, skipping whichever is empty."""
    return " - ".join(part for part in (format_date(start), format_date(end)) if part)


_default_registry: Optional[TemplateRegistry] = None


def get_default_registry() -> TemplateRegistry:
    """Shared registry over the packaged templates, created on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = create_registry()
    return _default_registry


def create_registry(**kwargs: Any) -> TemplateRegistry:
    """Create a TemplateRegistry with the date filters the templates rely on."""
    filters = {"format_date": format_date, "date_range": format_date_range}
    return TemplateRegistry(filters=filters, **kwargs)


def build_template_context(document: ResumeDocument, style: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the variables passed to a template.

    Custom sections are only shown when both title and content are non-empty.
    """
    personal = document.personal
    contact = [value for value in (personal.email, personal.phone, personal.location) if value]
    links = [value for value in (personal.website, personal.linkedin) if value]

    return {
        "personal": personal,
        "contact": contact,
        "links": links,
        "experience": document.experience_entries,
        "education": document.education_entries,
        "skills": document.skills,
        "custom_sections": [
            section
            for section in document.custom_sections
            if section.title.strip() and section.content.strip()
        ],
        "template_id": document.template_id.value,
        "style": style,
    }


def render_html(document: ResumeDocument, registry: Optional[TemplateRegistry] = None) -> str:
    """
    Render a document to a standalone HTML page using its selected template.

    Args:
        document: Snapshot to render
        registry: Template registry (defaults to the packaged templates)

    Returns:
        HTML string

    Raises:
        TemplateRenderError: If the template cannot be loaded or rendered
    """
    registry = registry or get_default_registry()
    template_id = document.template_id.value

    try:
        template = registry.get_template(template_id)
        context = build_template_context(document, registry.get_style(template_id))
        html = template.render(context)
    except (TemplateError, KeyError, FileNotFoundError) as e:
        raise TemplateRenderError(
            "Failed to render resume",
            template_id=template_id,
            template_path=registry.get_template_path(template_id),
            original_error=e,
        ) from e

    _log_debug(f"Rendered '{template_id}' template ({len(html)} chars)")
    return html
