"""
Markdown Utilities

Helper functions for formatting resume documents as markdown, for plain-text
previews and for pasting into places that do not accept HTML. Follows the same
omission rules as the HTML templates.
"""

from typing import List

from vitae.contexts.editing.document_data_structure import (
    CustomSection,
    EducationEntry,
    ExperienceEntry,
    ResumeDocument,
)
from vitae.contexts.rendering.renderer import format_date_range


def format_experience_markdown(entry: ExperienceEntry) -> str:
    """
    Format single experience entry as markdown.

    Position is formatted as ### (section header added separately by caller).
    """
    parts = []

    heading = " at ".join(part for part in (entry.position, entry.company) if part)
    parts.append(f"### {heading or 'Untitled position'}\n")

    dates = format_date_range(entry.start_date, entry.end_date)
    if dates:
        parts.append(f"*{dates}*")
    if entry.description:
        parts.append(entry.description)

    if entry.highlights:
        parts.append("")
        for highlight in entry.highlights:
            parts.append(f"- {highlight}")

    return "\n".join(parts)


def format_education_markdown(entry: EducationEntry) -> str:
    """Format single education entry as markdown."""
    degree = " in ".join(part for part in (entry.degree, entry.field) if part)
    parts = [f"### {degree or entry.institution or 'Untitled degree'}\n"]

    if degree and entry.institution:
        parts.append(f"**{entry.institution}**")
    dates = format_date_range(entry.start_date, entry.end_date)
    if dates:
        parts.append(f"*{dates}*")
    if entry.gpa:
        parts.append(f"GPA: {entry.gpa}")

    return "\n".join(parts)


def format_custom_section_markdown(section: CustomSection) -> str:
    return f"## {section.title}\n\n{section.content}"


def render_markdown(document: ResumeDocument) -> str:
    """
    Render a document as markdown.

    Returns:
        Markdown text with one ## heading per non-empty section
    """
    personal = document.personal
    parts: List[str] = []

    if personal.name:
        parts.append(f"# {personal.name}")
    if personal.title:
        parts.append(f"**{personal.title}**")

    contact = [value for value in (personal.email, personal.phone, personal.location) if value]
    links = [value for value in (personal.website, personal.linkedin) if value]
    if contact:
        parts.append(" | ".join(contact))
    if links:
        parts.append(" | ".join(links))

    if personal.summary:
        parts.append(f"## Professional Summary\n\n{personal.summary}")

    if document.experience_entries:
        entries = "\n\n".join(format_experience_markdown(e) for e in document.experience_entries)
        parts.append(f"## Experience\n\n{entries}")

    if document.education_entries:
        entries = "\n\n".join(format_education_markdown(e) for e in document.education_entries)
        parts.append(f"## Education\n\n{entries}")

    if document.skills:
        skills = "\n".join(f"- {skill}" for skill in document.skills)
        parts.append(f"## Skills\n\n{skills}")

    for section in document.custom_sections:
        if section.title.strip() and section.content.strip():
            parts.append(format_custom_section_markdown(section))

    return "\n\n".join(parts) + "\n" if parts else ""
