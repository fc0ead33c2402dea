"""
Enhance one field of the current document and write the result back.

The store has no notion of enhancement; this workflow reads the field from the
current snapshot, awaits the enhancer, and applies the result through the same
public operation a user edit would use.
"""

from typing import Awaitable, Callable, Optional

from vitae.contexts.editing.document_data_structure import (
    CustomSectionField,
    EducationField,
    ExperienceField,
    PersonalField,
    ResumeDocument,
    coerce_field,
)
from vitae.contexts.editing.exceptions import IndexOutOfRangeError
from vitae.contexts.editing.store import ResumeStore
from vitae.contexts.enhancement.enhancer import enhance
from vitae.contexts.enhancement.exceptions import EnhancementError
from vitae.contexts.enhancement.logger import _log_exception, _log_info, _log_success
from vitae.contexts.identity.entitlements import Entitlements

Enhancer = Callable[[str, str], Awaitable[str]]

# section name -> (field enum, entity label, snapshot attribute)
SECTIONS = {
    "experience": (ExperienceField, "experience", "experience_entries"),
    "education": (EducationField, "education", "education_entries"),
    "custom": (CustomSectionField, "custom section", "custom_sections"),
}


def _entries(document: ResumeDocument, section: str) -> tuple:
    return getattr(document, SECTIONS[section][2])


def _read_value(entry, field) -> str:
    value = getattr(entry, field.value)
    if isinstance(value, tuple):
        return "\n".join(value)
    return value


async def improve_field(
    store: ResumeStore,
    entitlements: Entitlements,
    section: str,
    field: str,
    index: Optional[int] = None,
    enhancer: Enhancer = enhance,
) -> ResumeDocument:
    """
    Enhance a field in place.

    Args:
        store: Store owning the document
        entitlements: Current user's flags; enhancement needs can_enhance
        section: "personal", "experience", "education" or "custom"
        field: Field name within the section
        index: Entry position (required for every section except "personal")
        enhancer: Coroutine (text, field_kind) -> improved text

    Returns:
        The snapshot after the improved text was written

    Raises:
        EntitlementError: If the user may not use enhancement
        InvalidFieldError / IndexOutOfRangeError: If the target does not exist
        EnhancementError: If the enhancer fails or the entry was removed meanwhile
        ValueError: If section is unknown
    """
    entitlements.require_enhancement()

    if section == "personal":
        personal_field = coerce_field(PersonalField, field, "personal")
        current = getattr(store.snapshot.personal, personal_field.value)
        improved = await _run_enhancer(enhancer, current, personal_field.value, section)
        document = store.update_personal_field(personal_field, improved)
        _log_success(f"Applied enhancement to personal.{personal_field.value}")
        return document

    if section not in SECTIONS:
        raise ValueError(f"Unknown section '{section}'. Expected one of: personal, {', '.join(SECTIONS)}")

    field_type, entity, collection = SECTIONS[section]
    target_field = coerce_field(field_type, field, entity)

    entries = _entries(store.snapshot, section)
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(entries):
        raise IndexOutOfRangeError(
            f"{collection} has no position {index!r} (length {len(entries)})",
            index=index,
            collection=collection,
            length=len(entries),
        )
    entry_id = entries[index].id

    improved = await _run_enhancer(
        enhancer, _read_value(entries[index], target_field), target_field.value, section
    )

    # The document may have changed while awaiting; write to the same entry, wherever it is now
    current_ids = [entry.id for entry in _entries(store.snapshot, section)]
    if entry_id not in current_ids:
        raise EnhancementError(
            "Entry was removed before the enhancement finished",
            section=section,
            field=target_field.value,
        )
    position = current_ids.index(entry_id)

    if section == "experience":
        document = store.update_experience_entry(position, target_field, improved)
    elif section == "education":
        document = store.update_education_entry(position, target_field, improved)
    else:
        document = store.update_custom_section(position, target_field, improved)

    _log_success(f"Applied enhancement to {section}[{position}].{target_field.value}")
    return document


async def _run_enhancer(enhancer: Enhancer, text: str, field_kind: str, section: str) -> str:
    _log_info(f"Enhancing {section}.{field_kind}")
    try:
        return await enhancer(text, field_kind)
    except Exception as e:
        _log_exception(f"Enhancement of {section}.{field_kind} failed")
        raise EnhancementError(
            "Unable to improve the content at this time",
            section=section,
            field=field_kind,
            original_error=e,
        ) from e
