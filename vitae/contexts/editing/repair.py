"""
Schema repair and migration for stored resume documents.

repair() is a pure function from raw JSON-like data to a ResumeDocument that satisfies
every document invariant. It runs in two steps:

1. Migration: the stored blob's schemaVersion (absent means 0) is brought up to
   CURRENT_SCHEMA_VERSION by applying each registered step in order.
2. Normalization: missing collections become empty, missing text becomes "",
   blank highlights and blank/duplicate skills are dropped, missing or duplicate
   ids are replaced, and an unknown template falls back to the default.

Structural problems that cannot be repaired (e.g., a collection that is not a list)
raise MalformedDocumentError.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Set

from vitae.contexts.editing.document_data_structure import (
    DEFAULT_TEMPLATE,
    CustomSection,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ResumeDocument,
    TemplateId,
    new_entry_id,
    split_highlights,
)
from vitae.contexts.editing.exceptions import MalformedDocumentError
from vitae.contexts.editing.logger import _log_debug, _log_warning

CURRENT_SCHEMA_VERSION = 1
SCHEMA_VERSION_KEY = "schemaVersion"

# Version 0 is the browser localStorage layout, which used shorter collection keys
LEGACY_KEYS = {
    "experience": "experienceEntries",
    "education": "educationEntries",
    "template": "templateId",
}


def _migrate_v0_to_v1(data: Dict[str, Any]) -> Dict[str, Any]:
    migrated = dict(data)
    for legacy_key, current_key in LEGACY_KEYS.items():
        if legacy_key in migrated:
            value = migrated.pop(legacy_key)
            migrated.setdefault(current_key, value)
    return migrated


# Maps a schema version to the step that upgrades it to the next version
MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    0: _migrate_v0_to_v1,
}


def migrate(raw: Any) -> Dict[str, Any]:
    """
    Bring raw stored data up to CURRENT_SCHEMA_VERSION.

    Args:
        raw: Parsed JSON value from storage

    Returns:
        Migrated dict with schemaVersion set to CURRENT_SCHEMA_VERSION

    Raises:
        MalformedDocumentError: If raw is not a mapping or its version is unsupported
    """
    if not isinstance(raw, Mapping):
        raise MalformedDocumentError(
            f"Stored document must be a JSON object, got {type(raw).__name__}"
        )

    data = dict(raw)
    version = data.get(SCHEMA_VERSION_KEY, 0)

    if isinstance(version, bool) or not isinstance(version, int):
        raise MalformedDocumentError(f"Invalid {SCHEMA_VERSION_KEY}: {version!r}")
    if version < 0 or version > CURRENT_SCHEMA_VERSION:
        raise MalformedDocumentError(
            f"Unsupported {SCHEMA_VERSION_KEY} {version} "
            f"(this build reads versions 0-{CURRENT_SCHEMA_VERSION})"
        )

    while version < CURRENT_SCHEMA_VERSION:
        _log_debug(f"Migrating stored document from schema v{version} to v{version + 1}")
        data = MIGRATIONS[version](data)
        version += 1

    data[SCHEMA_VERSION_KEY] = version
    return data


def _text(value: Any, location: str) -> str:
    """Coerce a stored scalar to text; None becomes ""."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise MalformedDocumentError(f"Expected text at {location}, got {type(value).__name__}")


def _sequence(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        _log_debug(f"Stored document has no '{key}'; defaulting to empty")
        return []
    if not isinstance(value, list):
        raise MalformedDocumentError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _mapping(value: Any, location: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise MalformedDocumentError(f"{location} must be an object, got {type(value).__name__}")
    return value


class _IdAllocator:
    """Keeps ids unique within one document, replacing missing or repeated ones."""

    def __init__(self, id_factory: Callable[[], str]):
        self.id_factory = id_factory
        self.seen: Set[str] = set()

    def claim(self, raw_id: Any, location: str) -> str:
        entry_id = _text(raw_id, f"{location}.id")
        if not entry_id or entry_id in self.seen:
            replacement = self.id_factory()
            while replacement in self.seen:
                replacement = self.id_factory()
            _log_debug(f"Assigned new id to {location} (stored id: {entry_id!r})")
            entry_id = replacement
        self.seen.add(entry_id)
        return entry_id


def _repair_personal(value: Any) -> PersonalInfo:
    if value is None:
        return PersonalInfo()
    personal = _mapping(value, "'personal'")
    return PersonalInfo(
        name=_text(personal.get("name"), "personal.name"),
        email=_text(personal.get("email"), "personal.email"),
        phone=_text(personal.get("phone"), "personal.phone"),
        location=_text(personal.get("location"), "personal.location"),
        title=_text(personal.get("title"), "personal.title"),
        summary=_text(personal.get("summary"), "personal.summary"),
        website=_text(personal.get("website"), "personal.website"),
        linkedin=_text(personal.get("linkedin"), "personal.linkedin"),
    )


def _repair_highlights(value: Any, location: str) -> tuple:
    if value is None:
        return ()
    if isinstance(value, str):
        return split_highlights(value)
    if not isinstance(value, list):
        raise MalformedDocumentError(f"{location} must be a list, got {type(value).__name__}")
    lines = [_text(line, location) for line in value]
    return split_highlights("\n".join(lines))


def _repair_experience(value: Any, index: int, ids: _IdAllocator) -> ExperienceEntry:
    location = f"experienceEntries[{index}]"
    entry = _mapping(value, location)
    return ExperienceEntry(
        id=ids.claim(entry.get("id"), location),
        company=_text(entry.get("company"), f"{location}.company"),
        position=_text(entry.get("position"), f"{location}.position"),
        start_date=_text(entry.get("startDate"), f"{location}.startDate"),
        end_date=_text(entry.get("endDate"), f"{location}.endDate"),
        description=_text(entry.get("description"), f"{location}.description"),
        highlights=_repair_highlights(entry.get("highlights"), f"{location}.highlights"),
    )


def _repair_education(value: Any, index: int, ids: _IdAllocator) -> EducationEntry:
    location = f"educationEntries[{index}]"
    entry = _mapping(value, location)
    return EducationEntry(
        id=ids.claim(entry.get("id"), location),
        institution=_text(entry.get("institution"), f"{location}.institution"),
        degree=_text(entry.get("degree"), f"{location}.degree"),
        field=_text(entry.get("field"), f"{location}.field"),
        start_date=_text(entry.get("startDate"), f"{location}.startDate"),
        end_date=_text(entry.get("endDate"), f"{location}.endDate"),
        gpa=_text(entry.get("gpa"), f"{location}.gpa"),
    )


def _repair_custom_section(value: Any, index: int, ids: _IdAllocator) -> CustomSection:
    location = f"customSections[{index}]"
    section = _mapping(value, location)
    return CustomSection(
        id=ids.claim(section.get("id"), location),
        title=_text(section.get("title"), f"{location}.title"),
        content=_text(section.get("content"), f"{location}.content"),
    )


def _repair_skills(values: List[Any]) -> tuple:
    skills = []
    for index, value in enumerate(values):
        skill = _text(value, f"skills[{index}]").strip()
        if not skill or skill in skills:
            _log_debug(f"Dropped blank or duplicate skill at skills[{index}]")
            continue
        skills.append(skill)
    return tuple(skills)


def _repair_template(value: Any) -> TemplateId:
    if value is None:
        return DEFAULT_TEMPLATE
    try:
        return TemplateId(value)
    except ValueError:
        _log_warning(f"Unknown stored template {value!r}; using '{DEFAULT_TEMPLATE.value}'")
        return DEFAULT_TEMPLATE


def repair(raw: Any, id_factory: Callable[[], str] = new_entry_id) -> ResumeDocument:
    """
    Build a valid ResumeDocument from raw stored data.

    Args:
        raw: Parsed JSON value (any schema version up to CURRENT_SCHEMA_VERSION)
        id_factory: Generator for replacement ids

    Returns:
        ResumeDocument satisfying all document invariants

    Raises:
        MalformedDocumentError: If the data has an unrepairable shape
    """
    data = migrate(raw)
    ids = _IdAllocator(id_factory)

    return ResumeDocument(
        personal=_repair_personal(data.get("personal")),
        experience_entries=tuple(
            _repair_experience(item, i, ids)
            for i, item in enumerate(_sequence(data, "experienceEntries"))
        ),
        education_entries=tuple(
            _repair_education(item, i, ids)
            for i, item in enumerate(_sequence(data, "educationEntries"))
        ),
        skills=_repair_skills(_sequence(data, "skills")),
        custom_sections=tuple(
            _repair_custom_section(item, i, ids)
            for i, item in enumerate(_sequence(data, "customSections"))
        ),
        template_id=_repair_template(data.get("templateId")),
    )


def document_to_dict(document: ResumeDocument) -> Dict[str, Any]:
    """Serialize a document to its persisted layout, stamped with the current schema version."""
    return {SCHEMA_VERSION_KEY: CURRENT_SCHEMA_VERSION, **document.to_dict()}
