"""
Resume Document Structure

Defines the immutable data model for a user's resume. Every published state of the
document is a frozen ResumeDocument; edits produce a new instance with
dataclasses.replace() and never touch the previous one.

Python attributes are snake_case. The persisted (wire) layout uses camelCase keys:

    {
        "schemaVersion": 1,
        "personal": {"name": ..., "email": ..., "website": ..., "linkedin": ...},
        "experienceEntries": [{"id": ..., "startDate": ..., "highlights": [...]}],
        "educationEntries": [{"id": ..., "institution": ..., "gpa": ...}],
        "skills": ["Python", ...],
        "customSections": [{"id": ..., "title": ..., "content": ...}],
        "templateId": "modern"
    }
"""

import re
import uuid
from dataclasses import dataclass, field, fields
from enum import Enum
from itertools import chain
from typing import Any, Dict, Tuple, Type, TypeVar, Union

from vitae.contexts.editing.exceptions import InvalidFieldError

# Sentinel end date for a current position
PRESENT = "Present"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class TemplateId(str, Enum):
    """Closed set of presentation templates. Controls rendering only."""

    MODERN = "modern"
    CLASSIC = "classic"
    MINIMAL = "minimal"
    CREATIVE = "creative"
    EXECUTIVE = "executive"
    TECH = "tech"


DEFAULT_TEMPLATE = TemplateId.MODERN


class PersonalField(str, Enum):
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    LOCATION = "location"
    TITLE = "title"
    SUMMARY = "summary"
    WEBSITE = "website"
    LINKEDIN = "linkedin"


class ExperienceField(str, Enum):
    COMPANY = "company"
    POSITION = "position"
    START_DATE = "start_date"
    END_DATE = "end_date"
    DESCRIPTION = "description"
    HIGHLIGHTS = "highlights"


class EducationField(str, Enum):
    INSTITUTION = "institution"
    DEGREE = "degree"
    FIELD = "field"
    START_DATE = "start_date"
    END_DATE = "end_date"
    GPA = "gpa"


class CustomSectionField(str, Enum):
    TITLE = "title"
    CONTENT = "content"


FieldEnum = TypeVar("FieldEnum", bound=Enum)


def to_snake_case(name: str) -> str:
    """Convert a camelCase wire key to its snake_case attribute name ("startDate" -> "start_date")."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def to_camel_case(name: str) -> str:
    """Convert a snake_case attribute name to its camelCase wire key ("start_date" -> "startDate")."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def coerce_field(
    field_type: Type[FieldEnum], value: Union[FieldEnum, str], entity: str
) -> FieldEnum:
    """
    Resolve a field identifier against a closed field enum.

    Accepts the enum member itself or an untyped string in either snake_case or
    camelCase spelling (e.g., "start_date" or "startDate").

    Raises:
        InvalidFieldError: If the value does not name a field of this entity
    """
    if isinstance(value, field_type):
        return value

    if isinstance(value, str) and not isinstance(value, Enum):
        try:
            return field_type(to_snake_case(value))
        except ValueError:
            pass

    raise InvalidFieldError(
        f"'{getattr(value, 'value', value)}' is not a field of {entity}",
        field=value,
        entity=entity,
        allowed=[member.value for member in field_type],
    )


def coerce_template(value: Union[TemplateId, str]) -> TemplateId:
    """Resolve a template identifier, raising ValueError when it is unknown."""
    if isinstance(value, TemplateId):
        return value
    return TemplateId(value)


def split_highlights(value: str) -> Tuple[str, ...]:
    """
    Split newline-delimited text into highlight lines.

    Whitespace-only lines are discarded; every other line is kept verbatim.
    """
    return tuple(line for line in value.splitlines() if line.strip())


def _to_wire(instance: Any) -> Dict[str, Any]:
    """Serialize a flat dataclass to a dict keyed by camelCase wire names."""
    data = {}
    for f in fields(instance):
        value = getattr(instance, f.name)
        if isinstance(value, tuple):
            value = list(value)
        data[to_camel_case(f.name)] = value
    return data


@dataclass(frozen=True)
class PersonalInfo:
    """
    Contact details and headline shown at the top of every template.

    All fields are plain text and may be empty. website and linkedin are optional
    and are stored as "" when absent.
    """

    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    title: str = ""
    summary: str = ""
    website: str = ""
    linkedin: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return _to_wire(self)


@dataclass(frozen=True)
class ExperienceEntry:
    """
    One job in the experience section.

    Attributes:
        id: Opaque identifier, assigned at creation and never changed
        company: Employer name
        position: Job title
        start_date: Free-form start date (typically YYYY-MM)
        end_date: Free-form end date, or PRESENT for a current position
        description: Free text paragraph
        highlights: Single-line achievements; never contains blank lines
    """

    id: str
    company: str = ""
    position: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""
    highlights: Tuple[str, ...] = ()

    @property
    def is_current(self) -> bool:
        return self.end_date == PRESENT

    def to_dict(self) -> Dict[str, Any]:
        return _to_wire(self)


@dataclass(frozen=True)
class EducationEntry:
    """One degree in the education section. gpa is optional and stored as "" when absent."""

    id: str
    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return _to_wire(self)


@dataclass(frozen=True)
class CustomSection:
    """User-defined free-form block (e.g., "Certifications"). Titles may repeat."""

    id: str
    title: str = ""
    content: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return _to_wire(self)


@dataclass(frozen=True)
class ResumeDocument:
    """
    Complete resume content for one user session.

    Sequences are tuples so that a published snapshot can be shared with any
    number of readers without copying. Display order equals sequence order.
    """

    personal: PersonalInfo = field(default_factory=PersonalInfo)
    experience_entries: Tuple[ExperienceEntry, ...] = ()
    education_entries: Tuple[EducationEntry, ...] = ()
    skills: Tuple[str, ...] = ()
    custom_sections: Tuple[CustomSection, ...] = ()
    template_id: TemplateId = DEFAULT_TEMPLATE

    def entry_ids(self) -> set:
        """All entry ids across experience, education, and custom sections."""
        return {
            entry.id
            for entry in chain(self.experience_entries, self.education_entries, self.custom_sections)
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted wire layout (without schemaVersion)."""
        return {
            "personal": self.personal.to_dict(),
            "experienceEntries": [entry.to_dict() for entry in self.experience_entries],
            "educationEntries": [entry.to_dict() for entry in self.education_entries],
            "skills": list(self.skills),
            "customSections": [section.to_dict() for section in self.custom_sections],
            "templateId": self.template_id.value,
        }


def new_entry_id() -> str:
    """Generate a fresh opaque entry identifier."""
    return uuid.uuid4().hex
