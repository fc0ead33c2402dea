"""
Editing Context

Responsibilities:
- Defines the resume document model (personal info, experience, education,
  skills, custom sections, template selection)
- Enforces document invariants on every mutation
- Publishes immutable snapshots to observers and schedules persistence
- Repairs and migrates stored documents into valid ones

Owns: Resume document model, mutation operations, schema repair
Never: Renders, enhances text, or checks entitlements
"""

from vitae.contexts.editing.document_data_structure import (
    PRESENT,
    CustomSection,
    CustomSectionField,
    EducationEntry,
    EducationField,
    ExperienceEntry,
    ExperienceField,
    PersonalField,
    PersonalInfo,
    ResumeDocument,
    TemplateId,
)
from vitae.contexts.editing.exceptions import (
    IndexOutOfRangeError,
    InvalidFieldError,
    InvalidTemplateError,
    MalformedDocumentError,
)
from vitae.contexts.editing.repair import CURRENT_SCHEMA_VERSION, document_to_dict, repair
from vitae.contexts.editing.defaults import get_default_document
from vitae.contexts.editing.store import ResumeStore

__all__ = [
    # Data structure classes
    "ResumeDocument",
    "PersonalInfo",
    "ExperienceEntry",
    "EducationEntry",
    "CustomSection",
    "TemplateId",
    "PRESENT",
    # Field identifiers
    "PersonalField",
    "ExperienceField",
    "EducationField",
    "CustomSectionField",
    # Errors
    "InvalidFieldError",
    "IndexOutOfRangeError",
    "InvalidTemplateError",
    "MalformedDocumentError",
    # Repair and defaults
    "repair",
    "document_to_dict",
    "CURRENT_SCHEMA_VERSION",
    "get_default_document",
    # Store
    "ResumeStore",
]
