"""Unit tests for schema repair and migration of stored documents."""

import itertools

import pytest

from vitae.contexts.editing import (
    CURRENT_SCHEMA_VERSION,
    MalformedDocumentError,
    TemplateId,
    document_to_dict,
    repair,
)
from vitae.contexts.editing.defaults import get_default_document, get_empty_document
from vitae.contexts.editing.repair import migrate


def _ids():
    counter = itertools.count(1)
    return lambda: f"new-{next(counter)}"


@pytest.mark.unit
def test_repair_empty_object_gives_empty_document():
    """Test that every missing part defaults to empty."""
    document = repair({})

    assert document == get_empty_document()


@pytest.mark.unit
def test_repair_missing_custom_sections():
    """Test that a blob without customSections loads with none and keeps the rest."""
    raw = {
        "personal": {"name": "Ada Lovelace", "email": "ada@example.com"},
        "experienceEntries": [
            {"id": "x1", "company": "Engine Co", "highlights": ["Wrote notes"]},
        ],
        "educationEntries": [{"id": "x2", "institution": "Home"}],
        "skills": ["Mathematics"],
        "templateId": "classic",
    }

    document = repair(raw)

    assert document.custom_sections == ()
    assert document.personal.name == "Ada Lovelace"
    assert document.personal.email == "ada@example.com"
    assert document.personal.website == ""
    assert document.experience_entries[0].id == "x1"
    assert document.experience_entries[0].company == "Engine Co"
    assert document.experience_entries[0].highlights == ("Wrote notes",)
    assert document.education_entries[0].institution == "Home"
    assert document.skills == ("Mathematics",)
    assert document.template_id is TemplateId.CLASSIC


@pytest.mark.unit
def test_repair_migrates_legacy_keys():
    """Test that version 0 blobs with short collection keys are migrated."""
    raw = {
        "personal": {"name": "Legacy"},
        "experience": [{"id": "1", "company": "Old Corp"}],
        "education": [{"id": "2", "degree": "BA"}],
        "template": "minimal",
    }

    document = repair(raw)

    assert document.experience_entries[0].company == "Old Corp"
    assert document.education_entries[0].degree == "BA"
    assert document.template_id is TemplateId.MINIMAL


@pytest.mark.unit
def test_migrate_stamps_current_version():
    """Test that migration sets schemaVersion and leaves current keys alone."""
    data = migrate({"experience": [], "experienceEntries": [{"id": "keep"}]})

    assert data["schemaVersion"] == CURRENT_SCHEMA_VERSION
    assert data["experienceEntries"] == [{"id": "keep"}]
    assert "experience" not in data


@pytest.mark.unit
@pytest.mark.parametrize("version", [-1, CURRENT_SCHEMA_VERSION + 1, "1", True])
def test_migrate_rejects_unsupported_versions(version):
    """Test that unknown schema versions are malformed."""
    with pytest.raises(MalformedDocumentError):
        migrate({"schemaVersion": version})


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    [
        [],
        "resume",
        {"experienceEntries": {"id": "1"}},
        {"skills": "Python"},
        {"personal": ["Ada"]},
        {"experienceEntries": ["not an object"]},
        {"personal": {"name": {"first": "Ada"}}},
    ],
)
def test_repair_rejects_unrepairable_shapes(raw):
    """Test MalformedDocumentError for structural problems."""
    with pytest.raises(MalformedDocumentError):
        repair(raw)


@pytest.mark.unit
def test_repair_normalizes_highlights():
    """Test that blank highlight lines are dropped, including from a string."""
    raw = {
        "experienceEntries": [
            {"id": "a", "highlights": ["Did X", "", "   ", "Did Y"]},
            {"id": "b", "highlights": "First\n\nSecond\n"},
            {"id": "c", "highlights": None},
        ]
    }

    entries = repair(raw).experience_entries

    assert entries[0].highlights == ("Did X", "Did Y")
    assert entries[1].highlights == ("First", "Second")
    assert entries[2].highlights == ()


@pytest.mark.unit
def test_repair_normalizes_skills():
    """Test that skills are trimmed, blank skills dropped, and duplicates removed."""
    document = repair({"skills": [" Python ", "", "   ", "Python", "python", "Go"]})

    assert document.skills == ("Python", "python", "Go")


@pytest.mark.unit
def test_repair_replaces_missing_and_duplicate_ids():
    """Test that every entry ends up with a unique id."""
    raw = {
        "experienceEntries": [{"id": "dup"}, {"id": "dup"}, {}],
        "educationEntries": [{"id": "dup"}],
        "customSections": [{"id": ""}],
    }

    document = repair(raw, id_factory=_ids())

    ids = [e.id for e in document.experience_entries]
    ids += [e.id for e in document.education_entries]
    ids += [s.id for s in document.custom_sections]
    assert ids[0] == "dup"
    assert len(set(ids)) == len(ids) == 5


@pytest.mark.unit
def test_repair_coerces_scalars_to_text():
    """Test that numbers and nulls in text fields become strings."""
    document = repair(
        {
            "personal": {"name": None, "phone": 5551234},
            "educationEntries": [{"id": 7, "gpa": 3.8}],
        }
    )

    assert document.personal.name == ""
    assert document.personal.phone == "5551234"
    assert document.education_entries[0].id == "7"
    assert document.education_entries[0].gpa == "3.8"


@pytest.mark.unit
def test_repair_unknown_template_falls_back_to_modern():
    """Test that an unknown stored template does not fail the load."""
    assert repair({"templateId": "neon"}).template_id is TemplateId.MODERN


@pytest.mark.unit
def test_document_to_dict_round_trips(sample_document):
    """Test that a saved document repairs back to an equal document."""
    data = document_to_dict(sample_document)

    assert data["schemaVersion"] == CURRENT_SCHEMA_VERSION
    assert repair(data) == sample_document


@pytest.mark.unit
def test_default_document_contents():
    """Test the built-in sample resume."""
    document = get_default_document()

    assert document.personal.name == "John Doe"
    assert [e.id for e in document.experience_entries] == ["1", "2"]
    assert document.experience_entries[0].end_date == "Present"
    assert len(document.experience_entries[0].highlights) == 4
    assert document.education_entries[0].gpa == "3.8"
    assert len(document.skills) == 10
    assert document.custom_sections == ()
    assert document.template_id is TemplateId.MODERN
    assert get_default_document() is document
