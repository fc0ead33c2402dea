"""
Integration tests for the file-backed store.

Covers JsonFileBackend, DocumentPersistence.from_directory, and a ResumeStore
session that writes to disk and is reopened.
"""

import json

import pytest

from vitae.contexts.editing import ResumeStore, TemplateId
from vitae.contexts.persistence import DocumentPersistence, JsonFileBackend
from vitae.utils.event_logging import get_recent_events, log_document_event


@pytest.mark.integration
def test_json_file_backend_round_trip(tmp_path):
    """Test get/set/delete on disk."""
    backend = JsonFileBackend(tmp_path / "storage")

    assert backend.get("resumeData") is None

    backend.set("resumeData", '{"a": 1}')
    assert backend.path_for("resumeData") == tmp_path / "storage" / "resumeData.json"
    assert backend.get("resumeData") == '{"a": 1}'

    backend.set("resumeData", '{"a": 2}')
    assert backend.get("resumeData") == '{"a": 2}'
    assert [p.name for p in (tmp_path / "storage").iterdir()] == ["resumeData.json"]

    backend.delete("resumeData")
    backend.delete("resumeData")
    assert backend.get("resumeData") is None


@pytest.mark.integration
@pytest.mark.parametrize("key", ["", "../escape", "a/b", ".."])
def test_json_file_backend_rejects_bad_keys(tmp_path, key):
    """Test that keys cannot point outside the storage directory."""
    with pytest.raises(ValueError):
        JsonFileBackend(tmp_path).path_for(key)


@pytest.mark.integration
def test_store_session_persists_across_reopen(tmp_path, fake_timer):
    """Test editing, flushing on close, and loading the result in a new session."""
    persistence = DocumentPersistence.from_directory(tmp_path)
    store = ResumeStore(persistence, timer_factory=fake_timer)

    store.update_personal_field("name", "Jane Roe")
    store.update_experience_entry(0, "highlights", "Did X\n\nDid Y\n")
    section_id = store.add_custom_section("Certifications")
    store.update_custom_section(0, "content", "AWS Solutions Architect")
    store.change_template("executive")
    store.close(flush=True)

    saved = json.loads((tmp_path / "resumeData.json").read_text(encoding="utf-8"))
    assert saved["personal"]["name"] == "Jane Roe"

    reopened = ResumeStore(DocumentPersistence.from_directory(tmp_path), timer_factory=fake_timer)
    document = reopened.snapshot

    assert document.personal.name == "Jane Roe"
    assert document.experience_entries[0].highlights == ("Did X", "Did Y")
    assert document.custom_sections[0].id == section_id
    assert document.custom_sections[0].content == "AWS Solutions Architect"
    assert document.template_id is TemplateId.EXECUTIVE


@pytest.mark.integration
def test_store_recovers_from_corrupt_file(tmp_path, fake_timer, sample_document):
    """Test that an unreadable file falls back to the sample and is overwritten on save."""
    (tmp_path / "resumeData.json").write_text("not json at all", encoding="utf-8")

    store = ResumeStore(DocumentPersistence.from_directory(tmp_path), timer_factory=fake_timer)
    assert store.snapshot == sample_document

    store.add_skill("Terraform")
    store.flush()

    saved = json.loads((tmp_path / "resumeData.json").read_text(encoding="utf-8"))
    assert saved["skills"][-1] == "Terraform"


@pytest.mark.integration
def test_store_recovers_from_undecodable_file(tmp_path, fake_timer, sample_document):
    """Test that a file holding invalid UTF-8 bytes falls back to the sample."""
    (tmp_path / "resumeData.json").write_bytes(b'{"personal": "\xff\xfe"}')

    store = ResumeStore(DocumentPersistence.from_directory(tmp_path), timer_factory=fake_timer)

    assert store.snapshot == sample_document


@pytest.mark.integration
def test_store_flush_survives_unencodable_text(tmp_path, fake_timer):
    """Test that a write the file backend cannot encode is logged, not raised."""
    store = ResumeStore(DocumentPersistence.from_directory(tmp_path), timer_factory=fake_timer)

    store.update_personal_field("name", "bad \ud800 text")

    assert store.flush() is True
    assert store.snapshot.personal.name == "bad \ud800 text"
    assert not (tmp_path / "resumeData.json").exists()
    assert [p.name for p in tmp_path.iterdir()] == []

    store.update_personal_field("name", "Jane Roe")
    store.close(flush=True)

    saved = json.loads((tmp_path / "resumeData.json").read_text(encoding="utf-8"))
    assert saved["personal"]["name"] == "Jane Roe"


@pytest.mark.integration
def test_document_events_are_appended(tmp_path):
    """Test JSON-lines event logging and filtering."""
    events_file = tmp_path / "logs" / "events.jsonl"

    log_document_event("document_saved", source="persistence", events_file=events_file, skills=3)
    log_document_event("document_load_failed", source="persistence", events_file=events_file)
    log_document_event("document_saved", source="cli", events_file=events_file, skills=4)

    events = get_recent_events(n=10, events_file=events_file)
    assert [e["event_type"] for e in events] == [
        "document_saved",
        "document_load_failed",
        "document_saved",
    ]
    assert "timestamp" in events[0]

    saved = get_recent_events(n=1, event_type="document_saved", events_file=events_file)
    assert saved == [events[2]]


@pytest.mark.integration
def test_recent_events_missing_file(tmp_path):
    """Test that a missing event log reads as empty."""
    assert get_recent_events(events_file=tmp_path / "none.jsonl") == []
