"""Unit tests for DocumentPersistence over an in-memory backend."""

import json

import pytest

from vitae.contexts.editing import TemplateId
from vitae.contexts.persistence import (
    DocumentPersistence,
    MemoryBackend,
    PersistenceLoadError,
    PersistenceSaveError,
)
from vitae.contexts.persistence.exceptions import BACKEND_ERROR, MALFORMED, NOT_FOUND, PARSE_ERROR


class _UnreadableBackend(MemoryBackend):
    def get(self, key):
        raise OSError("permission denied")


class _UnwritableBackend(MemoryBackend):
    def set(self, key, value):
        raise OSError("read-only file system")


class _UndecodableBackend(MemoryBackend):
    def get(self, key):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")


class _UnencodableBackend(MemoryBackend):
    def set(self, key, value):
        raise UnicodeEncodeError("utf-8", "\ud800", 0, 1, "surrogates not allowed")


def _broken_event_log(*args, **kwargs):
    raise OSError("events file is a directory")


@pytest.mark.unit
def test_save_then_load_returns_equal_document(persistence, backend, sample_document):
    """Test that a saved snapshot loads back unchanged."""
    persistence.save(sample_document)

    assert backend.write_count == 1
    assert persistence.load() == sample_document


@pytest.mark.unit
def test_saved_blob_is_versioned_json(persistence, backend, sample_document):
    """Test the stored layout."""
    persistence.save(sample_document)

    data = json.loads(backend.get("resumeData"))
    assert data["schemaVersion"] == 1
    assert data["templateId"] == "modern"
    assert data["experienceEntries"][0]["highlights"][0].startswith("Architected")


@pytest.mark.unit
def test_load_repairs_partial_blob():
    """Test that a blob missing collections loads with them empty."""
    blob = json.dumps({"personal": {"name": "Partial"}, "template": "creative"})
    persistence = DocumentPersistence(MemoryBackend({"resumeData": blob}))

    document = persistence.load()

    assert document.personal.name == "Partial"
    assert document.experience_entries == ()
    assert document.custom_sections == ()
    assert document.template_id is TemplateId.CREATIVE


@pytest.mark.unit
@pytest.mark.parametrize(
    "blobs,reason",
    [
        ({}, NOT_FOUND),
        ({"resumeData": "{oops"}, PARSE_ERROR),
        ({"resumeData": "[1, 2]"}, MALFORMED),
        ({"resumeData": json.dumps({"skills": "Python"})}, MALFORMED),
    ],
)
def test_load_failures_have_reasons(blobs, reason):
    """Test that each kind of unreadable blob is reported with its reason."""
    persistence = DocumentPersistence(MemoryBackend(blobs), key="resumeData")

    with pytest.raises(PersistenceLoadError) as exc_info:
        persistence.load()

    assert exc_info.value.reason == reason
    assert exc_info.value.key == "resumeData"


@pytest.mark.unit
def test_load_backend_error():
    """Test that backend read failures become PersistenceLoadError."""
    persistence = DocumentPersistence(_UnreadableBackend())

    with pytest.raises(PersistenceLoadError) as exc_info:
        persistence.load()

    assert exc_info.value.reason == BACKEND_ERROR
    assert isinstance(exc_info.value.original_error, OSError)


@pytest.mark.unit
def test_save_backend_error(sample_document):
    """Test that backend write failures become PersistenceSaveError."""
    persistence = DocumentPersistence(_UnwritableBackend(), key="resumeData")

    with pytest.raises(PersistenceSaveError) as exc_info:
        persistence.save(sample_document)

    assert exc_info.value.key == "resumeData"
    assert "read-only" in str(exc_info.value)


@pytest.mark.unit
def test_load_undecodable_blob_is_parse_error():
    """Test that a blob that is not valid UTF-8 is reported as unparsable."""
    persistence = DocumentPersistence(_UndecodableBackend())

    with pytest.raises(PersistenceLoadError) as exc_info:
        persistence.load()

    assert exc_info.value.reason == PARSE_ERROR
    assert isinstance(exc_info.value.original_error, UnicodeDecodeError)


@pytest.mark.unit
def test_save_unencodable_text_is_save_error(sample_document):
    """Test that text the backend cannot encode becomes PersistenceSaveError."""
    persistence = DocumentPersistence(_UnencodableBackend(), key="resumeData")

    with pytest.raises(PersistenceSaveError) as exc_info:
        persistence.save(sample_document)

    assert isinstance(exc_info.value.original_error, UnicodeEncodeError)


@pytest.mark.unit
def test_event_log_failure_does_not_fail_save(monkeypatch, persistence, backend, sample_document):
    """Test that a completed write stands when the event log cannot be appended."""
    monkeypatch.setattr("vitae.contexts.persistence.adapter.log_document_event", _broken_event_log)

    persistence.save(sample_document)

    assert backend.write_count == 1
    assert persistence.load() == sample_document


@pytest.mark.unit
def test_event_log_failure_keeps_load_error_typed(monkeypatch):
    """Test that a failed load still raises PersistenceLoadError when the event log is broken."""
    monkeypatch.setattr("vitae.contexts.persistence.adapter.log_document_event", _broken_event_log)
    persistence = DocumentPersistence(MemoryBackend({"resumeData": "{oops"}))

    with pytest.raises(PersistenceLoadError) as exc_info:
        persistence.load()

    assert exc_info.value.reason == PARSE_ERROR


@pytest.mark.unit
def test_memory_backend_delete():
    """Test MemoryBackend get/set/delete."""
    backend = MemoryBackend()
    backend.set("k", "v")
    assert backend.get("k") == "v"

    backend.delete("k")
    backend.delete("missing")
    assert backend.get("k") is None
