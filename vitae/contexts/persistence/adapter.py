"""
Document persistence adapter.

Reads and writes the single resume blob for a user session. The blob is the
JSON wire layout produced by document_to_dict(); reads go through repair() so
older or partially populated blobs load as valid documents.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from vitae.contexts.editing.document_data_structure import ResumeDocument
from vitae.contexts.editing.exceptions import MalformedDocumentError
from vitae.contexts.editing.repair import document_to_dict, repair
from vitae.contexts.persistence.backends import JsonFileBackend, KeyValueBackend
from vitae.contexts.persistence.exceptions import (
    BACKEND_ERROR,
    MALFORMED,
    NOT_FOUND,
    PARSE_ERROR,
    PersistenceLoadError,
    PersistenceSaveError,
)
from vitae.contexts.persistence.logger import _log_warning, log_load_failure, log_save_result
from vitae.utils.event_logging import log_document_event

load_dotenv()
STORAGE_PATH = Path(os.getenv("VITAE_STORAGE_PATH", "data/storage"))
STORAGE_KEY = os.getenv("VITAE_STORAGE_KEY", "resumeData")


class DocumentPersistence:
    """
    Load/save a ResumeDocument under one key of a key-value backend.

    Args:
        backend: Blob store to read from and write to
        key: Storage key (defaults to VITAE_STORAGE_KEY)
    """

    def __init__(self, backend: KeyValueBackend, key: str = STORAGE_KEY):
        self.backend = backend
        self.key = key

    @classmethod
    def from_directory(
        cls, directory: Optional[Union[str, Path]] = None, key: str = STORAGE_KEY
    ) -> "DocumentPersistence":
        """Create an adapter over a JsonFileBackend (defaults to VITAE_STORAGE_PATH)."""
        return cls(JsonFileBackend(directory if directory is not None else STORAGE_PATH), key=key)

    def load(self) -> ResumeDocument:
        """
        Read, parse, and repair the stored document.

        Returns:
            Repaired ResumeDocument

        Raises:
            PersistenceLoadError: If the blob is missing, unparsable, malformed,
                or the backend cannot be read
        """
        try:
            blob = self.backend.get(self.key)
        except UnicodeDecodeError as e:
            raise self._load_failed("Saved document is not valid UTF-8 text", PARSE_ERROR, e)
        except OSError as e:
            raise self._load_failed("Could not read from storage backend", BACKEND_ERROR, e)

        if blob is None:
            raise self._load_failed("No saved document", NOT_FOUND)

        try:
            raw = json.loads(blob)
        except json.JSONDecodeError as e:
            raise self._load_failed("Saved document is not valid JSON", PARSE_ERROR, e)

        try:
            return repair(raw)
        except MalformedDocumentError as e:
            raise self._load_failed("Saved document has an invalid structure", MALFORMED, e)

    def save(self, document: ResumeDocument) -> None:
        """
        Overwrite the stored blob with a full snapshot.

        Raises:
            PersistenceSaveError: If the backend write fails, including text the
                backend cannot encode
        """
        blob = json.dumps(document_to_dict(document), indent=2, ensure_ascii=False)

        try:
            self.backend.set(self.key, blob)
        except (OSError, ValueError) as e:
            log_save_result(self.key, success=False, error=e)
            self._record_event("document_save_failed")
            raise PersistenceSaveError(
                f"Could not write document '{self.key}'", key=self.key, original_error=e
            ) from e

        log_save_result(self.key, success=True, size=len(blob))
        self._record_event(
            "document_saved",
            experience_entries=len(document.experience_entries),
            education_entries=len(document.education_entries),
            skills=len(document.skills),
            custom_sections=len(document.custom_sections),
            template_id=document.template_id.value,
        )

    def _load_failed(
        self, message: str, reason: str, error: Optional[Exception] = None
    ) -> PersistenceLoadError:
        exc = PersistenceLoadError(message, key=self.key, reason=reason, original_error=error)
        log_load_failure(self.key, reason, exc)
        self._record_event("document_load_failed", reason=reason)
        if error is not None:
            exc.__cause__ = error
        return exc

    def _record_event(self, event_type: str, **fields) -> None:
        # Event log failures are logged, never raised.
        try:
            log_document_event(event_type, source="persistence", storage_key=self.key, **fields)
        except OSError as e:
            _log_warning(f"Could not append '{event_type}' to event log: {e}")
