"""
Resume Document Store

Owns the single ResumeDocument of an editing session and is the only way to change it.

Every successful mutation:
1. builds a new immutable snapshot (the previous snapshot is never modified),
2. schedules a debounced write of that snapshot,
3. notifies observers synchronously, in the order mutations were applied.

Failed operations raise before any of these steps, so state is never partially
updated. Persistence failures are logged and never raised out of the store.

Durability gap: a write is only attempted once the debounce delay has passed
without further edits. If the session ends first (close() without flush, or
process exit), that pending write is abandoned and the last flushed state is
what storage holds.

Usage:
    persistence = DocumentPersistence.from_directory("data/storage")
    store = ResumeStore(persistence)
    unsubscribe = store.subscribe(lambda doc: print(doc.template_id))

    entry_id = store.add_experience_entry()
    store.update_experience_entry(0, ExperienceField.HIGHLIGHTS, "Did X\\n\\nDid Y")
    store.change_template("tech")
    store.close(flush=True)
"""

import os
import threading
from dataclasses import replace
from typing import Any, Callable, List, Optional, Sequence, Set, Union

from dotenv import load_dotenv

from vitae.contexts.editing.defaults import get_default_document
from vitae.contexts.editing.document_data_structure import (
    CustomSection,
    CustomSectionField,
    EducationEntry,
    EducationField,
    ExperienceEntry,
    ExperienceField,
    PersonalField,
    ResumeDocument,
    TemplateId,
    coerce_field,
    coerce_template,
    new_entry_id,
    split_highlights,
)
from vitae.contexts.editing.exceptions import (
    IndexOutOfRangeError,
    InvalidFieldError,
    InvalidTemplateError,
)
from vitae.contexts.editing.logger import (
    _log_exception,
    _log_info,
    log_mutation,
    log_rejected,
)
from vitae.contexts.editing.repair import document_to_dict
from vitae.contexts.persistence.debounce import Debouncer
from vitae.contexts.persistence.exceptions import PersistenceLoadError, PersistenceSaveError

load_dotenv()
DEBOUNCE_SECONDS = float(os.getenv("VITAE_DEBOUNCE_SECONDS", "1.0"))

Observer = Callable[[ResumeDocument], None]


class ResumeStore:
    """
    Observable, persisted owner of one resume document.

    Args:
        persistence: Object with load() -> ResumeDocument and save(document), typically
            a DocumentPersistence. None keeps the document in memory only.
        debounce_delay: Seconds of quiet before a write (defaults to VITAE_DEBOUNCE_SECONDS)
        timer_factory: threading.Timer-compatible factory used by the write scheduler
        initial_document: Document to start from instead of loading; skips load()
        id_factory: Generator for new entry ids
    """

    def __init__(
        self,
        persistence: Optional[Any] = None,
        debounce_delay: float = DEBOUNCE_SECONDS,
        timer_factory: Callable[..., Any] = threading.Timer,
        initial_document: Optional[ResumeDocument] = None,
        id_factory: Callable[[], str] = new_entry_id,
    ):
        self.persistence = persistence
        self.id_factory = id_factory
        self._observers: List[Observer] = []
        self._closed = False
        self._writer = Debouncer(debounce_delay, self._persist, timer_factory=timer_factory)

        if initial_document is not None:
            self._document = initial_document
        else:
            self._document = self._load_initial_document()

        # Every id ever present in this session, so removed ids are never handed out again
        self._issued_ids: Set[str] = set(self._document.entry_ids())

    # Initialization and persistence

    def _load_initial_document(self) -> ResumeDocument:
        if self.persistence is None:
            return get_default_document()

        try:
            document = self.persistence.load()
        except PersistenceLoadError as e:
            _log_info(f"Starting from the sample resume ({e.reason})")
            return get_default_document()

        _log_info(
            f"Loaded saved resume ({len(document.experience_entries)} experience, "
            f"{len(document.education_entries)} education, {len(document.skills)} skills)"
        )
        return document

    def _persist(self, document: ResumeDocument) -> None:
        if self.persistence is None:
            return
        try:
            self.persistence.save(document)
        except PersistenceSaveError:
            # In-memory state stays authoritative; the next mutation retries
            _log_exception("Saving resume failed; keeping in-memory document")

    # Observation

    @property
    def snapshot(self) -> ResumeDocument:
        """The current immutable document. Safe to read from any thread."""
        return self._document

    @property
    def has_pending_write(self) -> bool:
        return self._writer.pending

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register a callback invoked with each new snapshot.

        Returns:
            Zero-argument function that removes the observer
        """
        self._observers.append(observer)
        return lambda: self.unsubscribe(observer)

    def unsubscribe(self, observer: Observer) -> None:
        """Remove an observer; unknown observers are ignored."""
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, document: ResumeDocument) -> None:
        for observer in list(self._observers):
            try:
                observer(document)
            except Exception:
                _log_exception(f"Observer {observer!r} raised while handling a change")

    def _commit(self, document: ResumeDocument, operation: str, detail: str = "") -> ResumeDocument:
        self._document = document
        log_mutation(operation, detail)
        if not self._closed:
            self._writer.schedule(document)
        self._notify(document)
        return document

    # Session

    def flush(self) -> bool:
        """
        Write any pending snapshot now.

        Returns:
            True if a pending write ran
        """
        return self._writer.flush()

    def close(self, flush: bool = False) -> None:
        """
        End the session.

        Args:
            flush: Write the pending snapshot first. By default a pending write
                is abandoned, matching what happens when the process exits.
        """
        if flush:
            self._writer.flush()
        elif self._writer.cancel():
            _log_info("Session closed with an unsaved change; pending write abandoned")
        self._closed = True
        self._observers.clear()

    def to_dict(self) -> dict:
        """Current document in its persisted layout."""
        return document_to_dict(self._document)

    # Helpers

    def _new_id(self) -> str:
        entry_id = self.id_factory()
        while entry_id in self._issued_ids:
            entry_id = self.id_factory()
        self._issued_ids.add(entry_id)
        return entry_id

    @staticmethod
    def _check_index(index: Any, sequence: Sequence, collection: str, operation: str) -> int:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(sequence):
            error = IndexOutOfRangeError(
                f"{collection} has no position {index!r} (length {len(sequence)})",
                index=index,
                collection=collection,
                length=len(sequence),
            )
            log_rejected(operation, error)
            raise error
        return index

    @staticmethod
    def _check_value(value: Any, operation: str) -> str:
        if not isinstance(value, str):
            raise TypeError(f"{operation} expects a string value, got {type(value).__name__}")
        return value

    @staticmethod
    def _resolve_field(field_type, field: Any, entity: str, operation: str):
        try:
            return coerce_field(field_type, field, entity)
        except InvalidFieldError as e:
            log_rejected(operation, e)
            raise

    @staticmethod
    def _replace_at(sequence: tuple, index: int, item: Any) -> tuple:
        return sequence[:index] + (item,) + sequence[index + 1 :]

    @staticmethod
    def _remove_at(sequence: tuple, index: int) -> tuple:
        return sequence[:index] + sequence[index + 1 :]

    # Personal

    def update_personal_field(self, field: Union[PersonalField, str], value: str) -> ResumeDocument:
        """Replace one personal field. Any string is accepted, including ""."""
        operation = "update_personal_field"
        personal_field = self._resolve_field(PersonalField, field, "personal", operation)
        value = self._check_value(value, operation)

        personal = replace(self._document.personal, **{personal_field.value: value})
        return self._commit(
            replace(self._document, personal=personal), operation, personal_field.value
        )

    # Experience

    def add_experience_entry(self) -> str:
        """
        Append an empty experience entry.

        The entry starts with empty text fields and no highlight lines.

        Returns:
            The new entry's id
        """
        entry = ExperienceEntry(id=self._new_id())
        self._commit(
            replace(
                self._document,
                experience_entries=self._document.experience_entries + (entry,),
            ),
            "add_experience_entry",
            entry.id,
        )
        return entry.id

    def update_experience_entry(
        self, index: int, field: Union[ExperienceField, str], value: str
    ) -> ResumeDocument:
        """
        Set one field of the experience entry at index.

        For highlights, value is newline-delimited text; whitespace-only lines are
        discarded and the rest stored as separate lines.
        """
        operation = "update_experience_entry"
        entries = self._document.experience_entries
        self._check_index(index, entries, "experience_entries", operation)
        experience_field = self._resolve_field(ExperienceField, field, "experience", operation)
        value = self._check_value(value, operation)

        if experience_field is ExperienceField.HIGHLIGHTS:
            stored: Any = split_highlights(value)
        else:
            stored = value

        entry = replace(entries[index], **{experience_field.value: stored})
        return self._commit(
            replace(self._document, experience_entries=self._replace_at(entries, index, entry)),
            operation,
            f"[{index}].{experience_field.value}",
        )

    def remove_experience_entry(self, index: int) -> ResumeDocument:
        """Remove the experience entry at index; later entries shift down."""
        operation = "remove_experience_entry"
        entries = self._document.experience_entries
        self._check_index(index, entries, "experience_entries", operation)

        return self._commit(
            replace(self._document, experience_entries=self._remove_at(entries, index)),
            operation,
            entries[index].id,
        )

    # Education

    def add_education_entry(self) -> str:
        """Append an empty education entry and return its id."""
        entry = EducationEntry(id=self._new_id())
        self._commit(
            replace(
                self._document,
                education_entries=self._document.education_entries + (entry,),
            ),
            "add_education_entry",
            entry.id,
        )
        return entry.id

    def update_education_entry(
        self, index: int, field: Union[EducationField, str], value: str
    ) -> ResumeDocument:
        operation = "update_education_entry"
        entries = self._document.education_entries
        self._check_index(index, entries, "education_entries", operation)
        education_field = self._resolve_field(EducationField, field, "education", operation)
        value = self._check_value(value, operation)

        entry = replace(entries[index], **{education_field.value: value})
        return self._commit(
            replace(self._document, education_entries=self._replace_at(entries, index, entry)),
            operation,
            f"[{index}].{education_field.value}",
        )

    def remove_education_entry(self, index: int) -> ResumeDocument:
        operation = "remove_education_entry"
        entries = self._document.education_entries
        self._check_index(index, entries, "education_entries", operation)

        return self._commit(
            replace(self._document, education_entries=self._remove_at(entries, index)),
            operation,
            entries[index].id,
        )

    # Skills

    def add_skill(self, text: str) -> ResumeDocument:
        """
        Append a skill.

        The text is trimmed. Blank text or an exact (case-sensitive) duplicate is
        silently ignored: no new snapshot, no write, no notification.
        """
        skill = self._check_value(text, "add_skill").strip()
        if not skill or skill in self._document.skills:
            return self._document

        return self._commit(
            replace(self._document, skills=self._document.skills + (skill,)),
            "add_skill",
            skill,
        )

    def remove_skill(self, index: int) -> ResumeDocument:
        operation = "remove_skill"
        skills = self._document.skills
        self._check_index(index, skills, "skills", operation)

        return self._commit(
            replace(self._document, skills=self._remove_at(skills, index)),
            operation,
            skills[index],
        )

    # Custom sections

    def add_custom_section(self, title: str) -> str:
        """Append a custom section with the given title and empty content; returns its id."""
        title = self._check_value(title, "add_custom_section")
        section = CustomSection(id=self._new_id(), title=title)
        self._commit(
            replace(
                self._document,
                custom_sections=self._document.custom_sections + (section,),
            ),
            "add_custom_section",
            section.id,
        )
        return section.id

    def update_custom_section(
        self, index: int, field: Union[CustomSectionField, str], value: str
    ) -> ResumeDocument:
        operation = "update_custom_section"
        sections = self._document.custom_sections
        self._check_index(index, sections, "custom_sections", operation)
        section_field = self._resolve_field(CustomSectionField, field, "custom section", operation)
        value = self._check_value(value, operation)

        section = replace(sections[index], **{section_field.value: value})
        return self._commit(
            replace(self._document, custom_sections=self._replace_at(sections, index, section)),
            operation,
            f"[{index}].{section_field.value}",
        )

    def remove_custom_section(self, index: int) -> ResumeDocument:
        operation = "remove_custom_section"
        sections = self._document.custom_sections
        self._check_index(index, sections, "custom_sections", operation)

        return self._commit(
            replace(self._document, custom_sections=self._remove_at(sections, index)),
            operation,
            sections[index].id,
        )

    # Template

    def change_template(self, template_id: Union[TemplateId, str]) -> ResumeDocument:
        """Select a presentation template. Content is left untouched."""
        try:
            template = coerce_template(template_id)
        except (ValueError, TypeError):
            error = InvalidTemplateError(template_id, [t.value for t in TemplateId])
            log_rejected("change_template", error)
            raise error from None

        return self._commit(
            replace(self._document, template_id=template),
            "change_template",
            template.value,
        )
