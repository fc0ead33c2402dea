"""
Persistence Context

Responsibilities:
- Stores the resume document as one JSON blob in a key-value backend
- Repairs stored blobs on load (missing fields, older schema versions)
- Coalesces bursts of writes with a debounced single-slot scheduler

Owns: Backends, serialized layout, write scheduling
Never: Changes document content or decides what to store
"""

from vitae.contexts.persistence.adapter import STORAGE_KEY, STORAGE_PATH, DocumentPersistence
from vitae.contexts.persistence.backends import JsonFileBackend, KeyValueBackend, MemoryBackend
from vitae.contexts.persistence.debounce import Debouncer
from vitae.contexts.persistence.exceptions import PersistenceLoadError, PersistenceSaveError

__all__ = [
    "DocumentPersistence",
    "STORAGE_KEY",
    "STORAGE_PATH",
    "KeyValueBackend",
    "MemoryBackend",
    "JsonFileBackend",
    "Debouncer",
    "PersistenceLoadError",
    "PersistenceSaveError",
]
