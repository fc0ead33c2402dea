"""
Key-value storage backends for persisted documents.

A backend stores opaque text blobs under string keys. The document adapter
(adapter.py) owns serialization; backends only move bytes.
"""

import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union


class KeyValueBackend(ABC):
    """Durable (or ephemeral) blob store keyed by string."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the blob stored under key, or None if there is none."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Overwrite the blob stored under key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the blob stored under key; missing keys are ignored."""


class MemoryBackend(KeyValueBackend):
    """In-process backend. Contents are lost when the object is discarded."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._blobs: Dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value
        self.write_count += 1

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)


class JsonFileBackend(KeyValueBackend):
    """
    One file per key: <directory>/<key>.json.

    Writes go to a temp file in the same directory and are then moved over the
    target, so readers never observe a partially written blob.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """
        Get the file path for a key.

        Raises:
            ValueError: If key is empty or contains a path separator
        """
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        # Write to temp file first (atomic write pattern)
        temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=self.directory, text=True)
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                f.write(value)
            shutil.move(temp_path, path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
