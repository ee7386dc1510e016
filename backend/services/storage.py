"""Durable key-value stores backing autosave, versions, and recent ids.

All stores share a tiny synchronous contract (``get``/``set`` of string
values). Failures surface as ``StorageError`` so the persistence layer
can treat every backend the same way.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol, cast

from supabase import Client

from backend.config import PROJECT_ROOT, Settings, get_settings
from backend.supabase_client import get_supabase_client

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class StorageError(Exception):
    """A storage backend could not complete a read or write."""


class StorageQuotaExceededError(StorageError):
    """A write would exceed the store's capacity."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store, optionally bounded by a byte quota."""

    def __init__(self, max_bytes: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self._max_bytes = max_bytes

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._max_bytes is not None:
            others = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
            needed = others + len(value.encode("utf-8"))
            if needed > self._max_bytes:
                raise StorageQuotaExceededError(
                    f"Writing {key!r} needs {needed} bytes, quota is {self._max_bytes}"
                )
        self._data[key] = value


class FileKeyValueStore:
    """One file per key under a directory.

    Writes go to a temporary file that atomically replaces the previous
    value, so a crash mid-write leaves the last complete value in place.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"Failed to read {path}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Failed to write {path}") from exc


class SupabaseKeyValueStore:
    """Rows of ``(key, value)`` in a Supabase table."""

    def __init__(self, client: Client, table: str) -> None:
        self._client = client
        self._table = table

    def get(self, key: str) -> str | None:
        try:
            result = (
                self._client.table(self._table)
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            raise StorageError(f"Failed to read {key!r} from {self._table}") from exc
        rows = cast(list[dict[str, Any]], result.data)
        if not rows:
            return None
        return rows[0]["value"]

    def set(self, key: str, value: str) -> None:
        try:
            self._client.table(self._table).upsert(
                {"key": key, "value": value}, on_conflict="key"
            ).execute()
        except Exception as exc:
            raise StorageError(f"Failed to write {key!r} to {self._table}") from exc


def create_key_value_store(settings: Settings | None = None) -> KeyValueStore:
    """Build the store selected by ``storage.backend`` in the settings."""
    if settings is None:
        settings = get_settings()

    backend = settings.storage.backend
    if backend == "memory":
        logger.info("Using in-memory storage (nothing survives a restart)")
        return InMemoryKeyValueStore()
    if backend == "supabase":
        logger.info("Using Supabase storage table %s", settings.storage.table)
        return SupabaseKeyValueStore(get_supabase_client(), settings.storage.table)

    directory = Path(settings.storage.directory)
    if not directory.is_absolute():
        directory = PROJECT_ROOT / directory
    logger.info("Using file storage at %s", directory)
    return FileKeyValueStore(directory)
