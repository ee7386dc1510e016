"""Persistence for newsletter documents.

Covers the three storage slots (autosave, version list, recent ids) and
the JSON interchange format. Storage problems never propagate out of
this module: failed writes are logged and reported through return
values, unreadable data reads as "nothing saved". The only error callers
must handle is ``InvalidNewsletterFileError`` from imports.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from backend.config import Settings, get_settings
from backend.ids import new_id
from backend.schemas.newsletter import Newsletter, SaveVersion
from backend.services.document import find_integrity_problems
from backend.services.storage import KeyValueStore, StorageError
from backend.time_utils import epoch_millis, label_timestamp, utc_now

logger = logging.getLogger(__name__)


class InvalidNewsletterFileError(ValueError):
    """An imported file is unreadable, not JSON, or not a newsletter."""


class ExportedFile(BaseModel):
    """A downloadable artifact produced from the current document."""

    filename: str
    content: str
    media_type: str


def dump_newsletter(newsletter: Newsletter) -> str:
    """Serialise a document to pretty-printed interchange JSON."""
    return json.dumps(newsletter.to_json_dict(), indent=2, ensure_ascii=False)


def parse_newsletter_json(text: str | bytes) -> Newsletter:
    """Parse interchange JSON into a document.

    Args:
        text: Raw file contents.

    Returns:
        The parsed document.

    Raises:
        InvalidNewsletterFileError: If the text is not valid JSON, does not
            match the document schema, or breaks the row/block invariants.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidNewsletterFileError("Invalid newsletter JSON file") from exc

    try:
        newsletter = Newsletter.model_validate(data)
    except ValidationError as exc:
        raise InvalidNewsletterFileError(
            f"File is not a newsletter document ({exc.error_count()} schema error(s))"
        ) from exc

    problems = find_integrity_problems(newsletter)
    if problems:
        raise InvalidNewsletterFileError(
            "Newsletter rows and blocks are inconsistent: " + "; ".join(problems)
        )
    return newsletter


class NewsletterStorage:
    """Autosave slot, bounded version list, and recent-id list over a key-value store.

    The version list is held in memory and written back in full after
    every change (read-modify-write of the whole slot).
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key_prefix: str = "neurology-ai-pulse",
        max_versions: int = 20,
        recent_limit: int = 5,
        filename_prefix: str = "neurology-ai-pulse",
    ) -> None:
        self._store = store
        self._max_versions = max_versions
        self._recent_limit = recent_limit
        self._filename_prefix = filename_prefix
        self.autosave_key = f"{key_prefix}:autosave"
        self.versions_key = f"{key_prefix}:versions"
        self.recent_key = f"{key_prefix}:recent"
        self._versions: list[SaveVersion] = self._load_versions()

    @classmethod
    def from_settings(cls, store: KeyValueStore, settings: Settings | None = None) -> NewsletterStorage:
        if settings is None:
            settings = get_settings()
        return cls(
            store,
            key_prefix=settings.storage.key_prefix,
            max_versions=settings.versions.max_versions,
            recent_limit=settings.autosave.recent_limit,
            filename_prefix=settings.export.filename_prefix,
        )

    # --- Raw slot access ---

    def _read(self, key: str) -> str | None:
        try:
            return self._store.get(key)
        except StorageError:
            logger.warning("Storage read failed for %s, treating as empty", key, exc_info=True)
            return None

    def _read_json(self, key: str) -> Any:
        raw = self._read(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored value under %s is not valid JSON, ignoring it", key)
            return None

    # --- Autosave ---

    def autosave(self, newsletter: Newsletter) -> bool:
        """Overwrite the autosave slot with the document and bump the recent list.

        The stored copy gets ``updated_at`` set to the save time; the
        caller's document is not modified.

        Returns:
            True if the autosave slot was written, False if storage
            rejected it. A failed recent-list write is logged only.
        """
        meta = newsletter.meta.model_copy(update={"updated_at": utc_now()})
        stamped = newsletter.model_copy(update={"meta": meta})
        try:
            self._store.set(self.autosave_key, dump_newsletter(stamped))
        except StorageError:
            logger.warning("Autosave failed for newsletter %s", newsletter.meta.id, exc_info=True)
            return False

        recent = [
            newsletter.meta.id,
            *(doc_id for doc_id in self.recent_ids() if doc_id != newsletter.meta.id),
        ][: self._recent_limit]
        try:
            self._store.set(self.recent_key, json.dumps(recent))
        except StorageError:
            logger.warning("Failed to update recent ids after autosave", exc_info=True)

        logger.debug("Autosaved newsletter %s", newsletter.meta.id)
        return True

    def load_autosave(self) -> Newsletter | None:
        """Return the autosaved document, or None if nothing usable is stored."""
        raw = self._read(self.autosave_key)
        if raw is None:
            return None
        try:
            return parse_newsletter_json(raw)
        except InvalidNewsletterFileError as exc:
            logger.warning("Ignoring unusable autosave: %s", exc)
            return None

    def recent_ids(self) -> list[str]:
        """Return recently autosaved document ids, newest first."""
        data = self._read_json(self.recent_key)
        if not isinstance(data, list):
            return []
        return [str(doc_id) for doc_id in data][: self._recent_limit]

    # --- Versions ---

    def _load_versions(self) -> list[SaveVersion]:
        data = self._read_json(self.versions_key)
        if not isinstance(data, list):
            return []

        versions: list[SaveVersion] = []
        for entry in data:
            try:
                versions.append(SaveVersion.model_validate(entry))
            except ValidationError:
                logger.warning("Skipping unreadable saved version entry")
        return versions[: self._max_versions]

    def _persist_versions(self) -> bool:
        payload = json.dumps([version.to_json_dict() for version in self._versions])
        try:
            self._store.set(self.versions_key, payload)
        except StorageError:
            logger.warning("Failed to persist %d version(s)", len(self._versions), exc_info=True)
            return False
        return True

    @property
    def versions(self) -> list[SaveVersion]:
        """Saved versions, newest first."""
        return list(self._versions)

    def get_version(self, version_id: str) -> SaveVersion | None:
        return next((v for v in self._versions if v.id == version_id), None)

    def save_version(self, newsletter: Newsletter, label: str | None = None) -> SaveVersion:
        """Capture a snapshot of the document as a new version.

        The snapshot's ``meta.version`` is one higher than the live
        document's; the live document itself is left untouched. Only the
        newest ``max_versions`` snapshots are kept.

        Args:
            newsletter: Live document to capture.
            label: Display label; generated from the version number and
                time when omitted or blank.

        Returns:
            The stored version.
        """
        now = utc_now()
        meta = newsletter.meta.model_copy(
            update={"version": newsletter.meta.version + 1, "updated_at": now}
        )
        snapshot = newsletter.model_copy(update={"meta": meta}, deep=True)
        version = SaveVersion(
            id=new_id(),
            label=(label or "").strip() or f"Version {newsletter.meta.version} — {label_timestamp(now)}",
            saved_at=now,
            newsletter=snapshot,
        )

        dropped = max(0, len(self._versions) + 1 - self._max_versions)
        self._versions = [version, *self._versions][: self._max_versions]
        if dropped:
            logger.debug("Dropped %d oldest version(s)", dropped)
        self._persist_versions()
        logger.info("Saved version %s (%s)", version.id, version.label)
        return version

    def delete_version(self, version_id: str) -> bool:
        """Remove a version by id.

        Returns:
            True if a version was removed, False if the id was unknown.
        """
        remaining = [v for v in self._versions if v.id != version_id]
        if len(remaining) == len(self._versions):
            return False
        self._versions = remaining
        self._persist_versions()
        logger.info("Deleted version %s", version_id)
        return True

    # --- JSON interchange ---

    def export_json(self, newsletter: Newsletter) -> ExportedFile:
        """Serialise the document as a downloadable JSON file."""
        filename = (
            f"{self._filename_prefix}-{newsletter.meta.issue_number}-{epoch_millis(utc_now())}.json"
        )
        return ExportedFile(
            filename=filename,
            content=dump_newsletter(newsletter),
            media_type="application/json",
        )

    async def import_json(self, source: Path | str | bytes, name: str | None = None) -> Newsletter:
        """Read and parse an exported newsletter file.

        Args:
            source: Path of a file on disk, or the uploaded file contents.
            name: Name used in log messages; defaults to the path's name.

        Raises:
            InvalidNewsletterFileError: If the file cannot be read or parsed.
        """
        if isinstance(source, Path):
            name = name or source.name
            try:
                text: str | bytes = await asyncio.to_thread(source.read_text, encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise InvalidNewsletterFileError("Failed to read file") from exc
        else:
            text = source

        try:
            return parse_newsletter_json(text)
        except InvalidNewsletterFileError as exc:
            logger.warning("Rejected import of %s: %s", name or "upload", exc)
            raise
