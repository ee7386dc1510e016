"""Persistence tests: autosave, versions, recent ids, and JSON interchange."""

import json
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from backend.schemas.newsletter import Newsletter
from backend.services.persistence import (
    InvalidNewsletterFileError,
    NewsletterStorage,
    dump_newsletter,
    parse_newsletter_json,
)
from backend.services.storage import InMemoryKeyValueStore, StorageQuotaExceededError

SAVE_TIME = datetime(2026, 10, 19, 9, 30, tzinfo=UTC)


# --- JSON interchange ---


def test_export_then_parse_round_trips(storage: NewsletterStorage, newsletter: Newsletter) -> None:
    exported = storage.export_json(newsletter)

    assert parse_newsletter_json(exported.content) == newsletter


def test_export_uses_camel_case_and_omits_unset_fields(
    storage: NewsletterStorage, newsletter: Newsletter
) -> None:
    data = json.loads(storage.export_json(newsletter).content)

    assert "issueNumber" in data["meta"]
    assert "blockIds" in data["rows"][0]
    header = data["blocks"][data["rows"][0]["blockIds"][0]]
    assert "logoUrl" not in header
    assert "blockBgColor" not in header


def test_export_filename_and_indentation(storage: NewsletterStorage, newsletter: Newsletter) -> None:
    with patch("backend.services.persistence.utc_now", return_value=SAVE_TIME):
        exported = storage.export_json(newsletter)

    assert exported.filename == "neurology-ai-pulse-001-1792402200000.json"
    assert exported.media_type == "application/json"
    assert exported.content.startswith('{\n  "meta"')


def test_parse_rejects_malformed_json() -> None:
    with pytest.raises(InvalidNewsletterFileError, match="Invalid newsletter JSON file"):
        parse_newsletter_json("{not valid json")


def test_parse_rejects_documents_missing_required_fields() -> None:
    with pytest.raises(InvalidNewsletterFileError, match="not a newsletter document"):
        parse_newsletter_json('{"meta": {"id": "x"}}')


def test_parse_rejects_unknown_block_types(newsletter: Newsletter) -> None:
    data = newsletter.to_json_dict()
    first_id = data["rows"][0]["blockIds"][0]
    data["blocks"][first_id]["type"] = "carousel"

    with pytest.raises(InvalidNewsletterFileError):
        parse_newsletter_json(json.dumps(data))


def test_parse_rejects_broken_row_references(newsletter: Newsletter) -> None:
    data = newsletter.to_json_dict()
    data["rows"][0]["blockIds"].append("ghost")

    with pytest.raises(InvalidNewsletterFileError, match="missing block ghost"):
        parse_newsletter_json(json.dumps(data))


@pytest.mark.asyncio
async def test_import_json_reads_exported_file(
    tmp_path: Path, storage: NewsletterStorage, newsletter: Newsletter
) -> None:
    path = tmp_path / "issue.json"
    path.write_text(dump_newsletter(newsletter), encoding="utf-8")

    assert await storage.import_json(path) == newsletter


@pytest.mark.asyncio
async def test_import_json_rejects_invalid_file_without_touching_session(
    tmp_path: Path, storage: NewsletterStorage, newsletter: Newsletter
) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not valid json", encoding="utf-8")
    before = newsletter.model_copy(deep=True)

    with pytest.raises(InvalidNewsletterFileError):
        await storage.import_json(path)

    assert newsletter == before


@pytest.mark.asyncio
async def test_import_json_accepts_uploaded_contents(
    storage: NewsletterStorage, newsletter: Newsletter
) -> None:
    content = dump_newsletter(newsletter).encode("utf-8")

    assert await storage.import_json(content, name="issue.json") == newsletter


@pytest.mark.asyncio
async def test_import_json_rejects_invalid_upload(storage: NewsletterStorage) -> None:
    with pytest.raises(InvalidNewsletterFileError, match="Invalid newsletter JSON file"):
        await storage.import_json(b"{not valid json", name="broken.json")


@pytest.mark.asyncio
async def test_import_json_reports_unreadable_file(tmp_path: Path, storage: NewsletterStorage) -> None:
    with pytest.raises(InvalidNewsletterFileError, match="Failed to read file"):
        await storage.import_json(tmp_path / "missing.json")


# --- Autosave ---


def test_autosave_then_load_returns_document(storage: NewsletterStorage, newsletter: Newsletter) -> None:
    with patch("backend.services.persistence.utc_now", return_value=SAVE_TIME):
        assert storage.autosave(newsletter) is True

    loaded = storage.load_autosave()
    assert loaded is not None
    assert loaded.meta.updated_at == SAVE_TIME
    assert loaded.rows == newsletter.rows
    assert loaded.blocks == newsletter.blocks


def test_autosave_does_not_modify_live_document(
    storage: NewsletterStorage, newsletter: Newsletter
) -> None:
    before = newsletter.meta.updated_at

    with patch("backend.services.persistence.utc_now", return_value=SAVE_TIME):
        storage.autosave(newsletter)

    assert newsletter.meta.updated_at == before


def test_load_autosave_returns_none_when_absent(storage: NewsletterStorage) -> None:
    assert storage.load_autosave() is None


def test_load_autosave_returns_none_for_corrupt_data(
    store: InMemoryKeyValueStore, storage: NewsletterStorage
) -> None:
    store.set(storage.autosave_key, "{definitely not json")

    assert storage.load_autosave() is None


def test_autosave_tracks_recent_ids_newest_first(
    storage: NewsletterStorage, newsletter: Newsletter
) -> None:
    docs = [
        newsletter.model_copy(update={"meta": newsletter.meta.model_copy(update={"id": f"doc-{i}"})})
        for i in range(7)
    ]
    for doc in docs:
        storage.autosave(doc)
    storage.autosave(docs[3])

    assert storage.recent_ids() == ["doc-3", "doc-6", "doc-5", "doc-4", "doc-2"]


def test_recent_ids_treat_corrupt_data_as_empty(
    store: InMemoryKeyValueStore, storage: NewsletterStorage
) -> None:
    store.set(storage.recent_key, '{"not": "a list"}')

    assert storage.recent_ids() == []


class _RecentListFailingStore(InMemoryKeyValueStore):
    def set(self, key: str, value: str) -> None:
        if key.endswith(":recent"):
            raise StorageQuotaExceededError("recent list is full")
        super().set(key, value)


def test_autosave_succeeds_when_only_recent_list_write_fails(newsletter: Newsletter) -> None:
    store = _RecentListFailingStore()
    storage = NewsletterStorage(store, key_prefix="p")

    assert storage.autosave(newsletter) is True
    assert store.get("p:autosave") is not None
    assert storage.recent_ids() == []


def test_autosave_quota_failure_returns_false(newsletter: Newsletter) -> None:
    storage = NewsletterStorage(InMemoryKeyValueStore(max_bytes=100))

    assert storage.autosave(newsletter) is False
    assert storage.load_autosave() is None


# --- Versions ---


def test_save_version_increments_snapshot_version_only(
    storage: NewsletterStorage, newsletter: Newsletter
) -> None:
    version = storage.save_version(newsletter, "Draft 1")

    assert version.label == "Draft 1"
    assert version.newsletter.meta.version == newsletter.meta.version + 1
    assert newsletter.meta.version == 1
    assert storage.versions[0] == version


def test_save_version_generates_label(storage: NewsletterStorage, newsletter: Newsletter) -> None:
    with patch("backend.services.persistence.utc_now", return_value=SAVE_TIME):
        version = storage.save_version(newsletter, "   ")

    assert version.label == "Version 1 — 2026-10-19 09:30:00"
    assert version.saved_at == SAVE_TIME


def test_snapshot_is_independent_of_later_edits(
    storage: NewsletterStorage, newsletter: Newsletter
) -> None:
    version = storage.save_version(newsletter, "Before")
    edited = newsletter.model_copy(update={"rows": newsletter.rows[1:]})

    assert version.newsletter.rows == newsletter.rows
    assert version.newsletter.rows != edited.rows


def test_version_list_is_capped_newest_first(storage: NewsletterStorage, newsletter: Newsletter) -> None:
    for i in range(25):
        storage.save_version(newsletter, f"v{i}")

    labels = [version.label for version in storage.versions]
    assert len(labels) == 20
    assert labels[0] == "v24"
    assert labels[-1] == "v5"


def test_versions_survive_reload(
    store: InMemoryKeyValueStore, storage: NewsletterStorage, newsletter: Newsletter
) -> None:
    saved = storage.save_version(newsletter, "Keep me")

    reloaded = NewsletterStorage(store, key_prefix="test-pulse")

    assert reloaded.versions == [saved]


def test_corrupt_version_list_loads_as_empty(store: InMemoryKeyValueStore) -> None:
    store.set("test-pulse:versions", "[[[")

    assert NewsletterStorage(store, key_prefix="test-pulse").versions == []


def test_unreadable_version_entries_are_skipped(
    store: InMemoryKeyValueStore, storage: NewsletterStorage, newsletter: Newsletter
) -> None:
    saved = storage.save_version(newsletter, "Good")
    entries = json.loads(store.get(storage.versions_key) or "[]")
    store.set(storage.versions_key, json.dumps([{"id": "bad"}, *entries]))

    assert NewsletterStorage(store, key_prefix="test-pulse").versions == [saved]


def test_delete_version(storage: NewsletterStorage, newsletter: Newsletter) -> None:
    keep = storage.save_version(newsletter, "Keep")
    drop = storage.save_version(newsletter, "Drop")

    assert storage.delete_version(drop.id) is True
    assert storage.versions == [keep]
    assert storage.delete_version("missing") is False
    assert storage.versions == [keep]


def test_version_persist_failure_keeps_in_memory_list(newsletter: Newsletter) -> None:
    storage = NewsletterStorage(InMemoryKeyValueStore(max_bytes=100))

    version = storage.save_version(newsletter, "Too big")

    assert storage.versions == [version]
    assert storage.get_version(version.id) == version


def test_get_version_returns_none_for_unknown_id(storage: NewsletterStorage) -> None:
    assert storage.get_version("missing") is None

