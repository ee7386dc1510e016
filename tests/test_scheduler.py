"""Autosave scheduler tests."""

from unittest.mock import MagicMock, patch

import pytest

from backend import scheduler
from backend.scheduler import _run_autosave_job, start_scheduler, stop_scheduler
from backend.services.session import EditorSession


@patch("backend.scheduler.get_settings")
@patch("backend.scheduler.AsyncIOScheduler")
def test_start_scheduler_registers_interval_autosave_job(
    mock_scheduler_cls: MagicMock,
    mock_get_settings: MagicMock,
    editor_session: EditorSession,
) -> None:
    """Verify the autosave job fires on the configured interval."""
    instance = MagicMock()
    mock_scheduler_cls.return_value = instance
    mock_get_settings.return_value.autosave.interval_seconds = 30

    start_scheduler(editor_session)

    instance.add_job.assert_called_once()
    call = instance.add_job.call_args
    assert call.kwargs["trigger"] == "interval"
    assert call.kwargs["seconds"] == 30
    assert call.kwargs["id"] == "autosave"
    assert call.kwargs["args"] == [editor_session]
    instance.start.assert_called_once()

    stop_scheduler()
    instance.shutdown.assert_called_once_with(wait=False)
    assert scheduler._scheduler is None


def test_stop_scheduler_without_start_is_safe() -> None:
    stop_scheduler()
    assert scheduler._scheduler is None


@pytest.mark.asyncio
async def test_autosave_job_saves_active_session(editor_session: EditorSession) -> None:
    await _run_autosave_job(editor_session)

    assert editor_session.last_saved_at is not None
    assert editor_session.storage.load_autosave() is not None


@pytest.mark.asyncio
async def test_autosave_job_skips_inactive_session(editor_session: EditorSession) -> None:
    editor_session.close()

    await _run_autosave_job(editor_session)

    assert editor_session.last_saved_at is None
    assert editor_session.storage.load_autosave() is None
