"""APScheduler integration for periodic autosave.

Registers one interval job that writes the open editor session to the
autosave slot. Start and stop functions are designed to be called from
the FastAPI lifespan.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from backend.config import get_settings
from backend.services.session import EditorSession

logger = logging.getLogger(__name__)

_scheduler: AsyncIOScheduler | None = None


def start_scheduler(session: EditorSession) -> AsyncIOScheduler:
    """Start the APScheduler with the autosave job.

    Args:
        session: Editor session whose document is autosaved.

    Returns:
        The running scheduler instance.
    """
    global _scheduler  # noqa: PLW0603

    settings = get_settings()
    _scheduler = AsyncIOScheduler(timezone="UTC")

    _scheduler.add_job(
        _run_autosave_job,
        trigger="interval",
        seconds=settings.autosave.interval_seconds,
        args=[session],
        id="autosave",
        name="Editor autosave",
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    logger.info("Scheduled autosave every %d seconds", settings.autosave.interval_seconds)

    _scheduler.start()
    logger.info("Scheduler started")
    return _scheduler


def stop_scheduler() -> None:
    """Stop the running scheduler gracefully."""
    global _scheduler  # noqa: PLW0603

    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
        _scheduler = None


async def _run_autosave_job(session: EditorSession) -> None:
    """Autosave the session's document if the editor is open."""
    if not session.is_active:
        logger.debug("Editor not active, skipping autosave")
        return

    if session.autosave():
        logger.debug("Scheduled autosave complete for %s", session.newsletter.meta.id)
    else:
        logger.warning("Scheduled autosave failed for %s", session.newsletter.meta.id)
