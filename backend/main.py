"""Newsletter builder FastAPI application entrypoint."""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import get_settings
from backend.routers import blocks, exports, newsletter, rows, session, storage
from backend.scheduler import start_scheduler, stop_scheduler
from backend.services.persistence import NewsletterStorage
from backend.services.session import EditorSession
from backend.services.storage import create_key_value_store

_TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATE_FORMAT = "%H:%M:%S"


class _JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "asctime": self.formatTime(record, self.datefmt),
            "levelname": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _configure_logging() -> None:
    """Configure root logger based on ENV setting (dev=DEBUG, prod=INFO).

    LOG_FORMAT=json switches the handler to one JSON object per line.
    """
    settings = get_settings()
    level = logging.DEBUG if settings.env != "prod" else logging.INFO
    logging.basicConfig(level=level, format=_TEXT_FORMAT, datefmt=_DATE_FORMAT, force=True)

    if settings.log_format == "json":
        formatter = _JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z")
        for handler in logging.getLogger().handlers:
            handler.setFormatter(formatter)


_configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup/shutdown lifecycle."""
    settings = get_settings()

    store = create_key_value_store(settings)
    editor_session = EditorSession(NewsletterStorage.from_settings(store, settings))
    app.state.editor_session = editor_session
    logger.info("Editor storage ready (backend=%s)", settings.storage.backend)

    scheduler_started = False
    if settings.enable_autosave_scheduler:
        start_scheduler(editor_session)
        scheduler_started = True
    else:
        logger.info("Autosave scheduler disabled by configuration")

    try:
        yield
    finally:
        if scheduler_started:
            stop_scheduler()
        if editor_session.is_active:
            editor_session.autosave()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title="Neurology AI Pulse Builder",
        description="Document model and persistence for a block-based newsletter editor",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(newsletter.router)
    app.include_router(blocks.router)
    app.include_router(rows.router)
    app.include_router(session.router)
    app.include_router(storage.router)
    app.include_router(exports.router)

    return app


app = create_app()


@app.get("/api/health")
async def health_check() -> dict[str, str]:
    """Return application health status."""
    return {"status": "ok"}
