"""FastAPI dependencies shared by the editor routers."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from backend.services.session import EditorSession


async def get_editor_session(request: Request) -> EditorSession:
    """Return the editor session created during application startup.

    Raises:
        HTTPException: 503 if the application has not finished starting.
    """
    session: EditorSession | None = getattr(request.app.state, "editor_session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Editor session not initialised",
        )
    return session
