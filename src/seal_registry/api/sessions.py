"""Session routes: log in, inspect, and log out of login sessions."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status

from seal_registry.api.deps import CredentialsDep, CurrentSession, SessionStoreDep
from seal_registry.config import settings
from seal_registry.schemas import ErrorRead, LoginPayload, SessionRead

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
    responses={400: {"model": ErrorRead}},
)


@router.post("")
async def login(
    payload: LoginPayload,
    response: Response,
    sessions: SessionStoreDep,
    credentials: CredentialsDep,
) -> SessionRead:
    """Open a session and hand its token back as the session cookie."""
    if not credentials.verify(payload.username, payload.password):
        logger.warning("Rejected login for %s", payload.username)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid login")

    session = sessions.create(payload.username)
    response.set_cookie(settings.session_cookie_name, session.token, httponly=True)
    response.headers["Location"] = f"/sessions/{session.token}"
    return SessionRead.model_validate(session)


@router.get("/{token}")
async def get_session_info(token: str, current: CurrentSession) -> SessionRead:
    # Callers can only read their own session.
    if current.token != token:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found.")
    return SessionRead.model_validate(current)


@router.delete("/{token}")
async def logout(token: str, sessions: SessionStoreDep, current: CurrentSession) -> str:
    if not sessions.invalidate(token, current.username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Logout failure.")
    return "Logout successful."
