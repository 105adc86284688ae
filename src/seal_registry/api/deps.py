"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from seal_registry.config import settings
from seal_registry.db import get_session
from seal_registry.sessions import CredentialVerifier, Session, SessionStore
from seal_registry.store.sql import SqlRegistryStore


async def get_store(session: Annotated[AsyncSession, Depends(get_session)]) -> SqlRegistryStore:
    return SqlRegistryStore(session)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_credential_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.credential_verifier


def get_current_session(
    request: Request,
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> Session:
    """Resolve the caller's login session from the session cookie."""
    token = request.cookies.get(settings.session_cookie_name)
    session = sessions.lookup(token) if token else None
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in.")
    return session


StoreDep = Annotated[SqlRegistryStore, Depends(get_store)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
CredentialsDep = Annotated[CredentialVerifier, Depends(get_credential_verifier)]
CurrentSession = Annotated[Session, Depends(get_current_session)]
