"""Login session store.

Sessions live in memory, keyed by an opaque token. The clock is injected so
expiry can be tested without sleeping. Credentials are checked by a
separate ``CredentialVerifier`` before a session is created.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Session:
    token: str
    username: str
    created_at: datetime
    last_seen: datetime


class SessionStore:
    """Create, look up, and invalidate login sessions.

    A session expires once it has been idle for longer than ``ttl``; every
    successful lookup refreshes it.
    """

    def __init__(
        self,
        *,
        ttl: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, Session] = {}

    def create(self, username: str) -> Session:
        now = self._clock()
        session = Session(
            token=secrets.token_urlsafe(32),
            username=username,
            created_at=now,
            last_seen=now,
        )
        self._sessions[session.token] = session
        logger.info("Opened session for %s", username)
        return session

    def lookup(self, token: str) -> Session | None:
        """Return the live session for ``token``, dropping it if expired."""
        session = self._sessions.get(token)
        if session is None:
            return None

        now = self._clock()
        if now - session.last_seen > self._ttl:
            del self._sessions[token]
            logger.info("Session for %s expired", session.username)
            return None

        session.last_seen = now
        return session

    def invalidate(self, token: str, username: str) -> bool:
        """Log out ``token``. Only the session's own user may do so."""
        session = self.lookup(token)
        if session is None or session.username != username:
            return False
        del self._sessions[token]
        logger.info("Closed session for %s", username)
        return True

    def __len__(self) -> int:
        return len(self._sessions)


class CredentialVerifier(Protocol):
    """Decides whether a username and password may open a session."""

    def verify(self, username: str, password: str) -> bool: ...


class StaticCredentials:
    """Checks logins against a fixed username to password mapping."""

    def __init__(self, users: Mapping[str, str]) -> None:
        self._users = dict(users)

    def verify(self, username: str, password: str) -> bool:
        expected = self._users.get(username)
        if expected is None:
            return False
        return secrets.compare_digest(expected.encode(), password.encode())
