# newsreader/core/sessions.py
"""
Server-side session store.
The client only holds a signed session id (see core.security); the state it
points to lives here, in process memory, and does not survive a restart.
"""
import datetime as dt
import secrets
from dataclasses import dataclass, field
from typing import Dict, Optional

from newsreader.config import settings


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass
class SessionData:
    """
    State bound to one session id.

    Fields:
    - user_id / username: the authenticated account
    - is_admin: cached admin flag; a cached True is trusted, a cached False
      is re-checked against the database by the admin guard
    - flash: one-shot {"kind": ..., "message": ...} payload, see take_flash()
    """
    sid: str
    expires_at: dt.datetime
    user_id: Optional[int] = None
    username: Optional[str] = None
    is_admin: bool = False
    flash: Optional[dict] = field(default=None)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


class SessionStore:
    """
    Simple in-memory session registry.

    Data structure:
    - _sessions: Dict[session_id, SessionData]

    Each request touches its own session id, and dict operations do not
    yield to the event loop, so no extra locking is needed. Expired entries
    are purged whenever a new session is created, so sessions abandoned
    without a logout do not accumulate.
    """
    def __init__(self, ttl_minutes: int):
        self.ttl = dt.timedelta(minutes=ttl_minutes)
        self._sessions: Dict[str, SessionData] = {}

    def create(self, user) -> SessionData:
        """
        Start a new session bound to an account.

        A fresh id is minted on every login, so a pre-login id can never be
        promoted to an authenticated one.
        """
        self.purge_expired()
        session = SessionData(
            sid=secrets.token_urlsafe(32),
            expires_at=_utc_now() + self.ttl,
            user_id=user.id,
            username=user.username,
            is_admin=bool(user.is_admin),
        )
        self._sessions[session.sid] = session
        return session

    def get(self, sid: Optional[str]) -> Optional[SessionData]:
        """Return the live session for sid, dropping it if it has expired."""
        if not sid:
            return None
        session = self._sessions.get(sid)
        if session is None:
            return None
        if session.expires_at <= _utc_now():
            self._sessions.pop(sid, None)
            return None
        return session

    def purge_expired(self) -> int:
        """Drop every expired session. Returns how many were removed."""
        now = _utc_now()
        expired = [sid for sid, s in self._sessions.items() if s.expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def destroy(self, sid: Optional[str]) -> None:
        """Forget a session. Unknown ids are ignored."""
        if sid:
            self._sessions.pop(sid, None)

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


def set_flash(session: SessionData, kind: str, message: str) -> None:
    """Store a message to show on the next rendered page ("success" or "error")."""
    session.flash = {"kind": kind, "message": message}


def take_flash(session: Optional[SessionData]) -> Optional[dict]:
    """Read the flash payload and clear it, so it is shown at most once."""
    if session is None:
        return None
    flash, session.flash = session.flash, None
    return flash


session_store = SessionStore(settings.session_ttl_minutes)
