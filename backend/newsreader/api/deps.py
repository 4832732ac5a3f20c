# newsreader/api/deps.py
import logging

import jwt  # PyJWT
from fastapi import Depends, Request, Response

from newsreader.config import settings
from newsreader.core.errors import ForbiddenError, LoginRequired, UnauthenticatedError
from newsreader.core.security import create_session_token, decode_session_token
from newsreader.core.sessions import SessionData, session_store
from newsreader.models.user import User

logger = logging.getLogger("uvicorn.error")


async def get_session(request: Request) -> SessionData | None:
    """
    FastAPI dependency returning the caller's server-side session, if any.

    The session cookie holds a signed token wrapping the session id. A
    missing, tampered or expired token, or an id the store no longer knows,
    all read as "no session".
    """
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    try:
        sid = decode_session_token(token)
    except jwt.InvalidTokenError:
        return None
    return session_store.get(sid)


async def require_login(session: SessionData | None = Depends(get_session)) -> SessionData:
    """
    Dependency for page routes: pass iff the session is bound to an account.

    Raises:
        LoginRequired: Handled app-wide as a redirect to /login
    """
    if session is None or not session.is_authenticated:
        raise LoginRequired()
    return session


async def require_login_api(session: SessionData | None = Depends(get_session)) -> SessionData:
    """
    Dependency for JSON routes.

    Raises:
        UnauthenticatedError: Handled app-wide as 401 {"success": false, ...}
    """
    if session is None or not session.is_authenticated:
        raise UnauthenticatedError()
    return session


async def require_admin(session: SessionData = Depends(require_login)) -> SessionData:
    """
    Dependency for admin routes.

    A cached admin flag of True is trusted. A cached False is re-checked
    against the users table, so a promotion made after login takes effect
    on the next request; a confirmed promotion is cached in the session.

    Raises:
        LoginRequired: Not logged in, or the account has been deleted
        ForbiddenError: Logged in but not an admin (plain 403, no redirect)
    """
    if session.is_admin:
        return session

    user = await User.get_or_none(id=session.user_id)
    if user is None:
        session_store.destroy(session.sid)
        raise LoginRequired()
    if not user.is_admin:
        raise ForbiddenError()
    session.is_admin = True
    return session


def start_session(response: Response, user: User, previous: SessionData | None = None) -> SessionData:
    """
    Bind a fresh session to `user` and set the session cookie on `response`.
    Any previous session of this client is destroyed first.
    """
    if previous is not None:
        session_store.destroy(previous.sid)
    session = session_store.create(user)
    response.set_cookie(
        settings.session_cookie_name,
        create_session_token(session.sid),
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return session


def end_session(response: Response, session: SessionData | None) -> None:
    """Destroy the server-side session and clear the cookie. Safe to call twice."""
    if session is not None:
        session_store.destroy(session.sid)
    response.delete_cookie(settings.session_cookie_name)
