# newsreader/core/security.py
"""
Security module for authentication.
Handles password hashing and signing of the session cookie token.
"""
import datetime as dt
import jwt  # PyJWT
from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext

from newsreader.config import settings

# Password hashing context
# Argon2 is a modern, salted, deliberately slow password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

# Session token configuration
SESSION_SECRET = settings.session_secret  # Key signing the session cookie (use strong secret in production)
SESSION_TTL_MINUTES = settings.session_ttl_minutes  # Token and server-side session lifetime
SESSION_ALG = "HS256"  # Token signing algorithm (HMAC SHA-256)

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database

    Returns:
        True if password matches, False otherwise (including unreadable hashes)
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False

async def hash_password_async(plain: str) -> str:
    """hash_password on a worker thread; argon2 would otherwise block the event loop."""
    return await run_in_threadpool(hash_password, plain)

async def verify_password_async(plain: str, hashed: str) -> bool:
    """verify_password on a worker thread."""
    return await run_in_threadpool(verify_password, plain, hashed)

def create_session_token(sid: str) -> str:
    """
    Sign an opaque session id for the session cookie.

    The token only carries the id; everything about the user lives in the
    server-side session store, so revoking a session is a store delete.

    Args:
        sid: Session identifier from the session store

    Returns:
        Encoded token string

    Token payload includes:
        - sid: Session identifier
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sid": sid,
        "iat": now,
        "exp": now + dt.timedelta(minutes=SESSION_TTL_MINUTES),
    }
    return jwt.encode(payload, SESSION_SECRET, algorithm=SESSION_ALG)

def decode_session_token(token: str) -> str:
    """
    Validate a session cookie token and return its session id.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid, tampered with, or has no sid
    """
    payload = jwt.decode(token, SESSION_SECRET, algorithms=[SESSION_ALG])
    sid = payload.get("sid")
    if not sid:
        raise jwt.InvalidTokenError("session token without sid")
    return sid
