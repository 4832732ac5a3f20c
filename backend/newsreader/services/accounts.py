# newsreader/services/accounts.py
"""
Account service: registration, credential checks and self-service edits.
Multi-row writes run in one transaction; the unique index on
users.username_key is the final word on duplicate usernames.
"""
import logging
from typing import Mapping, Optional

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from newsreader.config import settings
from newsreader.core.errors import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from newsreader.core.security import hash_password_async, verify_password_async
from newsreader.models.person import PROFILE_FIELDS, Person
from newsreader.models.user import User, normalize_username
from newsreader.schemas.auth import PasswordChangeIn, ProfileIn, SignupIn

logger = logging.getLogger("uvicorn.error")

# Verified against when the username is unknown, so both failure paths hash once
_DUMMY_HASH: Optional[str] = None


def clean(value: Optional[str]) -> Optional[str]:
    """Strip a form value; empty strings become None."""
    value = (value or "").strip()
    return value or None


def normalize_profile(profile: ProfileIn | Mapping) -> dict:
    data = profile.model_dump() if isinstance(profile, ProfileIn) else dict(profile)
    return {name: clean(data.get(name)) for name in PROFILE_FIELDS}


def check_new_password(password: str, confirm_password: str) -> None:
    """
    Validate a new password against its confirmation and the minimum length.

    Raises:
        ValidationError: On mismatch or when shorter than PASSWORD_MIN_LENGTH
    """
    if password != confirm_password:
        raise ValidationError("Passwords do not match.")
    if len(password) < settings.password_min_length:
        raise ValidationError(
            f"Password must be at least {settings.password_min_length} characters."
        )


async def create_account(
    username: str,
    password: str,
    profile: ProfileIn | Mapping,
    is_admin: bool = False,
) -> User:
    """
    Insert an account and its profile in one transaction.

    The existence check inside the transaction gives a friendly error on the
    common path; a concurrent insert that slips past it still trips the
    unique index and surfaces as the same DuplicateUsernameError.

    Raises:
        DuplicateUsernameError: If the username is taken (case-insensitive)
    """
    password_hash = await hash_password_async(password)
    try:
        async with in_transaction() as conn:
            taken = await User.filter(username_key=normalize_username(username)).using_db(conn).exists()
            if taken:
                raise DuplicateUsernameError()
            user = await User.create(
                username=username,
                password_hash=password_hash,
                is_admin=is_admin,
                using_db=conn,
            )
            await Person.create(user=user, using_db=conn, **normalize_profile(profile))
    except IntegrityError as exc:
        raise DuplicateUsernameError() from exc
    return user


async def register(form: SignupIn) -> User:
    """
    Sign up a new account.

    Raises:
        ValidationError: Missing username/password, mismatch, too short
        DuplicateUsernameError: Username already taken
    """
    username = (form.username or "").strip()
    if not username or not form.password:
        raise ValidationError("Username and password are required.")
    check_new_password(form.password, form.confirm_password)
    user = await create_account(username, form.password, form)
    logger.info("[accounts] registered user id=%s username=%s", user.id, user.username)
    return user


async def authenticate(username: str, password: str) -> User:
    """
    Check credentials and return the matching account.

    Raises:
        ValidationError: If either field is empty
        InvalidCredentialsError: Unknown username or wrong password (same error for both)
    """
    global _DUMMY_HASH
    if not username or not password:
        raise ValidationError("Please provide both username and password.")

    user = await User.get_or_none(username_key=normalize_username(username))
    if user is None:
        if _DUMMY_HASH is None:
            _DUMMY_HASH = await hash_password_async("not-a-real-password")
        await verify_password_async(password, _DUMMY_HASH)
        raise InvalidCredentialsError()
    if not await verify_password_async(password, user.password_hash):
        raise InvalidCredentialsError()
    return user


async def get_profile_for_user(user_id: int) -> Person:
    person = await Person.filter(user_id=user_id).select_related("user").first()
    if person is None:
        raise NotFoundError("Profile not found.")
    return person


async def update_own_profile(user_id: int, profile: ProfileIn) -> Person:
    """Update the caller's profile fields (empty values are stored as NULL)."""
    person = await get_profile_for_user(user_id)
    for name, value in normalize_profile(profile).items():
        setattr(person, name, value)
    await person.save()
    return person


async def change_password(user_id: int, form: PasswordChangeIn) -> None:
    """
    Replace the caller's password after checking the current one.

    Raises:
        InvalidCredentialsError: Current password is wrong
        ValidationError: New password mismatched or too short
        NotFoundError: Account no longer exists
    """
    user = await User.get_or_none(id=user_id)
    if user is None:
        raise NotFoundError("Account not found.")
    if not await verify_password_async(form.current_password, user.password_hash):
        raise InvalidCredentialsError("Current password is incorrect.")
    check_new_password(form.new_password, form.confirm_password)
    user.password_hash = await hash_password_async(form.new_password)
    await user.save(update_fields=["password_hash"])
    logger.info("[accounts] password changed for user id=%s", user.id)
