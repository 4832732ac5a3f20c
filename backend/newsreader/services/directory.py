# newsreader/services/directory.py
"""
Admin directory: search, create, edit, update and delete accounts together
with their profiles. Every multi-row write is a single transaction.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q
from tortoise.transactions import in_transaction

from newsreader.core.errors import DuplicateUsernameError, NotFoundError, ValidationError
from newsreader.core.security import hash_password_async
from newsreader.models.person import Person
from newsreader.models.saved_article import SavedArticle
from newsreader.models.user import User, normalize_username
from newsreader.schemas.admin import AdminUserIn
from newsreader.services.accounts import check_new_password, create_account, normalize_profile

logger = logging.getLogger("uvicorn.error")

# Columns matched (case-insensitive substring) by the admin search box
SEARCH_FIELDS = ("user__username", "first_name", "last_name", "city", "state", "country")


# Integer primary keys are 32-bit signed; anything outside cannot match a row
MAX_ID = 2**31 - 1


def _valid_id(value: Optional[int]) -> bool:
    return value is not None and 0 < value <= MAX_ID


def _parse_int(term: str) -> Optional[int]:
    try:
        value = int(term)
    except ValueError:
        return None
    return value if _valid_id(value) else None


async def search_users(term: Optional[str] = None) -> List[Person]:
    """
    List profiles joined with their accounts, ordered by profile id.

    An empty term lists everyone. Otherwise a row matches when any of
    SEARCH_FIELDS contains the term (case-insensitive), or when the term is
    an integer equal to the account id.
    """
    qs = Person.all().select_related("user").order_by("id")
    term = (term or "").strip()
    if term:
        condition = Q(**{f"{SEARCH_FIELDS[0]}__icontains": term})
        for name in SEARCH_FIELDS[1:]:
            condition |= Q(**{f"{name}__icontains": term})
        account_id = _parse_int(term)
        if account_id is not None:
            condition |= Q(user_id=account_id)
        qs = qs.filter(condition)
    return await qs


async def get_user(person_id: int) -> Person:
    """
    Load a profile and its account for the edit form.

    Raises:
        NotFoundError: If the profile id does not resolve
    """
    if not _valid_id(person_id):
        raise NotFoundError("User not found.")
    person = await Person.filter(id=person_id).select_related("user").first()
    if person is None:
        raise NotFoundError("User not found.")
    return person


async def create_user(form: AdminUserIn) -> User:
    """
    Create an account and profile from the admin form.

    Same rules as public sign-up, plus the admin flag.

    Raises:
        ValidationError, DuplicateUsernameError
    """
    username = (form.username or "").strip()
    if not username or not form.password:
        raise ValidationError("Username and password are required.")
    check_new_password(form.password, form.confirm_password)
    user = await create_account(username, form.password, form, is_admin=form.is_admin)
    logger.info("[admin] created user id=%s username=%s admin=%s", user.id, user.username, user.is_admin)
    return user


async def update_user(person_id: int, form: AdminUserIn, acting_user_id: Optional[int] = None) -> Person:
    """
    Apply the admin edit form to an account and its profile.

    Rules:
    - username is required; it may keep its current value, but must not
      collide with a different account
    - the password is only rehashed when a new one is supplied
    - an admin cannot remove their own admin flag, and the last admin
      cannot be demoted

    Raises:
        ValidationError, NotFoundError, DuplicateUsernameError
    """
    username = (form.username or "").strip()
    if not username:
        raise ValidationError("Username is required.")
    if form.password or form.confirm_password:
        check_new_password(form.password, form.confirm_password)
    if not _valid_id(person_id):
        raise NotFoundError("User not found.")
    new_hash = await hash_password_async(form.password) if form.password else None

    try:
        async with in_transaction() as conn:
            person = await Person.filter(id=person_id).using_db(conn).first()
            if person is None:
                raise NotFoundError("User not found.")
            user = await User.filter(id=person.user_id).using_db(conn).first()
            if user is None:
                raise NotFoundError("User not found.")

            taken = await (
                User.filter(username_key=normalize_username(username))
                .exclude(id=user.id)
                .using_db(conn)
                .exists()
            )
            if taken:
                raise DuplicateUsernameError()

            if user.is_admin and not form.is_admin:
                if acting_user_id is not None and user.id == acting_user_id:
                    raise ValidationError("You cannot remove your own admin access.")
                admin_count = await User.filter(is_admin=True).using_db(conn).count()
                if admin_count <= 1:
                    raise ValidationError("Cannot demote the last admin.")

            user.username = username
            user.is_admin = form.is_admin
            if new_hash is not None:
                user.password_hash = new_hash
            await user.save(using_db=conn)

            for name, value in normalize_profile(form).items():
                setattr(person, name, value)
            await person.save(using_db=conn)
    except IntegrityError as exc:
        raise DuplicateUsernameError() from exc

    person.user = user
    logger.info("[admin] updated user id=%s username=%s", user.id, user.username)
    return person


async def delete_user(person_id: int, acting_user_id: Optional[int] = None) -> bool:
    """
    Delete a profile, its account and the account's saved articles.

    An unknown profile id is treated as already deleted.

    Returns:
        True if rows were deleted, False if there was nothing to delete

    Raises:
        ValidationError: If an admin tries to delete their own account
    """
    if not _valid_id(person_id):
        logger.info("[admin] delete of unknown profile id=%s ignored", person_id)
        return False
    async with in_transaction() as conn:
        person = await Person.filter(id=person_id).using_db(conn).first()
        if person is None:
            logger.info("[admin] delete of unknown profile id=%s ignored", person_id)
            return False
        user_id = person.user_id
        if acting_user_id is not None and user_id == acting_user_id:
            raise ValidationError("You cannot delete your own account.")
        await SavedArticle.filter(user_id=user_id).using_db(conn).delete()
        await person.delete(using_db=conn)
        await User.filter(id=user_id).using_db(conn).delete()
    logger.info("[admin] deleted user id=%s (profile id=%s)", user_id, person_id)
    return True
