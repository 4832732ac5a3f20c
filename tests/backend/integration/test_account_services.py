"""
Service-level tests for accounts and the admin directory, run against the
in-memory database without going through HTTP.
"""
import asyncio

import pytest

from newsreader.core.errors import (
    ConflictError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from newsreader.models.person import Person
from newsreader.models.user import User
from newsreader.schemas.admin import AdminUserIn
from newsreader.schemas.auth import SignupIn
from newsreader.services import accounts, directory, saved_articles


pytestmark = pytest.mark.asyncio


async def test_register_then_authenticate(db):
    user = await accounts.register(SignupIn(username=" Nora ", password="password1", confirm_password="password1"))
    assert user.username == "Nora"
    assert user.username_key == "nora"
    assert user.password_hash != "password1"

    assert (await accounts.authenticate("NORA", "password1")).id == user.id
    with pytest.raises(InvalidCredentialsError):
        await accounts.authenticate("nora", "password2")
    with pytest.raises(InvalidCredentialsError):
        await accounts.authenticate("nobody", "password1")


async def test_concurrent_registrations_with_same_username(db):
    form = SignupIn(username="omar", password="password1", confirm_password="password1")
    results = await asyncio.gather(
        accounts.register(form),
        accounts.register(form),
        return_exceptions=True,
    )
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], DuplicateUsernameError)
    assert await User.filter(username_key="omar").count() == 1
    assert await Person.all().count() == 1


async def test_failed_profile_insert_rolls_back_account(db, monkeypatch):
    async def broken_create(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(Person, "create", broken_create)
    with pytest.raises(RuntimeError):
        await accounts.register(SignupIn(username="pat", password="password1", confirm_password="password1"))
    assert await User.filter(username_key="pat").count() == 0


async def test_password_length_uses_configured_minimum(db, monkeypatch):
    monkeypatch.setattr(accounts.settings, "password_min_length", 6)
    user = await accounts.register(SignupIn(username="quinn", password="sixsix", confirm_password="sixsix"))
    assert user.id is not None


async def test_directory_search_order_and_filters(db):
    for name in ("rita", "sam", "tom"):
        await accounts.create_account(name, "password1", {"city": "Springfield" if name != "sam" else "Shelbyville"})

    everyone = await directory.search_users(None)
    assert [p.user.username for p in everyone] == ["rita", "sam", "tom"]
    assert [p.id for p in everyone] == sorted(p.id for p in everyone)

    springfield = await directory.search_users("SPRINGFIELD")
    assert [p.user.username for p in springfield] == ["rita", "tom"]

    assert await directory.search_users("zzz-nothing") == []


async def test_directory_update_keeps_password_when_blank(db):
    user = await accounts.create_account("uma", "password1", {})
    person = await Person.get(user_id=user.id)
    old_hash = user.password_hash

    await directory.update_user(person.id, AdminUserIn(username="uma", city="Quito"))
    await user.refresh_from_db()
    assert user.password_hash == old_hash
    assert (await accounts.authenticate("uma", "password1")).id == user.id


async def test_directory_cannot_demote_last_admin(db):
    admin = await accounts.create_account("victor", "password1", {}, is_admin=True)
    person = await Person.get(user_id=admin.id)
    with pytest.raises(ValidationError):
        await directory.update_user(person.id, AdminUserIn(username="victor", is_admin=False))
    await admin.refresh_from_db()
    assert admin.is_admin is True


async def test_directory_update_and_get_unknown_profile(db):
    with pytest.raises(NotFoundError):
        await directory.update_user(424242, AdminUserIn(username="nobody"))
    with pytest.raises(NotFoundError):
        await directory.get_user(424242)
    assert await directory.delete_user(424242) is False

    huge = 10**20
    with pytest.raises(NotFoundError):
        await directory.get_user(huge)
    with pytest.raises(NotFoundError):
        await directory.update_user(huge, AdminUserIn(username="nobody"))
    assert await directory.delete_user(huge) is False
    assert await directory.search_users(str(huge)) == []


async def test_directory_delete_removes_both_rows(db):
    user = await accounts.create_account("wendy", "password1", {})
    person = await Person.get(user_id=user.id)
    assert await directory.delete_user(person.id) is True
    assert await User.get_or_none(id=user.id) is None
    assert await Person.get_or_none(id=person.id) is None


async def test_saved_articles_service_rules(db):
    user = await accounts.create_account("xena", "password1", {})

    with pytest.raises(UnauthenticatedError):
        await saved_articles.save_article(None, "t", "https://example.com")
    with pytest.raises(UnauthenticatedError):
        await saved_articles.unsave_article(None, "https://example.com")

    with pytest.raises(ValidationError):
        await saved_articles.save_article(user.id, "Title", "javascript:alert(1)")

    await saved_articles.save_article(user.id, "Title", "https://example.com/1")
    with pytest.raises(ConflictError):
        await saved_articles.save_article(user.id, "Other title", "https://example.com/1")

    listed = await saved_articles.list_saved(user.id)
    assert [a.url for a in listed] == ["https://example.com/1"]

    await saved_articles.unsave_article(user.id, "https://example.com/1")
    with pytest.raises(NotFoundError):
        await saved_articles.unsave_article(user.id, "https://example.com/1")


async def test_save_for_deleted_account_is_unauthenticated(db):
    user = await accounts.create_account("yuri", "password1", {})
    await User.filter(id=user.id).delete()
    with pytest.raises(UnauthenticatedError):
        await saved_articles.save_article(user.id, "Title", "https://example.com/1")


async def test_bootstrap_creates_admin_once(db, monkeypatch):
    from newsreader.core import bootstrap

    monkeypatch.setattr(bootstrap.settings, "admin_password", None)
    assert await bootstrap.ensure_default_admin() is None
    assert await User.filter(is_admin=True).count() == 0

    # A regular user already holds the default name
    await accounts.create_account("Admin", "password1", {})
    monkeypatch.setattr(bootstrap.settings, "admin_username", "admin")
    monkeypatch.setattr(bootstrap.settings, "admin_password", "bootstrap-pass")

    created = await bootstrap.ensure_default_admin()
    assert created.username == "admin2"
    assert created.is_admin is True
    assert await Person.filter(user_id=created.id).count() == 1

    assert await bootstrap.ensure_default_admin() is None
    assert await User.filter(is_admin=True).count() == 1
