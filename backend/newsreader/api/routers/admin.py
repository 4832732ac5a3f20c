# newsreader/api/routers/admin.py
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse

from newsreader.api.deps import require_admin
from newsreader.api.templating import render
from newsreader.core.errors import AppError, NotFoundError
from newsreader.core.sessions import SessionData, set_flash, take_flash
from newsreader.schemas.admin import AdminUserIn
from newsreader.services import directory

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger("uvicorn.error")

USERS_URL = "/admin/users"


def _back_to_list() -> RedirectResponse:
    return RedirectResponse(USERS_URL, status_code=302)


def _form_page(request: Request, session: SessionData, values: dict, *,
               person_id: int | None = None, error: str | None = None, status_code: int = 200):
    """Create form when person_id is None, edit form otherwise."""
    action = USERS_URL if person_id is None else f"{USERS_URL}/{person_id}"
    return render(
        request,
        "admin/user_form.html",
        {"values": values, "error": error, "action": action, "person_id": person_id},
        session=session,
        status_code=status_code,
    )


# ==============================================================================
# User directory
#     Prefix: /admin/users
#     {person_id} is the profile id; the account is reached through it
# ==============================================================================
@router.get("/users")
async def list_users(
    request: Request,
    search: str | None = Query(default=None, description="Username, name or location substring, or account id"),
    session: SessionData = Depends(require_admin),
):
    """List accounts with their profiles, optionally filtered by `search`."""
    try:
        people = await directory.search_users(search)
    except Exception:
        logger.exception("[admin] user search error")
        return render(
            request,
            "admin/users.html",
            {"people": [], "search": search or "", "flash": {"kind": "error", "message": AppError.message}},
            session=session,
            status_code=500,
        )
    return render(
        request,
        "admin/users.html",
        {"people": people, "search": search or "", "flash": take_flash(session)},
        session=session,
    )


@router.get("/users/new")
async def new_user_form(request: Request, session: SessionData = Depends(require_admin)):
    return _form_page(request, session, AdminUserIn().form_values())


@router.post("/users")
async def create_user(
    request: Request,
    form: Annotated[AdminUserIn, Form()],
    session: SessionData = Depends(require_admin),
):
    """
    Create an account and profile.

    Responses:
        302 -> /admin/users with a success flash
        400/409/500 re-rendered form with the submitted values
    """
    try:
        user = await directory.create_user(form)
    except AppError as exc:
        return _form_page(request, session, form.form_values(), error=exc.message,
                          status_code=exc.status_code)
    except Exception:
        logger.exception("[admin] create user error")
        return _form_page(request, session, form.form_values(), error=AppError.message, status_code=500)

    set_flash(session, "success", f"User {user.username} created.")
    return _back_to_list()


@router.get("/users/{person_id}/edit")
async def edit_user_form(request: Request, person_id: int, session: SessionData = Depends(require_admin)):
    """Edit form for one profile; unknown ids go back to the list."""
    try:
        person = await directory.get_user(person_id)
    except NotFoundError as exc:
        set_flash(session, "error", exc.message)
        return _back_to_list()

    values = person.profile_values()
    values.update(username=person.user.username, is_admin=person.user.is_admin)
    return _form_page(request, session, values, person_id=person_id)


@router.post("/users/{person_id}")
async def update_user(
    request: Request,
    person_id: int,
    form: Annotated[AdminUserIn, Form()],
    session: SessionData = Depends(require_admin),
):
    """
    Update an account and profile.

    Responses:
        302 -> /admin/users with a flash (success, or error when the id is unknown)
        400/409/500 re-rendered edit form with the submitted values
    """
    try:
        person = await directory.update_user(person_id, form, acting_user_id=session.user_id)
    except NotFoundError as exc:
        set_flash(session, "error", exc.message)
        return _back_to_list()
    except AppError as exc:
        return _form_page(request, session, form.form_values(), person_id=person_id,
                          error=exc.message, status_code=exc.status_code)
    except Exception:
        logger.exception("[admin] update user error")
        return _form_page(request, session, form.form_values(), person_id=person_id,
                          error=AppError.message, status_code=500)

    if person.user_id == session.user_id:
        session.username = person.user.username
    set_flash(session, "success", f"User {person.user.username} updated.")
    return _back_to_list()


@router.post("/users/{person_id}/delete")
async def delete_user(person_id: int, session: SessionData = Depends(require_admin)):
    """Delete an account, its profile and saved articles; unknown ids are a no-op."""
    try:
        await directory.delete_user(person_id, acting_user_id=session.user_id)
    except AppError as exc:
        set_flash(session, "error", exc.message)
    except Exception:
        logger.exception("[admin] delete user error")
        set_flash(session, "error", AppError.message)
    else:
        set_flash(session, "success", "User deleted.")
    return _back_to_list()
