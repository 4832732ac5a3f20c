# newsreader/api/routers/pages.py
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from newsreader.api.deps import get_session, require_login
from newsreader.api.templating import render
from newsreader.core.errors import AppError, NotFoundError
from newsreader.core.sessions import SessionData, set_flash, take_flash
from newsreader.schemas.auth import PasswordChangeIn, ProfileIn
from newsreader.services import accounts
from newsreader.services.news import NewsUnavailableError, fetch_news
from newsreader.services.saved_articles import list_saved

router = APIRouter(tags=["pages"])
logger = logging.getLogger("uvicorn.error")


@router.get("/")
async def index(request: Request, session: SessionData | None = Depends(get_session)):
    """Landing page with the positive-news feed."""
    try:
        news = await fetch_news()
    except NewsUnavailableError as exc:
        logger.error("[news] %s", exc)
        return render(request, "index.html", {"news": [], "error": "Error fetching news"},
                      session=session, status_code=500)
    return render(request, "index.html", {"news": news, "error": None}, session=session)


@router.get("/preferences")
async def preferences(request: Request, session: SessionData = Depends(require_login)):
    """Profile/preferences page for the logged-in account."""
    try:
        person = await accounts.get_profile_for_user(session.user_id)
    except NotFoundError:
        values = ProfileIn().model_dump()
    else:
        values = person.profile_values()
    return render(
        request,
        "preferences.html",
        {"values": values, "flash": take_flash(session)},
        session=session,
    )


@router.post("/preferences")
async def update_preferences(
    form: Annotated[ProfileIn, Form()],
    session: SessionData = Depends(require_login),
):
    try:
        await accounts.update_own_profile(session.user_id, form)
    except AppError as exc:
        set_flash(session, "error", exc.message)
    except Exception:
        logger.exception("[preferences] update error")
        set_flash(session, "error", AppError.message)
    else:
        set_flash(session, "success", "Preferences saved.")
    return RedirectResponse("/preferences", status_code=302)


@router.post("/preferences/password")
async def update_password(
    form: Annotated[PasswordChangeIn, Form()],
    session: SessionData = Depends(require_login),
):
    try:
        await accounts.change_password(session.user_id, form)
    except AppError as exc:
        set_flash(session, "error", exc.message)
    except Exception:
        logger.exception("[preferences] password change error")
        set_flash(session, "error", AppError.message)
    else:
        set_flash(session, "success", "Password updated.")
    return RedirectResponse("/preferences", status_code=302)


@router.get("/saved")
async def saved(request: Request, session: SessionData = Depends(require_login)):
    """List the account's saved articles, oldest first."""
    articles = await list_saved(session.user_id)
    return render(request, "saved.html", {"articles": articles}, session=session)
