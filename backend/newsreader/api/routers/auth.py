# newsreader/api/routers/auth.py
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from newsreader.api.deps import end_session, get_session, start_session
from newsreader.api.templating import render
from newsreader.core.errors import AppError
from newsreader.core.sessions import SessionData
from newsreader.schemas.auth import LoginIn, SignupIn
from newsreader.services import accounts

router = APIRouter(tags=["auth"])
logger = logging.getLogger("uvicorn.error")

SIGNUP_BLANK = SignupIn().form_values()


@router.get("/login")
async def login_form(request: Request, session: SessionData | None = Depends(get_session)):
    """Render the login form; logged-in users go straight to the home page."""
    if session is not None and session.is_authenticated:
        return RedirectResponse("/", status_code=302)
    return render(request, "login.html", {"error": None, "values": {"username": ""}})


@router.post("/login")
async def login(
    request: Request,
    form: Annotated[LoginIn, Form()],
    session: SessionData | None = Depends(get_session),
):
    """
    Authenticate and start a session.

    Responses:
        302 -> "/" on success (session cookie set)
        400 re-rendered form when a field is empty
        401 re-rendered form with the same message for unknown user and bad password
        500 re-rendered form on unexpected failures
    """
    values = {"username": form.username}
    try:
        user = await accounts.authenticate(form.username, form.password)
    except AppError as exc:
        return render(request, "login.html", {"error": exc.message, "values": values},
                      status_code=exc.status_code)
    except Exception:
        logger.exception("[auth] login error")
        return render(request, "login.html", {"error": AppError.message, "values": values},
                      status_code=500)

    response = RedirectResponse("/", status_code=302)
    start_session(response, user, previous=session)
    logger.info("[auth] login user id=%s", user.id)
    return response


@router.get("/signup")
async def signup_form(request: Request, session: SessionData | None = Depends(get_session)):
    if session is not None and session.is_authenticated:
        return RedirectResponse("/", status_code=302)
    return render(request, "signup.html", {"error": None, "values": SIGNUP_BLANK})


@router.post("/signup")
async def signup(
    request: Request,
    form: Annotated[SignupIn, Form()],
    session: SessionData | None = Depends(get_session),
):
    """
    Register an account with its profile and log it in.

    Responses:
        302 -> "/" on success (session cookie set)
        400 validation error, 409 duplicate username, 500 unexpected failure;
        all re-render the form with the submitted values (minus passwords)
    """
    try:
        user = await accounts.register(form)
    except AppError as exc:
        return render(request, "signup.html", {"error": exc.message, "values": form.form_values()},
                      status_code=exc.status_code)
    except Exception:
        logger.exception("[auth] signup error")
        return render(request, "signup.html", {"error": AppError.message, "values": form.form_values()},
                      status_code=500)

    response = RedirectResponse("/", status_code=302)
    start_session(response, user, previous=session)
    return response


@router.api_route("/logout", methods=["GET", "POST"])
async def logout(session: SessionData | None = Depends(get_session)):
    """Destroy the session (if any) and go back to the login page."""
    response = RedirectResponse("/login", status_code=302)
    end_session(response, session)
    return response
