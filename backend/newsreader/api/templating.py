# newsreader/api/templating.py
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from newsreader.core.sessions import SessionData

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(
    request: Request,
    name: str,
    context: dict | None = None,
    session: SessionData | None = None,
    status_code: int = 200,
):
    """Render a page template; `current_user` drives the navigation bar."""
    page = {"current_user": session if session is not None and session.is_authenticated else None}
    page.update(context or {})
    return templates.TemplateResponse(request, name, page, status_code=status_code)
