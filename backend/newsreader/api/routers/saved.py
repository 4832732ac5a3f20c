# newsreader/api/routers/saved.py
"""
JSON endpoints behind the save/unsave buttons on the news and saved pages.
Every answer has the shape {"success": bool, "message": str}.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaError

from newsreader.api.deps import require_login_api
from newsreader.core.errors import AppError
from newsreader.core.sessions import SessionData
from newsreader.schemas.saved import SaveArticleIn, SavedArticleResult, UnsaveArticleIn
from newsreader.services.saved_articles import save_article, unsave_article

router = APIRouter(tags=["saved"])
logger = logging.getLogger("uvicorn.error")


async def _json_object(request: Request) -> dict:
    """Request body as a JSON object; a missing or malformed body reads as {}."""
    try:
        data = await request.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


async def save_body(data: dict = Depends(_json_object)) -> SaveArticleIn:
    try:
        return SaveArticleIn.model_validate(data)
    except SchemaError:
        return SaveArticleIn()


async def unsave_body(data: dict = Depends(_json_object)) -> UnsaveArticleIn:
    try:
        return UnsaveArticleIn.model_validate(data)
    except SchemaError:
        return UnsaveArticleIn()


def _result(success: bool, message: str, status_code: int = 200) -> JSONResponse:
    body = SavedArticleResult(success=success, message=message)
    return JSONResponse(body.model_dump(), status_code=status_code)


@router.post("/save-article", response_model=SavedArticleResult)
async def save(body: SaveArticleIn = Depends(save_body), session: SessionData = Depends(require_login_api)):
    """
    Bookmark an article for the logged-in account.

    Status codes: 200 saved, 400 missing title/url or non-http(s) url,
    401 not logged in, 409 already saved, 500 unexpected failure.
    """
    try:
        await save_article(session.user_id, body.title, body.url)
    except AppError as exc:
        return _result(False, exc.message, exc.status_code)
    except Exception:
        logger.exception("[saved] save error")
        return _result(False, AppError.message, 500)
    return _result(True, "Article saved.")


@router.delete("/unsave-article", response_model=SavedArticleResult)
async def unsave(body: UnsaveArticleIn = Depends(unsave_body), session: SessionData = Depends(require_login_api)):
    """
    Remove a bookmark.

    Status codes: 200 removed, 400 missing url, 401 not logged in,
    404 not in the saved list, 500 unexpected failure.
    """
    try:
        await unsave_article(session.user_id, body.url)
    except AppError as exc:
        return _result(False, exc.message, exc.status_code)
    except Exception:
        logger.exception("[saved] unsave error")
        return _result(False, AppError.message, 500)
    return _result(True, "Article removed.")
