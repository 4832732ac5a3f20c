# newsreader/services/saved_articles.py
"""
Saved-articles service: bookmark feed articles per account.
"""
import logging
from typing import List, Optional
from urllib.parse import urlparse

from tortoise.exceptions import IntegrityError

from newsreader.core.errors import ConflictError, NotFoundError, UnauthenticatedError, ValidationError
from newsreader.models.saved_article import SavedArticle
from newsreader.models.user import User
from newsreader.services.accounts import clean

logger = logging.getLogger("uvicorn.error")

# Saved links are rendered as hrefs, so only web URLs are accepted
ALLOWED_URL_SCHEMES = ("http", "https")


def _is_web_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme.lower() in ALLOWED_URL_SCHEMES and bool(parsed.netloc)


async def save_article(user_id: Optional[int], title: Optional[str], url: Optional[str]) -> SavedArticle:
    """
    Bookmark an article for an account.

    The pre-check gives the usual "already saved" answer; the unique
    (user_id, url) index settles concurrent duplicate saves.

    Raises:
        UnauthenticatedError: No account, or the account has been deleted
        ValidationError: Missing title or url, or a url that is not http(s)
        ConflictError: Already saved by this account
    """
    if user_id is None:
        raise UnauthenticatedError()
    title, url = clean(title), clean(url)
    if not title or not url:
        raise ValidationError("Title and URL are required.")
    if not _is_web_url(url):
        raise ValidationError("URL must start with http:// or https://.")

    if not await User.exists(id=user_id):
        raise UnauthenticatedError()
    if await SavedArticle.filter(user_id=user_id, url=url).exists():
        raise ConflictError("Article already saved.")
    try:
        article = await SavedArticle.create(user_id=user_id, title=title, url=url)
    except IntegrityError as exc:
        # Either a concurrent duplicate or the account vanished in between
        if await SavedArticle.filter(user_id=user_id, url=url).exists():
            raise ConflictError("Article already saved.") from exc
        raise UnauthenticatedError() from exc
    logger.info("[saved] user id=%s saved %s", user_id, url)
    return article


async def unsave_article(user_id: Optional[int], url: Optional[str]) -> None:
    """
    Remove a bookmark.

    Raises:
        UnauthenticatedError: No account
        ValidationError: Missing url
        NotFoundError: Nothing was deleted
    """
    if user_id is None:
        raise UnauthenticatedError()
    url = clean(url)
    if not url:
        raise ValidationError("URL is required.")
    deleted = await SavedArticle.filter(user_id=user_id, url=url).delete()
    if not deleted:
        raise NotFoundError("Article not found in saved list.")


async def list_saved(user_id: int) -> List[SavedArticle]:
    return await SavedArticle.filter(user_id=user_id).order_by("id")
