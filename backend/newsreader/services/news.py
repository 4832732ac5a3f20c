# newsreader/services/news.py
"""
Webz news feed client used by the landing page.
"""
import logging
from typing import List

import httpx

from newsreader.config import settings  # Use unified config.py settings

logger = logging.getLogger("uvicorn.error")


class NewsUnavailableError(RuntimeError):
    """The news feed could not be fetched."""


async def fetch_news(query: str = "*", sentiment: str = "positive") -> List[dict]:
    """
    Fetch posts from the Webz lite news API.

    Configuration source: newsreader.config.settings
    - webz_api_url: API endpoint
    - webz_api_key: API token
    - news_timeout_seconds: request timeout

    Returns:
        List of post dicts as returned by the API ("posts" key)

    Raises:
        NewsUnavailableError: Missing key, transport error, HTTP error or bad JSON
    """
    if not settings.webz_api_key:
        raise NewsUnavailableError("WEBZ_API_KEY is missing")

    params = {
        "token": settings.webz_api_key,
        "q": query,
        "sentiment": sentiment,
    }
    try:
        async with httpx.AsyncClient(timeout=settings.news_timeout_seconds) as client:
            resp = await client.get(settings.webz_api_url, params=params)
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise NewsUnavailableError(f"news feed request failed: {exc}") from exc

    posts = data.get("posts") if isinstance(data, dict) else None
    return posts or []
