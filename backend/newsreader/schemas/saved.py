# newsreader/schemas/saved.py
"""
Pydantic schemas for the JSON save/unsave article endpoints.
"""
from typing import Optional

from pydantic import BaseModel

__all__ = ["SaveArticleIn", "UnsaveArticleIn", "SavedArticleResult"]


class SaveArticleIn(BaseModel):
    title: Optional[str] = None  # Article headline from the feed
    url: Optional[str] = None    # Article link; unique per account


class UnsaveArticleIn(BaseModel):
    url: Optional[str] = None


class SavedArticleResult(BaseModel):
    """Response body for both endpoints."""
    success: bool
    message: str
