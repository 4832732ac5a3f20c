# newsreader/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: Account credentials and admin flag (users table)
- Person: Profile attributes, one row per account (person table)
- SavedArticle: Bookmarked news articles (news_posts table)
"""
from .user import User
from .person import Person
from .saved_article import SavedArticle
