# newsreader/services/__init__.py
"""
Service layer.
- accounts: sign-up, login, self-service profile and password changes
- directory: admin search/create/update/delete over accounts and profiles
- saved_articles: per-account article bookmarks
- news: Webz news feed client
"""
