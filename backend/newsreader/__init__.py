"""
News reader web application.
Server-rendered news site with user accounts, saved articles, editable
preferences, and an admin console for managing user records.
"""
